# orders/services/order_queries.py

"""
Read side of the order ledger: populated lookups and summary stats.
"""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.db.models import Count, DecimalField, Prefetch, Sum, Value
from django.db.models.functions import Coalesce

from orders.models import Order, OrderItem, OrderStatus
from orders.services.exceptions import OrderNotFoundError
from orders.services.pricing import money


def order_queryset():
    """Orders joined with client, creator and line-item products."""
    items = OrderItem.objects.select_related("product").order_by("position")
    return (
        Order.objects.select_related("client", "created_by")
        .prefetch_related(Prefetch("items", queryset=items))
        .order_by("-created_at")
    )


def coerce_order_id(order_id):
    if isinstance(order_id, uuid.UUID):
        return order_id
    try:
        return uuid.UUID(str(order_id).strip())
    except (TypeError, ValueError, AttributeError) as exc:
        raise OrderNotFoundError(order_id) from exc


def get_order(order_id) -> Order:
    pk = coerce_order_id(order_id)
    try:
        return order_queryset().get(pk=pk)
    except Order.DoesNotExist as exc:
        raise OrderNotFoundError(order_id) from exc


def order_stats_summary() -> dict:
    """
    {
      "totalOrders": int,
      "totalRevenue": Decimal,   # every status except Cancelled
      "statusBreakdown": [{"status", "count", "totalAmount"}, ...]  # one row per status
    }
    """
    rows = (
        Order.objects.order_by()
        .values("status")
        .annotate(
            count=Count("id"),
            total=Coalesce(
                Sum("total_amount"),
                Value(Decimal("0.00")),
                output_field=DecimalField(max_digits=14, decimal_places=2),
            ),
        )
    )
    by_status = {row["status"]: row for row in rows}

    breakdown = []
    total_orders = 0
    revenue = Decimal("0.00")

    for status in OrderStatus.values:
        row = by_status.get(status) or {}
        count = int(row.get("count") or 0)
        amount = money(row.get("total") or 0)

        total_orders += count
        if status != OrderStatus.CANCELLED.value:
            revenue += amount

        breakdown.append({"status": status, "count": count, "totalAmount": amount})

    return {
        "totalOrders": total_orders,
        "totalRevenue": money(revenue),
        "statusBreakdown": breakdown,
    }
