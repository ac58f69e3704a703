# orders/services/order_engine.py

"""
ORDER TRANSACTION ENGINE (APPLICATION SERVICE)

Purpose:
- Place, edit, re-status and delete orders while keeping the order ledger
  and on-hand stock consistent.

Hard rules:
- Every operation is ONE transaction.atomic block (via core.db.run_atomic):
  ledger rows + stock adjustments commit together or roll back together.
- All validation runs before the first write of an attempt; a failure after
  a write (stock conflict, DB error) rolls the whole attempt back.
- Products are locked with select_for_update() in primary-key order before
  availability is checked, and stock is decremented with a conditional
  UPDATE, so stock can never go negative. An edit locks its stored and
  submitted products in one batch.
- A total that does not fit Order.total_amount is rejected during
  validation (OrderTotalTooLargeError), before anything is written.
- If the conditional UPDATE finds less stock than the locked read reported,
  the attempt raises StockConflictError and is retried with backoff up to
  ORDER_TX_MAX_ATTEMPTS; exhaustion surfaces as ConflictError (409).
- The authoritative unit price is the product's current price; the submitted
  price is only checked against it (tolerance 0.01).

Reservation:
- Pending / Confirmed / Delivered hold stock; Cancelled does not.
- Deleting an order releases its stock unless it was Delivered.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from django.db import OperationalError

from clients.models import Client
from clients.services import get_client
from core.db import run_atomic
from orders.models import Order, OrderItem, OrderStatus
from orders.services import order_lifecycle as lifecycle
from orders.services.exceptions import (
    OrderLockedError,
    OrderNotFoundError,
    StockConflictError,
)
from orders.services.order_queries import coerce_order_id, get_order
from orders.services.order_validation import (
    LineItem,
    check_prices,
    check_stock,
    check_total,
    ensure_not_past,
    normalize_payment_type,
    parse_delivery_date,
    parse_line_items,
    require_fields,
    require_line_items,
    requested_quantities,
)
from orders.services.pricing import order_total
from products.services import adjust_quantity, get_products, lock_products
from products.services.exceptions import InsufficientStockError

logger = logging.getLogger(__name__)

RETRYABLE_ERRORS = (StockConflictError, OperationalError)


@dataclass
class ValidatedOrder:
    client: Client
    delivery_date: date
    payment_type: str
    status: str | None
    items: list[LineItem]
    products: dict
    total: Decimal


# ============================================================
# Validation pipeline
# ============================================================
def _validate_payload(
    *,
    client_id,
    line_items,
    delivery_date,
    payment_type,
    status=None,
) -> ValidatedOrder:
    """
    Runs the full create pipeline, failing fast. Must be called inside
    transaction.atomic: products come back row-locked.
    """
    raw_items = require_line_items(line_items)

    require_fields(
        client_id=client_id,
        delivery_date=delivery_date,
        payment_type=payment_type,
    )
    payment = normalize_payment_type(payment_type)
    target_status = lifecycle.normalize_status(status) if status not in (None, "") else None

    delivery = ensure_not_past(parse_delivery_date(delivery_date))

    client = get_client(client_id)

    items = parse_line_items(raw_items)

    products = get_products([item.product_id for item in items], lock=True)

    check_stock(items, products)
    check_prices(items, products)

    total_field = Order._meta.get_field("total_amount")
    total = check_total(
        order_total((products[item.product_id].price, item.quantity) for item in items),
        max_digits=total_field.max_digits,
        decimal_places=total_field.decimal_places,
    )

    return ValidatedOrder(
        client=client,
        delivery_date=delivery,
        payment_type=payment,
        status=target_status,
        items=items,
        products=products,
        total=total,
    )


# ============================================================
# Stock movements
# ============================================================
def _apply_reservation(quantities: dict) -> None:
    """
    Decrement stock for {product_id: quantity}, in primary-key order.

    Availability was already checked against locked rows, so a failing
    conditional update means the row changed underneath us.
    """
    for product_id in sorted(quantities, key=str):
        try:
            adjust_quantity(product_id, -quantities[product_id])
        except InsufficientStockError as exc:
            raise StockConflictError(product_id=product_id, available=exc.available) from exc


def _reserve_with_check(quantities: dict) -> None:
    """Lock, check and decrement (used when a stored order re-acquires stock)."""
    if not quantities:
        return

    products = get_products(list(quantities), lock=True)
    for product_id, requested in quantities.items():
        product = products[product_id]
        if requested > int(product.quantity):
            raise InsufficientStockError(
                product_id=product_id,
                available=int(product.quantity),
                requested=requested,
                product_name=product.name,
            )

    _apply_reservation(quantities)


def _release(quantities: dict) -> None:
    for product_id in sorted(quantities, key=str):
        adjust_quantity(product_id, quantities[product_id])


def _stored_quantities(order: Order) -> dict:
    """
    {product_id: quantity} for an order's stored line items.
    Items whose product has been deleted from the catalog are skipped.
    """
    totals: dict = {}
    for item in order.items.all():
        if item.product_id is None:
            logger.warning(
                "Skipping stock movement for deleted product",
                extra={"order_id": str(order.pk), "product_name": item.product_name},
            )
            continue
        totals[item.product_id] = totals.get(item.product_id, 0) + int(item.quantity)
    return totals


def _payload_product_ids(line_items) -> set:
    """Product ids named by a raw payload; malformed entries are left to validation."""
    if not isinstance(line_items, (list, tuple)):
        return set()
    return {
        str(raw.get("productId"))
        for raw in line_items
        if isinstance(raw, dict) and raw.get("productId") is not None
    }


# ============================================================
# Ledger writes
# ============================================================
def _write_items(order: Order, validated: ValidatedOrder) -> None:
    OrderItem.objects.bulk_create(
        [
            OrderItem(
                order=order,
                product=validated.products[item.product_id],
                product_name=validated.products[item.product_id].name,
                quantity=item.quantity,
                unit_price=validated.products[item.product_id].price,
                position=position,
            )
            for position, item in enumerate(validated.items)
        ]
    )


def _lock_order(order_id) -> Order:
    pk = coerce_order_id(order_id)
    order = Order.objects.select_for_update().filter(pk=pk).first()
    if order is None:
        raise OrderNotFoundError(order_id)
    return order


# ============================================================
# Operations
# ============================================================
def create_order(
    *,
    client_id,
    line_items,
    delivery_date,
    payment_type,
    status=None,
    user=None,
) -> Order:
    """
    Validate, price, reserve stock and persist a new order atomically.
    Returns the populated order.
    """

    def _attempt():
        validated = _validate_payload(
            client_id=client_id,
            line_items=line_items,
            delivery_date=delivery_date,
            payment_type=payment_type,
            status=status,
        )
        target_status = validated.status or OrderStatus.PENDING.value

        order = Order.objects.create(
            client=validated.client,
            delivery_date=validated.delivery_date,
            payment_type=validated.payment_type,
            status=target_status,
            total_amount=validated.total,
            created_by=user if getattr(user, "is_authenticated", False) else None,
        )
        _write_items(order, validated)

        if lifecycle.holds_reservation(target_status):
            _apply_reservation(requested_quantities(validated.items))

        return order.pk

    order_id = run_atomic(_attempt, retry_on=RETRYABLE_ERRORS, operation="create_order")

    order = get_order(order_id)
    logger.info(
        "Order created",
        extra={
            "order_id": str(order.pk),
            "client_id": str(order.client_id),
            "total_amount": str(order.total_amount),
            "user_id": str(getattr(user, "pk", "") or ""),
        },
    )
    return order


def update_order(
    order_id,
    *,
    client_id,
    line_items,
    delivery_date,
    payment_type,
    status=None,
    user=None,
) -> Order:
    """
    Replace an order's payload.

    The stored line items are released first and the new payload is then
    validated and reserved as if it were a new order; a failure anywhere
    rolls back the release too.
    """

    def _attempt():
        order = _lock_order(order_id)

        if lifecycle.is_locked_for_edit(order.status):
            raise OrderLockedError(order.status)

        current_status = order.status

        # Virtual release of what the order currently holds. Old and new
        # products are locked together so the lock order stays global.
        held = _stored_quantities(order) if lifecycle.holds_reservation(current_status) else {}
        lock_products(set(map(str, held)) | _payload_product_ids(line_items))
        _release(held)

        validated = _validate_payload(
            client_id=client_id,
            line_items=line_items,
            delivery_date=delivery_date,
            payment_type=payment_type,
            status=status,
        )

        target_status = validated.status or current_status
        lifecycle.validate_transition(order=order, target_status=target_status)

        if lifecycle.holds_reservation(target_status):
            _apply_reservation(requested_quantities(validated.items))

        order.items.all().delete()
        _write_items(order, validated)

        order.client = validated.client
        order.delivery_date = validated.delivery_date
        order.payment_type = validated.payment_type
        order.status = target_status
        order.total_amount = validated.total
        order.save()

        return order.pk

    pk = run_atomic(_attempt, retry_on=RETRYABLE_ERRORS, operation="update_order")

    order = get_order(pk)
    logger.info(
        "Order updated",
        extra={
            "order_id": str(order.pk),
            "total_amount": str(order.total_amount),
            "user_id": str(getattr(user, "pk", "") or ""),
        },
    )
    return order


def update_order_status(order_id, status, *, user=None) -> Order:
    """
    Move an order to a new status under the configured policy.

    Stock moves only when the change crosses the reservation boundary
    (entering Cancelled releases, leaving Cancelled re-reserves).
    """
    target_status = lifecycle.normalize_status(status)
    changed = {}

    def _attempt():
        order = _lock_order(order_id)
        current_status = order.status

        changed["from"] = current_status
        if current_status == target_status:
            return order.pk

        lifecycle.validate_transition(order=order, target_status=target_status)

        effect = lifecycle.reservation_effect(
            from_status=current_status,
            to_status=target_status,
        )
        if effect == lifecycle.RELEASE:
            held = _stored_quantities(order)
            lock_products(held)
            _release(held)
        elif effect == lifecycle.RESERVE:
            _reserve_with_check(_stored_quantities(order))

        order.status = target_status
        order.save(update_fields=["status", "updated_at"])
        return order.pk

    pk = run_atomic(_attempt, retry_on=RETRYABLE_ERRORS, operation="update_order_status")

    if changed.get("from") != target_status:
        logger.info(
            "Order status changed",
            extra={
                "order_id": str(pk),
                "from_status": changed.get("from"),
                "to_status": target_status,
                "user_id": str(getattr(user, "pk", "") or ""),
            },
        )
    return get_order(pk)


def delete_order(order_id, *, user=None) -> None:
    """
    Delete an order, releasing its reservation first when it still holds one
    and was not Delivered.
    """
    released = {}

    def _attempt():
        order = _lock_order(order_id)

        if lifecycle.holds_reservation(order.status) and order.status != OrderStatus.DELIVERED.value:
            held = _stored_quantities(order)
            lock_products(held)
            _release(held)
            released["units"] = sum(held.values())

        pk = order.pk
        order.delete()
        return pk

    pk = run_atomic(_attempt, retry_on=RETRYABLE_ERRORS, operation="delete_order")

    logger.info(
        "Order deleted",
        extra={
            "order_id": str(pk),
            "released_units": released.get("units", 0),
            "user_id": str(getattr(user, "pk", "") or ""),
        },
    )
