# products/services/inventory.py

"""
======================================================
PATH: products/services/inventory.py
======================================================
INVENTORY STORE (STOCK CORE SERVICES)

Purpose:
- Single product lookup and ONE batched lookup for many ids.
- Conditional stock adjustment (reservation / release / restock).
- Admin stock corrections applied as a delta against the locked row.

Rules:
- Quantities are integer units.
- adjust_quantity() is a single conditional UPDATE:
      quantity = quantity + delta   WHERE quantity + delta >= 0
  so on-hand stock can never go negative, even when two transactions
  race past an availability check.
- adjust_quantity() joins the caller's transaction.atomic block; the caller
  (order engine) owns commit/rollback.
- get_products(lock=True) takes row locks in primary-key order, so two orders
  touching the same products always lock them in the same sequence.
"""

from __future__ import annotations

import logging
import uuid

from django.db import transaction
from django.db.models import F

from products.models import Product
from products.services.exceptions import (
    InsufficientStockError,
    InvalidStockAdjustmentError,
    ProductNotFoundError,
)

logger = logging.getLogger(__name__)


def _coerce_uuid(value):
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value).strip())
    except (TypeError, ValueError, AttributeError):
        return None


def _to_int_delta(value) -> int:
    if value is None or isinstance(value, bool):
        raise InvalidStockAdjustmentError("delta must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        s = value.strip()
        if s.lstrip("-").isdigit():
            return int(s)
    raise InvalidStockAdjustmentError("delta must be an integer")


def get_product(product_id) -> Product:
    pid = _coerce_uuid(product_id)
    if pid is None:
        raise ProductNotFoundError(product_id)
    try:
        return Product.objects.get(pk=pid)
    except Product.DoesNotExist as exc:
        raise ProductNotFoundError(product_id) from exc


def get_products(product_ids, *, lock: bool = False) -> dict:
    """
    Resolve many product ids in one query.

    Returns {uuid: Product} covering every requested id, or raises
    ProductNotFoundError listing the missing ids (in request order).
    lock=True must be called inside transaction.atomic.
    """
    requested = []
    for raw in product_ids:
        pid = _coerce_uuid(raw)
        if pid is None:
            raise ProductNotFoundError(raw)
        if pid not in requested:
            requested.append(pid)

    if not requested:
        return {}

    qs = Product.objects.filter(pk__in=requested).order_by("pk")
    if lock:
        qs = qs.select_for_update()

    found = {p.pk: p for p in qs}

    missing = [pid for pid in requested if pid not in found]
    if missing:
        raise ProductNotFoundError(missing)

    return found


@transaction.atomic
def adjust_quantity(product_id, delta) -> Product:
    """
    Apply a signed stock delta atomically.

    delta < 0: reservation (fails with InsufficientStockError if it would go negative)
    delta > 0: release / restock
    """
    d = _to_int_delta(delta)
    if d == 0:
        raise InvalidStockAdjustmentError("delta cannot be 0")

    pid = _coerce_uuid(product_id)
    if pid is None:
        raise ProductNotFoundError(product_id)

    qs = Product.objects.filter(pk=pid)
    if d < 0:
        qs = qs.filter(quantity__gte=-d)

    updated = qs.update(quantity=F("quantity") + d, version=F("version") + 1)

    if not updated:
        current = Product.objects.filter(pk=pid).values("name", "quantity").first()
        if current is None:
            raise ProductNotFoundError(product_id)
        raise InsufficientStockError(
            product_id=pid,
            available=int(current["quantity"] or 0),
            requested=-d,
            product_name=current["name"],
        )

    product = Product.objects.get(pk=pid)

    logger.debug(
        "Stock adjusted",
        extra={"product_id": str(pid), "delta": d, "quantity": product.quantity},
    )
    return product


@transaction.atomic
def set_quantity(product_id, quantity) -> Product:
    """
    Admin stock correction: bring on-hand stock to `quantity`.

    The row is locked and the difference is applied as a delta, so
    reservations committed after the caller read the product are kept.
    """
    target = _to_int_delta(quantity)
    if target < 0:
        raise InvalidStockAdjustmentError("quantity must be non-negative")

    pid = _coerce_uuid(product_id)
    if pid is None:
        raise ProductNotFoundError(product_id)

    current = Product.objects.select_for_update().filter(pk=pid).first()
    if current is None:
        raise ProductNotFoundError(product_id)

    delta = target - int(current.quantity)
    if delta == 0:
        return current

    product = adjust_quantity(pid, delta)
    logger.info(
        "Stock corrected",
        extra={"product_id": str(pid), "delta": delta, "quantity": product.quantity},
    )
    return product


def lock_products(product_ids) -> None:
    """
    Row-lock whichever of `product_ids` exist, in primary-key order.

    Malformed or unknown ids are skipped; lookups that must report them use
    get_products(). Must be called inside transaction.atomic.
    """
    pids = {pid for pid in (_coerce_uuid(raw) for raw in product_ids) if pid is not None}
    if not pids:
        return
    list(
        Product.objects.select_for_update()
        .filter(pk__in=pids)
        .order_by("pk")
        .values_list("pk", flat=True)
    )
