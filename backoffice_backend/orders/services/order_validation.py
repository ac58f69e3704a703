# orders/services/order_validation.py

"""
ORDER PAYLOAD VALIDATION

Pure checks used by the order engine, in the order the engine applies them:

1. line items present                      -> EmptyOrderError
2. clientId / deliveryDate / paymentType   -> MissingFieldError, InvalidPaymentTypeError
   (status, when supplied)                 -> InvalidStatusError
3. delivery date parses, not before today  -> InvalidDeliveryDateError, PastDeliveryDateError
5. each line item well formed              -> InvalidLineItemError
7. stock available (repeated ids summed)   -> InsufficientStockError
8. submitted price within tolerance        -> PriceMismatchError
9. total fits Order.total_amount           -> OrderTotalTooLargeError

Steps 4 (client lookup) and 6 (batched product lookup) need the database and
live in order_engine.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from orders.models import PaymentType
from orders.services.exceptions import (
    EmptyOrderError,
    InvalidDeliveryDateError,
    InvalidLineItemError,
    InvalidPaymentTypeError,
    MissingFieldError,
    OrderTotalTooLargeError,
    PastDeliveryDateError,
    PriceMismatchError,
)
from orders.services.pricing import price_matches
from products.services.exceptions import InsufficientStockError

# Labels accepted for backwards compatibility with older clients.
LEGACY_PAYMENT_TYPES = {
    "credit card": PaymentType.CREDIT_CARD.value,
    "bank transfer": PaymentType.BANK_TRANSFER.value,
}


@dataclass(frozen=True)
class LineItem:
    index: int
    product_id: uuid.UUID
    quantity: int
    price: Decimal


def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


# ------------------------------------------------------------
# 1-2. Presence
# ------------------------------------------------------------
def require_line_items(line_items) -> list:
    if not isinstance(line_items, (list, tuple)) or len(line_items) == 0:
        raise EmptyOrderError()
    return list(line_items)


def require_fields(*, client_id, delivery_date, payment_type) -> None:
    missing = [
        name
        for name, value in (
            ("clientId", client_id),
            ("deliveryDate", delivery_date),
            ("paymentType", payment_type),
        )
        if _is_blank(value)
    ]
    if missing:
        raise MissingFieldError(missing)


def normalize_payment_type(value) -> str:
    raw = str(value or "").strip()
    if raw in PaymentType.values:
        return raw

    legacy = LEGACY_PAYMENT_TYPES.get(raw.lower())
    if legacy:
        return legacy

    raise InvalidPaymentTypeError(value, PaymentType.values)


# ------------------------------------------------------------
# 3. Delivery date
# ------------------------------------------------------------
def parse_delivery_date(value) -> date:
    """
    Accepts a date, a datetime, or an ISO-8601 date / datetime string.
    Aware datetimes are converted to local time before the date is taken.
    """
    if isinstance(value, datetime):
        parsed_dt = value
    elif isinstance(value, date):
        return value
    else:
        raw = str(value).strip()
        try:
            parsed_dt = parse_datetime(raw) if ("T" in raw or " " in raw) else None
            if parsed_dt is None:
                parsed = parse_date(raw)
                if parsed is None:
                    raise InvalidDeliveryDateError(value)
                return parsed
        except ValueError as exc:
            raise InvalidDeliveryDateError(value) from exc

    if timezone.is_aware(parsed_dt):
        parsed_dt = timezone.localtime(parsed_dt)
    return parsed_dt.date()


def ensure_not_past(delivery_date: date, *, today: date | None = None) -> date:
    today = today or timezone.localdate()
    if delivery_date < today:
        raise PastDeliveryDateError(delivery_date, today)
    return delivery_date


# ------------------------------------------------------------
# 5. Line items
# ------------------------------------------------------------
def _to_int_qty(value) -> int:
    if value is None or isinstance(value, bool):
        raise ValueError("quantity must be a whole integer unit")

    if isinstance(value, int):
        return value

    if isinstance(value, str):
        s = value.strip()
        if s.isdigit():
            return int(s)

    raise ValueError("quantity must be a whole integer unit")


def _to_price(value) -> Decimal:
    if value is None or isinstance(value, bool) or _is_blank(value):
        raise ValueError("price is required")
    try:
        price = Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as exc:
        raise ValueError("price must be a number") from exc
    if not price.is_finite():
        raise ValueError("price must be a number")
    if price < 0:
        raise ValueError("price must be non-negative")
    return price


def parse_line_items(raw_items) -> list[LineItem]:
    items: list[LineItem] = []

    for index, raw in enumerate(raw_items):
        if not isinstance(raw, dict):
            raise InvalidLineItemError(index, "line item must be an object")

        product_id = raw.get("productId")
        if _is_blank(product_id):
            raise InvalidLineItemError(index, "productId is required")
        try:
            pid = uuid.UUID(str(product_id).strip())
        except ValueError as exc:
            raise InvalidLineItemError(index, "productId is invalid") from exc

        try:
            quantity = _to_int_qty(raw.get("quantity"))
        except ValueError as exc:
            raise InvalidLineItemError(index, str(exc)) from exc
        if quantity < 1:
            raise InvalidLineItemError(index, "quantity must be at least 1")

        try:
            price = _to_price(raw.get("price"))
        except ValueError as exc:
            raise InvalidLineItemError(index, str(exc)) from exc

        items.append(LineItem(index=index, product_id=pid, quantity=quantity, price=price))

    return items


def requested_quantities(items) -> dict:
    """{product_id: total quantity}, summing repeated product ids."""
    totals: dict = {}
    for item in items:
        totals[item.product_id] = totals.get(item.product_id, 0) + item.quantity
    return totals


# ------------------------------------------------------------
# 7-8. Against live inventory
# ------------------------------------------------------------
def check_stock(items, products: dict) -> None:
    for product_id, requested in requested_quantities(items).items():
        product = products[product_id]
        if requested > int(product.quantity):
            raise InsufficientStockError(
                product_id=product_id,
                available=int(product.quantity),
                requested=requested,
                product_name=product.name,
            )


def check_prices(items, products: dict) -> None:
    for item in items:
        product = products[item.product_id]
        if not price_matches(item.price, product.price):
            raise PriceMismatchError(
                product_id=item.product_id,
                expected=product.price,
                received=item.price,
            )


# ------------------------------------------------------------
# 9. Total fits the ledger column
# ------------------------------------------------------------
def max_amount(*, max_digits: int, decimal_places: int) -> Decimal:
    """Largest value a DecimalField(max_digits, decimal_places) can hold."""
    return Decimal(10) ** (max_digits - decimal_places) - Decimal(1).scaleb(-decimal_places)


def check_total(total: Decimal, *, max_digits: int, decimal_places: int) -> Decimal:
    limit = max_amount(max_digits=max_digits, decimal_places=decimal_places)
    if total > limit:
        raise OrderTotalTooLargeError(total=total, limit=limit)
    return total
