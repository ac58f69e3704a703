# orders/services/pricing.py

"""
Money rules for orders.

- Unit prices are taken from the catalog at full precision (4 dp).
- Line totals are NOT rounded individually; the order total is the exact
  sum quantized to 2 dp with ROUND_HALF_UP:
      10.00 x 2 + 5.005 x 1 = 25.005 -> 25.01
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

TWOPLACES = Decimal("0.01")

PRICE_TOLERANCE = Decimal("0.01")


def money(v) -> Decimal:
    if v is None or v == "":
        return Decimal("0.00")
    return Decimal(str(v)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def line_total(unit_price, quantity: int) -> Decimal:
    return Decimal(str(unit_price)) * int(quantity)


def order_total(lines) -> Decimal:
    """lines: iterable of (unit_price, quantity)."""
    total = sum((line_total(price, qty) for price, qty in lines), Decimal("0"))
    return money(total)


def price_matches(submitted, current) -> bool:
    return abs(Decimal(str(submitted)) - Decimal(str(current))) <= PRICE_TOLERANCE
