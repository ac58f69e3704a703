"""
ORDER LIFECYCLE DOMAIN RULES

This module defines the allowed status transitions for Order entities
and which statuses hold a stock reservation.

DESIGN PRINCIPLES:
- No database writes
- No stock mutation
- Single source of truth for the status graph

POLICIES (settings.ORDER_STATUS_POLICY):
- strict (default):
    Pending   -> Confirmed, Cancelled
    Confirmed -> Delivered, Cancelled
    Delivered, Cancelled are terminal; their line items cannot be edited
- permissive:
    any known status may follow any other; line items are always editable

Re-setting the current status is a no-op under both policies.
"""

from __future__ import annotations

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

from orders.models import Order, OrderStatus
from orders.services.exceptions import InvalidStatusError, InvalidTransitionError

# ============================================================
# POLICIES
# ============================================================

POLICY_STRICT = "strict"
POLICY_PERMISSIVE = "permissive"

POLICIES = {POLICY_STRICT, POLICY_PERMISSIVE}


# ============================================================
# STATE DEFINITIONS
# ============================================================

TERMINAL_STATES = {
    OrderStatus.DELIVERED.value,
    OrderStatus.CANCELLED.value,
}

ALLOWED_TRANSITIONS = {
    OrderStatus.PENDING.value: {
        OrderStatus.CONFIRMED.value,
        OrderStatus.CANCELLED.value,
    },
    OrderStatus.CONFIRMED.value: {
        OrderStatus.DELIVERED.value,
        OrderStatus.CANCELLED.value,
    },
}

# Statuses whose line items are backed by decremented stock.
RESERVING_STATES = {
    OrderStatus.PENDING.value,
    OrderStatus.CONFIRMED.value,
    OrderStatus.DELIVERED.value,
}

RESERVE = "reserve"
RELEASE = "release"


# ============================================================
# DOMAIN RULES
# ============================================================


def get_policy(policy: str | None = None) -> str:
    value = (policy or getattr(settings, "ORDER_STATUS_POLICY", POLICY_STRICT) or POLICY_STRICT)
    value = str(value).strip().lower()
    if value not in POLICIES:
        raise ImproperlyConfigured(
            f"ORDER_STATUS_POLICY must be one of {sorted(POLICIES)}, got '{value}'"
        )
    return value


def normalize_status(value) -> str:
    """
    Case-insensitive match against the known statuses.
    "pending" -> "Pending"; unknown values raise InvalidStatusError.
    """
    raw = str(value or "").strip()
    for choice in OrderStatus.values:
        if raw.lower() == choice.lower():
            return choice
    raise InvalidStatusError(value, OrderStatus.values)


def holds_reservation(status: str) -> bool:
    return status in RESERVING_STATES


def can_transition(*, from_status: str, to_status: str, policy: str | None = None) -> bool:
    if from_status == to_status:
        return True

    if get_policy(policy) == POLICY_PERMISSIVE:
        return to_status in OrderStatus.values

    if from_status in TERMINAL_STATES:
        return False

    return to_status in ALLOWED_TRANSITIONS.get(from_status, set())


def validate_transition(*, order: Order, target_status: str, policy: str | None = None):
    if not can_transition(
        from_status=order.status,
        to_status=target_status,
        policy=policy,
    ):
        raise InvalidTransitionError(
            from_status=order.status,
            to_status=target_status,
        )


def reservation_effect(*, from_status: str, to_status: str) -> str | None:
    """
    Stock side effect of a status change:
    RESERVE when entering a reserving status from a non-reserving one,
    RELEASE when leaving, None otherwise.
    """
    before = holds_reservation(from_status)
    after = holds_reservation(to_status)

    if before and not after:
        return RELEASE
    if after and not before:
        return RESERVE
    return None


def is_locked_for_edit(status: str, policy: str | None = None) -> bool:
    if get_policy(policy) == POLICY_PERMISSIVE:
        return False
    return status in TERMINAL_STATES
