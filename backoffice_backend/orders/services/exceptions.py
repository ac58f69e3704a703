# orders/services/exceptions.py

"""
ORDER ENGINE ERRORS

Every error maps onto the core taxonomy (core.exceptions), so views never
translate them by hand: the API exception handler renders message + fields.
"""

from __future__ import annotations

from core.exceptions import (
    BusinessRuleError,
    ConflictError,
    InputValidationError,
    NotFoundError,
)


# ------------------------------------------------------------
# Input validation (400)
# ------------------------------------------------------------
class EmptyOrderError(InputValidationError):
    default_message = "Products must be a non-empty array"


class MissingFieldError(InputValidationError):
    def __init__(self, fields):
        self.fields = list(fields)
        super().__init__(
            "Client, delivery date, and payment type are required",
            missingFields=self.fields,
        )


class InvalidPaymentTypeError(InputValidationError):
    def __init__(self, value, allowed):
        super().__init__(
            f"Invalid payment type '{value}'. Allowed: {', '.join(allowed)}",
            allowed=list(allowed),
        )


class InvalidStatusError(InputValidationError):
    def __init__(self, value, allowed):
        if value is None or str(value).strip() == "":
            message = f"Status is required. Allowed: {', '.join(allowed)}"
        else:
            message = f"Invalid status '{value}'. Allowed: {', '.join(allowed)}"
        super().__init__(message, allowed=list(allowed))


class InvalidDeliveryDateError(InputValidationError):
    def __init__(self, value):
        super().__init__(f"Invalid delivery date '{value}'")


class InvalidLineItemError(InputValidationError):
    def __init__(self, index: int, reason: str):
        self.index = index
        super().__init__(f"Invalid product data at position {index}: {reason}", index=index)


# ------------------------------------------------------------
# Business rules (400)
# ------------------------------------------------------------
class PastDeliveryDateError(BusinessRuleError):
    def __init__(self, delivery_date, today):
        super().__init__(
            "Delivery date cannot be in the past",
            deliveryDate=delivery_date.isoformat(),
            today=today.isoformat(),
        )


class PriceMismatchError(BusinessRuleError):
    def __init__(self, *, product_id, expected, received):
        self.product_id = str(product_id)
        super().__init__(
            f"Price mismatch for product {self.product_id}. Expected: {expected}, received: {received}",
            productId=self.product_id,
            expected=str(expected),
            received=str(received),
        )


class OrderTotalTooLargeError(BusinessRuleError):
    def __init__(self, *, total, limit):
        super().__init__(
            f"Order total {total} exceeds the maximum of {limit}",
            total=str(total),
            limit=str(limit),
        )


class InvalidTransitionError(BusinessRuleError):
    def __init__(self, *, from_status, to_status):
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(
            f"Order cannot transition from '{from_status}' to '{to_status}'",
            fromStatus=from_status,
            toStatus=to_status,
        )


class OrderLockedError(BusinessRuleError):
    def __init__(self, status):
        super().__init__(f"Orders in status '{status}' cannot be edited", status=status)


# ------------------------------------------------------------
# Lookup (404)
# ------------------------------------------------------------
class OrderNotFoundError(NotFoundError):
    def __init__(self, order_id):
        self.order_id = str(order_id)
        super().__init__("Order not found", orderId=self.order_id)


# ------------------------------------------------------------
# Concurrency (409, retried by run_atomic first)
# ------------------------------------------------------------
class StockConflictError(ConflictError):
    """
    The conditional stock update found less stock than the locked read
    reported. The whole attempt is rolled back and retried.
    """

    def __init__(self, *, product_id, available):
        self.product_id = str(product_id)
        super().__init__(
            f"Stock for product {self.product_id} changed during the transaction",
            productId=self.product_id,
            available=available,
        )
