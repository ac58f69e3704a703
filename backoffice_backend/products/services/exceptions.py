# products/services/exceptions.py

"""
INVENTORY SERVICE ERRORS

Centralized domain errors for the inventory store.
"""

from __future__ import annotations

from core.exceptions import BusinessRuleError, InputValidationError, NotFoundError


class ProductNotFoundError(NotFoundError):
    """Raised when one or more product ids do not resolve."""

    def __init__(self, product_ids):
        ids = [str(pid) for pid in (product_ids if isinstance(product_ids, (list, tuple)) else [product_ids])]
        self.product_ids = ids
        first = ids[0] if ids else "?"
        super().__init__(
            f"Product {first} not found",
            productId=first,
            missingProductIds=ids if len(ids) > 1 else None,
        )


class InsufficientStockError(BusinessRuleError):
    """Raised when a reservation asks for more than is on hand."""

    def __init__(self, *, product_id, available: int, requested: int | None = None, product_name: str | None = None):
        self.product_id = str(product_id)
        self.available = int(available)
        self.requested = requested
        label = product_name or self.product_id
        super().__init__(
            f"Insufficient stock for {label}. Available: {self.available}",
            productId=self.product_id,
            available=self.available,
            requested=requested,
        )


class InvalidStockAdjustmentError(InputValidationError):
    """Raised for zero or non-integer stock deltas."""
