from .order import Order, OrderItem, OrderStatus, PaymentType

__all__ = [
    "Order",
    "OrderItem",
    "OrderStatus",
    "PaymentType",
]
