from .order import (
    OrderInputSerializer,
    OrderItemSerializer,
    OrderSerializer,
    OrderStatusInputSerializer,
)

__all__ = [
    "OrderSerializer",
    "OrderItemSerializer",
    "OrderInputSerializer",
    "OrderStatusInputSerializer",
]
