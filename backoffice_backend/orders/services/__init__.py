from .order_engine import create_order, delete_order, update_order, update_order_status
from .order_queries import get_order, order_queryset, order_stats_summary

__all__ = [
    "create_order",
    "update_order",
    "update_order_status",
    "delete_order",
    "get_order",
    "order_queryset",
    "order_stats_summary",
]
