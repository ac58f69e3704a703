from .inventory import (
    adjust_quantity,
    get_product,
    get_products,
    lock_products,
    set_quantity,
)

__all__ = [
    "adjust_quantity",
    "get_product",
    "get_products",
    "lock_products",
    "set_quantity",
]
