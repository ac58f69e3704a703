from .product import ProductDisplaySerializer, ProductSerializer

__all__ = [
    "ProductSerializer",
    "ProductDisplaySerializer",
]
