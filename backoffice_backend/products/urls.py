# products/urls.py

"""
PRODUCTS URLS

Mounted under /api/:
    /api/products
    /api/products/<uuid>
    /api/products/stats/low-stock
"""

from django.urls import include, path

from core.routers import OptionalSlashRouter
from products.views import ProductViewSet

router = OptionalSlashRouter()
router.register(r"products", ProductViewSet, basename="products")

urlpatterns = [
    path("", include(router.urls)),
]
