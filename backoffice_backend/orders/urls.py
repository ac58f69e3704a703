# orders/urls.py

from django.urls import include, path

from core.routers import OptionalSlashRouter
from orders.views import OrderViewSet

router = OptionalSlashRouter()
router.register(r"orders", OrderViewSet, basename="orders")

urlpatterns = [
    path("", include(router.urls)),
]
