# clients/urls.py

from django.urls import include, path

from clients.views import ClientViewSet
from core.routers import OptionalSlashRouter

router = OptionalSlashRouter()
router.register(r"clients", ClientViewSet, basename="clients")

urlpatterns = [
    path("", include(router.urls)),
]
