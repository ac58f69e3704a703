from .client import ClientViewSet

__all__ = ["ClientViewSet"]
