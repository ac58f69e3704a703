from .client import ClientDisplaySerializer, ClientSerializer

__all__ = [
    "ClientSerializer",
    "ClientDisplaySerializer",
]
