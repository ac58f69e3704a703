# core/routers.py

from rest_framework.routers import SimpleRouter


class OptionalSlashRouter(SimpleRouter):
    """
    Router whose routes match with or without a trailing slash
    (/api/orders and /api/orders/ both resolve).
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.trailing_slash = "/?"
