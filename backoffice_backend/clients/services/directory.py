# clients/services/directory.py

"""
CLIENT DIRECTORY

Read side used by the order engine. Malformed ids resolve to
ClientNotFoundError (404), never to a 500.
"""

from __future__ import annotations

import uuid

from clients.models import Client
from clients.services.exceptions import ClientNotFoundError


def get_client(client_id) -> Client:
    if client_id is None:
        raise ClientNotFoundError(client_id)

    try:
        pk = client_id if isinstance(client_id, uuid.UUID) else uuid.UUID(str(client_id).strip())
    except (TypeError, ValueError, AttributeError) as exc:
        raise ClientNotFoundError(client_id) from exc

    try:
        return Client.objects.get(pk=pk)
    except Client.DoesNotExist as exc:
        raise ClientNotFoundError(client_id) from exc
