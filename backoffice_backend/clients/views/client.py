# clients/views/client.py

"""
CLIENT VIEWSET

GET    /api/clients?search=<regex>&page=&limit=
GET    /api/clients/<id>
POST   /api/clients              -> 201 {message, client}
PUT    /api/clients/<id>         -> {message, client}
PATCH  /api/clients/<id>
DELETE /api/clients/<id>         -> {message}   (409 when the client has orders)
"""

import logging

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from clients.filters import ClientFilter
from clients.models import Client
from clients.serializers import ClientSerializer
from permissions.roles import CAP_CLIENTS_WRITE, ReadOrCapability

logger = logging.getLogger(__name__)


class ClientViewSet(viewsets.ModelViewSet):
    serializer_class = ClientSerializer
    permission_classes = [IsAuthenticated, ReadOrCapability]
    required_write_capability = CAP_CLIENTS_WRITE

    filter_backends = [DjangoFilterBackend]
    filterset_class = ClientFilter

    pagination_results_key = "clients"
    lookup_value_regex = "[0-9a-fA-F-]{32,36}"

    def get_queryset(self):
        return Client.objects.all().order_by("-created_at")

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        client = serializer.save()

        logger.info("Client created", extra={"client_id": str(client.pk)})

        return Response(
            {"message": "Client added", "client": self.get_serializer(client).data},
            status=status.HTTP_201_CREATED,
        )

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop("partial", False)
        instance = self.get_object()

        serializer = self.get_serializer(instance, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        client = serializer.save()

        logger.info("Client updated", extra={"client_id": str(client.pk)})

        return Response({"message": "Client updated", "client": self.get_serializer(client).data})

    def destroy(self, request, *args, **kwargs):
        instance = self.get_object()
        client_id = str(instance.pk)

        # ProtectedError (client has orders) -> 409 via core.exceptions
        instance.delete()

        logger.info("Client deleted", extra={"client_id": client_id})
        return Response({"message": "Client deleted"})
