# orders/views/order.py

"""
======================================================
PATH: orders/views/order.py
======================================================
ORDER VIEWSET

Endpoints (bearer token required):
    POST   /api/orders                 -> 201 {message, order}
    GET    /api/orders?page=&limit=    -> {orders, total, page, limit, totalPages}
    GET    /api/orders/<id>            -> populated order
    PUT    /api/orders/<id>            -> full re-validation, populated order
    PUT    /api/orders/<id>/status     -> {status}, populated order
    DELETE /api/orders/<id>            -> {message}
    GET    /api/orders/stats/summary   -> {totalOrders, totalRevenue, statusBreakdown}

Rules:
- Views do not validate business rules; the order engine does, and its
  errors are rendered by core.exceptions.api_exception_handler.
======================================================
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ParseError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from orders.filters import OrderFilter
from orders.serializers import (
    OrderInputSerializer,
    OrderSerializer,
    OrderStatusInputSerializer,
)
from orders.services import (
    create_order,
    delete_order,
    get_order,
    order_queryset,
    order_stats_summary,
    update_order,
    update_order_status,
)
from permissions.roles import (
    CAP_ORDERS_WRITE,
    CAP_REPORTS_VIEW,
    HasCapability,
    ReadOrCapability,
)

UUID_LOOKUP_REGEX = "[0-9a-fA-F]{8}-?[0-9a-fA-F]{4}-?[0-9a-fA-F]{4}-?[0-9a-fA-F]{4}-?[0-9a-fA-F]{12}"


def _payload(request) -> dict:
    data = request.data
    if not isinstance(data, dict):
        raise ParseError("Request body must be a JSON object")
    return data


def _order_kwargs(data: dict) -> dict:
    return {
        "client_id": data.get("clientId"),
        "line_items": data.get("products"),
        "delivery_date": data.get("deliveryDate"),
        "payment_type": data.get("paymentType"),
        "status": data.get("status"),
    }


class OrderViewSet(viewsets.GenericViewSet):
    serializer_class = OrderSerializer
    permission_classes = [IsAuthenticated, ReadOrCapability]
    required_write_capability = CAP_ORDERS_WRITE
    required_capability = CAP_REPORTS_VIEW

    filter_backends = [DjangoFilterBackend]
    filterset_class = OrderFilter

    pagination_results_key = "orders"
    lookup_value_regex = UUID_LOOKUP_REGEX

    def get_permissions(self):
        if self.action == "stats_summary":
            return [IsAuthenticated(), HasCapability()]
        return super().get_permissions()

    def get_queryset(self):
        return order_queryset()

    # -----------------------------
    # Read
    # -----------------------------
    def list(self, request):
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        serializer = self.get_serializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    def retrieve(self, request, pk=None):
        return Response(self.get_serializer(get_order(pk)).data)

    # -----------------------------
    # Write
    # -----------------------------
    @extend_schema(
        request=OrderInputSerializer,
        responses={
            201: OpenApiResponse(description="{message, order}"),
            400: OpenApiResponse(description="Validation or business rule failure"),
            404: OpenApiResponse(description="Client or product not found"),
            409: OpenApiResponse(description="Concurrent stock update, retry"),
        },
    )
    def create(self, request):
        order = create_order(**_order_kwargs(_payload(request)), user=request.user)
        return Response(
            {
                "message": "Order created successfully",
                "order": self.get_serializer(order).data,
            },
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(request=OrderInputSerializer, responses={200: OrderSerializer})
    def update(self, request, pk=None):
        order = update_order(pk, **_order_kwargs(_payload(request)), user=request.user)
        return Response(self.get_serializer(order).data)

    @extend_schema(responses={200: OpenApiResponse(description="{message}")})
    def destroy(self, request, pk=None):
        delete_order(pk, user=request.user)
        return Response({"message": "Order deleted successfully"})

    @extend_schema(request=OrderStatusInputSerializer, responses={200: OrderSerializer})
    @action(detail=True, methods=["put"], url_path="status", url_name="status")
    def update_status(self, request, pk=None):
        data = _payload(request)
        order = update_order_status(pk, data.get("status"), user=request.user)
        return Response(self.get_serializer(order).data)

    # -----------------------------
    # Reports
    # -----------------------------
    @extend_schema(
        responses={
            200: OpenApiResponse(description="{totalOrders, totalRevenue, statusBreakdown}"),
        }
    )
    @action(detail=False, methods=["get"], url_path="stats/summary", url_name="stats-summary")
    def stats_summary(self, request):
        return Response(order_stats_summary())
