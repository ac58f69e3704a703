# products/views/product.py

"""
PRODUCT VIEWSET

Purpose:
- Catalog endpoints (list/search/retrieve for every authenticated user)
- Catalog writes (create/update/delete) for admins only
- Low stock report

Stock rule:
- Updates lock the row and write only the submitted fields; a quantity
  edit is an admin correction applied as a delta (set_quantity).
- Order reservations never go through this view (see products.services.inventory).
"""

import logging

from django.db import transaction
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import (
    OpenApiParameter,
    OpenApiResponse,
    extend_schema,
)
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from permissions.roles import (
    CAP_CATALOG_EDIT,
    CAP_REPORTS_VIEW,
    HasCapability,
    ReadOrCapability,
)
from products.filters import ProductFilter
from products.models import Product
from products.serializers import ProductSerializer

logger = logging.getLogger(__name__)

DEFAULT_LOW_STOCK_THRESHOLD = 10


class ProductViewSet(viewsets.ModelViewSet):
    """
    GET    /api/products?search=<regex>&page=&limit=
    GET    /api/products/<id>
    POST   /api/products                  (admin)
    PUT    /api/products/<id>             (admin)
    PATCH  /api/products/<id>             (admin)
    DELETE /api/products/<id>             (admin)
    GET    /api/products/stats/low-stock?threshold=
    """

    serializer_class = ProductSerializer
    permission_classes = [IsAuthenticated, ReadOrCapability]
    required_write_capability = CAP_CATALOG_EDIT
    required_capability = CAP_REPORTS_VIEW

    filter_backends = [DjangoFilterBackend]
    filterset_class = ProductFilter

    pagination_results_key = "products"
    lookup_value_regex = "[0-9a-fA-F-]{32,36}"

    def get_permissions(self):
        if self.action == "low_stock":
            return [IsAuthenticated(), HasCapability()]
        return super().get_permissions()

    def get_queryset(self):
        qs = Product.objects.all().order_by("-created_at")
        if self.action in ("update", "partial_update"):
            qs = qs.select_for_update()
        return qs

    @transaction.atomic
    def update(self, request, *args, **kwargs):
        return super().update(request, *args, **kwargs)

    def perform_create(self, serializer):
        product = serializer.save()
        logger.info(
            "Product created",
            extra={"product_id": str(product.pk), "user_id": str(self.request.user.pk)},
        )

    def perform_update(self, serializer):
        product = serializer.save()
        logger.info(
            "Product updated",
            extra={"product_id": str(product.pk), "user_id": str(self.request.user.pk)},
        )

    def perform_destroy(self, instance):
        product_id = str(instance.pk)
        instance.delete()
        logger.info(
            "Product deleted",
            extra={"product_id": product_id, "user_id": str(self.request.user.pk)},
        )

    def destroy(self, request, *args, **kwargs):
        instance = self.get_object()
        self.perform_destroy(instance)
        return Response({"message": "Product deleted successfully"})

    # -----------------------------
    # Reports
    # -----------------------------
    @extend_schema(
        parameters=[
            OpenApiParameter(
                name="threshold",
                type=int,
                location=OpenApiParameter.QUERY,
                required=False,
                description=f"Products with quantity at or below this value (default {DEFAULT_LOW_STOCK_THRESHOLD}).",
            ),
        ],
        responses={
            200: OpenApiResponse(description="Low stock products, lowest quantity first"),
            400: OpenApiResponse(description="Invalid threshold"),
        },
    )
    @action(detail=False, methods=["get"], url_path="stats/low-stock")
    def low_stock(self, request):
        raw = (request.query_params.get("threshold") or "").strip()
        if raw:
            if not raw.isdigit():
                raise ValidationError({"threshold": "threshold must be a non-negative integer"})
            threshold = int(raw)
        else:
            threshold = DEFAULT_LOW_STOCK_THRESHOLD

        qs = Product.objects.filter(quantity__lte=threshold).order_by("quantity", "name")
        data = ProductSerializer(qs, many=True).data

        return Response(
            {
                "threshold": threshold,
                "count": len(data),
                "products": data,
            }
        )
