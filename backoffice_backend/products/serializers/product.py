# products/serializers/product.py

"""
PRODUCT SERIALIZER

Purpose:
- Canonical Product serializer for catalog management (admin writes, staff reads).
- Edits write only the submitted fields; a quantity edit is applied as a
  delta against the locked row (set_quantity), so order reservations
  committed in between are kept.
"""

from decimal import Decimal

from rest_framework import serializers

from products.models import Product
from products.services.inventory import set_quantity


class ProductSerializer(serializers.ModelSerializer):
    price = serializers.DecimalField(
        max_digits=14,
        decimal_places=4,
        min_value=Decimal("0"),
    )
    quantity = serializers.IntegerField(min_value=0)
    isInStock = serializers.BooleanField(source="is_in_stock", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "price",
            "quantity",
            "isInStock",
            "version",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = [
            "id",
            "isInStock",
            "version",
            "createdAt",
            "updatedAt",
        ]

    def validate_name(self, value):
        value = (value or "").strip()
        if not value:
            raise serializers.ValidationError("Product name is required")
        return value

    def update(self, instance, validated_data):
        # Only submitted fields are written; stock goes through set_quantity().
        quantity = validated_data.pop("quantity", None)

        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        instance.save(update_fields=list(validated_data) + ["updated_at"])

        if quantity is not None:
            set_quantity(instance.pk, quantity)
            instance.refresh_from_db(fields=["quantity", "version"])

        return instance


class ProductDisplaySerializer(serializers.ModelSerializer):
    """Minimal product fields embedded in order line items."""

    class Meta:
        model = Product
        fields = ["id", "name", "price"]
        read_only_fields = fields
