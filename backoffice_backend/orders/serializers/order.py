# orders/serializers/order.py

"""
ORDER SERIALIZERS

Read:
- OrderSerializer: populated order (client + product display fields).

Write (documentation / shape only):
- OrderInputSerializer, OrderStatusInputSerializer describe request bodies
  for the OpenAPI schema. Business validation is done by the order engine,
  which applies its checks in a fixed order.
"""

from decimal import Decimal

from rest_framework import serializers

from clients.serializers import ClientDisplaySerializer
from orders.models import Order, OrderItem, OrderStatus, PaymentType
from products.serializers import ProductDisplaySerializer


class OrderItemSerializer(serializers.ModelSerializer):
    productId = serializers.UUIDField(source="product_id", read_only=True, allow_null=True)
    product = ProductDisplaySerializer(read_only=True, allow_null=True)
    productName = serializers.CharField(source="product_name", read_only=True)
    price = serializers.DecimalField(
        source="unit_price",
        max_digits=14,
        decimal_places=4,
        read_only=True,
    )
    lineTotal = serializers.DecimalField(
        source="line_total",
        max_digits=16,
        decimal_places=4,
        read_only=True,
    )

    class Meta:
        model = OrderItem
        fields = [
            "productId",
            "product",
            "productName",
            "quantity",
            "price",
            "lineTotal",
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    clientId = serializers.UUIDField(source="client_id", read_only=True)
    client = ClientDisplaySerializer(read_only=True)
    products = OrderItemSerializer(source="items", many=True, read_only=True)
    deliveryDate = serializers.DateField(source="delivery_date", read_only=True)
    paymentType = serializers.CharField(source="payment_type", read_only=True)
    totalAmount = serializers.DecimalField(
        source="total_amount",
        max_digits=12,
        decimal_places=2,
        read_only=True,
    )
    createdBy = serializers.UUIDField(source="created_by_id", read_only=True, allow_null=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "clientId",
            "client",
            "products",
            "deliveryDate",
            "paymentType",
            "status",
            "totalAmount",
            "createdBy",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = fields


class OrderLineInputSerializer(serializers.Serializer):
    productId = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)
    price = serializers.DecimalField(max_digits=14, decimal_places=4, min_value=Decimal("0"))


class OrderInputSerializer(serializers.Serializer):
    clientId = serializers.UUIDField()
    products = OrderLineInputSerializer(many=True)
    deliveryDate = serializers.DateField()
    paymentType = serializers.ChoiceField(choices=PaymentType.choices)
    status = serializers.ChoiceField(choices=OrderStatus.choices, required=False)


class OrderStatusInputSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=OrderStatus.choices)
