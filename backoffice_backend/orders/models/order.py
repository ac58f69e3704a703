# orders/models/order.py

"""
ORDER LEDGER

Order:
- belongs to one Client (PROTECT: clients with orders cannot be deleted)
- owns its line items (OrderItem, CASCADE)
- total_amount is computed server-side by orders.services.pricing

OrderItem:
- unit_price is the product price captured when the order was placed;
  later catalog price changes never touch it
- product is SET_NULL so catalog deletions do not erase order history;
  product_name keeps the display snapshot
- position keeps the submission order of line items

Writes happen ONLY through orders.services.order_engine.
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.db import models
from django.db.models import Q


class OrderStatus(models.TextChoices):
    PENDING = "Pending", "Pending"
    CONFIRMED = "Confirmed", "Confirmed"
    DELIVERED = "Delivered", "Delivered"
    CANCELLED = "Cancelled", "Cancelled"


class PaymentType(models.TextChoices):
    CASH = "Cash", "Cash"
    CREDIT_CARD = "CreditCard", "Credit Card"
    BANK_TRANSFER = "BankTransfer", "Bank Transfer"


class Order(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    client = models.ForeignKey(
        "clients.Client",
        on_delete=models.PROTECT,
        related_name="orders",
    )

    delivery_date = models.DateField()

    payment_type = models.CharField(max_length=20, choices=PaymentType.choices)

    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
        db_index=True,
    )

    total_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
    )

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders_created",
    )

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=Q(total_amount__gte=0),
                name="order_total_non_negative",
            ),
        ]

    def __str__(self):
        return f"Order {self.id} ({self.status})"


class OrderItem(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name="items",
    )

    product = models.ForeignKey(
        "products.Product",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="order_items",
    )

    product_name = models.CharField(max_length=255, blank=True)

    quantity = models.PositiveIntegerField()

    unit_price = models.DecimalField(max_digits=14, decimal_places=4)

    position = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["position"]
        constraints = [
            models.CheckConstraint(
                condition=Q(quantity__gte=1),
                name="order_item_quantity_positive",
            ),
            models.CheckConstraint(
                condition=Q(unit_price__gte=0),
                name="order_item_unit_price_non_negative",
            ),
        ]

    def __str__(self):
        return f"{self.quantity} x {self.product_name}"

    @property
    def line_total(self) -> Decimal:
        return Decimal(self.unit_price) * int(self.quantity)
