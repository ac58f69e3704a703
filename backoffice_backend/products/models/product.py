# products/models/product.py

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import F, Q


class Product(models.Model):
    """
    Represents a sellable catalog product.

    STOCK MODEL (IMPORTANT):
    - `quantity` is the on-hand stock; it never goes negative
      (conditional UPDATE in products.services.inventory + DB check constraint)
    - `quantity` is mutated ONLY through adjust_quantity() / set_quantity();
      save() on an existing row never writes it, so a stale in-memory copy
      cannot undo a reservation
    - `version` is bumped in the database (F expression) on every stock
      adjustment and catalog save

    PRICING:
    - `price` is the current selling price (4 dp so sub-cent list prices are
      representable); orders snapshot it into OrderItem.unit_price.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=255, db_index=True)

    price = models.DecimalField(
        max_digits=14,
        decimal_places=4,
        default=Decimal("0.0000"),
    )

    quantity = models.PositiveIntegerField(default=0)

    version = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=Q(quantity__gte=0),
                name="product_quantity_non_negative",
            ),
            models.CheckConstraint(
                condition=Q(price__gte=0),
                name="product_price_non_negative",
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.quantity} in stock)"

    def clean(self):
        if not (self.name or "").strip():
            raise ValidationError("Product name is required")

        if self.price is None or Decimal(self.price) < Decimal("0"):
            raise ValidationError("Price must be non-negative")

        if self.quantity is None or int(self.quantity) < 0:
            raise ValidationError("Quantity must be non-negative")

    def save(self, *args, **kwargs):
        if self._state.adding:
            super().save(*args, **kwargs)
            return

        update_fields = kwargs.get("update_fields")
        if update_fields is None:
            # A catalog save never writes stock; see adjust_quantity() / set_quantity().
            update_fields = [
                f.name
                for f in self._meta.concrete_fields
                if not f.primary_key and f.name not in ("quantity", "created_at")
            ]
        update_fields = list(update_fields)
        if "version" not in update_fields:
            update_fields.append("version")
        kwargs["update_fields"] = update_fields

        self.version = F("version") + 1
        super().save(*args, **kwargs)
        self.refresh_from_db(fields=["version"])

    @property
    def is_in_stock(self) -> bool:
        return int(self.quantity or 0) > 0
