# clients/models/client.py

import uuid

from django.core.exceptions import ValidationError
from django.db import models


class Client(models.Model):
    """
    A customer of the business.

    Orders reference clients (PROTECT): a client with order history
    cannot be deleted.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    full_name = models.CharField(max_length=255, db_index=True)
    fiscal_number = models.CharField(max_length=64, db_index=True)

    phone = models.CharField(max_length=50, blank=True)
    email = models.EmailField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.full_name} ({self.fiscal_number})"

    def clean(self):
        if not (self.full_name or "").strip():
            raise ValidationError("Client full name is required")
        if not (self.fiscal_number or "").strip():
            raise ValidationError("Client fiscal number is required")
