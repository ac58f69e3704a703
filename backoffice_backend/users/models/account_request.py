# users/models/account_request.py

"""
ACCOUNT REQUEST

Self-registration does not create a User. It files an AccountRequest
that an admin approves (creating the User) or rejects.
The password is stored hashed, exactly as it will be on the User.
"""

import uuid

from django.conf import settings
from django.db import models


class AccountRequestStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    APPROVED = "approved", "Approved"
    REJECTED = "rejected", "Rejected"


class AccountRequest(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=100)
    surname = models.CharField(max_length=100)
    email = models.EmailField(unique=True)

    # Hashed with django.contrib.auth.hashers.make_password
    password = models.CharField(max_length=128)

    status = models.CharField(
        max_length=20,
        choices=AccountRequestStatus.choices,
        default=AccountRequestStatus.PENDING,
        db_index=True,
    )

    created_at = models.DateTimeField(auto_now_add=True)
    reviewed_at = models.DateTimeField(null=True, blank=True)
    reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="reviewed_account_requests",
    )

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.email} ({self.status})"
