"""
PATH: users/models/user.py

CUSTOM USER MODEL

- email is the login identity (USERNAME_FIELD)
- role is "admin" or "user" (see permissions.roles)
- first_name / last_name are exposed to the API as name / surname
- reset_code holds a HASHED one-time password reset code with its expiry
"""

from __future__ import annotations

import uuid

from django.contrib.auth.hashers import check_password, make_password
from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

from permissions.roles import ROLE_ADMIN, ROLE_CHOICES, ROLE_USER


# ---------------- USER MANAGER ----------------
class UserManager(BaseUserManager):
    use_in_migrations = True

    def create_user(self, email=None, password=None, **extra_fields):
        email = (email or "").strip()
        if not email:
            raise ValueError("Users must have an email address")

        extra_fields["email"] = self.normalize_email(email)
        extra_fields.setdefault("role", ROLE_USER)
        extra_fields.setdefault("is_active", True)

        user = self.model(**extra_fields)

        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()

        user.full_clean(exclude=["password"])
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError("Superuser must have an email")
        if not password:
            raise ValueError("Superuser must have a password")

        extra_fields.setdefault("role", ROLE_ADMIN)
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("is_active", True)

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True")

        return self.create_user(email=email, password=password, **extra_fields)


# ---------------- USER MODEL ----------------
class User(AbstractBaseUser, PermissionsMixin):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Canonical identity
    email = models.EmailField(unique=True)

    first_name = models.CharField(max_length=100, blank=True)
    last_name = models.CharField(max_length=100, blank=True)

    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_USER)

    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    reset_code = models.CharField(max_length=128, blank=True)
    reset_code_expires = models.DateTimeField(null=True, blank=True)
    reset_code_attempts = models.PositiveSmallIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    USERNAME_FIELD = "email"
    EMAIL_FIELD = "email"
    REQUIRED_FIELDS = []

    class Meta:
        ordering = ["-created_at"]

    def clean(self):
        if self.email:
            self.email = self.__class__.objects.normalize_email(self.email).strip()
        if not self.email:
            raise ValidationError("User must have an email")

    def __str__(self):
        return f"{self.email} ({self.role})"

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    # ---------------- PASSWORD RESET ----------------
    def set_reset_code(self, raw_code: str, *, expires_at):
        self.reset_code = make_password(raw_code)
        self.reset_code_expires = expires_at
        self.reset_code_attempts = 0

    def check_reset_code(self, raw_code: str) -> bool:
        if not self.reset_code or not self.reset_code_expires:
            return False
        if self.reset_code_expires < timezone.now():
            return False
        return check_password(raw_code, self.reset_code)

    def clear_reset_code(self):
        self.reset_code = ""
        self.reset_code_expires = None
        self.reset_code_attempts = 0
