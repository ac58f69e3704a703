# users/management/commands/create_admin.py

"""
PATH: users/management/commands/create_admin.py

Idempotent admin bootstrap.

- Reads --email / --password, falling back to ADMIN_EMAIL / ADMIN_PASSWORD env vars.
- Creates the admin if missing; otherwise makes sure it is an active admin
  and resets its password.
- Does NOT print the password.
"""

from __future__ import annotations

import os

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from permissions.roles import ROLE_ADMIN


class Command(BaseCommand):
    help = "Create/update an admin account (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument("--email", default=None)
        parser.add_argument("--password", default=None)
        parser.add_argument("--name", default="Admin")
        parser.add_argument("--surname", default="User")

    def handle(self, *args, **options):
        email = (options["email"] or os.environ.get("ADMIN_EMAIL") or "").strip()
        password = (options["password"] or os.environ.get("ADMIN_PASSWORD") or "").strip()

        if not email or not password:
            raise CommandError("Provide --email/--password or set ADMIN_EMAIL/ADMIN_PASSWORD.")

        User = get_user_model()

        with transaction.atomic():
            user = User.objects.filter(email__iexact=email).first()

            if user:
                user.role = ROLE_ADMIN
                user.is_active = True
                user.is_staff = True
                user.is_superuser = True
                user.set_password(password)
                user.save()
                self.stdout.write(self.style.SUCCESS(f"Admin ensured: {email} (updated)"))
                return

            User.objects.create_superuser(
                email=email,
                password=password,
                first_name=options["name"],
                last_name=options["surname"],
            )

        self.stdout.write(self.style.SUCCESS(f"Admin ensured: {email} (created)"))
