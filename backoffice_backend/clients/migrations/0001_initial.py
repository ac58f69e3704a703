"""
MIGRATION: CREATE Client
"""

from __future__ import annotations

import uuid

from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Client",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        primary_key=True,
                        default=uuid.uuid4,
                        editable=False,
                        serialize=False,
                    ),
                ),
                ("full_name", models.CharField(max_length=255, db_index=True)),
                ("fiscal_number", models.CharField(max_length=64, db_index=True)),
                ("phone", models.CharField(max_length=50, blank=True)),
                ("email", models.EmailField(max_length=254, blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["-created_at"],
            },
        ),
    ]
