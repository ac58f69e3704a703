"""
MIGRATION: failed reset-code attempts per user
"""

from __future__ import annotations

from django.db import migrations, models


class Migration(migrations.Migration):
    dependencies = [
        ("users", "0001_initial"),
    ]

    operations = [
        migrations.AddField(
            model_name="user",
            name="reset_code_attempts",
            field=models.PositiveSmallIntegerField(default=0),
        ),
    ]
