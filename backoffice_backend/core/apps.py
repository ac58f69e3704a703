# core/apps.py

"""
CORE APP CONFIG

Shared API plumbing:
- error taxonomy + DRF exception handler ({"message": ...} bodies)
- pagination envelope ({<items>, total, page, limit, totalPages})
- database supervision (connect with backoff, bounded transaction retries)
"""

from django.apps import AppConfig


class CoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "core"
    verbose_name = "Core"
