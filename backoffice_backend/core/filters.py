# core/filters.py

"""
Shared django-filter building blocks.
"""

from __future__ import annotations

import re

import django_filters
from django.db.models import Q
from rest_framework.exceptions import ValidationError


class RegexSearchFilter(django_filters.CharFilter):
    """
    Case-insensitive regular-expression search across one or more fields.

        search = RegexSearchFilter(fields=["full_name", "fiscal_number"])

    Invalid patterns are rejected with 400 instead of a database error.
    """

    max_pattern_length = 200

    def __init__(self, *args, fields=None, **kwargs):
        self.search_fields = list(fields or [])
        kwargs.setdefault("label", "Regex search")
        super().__init__(*args, **kwargs)

    def filter(self, qs, value):
        pattern = (value or "").strip()
        if not pattern:
            return qs

        if len(pattern) > self.max_pattern_length:
            raise ValidationError({"search": "Search pattern is too long"})

        try:
            re.compile(pattern)
        except re.error as exc:
            raise ValidationError({"search": f"Invalid search pattern: {exc}"}) from exc

        condition = Q()
        for field in self.search_fields:
            condition |= Q(**{f"{field}__iregex": pattern})

        return qs.filter(condition)
