# clients/filters.py

import django_filters

from clients.models import Client
from core.filters import RegexSearchFilter


class ClientFilter(django_filters.FilterSet):
    """
    GET /api/clients?search=<regex>
    Matches full name or fiscal number.
    """

    search = RegexSearchFilter(fields=["full_name", "fiscal_number"])

    class Meta:
        model = Client
        fields = ["search"]
