# core/pagination.py

"""
PAGE/LIMIT PAGINATION

Response envelope used by every list endpoint:

    {
        "<results_key>": [...],
        "total": <int>,
        "page": <int>,
        "limit": <int>,
        "totalPages": <int>
    }

Views pick the collection key via `pagination_results_key`
(e.g. "orders", "products", "clients").
"""

from __future__ import annotations

import math

from django.core.paginator import InvalidPage
from rest_framework.exceptions import NotFound
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


class PageLimitPagination(PageNumberPagination):
    page_query_param = "page"
    page_size_query_param = "limit"
    page_size = 10
    max_page_size = 100

    results_key = "results"

    def paginate_queryset(self, queryset, request, view=None):
        self.results_key = getattr(view, "pagination_results_key", None) or self.results_key
        self.limit = self.get_page_size(request)

        paginator = self.django_paginator_class(queryset, self.limit)
        page_number = self.get_page_number(request, paginator)

        try:
            self.page = paginator.page(page_number)
        except InvalidPage:
            # Past the last page: empty page rather than 404, clamp otherwise.
            if str(page_number).isdigit() and int(page_number) > 1:
                self.page = None
                self.page_number = int(page_number)
                self.total = paginator.count
                self.request = request
                return []
            raise NotFound("Invalid page")

        self.page_number = self.page.number
        self.total = paginator.count
        self.request = request
        return list(self.page)

    def get_paginated_response(self, data):
        total = int(self.total or 0)
        limit = int(self.limit or self.page_size)
        return Response(
            {
                self.results_key: data,
                "total": total,
                "page": int(self.page_number),
                "limit": limit,
                "totalPages": math.ceil(total / limit) if limit else 0,
            }
        )

    def get_paginated_response_schema(self, schema):
        return {
            "type": "object",
            "properties": {
                self.results_key: schema,
                "total": {"type": "integer"},
                "page": {"type": "integer"},
                "limit": {"type": "integer"},
                "totalPages": {"type": "integer"},
            },
        }
