# products/filters.py

import django_filters

from core.filters import RegexSearchFilter
from products.models import Product


class ProductFilter(django_filters.FilterSet):
    """
    GET /api/products?search=<regex>&inStock=true
    """

    search = RegexSearchFilter(fields=["name"])
    inStock = django_filters.BooleanFilter(method="filter_in_stock")

    class Meta:
        model = Product
        fields = ["search", "inStock"]

    def filter_in_stock(self, queryset, name, value):
        if value is None:
            return queryset
        return queryset.filter(quantity__gt=0) if value else queryset.filter(quantity=0)
