# products/admin.py

from django.contrib import admin

from products.models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = (
        "name",
        "price",
        "quantity",
        "version",
        "created_at",
    )
    search_fields = ("name",)
    ordering = ("-created_at",)
    readonly_fields = ("quantity", "version", "created_at", "updated_at")
