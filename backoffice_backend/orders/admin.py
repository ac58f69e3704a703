# orders/admin.py

"""
Orders are written only by the order engine (stock must move with them),
so the admin is read-only.
"""

from django.contrib import admin

from orders.models import Order, OrderItem


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    can_delete = False
    fields = ("position", "product", "product_name", "quantity", "unit_price")
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "client",
        "status",
        "payment_type",
        "delivery_date",
        "total_amount",
        "created_at",
    )
    list_filter = ("status", "payment_type", "delivery_date")
    search_fields = ("id", "client__full_name", "client__fiscal_number")
    ordering = ("-created_at",)
    inlines = [OrderItemInline]

    readonly_fields = (
        "client",
        "delivery_date",
        "payment_type",
        "status",
        "total_amount",
        "created_by",
        "created_at",
        "updated_at",
    )

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False if obj else True

    def has_delete_permission(self, request, obj=None):
        return False
