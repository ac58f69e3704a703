# clients/admin.py

from django.contrib import admin

from clients.models import Client


@admin.register(Client)
class ClientAdmin(admin.ModelAdmin):
    list_display = ("full_name", "fiscal_number", "phone", "email", "created_at")
    search_fields = ("full_name", "fiscal_number", "email")
    ordering = ("-created_at",)
    readonly_fields = ("created_at", "updated_at")
