# clients/serializers/client.py

from rest_framework import serializers

from clients.models import Client


class ClientSerializer(serializers.ModelSerializer):
    fullName = serializers.CharField(source="full_name", max_length=255)
    fiscalNumber = serializers.CharField(source="fiscal_number", max_length=64)
    phone = serializers.CharField(max_length=50, required=False, allow_blank=True)
    email = serializers.EmailField(required=False, allow_blank=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Client
        fields = [
            "id",
            "fullName",
            "fiscalNumber",
            "phone",
            "email",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = ["id", "createdAt", "updatedAt"]

    def validate_fullName(self, value):
        value = (value or "").strip()
        if not value:
            raise serializers.ValidationError("Full name is required")
        return value

    def validate_fiscalNumber(self, value):
        value = (value or "").strip()
        if not value:
            raise serializers.ValidationError("Fiscal number is required")
        return value


class ClientDisplaySerializer(serializers.ModelSerializer):
    """Client fields embedded in order payloads."""

    fullName = serializers.CharField(source="full_name", read_only=True)
    fiscalNumber = serializers.CharField(source="fiscal_number", read_only=True)

    class Meta:
        model = Client
        fields = ["id", "fullName", "fiscalNumber", "phone", "email"]
        read_only_fields = fields
