from rest_framework import serializers

from apps.catalog.models import Item, Vendor


class VendorSerializer(serializers.ModelSerializer):
    class Meta:
        model = Vendor
        fields = (
            "id",
            "name",
            "business_number",
            "industry",
            "representative",
            "contact",
            "contact_person",
            "email",
            "phone",
            "address",
            "memo",
            "is_active",
            "created_at",
            "updated_at",
        )
        read_only_fields = ("id", "created_at", "updated_at")


class ItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = Item
        fields = (
            "id",
            "name",
            "category",
            "specification",
            "unit",
            "standard_price",
            "description",
            "is_active",
            "created_at",
            "updated_at",
        )
        read_only_fields = ("id", "created_at", "updated_at")

    def validate_standard_price(self, value):
        if value is not None and value < 0:
            raise serializers.ValidationError("standard_price cannot be negative.")
        return value
