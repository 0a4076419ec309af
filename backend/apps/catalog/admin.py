from django.contrib import admin

from apps.catalog.models import Item, Vendor


@admin.register(Vendor)
class VendorAdmin(admin.ModelAdmin):
    list_display = ("name", "business_number", "contact_person", "email", "is_active")
    list_filter = ("is_active",)
    search_fields = ("name", "business_number", "email", "contact_person")


@admin.register(Item)
class ItemAdmin(admin.ModelAdmin):
    list_display = ("name", "category", "unit", "standard_price", "is_active")
    list_filter = ("category", "is_active")
    search_fields = ("name", "category", "specification")
