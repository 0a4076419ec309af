import uuid

from django.db import models


class Vendor(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    business_number = models.CharField(max_length=50, blank=True, null=True)
    industry = models.CharField(max_length=100, blank=True, null=True)
    representative = models.CharField(max_length=100, blank=True, null=True)
    contact = models.CharField(max_length=100)
    contact_person = models.CharField(max_length=100)
    email = models.EmailField(max_length=255, unique=True)
    phone = models.CharField(max_length=50, blank=True, null=True)
    address = models.TextField(blank=True, null=True)
    memo = models.TextField(blank=True, null=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "catalog_vendor"
        ordering = ["name"]
        indexes = [
            models.Index(fields=["name"], name="idx_catalog_vendor_name"),
            models.Index(fields=["business_number"], name="idx_catalog_vendor_bizno"),
        ]

    def __str__(self) -> str:
        return self.name


class Item(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    category = models.CharField(max_length=100, blank=True, null=True)
    specification = models.TextField(blank=True, null=True)
    unit = models.CharField(max_length=50)
    standard_price = models.DecimalField(max_digits=15, decimal_places=2, blank=True, null=True)
    description = models.TextField(blank=True, null=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "catalog_item"
        ordering = ["name"]
        indexes = [
            models.Index(fields=["name"], name="idx_catalog_item_name"),
            models.Index(fields=["category"], name="idx_catalog_item_category"),
        ]

    def __str__(self) -> str:
        return self.name
