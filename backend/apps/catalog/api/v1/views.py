from rest_framework import viewsets

from apps.catalog.api.v1.serializers import ItemSerializer, VendorSerializer
from apps.catalog.models import Item, Vendor
from apps.core.api.mixins import ProtectedDestroyMixin

TRUTHY = {"1", "true", "True"}


class VendorViewSet(ProtectedDestroyMixin, viewsets.ModelViewSet):
    serializer_class = VendorSerializer
    protected_message = "Vendor is referenced by purchase orders and cannot be deleted."

    def get_queryset(self):
        queryset = Vendor.objects.order_by("name")
        if self.request.query_params.get("active") in TRUTHY:
            queryset = queryset.filter(is_active=True)
        query = (self.request.query_params.get("q") or "").strip()
        if query:
            queryset = queryset.filter(name__icontains=query)
        return queryset


class ItemViewSet(ProtectedDestroyMixin, viewsets.ModelViewSet):
    serializer_class = ItemSerializer
    protected_message = "Item is referenced by purchase order lines and cannot be deleted."

    def get_queryset(self):
        queryset = Item.objects.order_by("name")
        if self.request.query_params.get("active") in TRUTHY:
            queryset = queryset.filter(is_active=True)
        category = (self.request.query_params.get("category") or "").strip()
        if category:
            queryset = queryset.filter(category=category)
        query = (self.request.query_params.get("q") or "").strip()
        if query:
            queryset = queryset.filter(name__icontains=query)
        return queryset
