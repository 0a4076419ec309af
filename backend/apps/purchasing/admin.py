from django.contrib import admin

from apps.purchasing.models import (
    Invoice,
    ItemReceipt,
    OrderAttachment,
    OrderHistory,
    PurchaseOrder,
    PurchaseOrderItem,
    VerificationLog,
)


class PurchaseOrderItemInline(admin.TabularInline):
    model = PurchaseOrderItem
    extra = 0
    readonly_fields = ("total_amount",)


class OrderAttachmentInline(admin.TabularInline):
    model = OrderAttachment
    extra = 0
    readonly_fields = ("original_name", "file_size", "mime_type", "uploaded_by", "created_at")


class OrderHistoryInline(admin.TabularInline):
    model = OrderHistory
    extra = 0
    can_delete = False
    readonly_fields = ("user", "action", "changes", "created_at")

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(PurchaseOrder)
class PurchaseOrderAdmin(admin.ModelAdmin):
    list_display = ("order_number", "project", "vendor", "user", "status", "total_amount", "order_date")
    list_filter = ("status", "is_approved")
    search_fields = ("order_number", "vendor__name", "project__project_name")
    readonly_fields = ("total_amount", "approved_by", "approved_at", "sent_at")
    inlines = (PurchaseOrderItemInline, OrderAttachmentInline, OrderHistoryInline)


@admin.register(Invoice)
class InvoiceAdmin(admin.ModelAdmin):
    list_display = ("invoice_number", "order", "invoice_type", "status", "total_amount", "tax_invoice_issued")
    list_filter = ("status", "invoice_type", "tax_invoice_issued")
    search_fields = ("invoice_number", "order__order_number")
    readonly_fields = (
        "uploaded_by",
        "verified_by",
        "verified_at",
        "tax_invoice_issued",
        "tax_invoice_issued_date",
        "tax_invoice_issued_by",
    )


@admin.register(ItemReceipt)
class ItemReceiptAdmin(admin.ModelAdmin):
    list_display = ("order_item", "received_quantity", "received_date", "status", "quality_check")
    list_filter = ("status", "quality_check")
    search_fields = ("order_item__item_name", "order_item__order__order_number", "notes")


@admin.register(VerificationLog)
class VerificationLogAdmin(admin.ModelAdmin):
    list_display = ("order", "action", "performed_by", "created_at")
    list_filter = ("action",)
    search_fields = ("order__order_number", "details")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
