from rest_framework import serializers

from apps.purchasing.models import (
    Invoice,
    ItemReceipt,
    OrderAttachment,
    OrderHistory,
    PurchaseOrder,
    PurchaseOrderItem,
    VerificationLog,
)
from apps.purchasing.services import orders


class PurchaseOrderItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = PurchaseOrderItem
        fields = (
            "id",
            "item",
            "item_name",
            "specification",
            "unit",
            "quantity",
            "unit_price",
            "total_amount",
            "notes",
            "created_at",
            "updated_at",
        )
        read_only_fields = ("id", "total_amount", "created_at", "updated_at")

    def validate_quantity(self, value):
        if value <= 0:
            raise serializers.ValidationError("quantity must be greater than 0.")
        return value

    def validate_unit_price(self, value):
        if value < 0:
            raise serializers.ValidationError("unit_price cannot be negative.")
        return value


class PurchaseOrderSerializer(serializers.ModelSerializer):
    items = PurchaseOrderItemSerializer(many=True)
    vendor_name = serializers.CharField(source="vendor.name", read_only=True, default=None)
    project_name = serializers.CharField(source="project.project_name", read_only=True)
    user_name = serializers.CharField(source="user.name", read_only=True)

    class Meta:
        model = PurchaseOrder
        fields = (
            "id",
            "order_number",
            "project",
            "project_name",
            "vendor",
            "vendor_name",
            "user",
            "user_name",
            "order_date",
            "delivery_date",
            "status",
            "total_amount",
            "notes",
            "is_approved",
            "approved_by",
            "approved_at",
            "sent_at",
            "items",
            "created_at",
            "updated_at",
        )
        read_only_fields = (
            "id",
            "order_number",
            "user",
            "total_amount",
            "is_approved",
            "approved_by",
            "approved_at",
            "sent_at",
            "created_at",
            "updated_at",
        )
        extra_kwargs = {"order_date": {"required": False}}

    def validate_status(self, value):
        if self.instance is None and value not in (PurchaseOrder.Status.DRAFT, PurchaseOrder.Status.PENDING):
            raise serializers.ValidationError("New orders start as draft or pending.")
        return value

    def validate(self, attrs):
        if (self.instance is None or "items" in attrs) and not attrs.get("items"):
            raise serializers.ValidationError({"items": "An order needs at least one item."})
        order_date = attrs.get("order_date", getattr(self.instance, "order_date", None))
        delivery_date = attrs.get("delivery_date", getattr(self.instance, "delivery_date", None))
        if order_date and delivery_date and delivery_date < order_date:
            raise serializers.ValidationError({"delivery_date": "delivery_date cannot be before order_date."})
        return attrs

    def create(self, validated_data):
        items = validated_data.pop("items", [])
        return orders.create_order(validated_data, items, self.context["actor"])

    def update(self, instance, validated_data):
        items = validated_data.pop("items", None)
        order = orders.update_order(instance, validated_data, self.context.get("actor"))
        if items is not None:
            order = orders.replace_items(order, items)
        return order


class OrderHistorySerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderHistory
        fields = ("id", "order", "user", "action", "changes", "created_at")
        read_only_fields = fields


class OrderAttachmentSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderAttachment
        fields = (
            "id",
            "order",
            "file",
            "original_name",
            "file_size",
            "mime_type",
            "uploaded_by",
            "created_at",
        )
        read_only_fields = fields


class InvoiceSerializer(serializers.ModelSerializer):
    class Meta:
        model = Invoice
        fields = (
            "id",
            "order",
            "invoice_number",
            "invoice_type",
            "issue_date",
            "due_date",
            "total_amount",
            "vat_amount",
            "status",
            "file",
            "uploaded_by",
            "verified_by",
            "verified_at",
            "tax_invoice_issued",
            "tax_invoice_issued_date",
            "tax_invoice_issued_by",
            "notes",
            "created_at",
            "updated_at",
        )
        read_only_fields = (
            "id",
            "status",
            "uploaded_by",
            "verified_by",
            "verified_at",
            "tax_invoice_issued",
            "tax_invoice_issued_date",
            "tax_invoice_issued_by",
            "created_at",
            "updated_at",
        )
        extra_kwargs = {"file": {"required": False, "allow_null": True}}

    def validate_total_amount(self, value):
        if value < 0:
            raise serializers.ValidationError("total_amount cannot be negative.")
        return value

    def validate_vat_amount(self, value):
        if value < 0:
            raise serializers.ValidationError("vat_amount cannot be negative.")
        return value

    def validate(self, attrs):
        if self.instance is not None and "order" in attrs and attrs["order"] != self.instance.order:
            raise serializers.ValidationError({"order": "An invoice cannot be moved to another order."})
        return attrs


class ItemReceiptSerializer(serializers.ModelSerializer):
    order = serializers.UUIDField(source="order_item.order_id", read_only=True)

    class Meta:
        model = ItemReceipt
        fields = (
            "id",
            "order_item",
            "order",
            "invoice",
            "received_quantity",
            "received_date",
            "quality_check",
            "quality_notes",
            "status",
            "verified_by",
            "notes",
            "created_at",
            "updated_at",
        )
        read_only_fields = ("id", "verified_by", "created_at", "updated_at")

    def validate_received_quantity(self, value):
        if value <= 0:
            raise serializers.ValidationError("received_quantity must be greater than 0.")
        return value

    def validate(self, attrs):
        if self.instance is not None and "order_item" in attrs and attrs["order_item"] != self.instance.order_item:
            raise serializers.ValidationError({"order_item": "A receipt cannot be moved to another order item."})
        order_item = attrs.get("order_item", getattr(self.instance, "order_item", None))
        invoice = attrs.get("invoice")
        if invoice is not None and order_item is not None and invoice.order_id != order_item.order_id:
            raise serializers.ValidationError({"invoice": "invoice must belong to the same order as the item."})
        return attrs


class ReceiptSummaryItemSerializer(serializers.Serializer):
    order_item = serializers.UUIDField()
    item_name = serializers.CharField()
    unit = serializers.CharField(allow_null=True)
    quantity = serializers.DecimalField(max_digits=10, decimal_places=2)
    total_received = serializers.DecimalField(max_digits=12, decimal_places=2)
    remaining = serializers.DecimalField(max_digits=10, decimal_places=2)
    status = serializers.CharField()
    receipt_count = serializers.IntegerField()


class ReceiptSummarySerializer(serializers.Serializer):
    order = serializers.UUIDField()
    status = serializers.CharField()
    items = ReceiptSummaryItemSerializer(many=True)


class VerificationLogSerializer(serializers.ModelSerializer):
    performed_by_name = serializers.CharField(source="performed_by.name", read_only=True, default=None)

    class Meta:
        model = VerificationLog
        fields = (
            "id",
            "order",
            "invoice",
            "item_receipt",
            "action",
            "details",
            "performed_by",
            "performed_by_name",
            "created_at",
        )
        read_only_fields = fields
