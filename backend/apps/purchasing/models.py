import uuid
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from apps.accounts.models import User
from apps.catalog.models import Item, Vendor
from apps.projects.models import Project


class PurchaseOrder(models.Model):
    class Status(models.TextChoices):
        DRAFT = "draft", "draft"
        PENDING = "pending", "pending"
        APPROVED = "approved", "approved"
        SENT = "sent", "sent"
        COMPLETED = "completed", "completed"

    # Statuses only ever move rightwards through this sequence.
    STATUS_SEQUENCE = (
        Status.DRAFT,
        Status.PENDING,
        Status.APPROVED,
        Status.SENT,
        Status.COMPLETED,
    )

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order_number = models.CharField(max_length=50, unique=True)
    project = models.ForeignKey(Project, on_delete=models.PROTECT, related_name="purchase_orders")
    vendor = models.ForeignKey(
        Vendor,
        on_delete=models.PROTECT,
        related_name="purchase_orders",
        blank=True,
        null=True,
    )
    user = models.ForeignKey(User, on_delete=models.PROTECT, related_name="purchase_orders")
    order_date = models.DateField()
    delivery_date = models.DateField(blank=True, null=True)
    status = models.CharField(max_length=16, choices=Status.choices, default=Status.PENDING)
    total_amount = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal("0"))
    notes = models.TextField(blank=True, null=True)
    is_approved = models.BooleanField(default=False)
    approved_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        related_name="approved_purchase_orders",
        blank=True,
        null=True,
    )
    approved_at = models.DateTimeField(blank=True, null=True)
    sent_at = models.DateTimeField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "purchasing_purchase_order"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="idx_purchasing_po_status"),
            models.Index(fields=["order_date"], name="idx_purchasing_po_date"),
        ]

    def __str__(self) -> str:
        return self.order_number

    @classmethod
    def status_rank(cls, status: str) -> int:
        return cls.STATUS_SEQUENCE.index(status)


class PurchaseOrderItem(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order = models.ForeignKey(PurchaseOrder, on_delete=models.CASCADE, related_name="items")
    item = models.ForeignKey(
        Item,
        on_delete=models.PROTECT,
        related_name="order_items",
        blank=True,
        null=True,
    )
    item_name = models.CharField(max_length=255)
    specification = models.TextField(blank=True, null=True)
    unit = models.CharField(max_length=50, blank=True, null=True)
    quantity = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )
    unit_price = models.DecimalField(
        max_digits=15,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0"))],
    )
    total_amount = models.DecimalField(max_digits=15, decimal_places=2)
    notes = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "purchasing_purchase_order_item"
        ordering = ["created_at", "id"]

    def __str__(self) -> str:
        return f"{self.order.order_number} - {self.item_name} x {self.quantity}"


class OrderHistory(models.Model):
    class Action(models.TextChoices):
        CREATED = "created", "created"
        UPDATED = "updated", "updated"
        APPROVED = "approved", "approved"
        SENT = "sent", "sent"
        COMPLETED = "completed", "completed"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order = models.ForeignKey(PurchaseOrder, on_delete=models.CASCADE, related_name="history")
    user = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        related_name="order_history",
        blank=True,
        null=True,
    )
    action = models.CharField(max_length=16, choices=Action.choices)
    changes = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "purchasing_order_history"
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.order.order_number}:{self.action}"


class OrderAttachment(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order = models.ForeignKey(PurchaseOrder, on_delete=models.CASCADE, related_name="attachments")
    file = models.FileField(upload_to="attachments/%Y/%m/%d")
    original_name = models.CharField(max_length=255)
    file_size = models.PositiveIntegerField()
    mime_type = models.CharField(max_length=100)
    uploaded_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        related_name="order_attachments",
        blank=True,
        null=True,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "purchasing_order_attachment"
        ordering = ["created_at"]

    def __str__(self) -> str:
        return f"{self.order.order_number}:{self.original_name}"


class Invoice(models.Model):
    class InvoiceType(models.TextChoices):
        INVOICE = "invoice", "invoice"
        TAX_INVOICE = "tax_invoice", "tax_invoice"

    class Status(models.TextChoices):
        PENDING = "pending", "pending"
        VERIFIED = "verified", "verified"
        PAID = "paid", "paid"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order = models.ForeignKey(PurchaseOrder, on_delete=models.CASCADE, related_name="invoices")
    invoice_number = models.CharField(max_length=100, unique=True)
    invoice_type = models.CharField(max_length=20, choices=InvoiceType.choices, default=InvoiceType.INVOICE)
    issue_date = models.DateField()
    due_date = models.DateField(blank=True, null=True)
    total_amount = models.DecimalField(max_digits=15, decimal_places=2)
    vat_amount = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal("0"))
    status = models.CharField(max_length=16, choices=Status.choices, default=Status.PENDING)
    file = models.FileField(upload_to="invoices/%Y/%m/%d", blank=True, null=True)
    uploaded_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        related_name="uploaded_invoices",
        blank=True,
        null=True,
    )
    verified_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        related_name="verified_invoices",
        blank=True,
        null=True,
    )
    verified_at = models.DateTimeField(blank=True, null=True)
    tax_invoice_issued = models.BooleanField(default=False)
    tax_invoice_issued_date = models.DateTimeField(blank=True, null=True)
    tax_invoice_issued_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        related_name="issued_tax_invoices",
        blank=True,
        null=True,
    )
    notes = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "purchasing_invoice"
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return self.invoice_number


class ItemReceipt(models.Model):
    class Status(models.TextChoices):
        PENDING = "pending", "pending"
        APPROVED = "approved", "approved"
        REJECTED = "rejected", "rejected"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order_item = models.ForeignKey(PurchaseOrderItem, on_delete=models.CASCADE, related_name="receipts")
    invoice = models.ForeignKey(
        Invoice,
        on_delete=models.SET_NULL,
        related_name="item_receipts",
        blank=True,
        null=True,
    )
    received_quantity = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )
    received_date = models.DateField()
    quality_check = models.BooleanField(default=False)
    quality_notes = models.TextField(blank=True, null=True)
    verified_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        related_name="verified_receipts",
        blank=True,
        null=True,
    )
    status = models.CharField(max_length=16, choices=Status.choices, default=Status.PENDING)
    notes = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "purchasing_item_receipt"
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.order_item.item_name} - {self.received_quantity}"


class VerificationLog(models.Model):
    class Action(models.TextChoices):
        INVOICE_UPLOADED = "invoice_uploaded", "invoice_uploaded"
        INVOICE_VERIFIED = "invoice_verified", "invoice_verified"
        TAX_INVOICE_ISSUED = "tax_invoice_issued", "tax_invoice_issued"
        TAX_INVOICE_CANCELLED = "tax_invoice_cancelled", "tax_invoice_cancelled"
        ITEM_RECEIVED = "item_received", "item_received"
        ITEM_VERIFIED = "item_verified", "item_verified"
        QUALITY_CHECKED = "quality_checked", "quality_checked"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order = models.ForeignKey(PurchaseOrder, on_delete=models.CASCADE, related_name="verification_logs")
    invoice = models.ForeignKey(
        Invoice,
        on_delete=models.SET_NULL,
        related_name="verification_logs",
        blank=True,
        null=True,
    )
    item_receipt = models.ForeignKey(
        ItemReceipt,
        on_delete=models.SET_NULL,
        related_name="verification_logs",
        blank=True,
        null=True,
    )
    action = models.CharField(max_length=32, choices=Action.choices)
    details = models.TextField(blank=True, null=True)
    performed_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        related_name="verification_logs",
        blank=True,
        null=True,
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "purchasing_verification_log"
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.order.order_number}:{self.action}"
