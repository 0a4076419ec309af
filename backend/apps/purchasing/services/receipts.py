"""Receipt reconciliation.

Each order item accumulates receipts (partial deliveries). Received totals
and the pending/partial/complete status are derived at read time and never
stored. The sum of received quantities for an item never exceeds its ordered
quantity: every write path re-reads the item's receipts under a row lock on
the item before checking the remaining amount.
"""
import logging
from decimal import Decimal

from django.conf import settings
from django.core.cache import cache
from django.db import transaction
from django.utils import timezone

from apps.core.api.exceptions import InvariantViolation
from apps.purchasing.models import ItemReceipt, PurchaseOrderItem, VerificationLog
from apps.purchasing.services.verification_logs import append_log

logger = logging.getLogger(__name__)

ZERO = Decimal("0")

STATUS_PENDING = "pending"
STATUS_PARTIAL = "partial"
STATUS_COMPLETE = "complete"

BULK_RECEIPT_NOTE = "Bulk receipt"

RECEIPT_FIELDS = (
    "invoice",
    "received_quantity",
    "received_date",
    "quality_check",
    "quality_notes",
    "status",
    "notes",
)


def derive_status(quantity: Decimal, total_received: Decimal) -> str:
    if total_received <= ZERO:
        return STATUS_PENDING
    if total_received < quantity:
        return STATUS_PARTIAL
    return STATUS_COMPLETE


def total_received_for(order_item_id, exclude_receipt_id=None) -> Decimal:
    queryset = ItemReceipt.objects.filter(order_item_id=order_item_id)
    if exclude_receipt_id is not None:
        queryset = queryset.exclude(pk=exclude_receipt_id)
    return sum(queryset.values_list("received_quantity", flat=True), ZERO)


def summarize_order_item(order_item: PurchaseOrderItem, receipts=None) -> dict:
    if receipts is None:
        receipts = list(order_item.receipts.all())
    total_received = sum((receipt.received_quantity for receipt in receipts), ZERO)
    return {
        "order_item": order_item.id,
        "item_name": order_item.item_name,
        "unit": order_item.unit,
        "quantity": order_item.quantity,
        "total_received": total_received,
        "remaining": max(order_item.quantity - total_received, ZERO),
        "status": derive_status(order_item.quantity, total_received),
        "receipt_count": len(receipts),
    }


def summary_cache_key(order_id) -> str:
    return f"receipt-summary:{order_id}"


def invalidate_summary(order_id) -> None:
    cache.delete(summary_cache_key(order_id))


def build_receipt_summary(order) -> dict:
    items = [
        summarize_order_item(item, list(item.receipts.all()))
        for item in order.items.prefetch_related("receipts").order_by("created_at", "id")
    ]
    statuses = {item["status"] for item in items}
    if not items or statuses == {STATUS_PENDING}:
        order_status = STATUS_PENDING
    elif statuses == {STATUS_COMPLETE}:
        order_status = STATUS_COMPLETE
    else:
        order_status = STATUS_PARTIAL
    return {"order": order.id, "status": order_status, "items": items}


def receipt_summary(order) -> dict:
    return cache.get_or_set(
        summary_cache_key(order.id),
        lambda: build_receipt_summary(order),
        getattr(settings, "RECEIPT_SUMMARY_CACHE_TIMEOUT", 300),
    )


def _lock_order_item(order_item_id) -> PurchaseOrderItem:
    return PurchaseOrderItem.objects.select_for_update().select_related("order").get(pk=order_item_id)


def _log_receipt(receipt: ItemReceipt, order_item: PurchaseOrderItem, actor) -> None:
    append_log(
        order_item.order,
        VerificationLog.Action.ITEM_RECEIVED,
        performed_by=actor,
        details=f"Received {receipt.received_quantity} of {order_item.item_name}",
        invoice=receipt.invoice,
        item_receipt=receipt,
    )
    if receipt.quality_check:
        append_log(
            order_item.order,
            VerificationLog.Action.QUALITY_CHECKED,
            performed_by=actor,
            details=f"Quality check passed for {order_item.item_name}",
            invoice=receipt.invoice,
            item_receipt=receipt,
        )


def register_receipt(order_item: PurchaseOrderItem, fields: dict, actor) -> ItemReceipt:
    with transaction.atomic():
        order_item = _lock_order_item(order_item.pk)
        total_received = total_received_for(order_item.pk)
        remaining = order_item.quantity - total_received
        quantity = fields["received_quantity"]

        if remaining <= ZERO:
            logger.warning("Refused receipt for fully received item %s", order_item.pk)
            raise InvariantViolation(f"{order_item.item_name} has already been fully received.")
        if quantity > remaining:
            logger.warning(
                "Refused receipt of %s for item %s with %s remaining", quantity, order_item.pk, remaining
            )
            raise InvariantViolation(
                "Received quantity exceeds the remaining quantity.",
                field_errors={"received_quantity": f"At most {remaining} can still be received."},
            )

        receipt = ItemReceipt.objects.create(
            order_item=order_item,
            verified_by=actor,
            **{key: value for key, value in fields.items() if key in RECEIPT_FIELDS},
        )
        _log_receipt(receipt, order_item, actor)

    invalidate_summary(order_item.order_id)
    logger.info("Registered receipt of %s for item %s", quantity, order_item.pk)
    return receipt


def update_receipt(receipt: ItemReceipt, fields: dict, actor=None) -> ItemReceipt:
    with transaction.atomic():
        order_item = _lock_order_item(receipt.order_item_id)
        receipt = ItemReceipt.objects.select_for_update().get(pk=receipt.pk)

        if "received_quantity" in fields:
            others = total_received_for(order_item.pk, exclude_receipt_id=receipt.pk)
            allowed = order_item.quantity - others
            if fields["received_quantity"] > allowed:
                raise InvariantViolation(
                    "Received quantity exceeds the remaining quantity.",
                    field_errors={"received_quantity": f"At most {max(allowed, ZERO)} can be recorded on this receipt."},
                )

        was_approved = receipt.status == ItemReceipt.Status.APPROVED
        was_checked = receipt.quality_check
        changed = [key for key in fields if key in RECEIPT_FIELDS]
        for key in changed:
            setattr(receipt, key, fields[key])
        if changed:
            receipt.save(update_fields=[*changed, "updated_at"])

        if not was_approved and receipt.status == ItemReceipt.Status.APPROVED:
            append_log(
                order_item.order,
                VerificationLog.Action.ITEM_VERIFIED,
                performed_by=actor,
                details=f"Receipt for {order_item.item_name} approved",
                invoice=receipt.invoice,
                item_receipt=receipt,
            )
        if not was_checked and receipt.quality_check:
            append_log(
                order_item.order,
                VerificationLog.Action.QUALITY_CHECKED,
                performed_by=actor,
                details=f"Quality check passed for {order_item.item_name}",
                invoice=receipt.invoice,
                item_receipt=receipt,
            )

    invalidate_summary(order_item.order_id)
    return receipt


def delete_receipt(receipt: ItemReceipt) -> None:
    order_id = receipt.order_item.order_id
    receipt.delete()
    invalidate_summary(order_id)


def bulk_receive(order, actor) -> list[ItemReceipt]:
    """Receive the full remainder of every incomplete item of ``order``.

    Runs in one transaction: either every missing receipt is created or none.
    """
    today = timezone.localdate()
    created = []
    with transaction.atomic():
        order_items = list(
            PurchaseOrderItem.objects.select_for_update().filter(order=order).order_by("created_at", "id")
        )
        for order_item in order_items:
            remaining = order_item.quantity - total_received_for(order_item.pk)
            if remaining <= ZERO:
                continue
            receipt = ItemReceipt.objects.create(
                order_item=order_item,
                received_quantity=remaining,
                received_date=today,
                quality_check=True,
                status=ItemReceipt.Status.APPROVED,
                verified_by=actor,
                notes=BULK_RECEIPT_NOTE,
            )
            order_item.order = order
            _log_receipt(receipt, order_item, actor)
            created.append(receipt)

    invalidate_summary(order.id)
    logger.info("Bulk receipt for order %s created %d receipts", order.order_number, len(created))
    return created
