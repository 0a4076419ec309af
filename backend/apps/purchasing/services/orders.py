import logging
from decimal import ROUND_HALF_UP, Decimal

from django.conf import settings
from django.core.mail import send_mail
from django.db import transaction
from django.utils import timezone

from apps.core.api.exceptions import InvariantViolation
from apps.core.idempotency import normalize_payload
from apps.purchasing.models import ItemReceipt, OrderAttachment, OrderHistory, PurchaseOrder, PurchaseOrderItem
from apps.purchasing.services.receipts import invalidate_summary

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")

ORDER_ITEM_FIELDS = ("item", "item_name", "specification", "unit", "quantity", "unit_price", "notes")


def generate_order_number(year: int | None = None) -> str:
    year = year or timezone.localdate().year
    prefix = f"PO-{year}-"
    last_number = 0
    for order_number in PurchaseOrder.objects.filter(order_number__startswith=prefix).values_list(
        "order_number", flat=True
    ):
        suffix = order_number[len(prefix):]
        if suffix.isdigit():
            last_number = max(last_number, int(suffix))
    return f"{prefix}{last_number + 1:03d}"


def line_total(quantity: Decimal, unit_price: Decimal) -> Decimal:
    return (quantity * unit_price).quantize(CENT, rounding=ROUND_HALF_UP)


def record_history(order: PurchaseOrder, action: str, user=None, changes=None) -> OrderHistory:
    return OrderHistory.objects.create(
        order=order,
        user=user,
        action=action,
        changes=normalize_payload(changes or {}),
    )


def _build_items(order: PurchaseOrder, items: list[dict]) -> list[PurchaseOrderItem]:
    return PurchaseOrderItem.objects.bulk_create(
        [
            PurchaseOrderItem(
                order=order,
                total_amount=line_total(item["quantity"], item["unit_price"]),
                **{key: value for key, value in item.items() if key in ORDER_ITEM_FIELDS},
            )
            for item in items
        ]
    )


def recalculate_total(order: PurchaseOrder) -> PurchaseOrder:
    order.total_amount = sum(order.items.values_list("total_amount", flat=True), Decimal("0"))
    order.save(update_fields=["total_amount", "updated_at"])
    return order


@transaction.atomic
def create_order(fields: dict, items: list[dict], actor) -> PurchaseOrder:
    order = PurchaseOrder.objects.create(
        order_number=generate_order_number(),
        user=actor,
        order_date=fields.pop("order_date", None) or timezone.localdate(),
        **fields,
    )
    _build_items(order, items)
    recalculate_total(order)
    record_history(order, OrderHistory.Action.CREATED, actor, {"order_number": order.order_number})
    logger.info("Created order %s with %d items", order.order_number, len(items))
    return order


@transaction.atomic
def update_order(order: PurchaseOrder, fields: dict, actor=None) -> PurchaseOrder:
    if "status" in fields:
        ensure_editable_status(order, fields["status"])
    for key, value in fields.items():
        setattr(order, key, value)
    if fields:
        order.save(update_fields=[*fields.keys(), "updated_at"])
        record_history(order, OrderHistory.Action.UPDATED, actor, {"changes": fields})
    return order


@transaction.atomic
def replace_items(order: PurchaseOrder, items: list[dict]) -> PurchaseOrder:
    if ItemReceipt.objects.filter(order_item__order=order).exists():
        raise InvariantViolation("Order items that already have receipts cannot be replaced.")
    order.items.all().delete()
    _build_items(order, items)
    recalculate_total(order)
    invalidate_summary(order.id)
    return order


# Approval, sending and completion have their own operations; a plain edit
# may only submit a draft.
EDITABLE_TRANSITIONS = {(PurchaseOrder.Status.DRAFT, PurchaseOrder.Status.PENDING)}


def ensure_editable_status(order: PurchaseOrder, target: str) -> None:
    if target == order.status:
        return
    ensure_forward(order, target)
    if (order.status, target) not in EDITABLE_TRANSITIONS:
        logger.warning("Refused direct status change of %s from %s to %s", order.order_number, order.status, target)
        raise InvariantViolation(
            f"Status {target} can only be set through its own action.",
            field_errors={"status": "Use the approve, send or complete action."},
        )


def ensure_forward(order: PurchaseOrder, target: str) -> None:
    if target == order.status:
        return
    if PurchaseOrder.status_rank(target) < PurchaseOrder.status_rank(order.status):
        logger.warning("Refused status change of %s from %s to %s", order.order_number, order.status, target)
        raise InvariantViolation(f"Order status cannot move back from {order.status} to {target}.")


@transaction.atomic
def approve_order(order: PurchaseOrder, actor) -> PurchaseOrder:
    ensure_forward(order, PurchaseOrder.Status.APPROVED)
    if order.is_approved:
        return order
    order.is_approved = True
    order.approved_by = actor
    order.approved_at = timezone.now()
    if PurchaseOrder.status_rank(order.status) < PurchaseOrder.status_rank(PurchaseOrder.Status.APPROVED):
        order.status = PurchaseOrder.Status.APPROVED
    order.save(update_fields=["is_approved", "approved_by", "approved_at", "status", "updated_at"])
    record_history(order, OrderHistory.Action.APPROVED, actor, {"approved_at": order.approved_at})
    logger.info("Order %s approved by %s", order.order_number, actor.pk)
    return order


def render_order_mail(order: PurchaseOrder) -> str:
    lines = [
        f"Purchase order {order.order_number}",
        "",
        f"Vendor: {order.vendor.name}",
        f"Order date: {order.order_date}",
        f"Requested delivery: {order.delivery_date or '-'}",
        "",
        "Items:",
    ]
    for item in order.items.all():
        spec = f" ({item.specification})" if item.specification else ""
        lines.append(f"- {item.item_name}{spec} x {item.quantity} = {item.total_amount}")
    lines.extend(["", f"Total: {order.total_amount}", "", f"Notes: {order.notes or '-'}"])
    return "\n".join(lines)


@transaction.atomic
def send_order(order: PurchaseOrder, actor) -> PurchaseOrder:
    if not order.is_approved and not actor.is_admin:
        raise InvariantViolation("Order must be approved before sending.")
    if order.vendor is None or not order.vendor.email:
        raise InvariantViolation("Order has no vendor e-mail to send to.")
    ensure_forward(order, PurchaseOrder.Status.SENT)

    send_mail(
        subject=f"Purchase order {order.order_number}",
        message=render_order_mail(order),
        from_email=settings.DEFAULT_FROM_EMAIL,
        recipient_list=[order.vendor.email],
    )
    order.status = PurchaseOrder.Status.SENT
    order.sent_at = timezone.now()
    order.save(update_fields=["status", "sent_at", "updated_at"])
    record_history(order, OrderHistory.Action.SENT, actor, {"to": order.vendor.email})
    logger.info("Order %s sent to %s", order.order_number, order.vendor.email)
    return order


@transaction.atomic
def complete_order(order: PurchaseOrder, actor) -> PurchaseOrder:
    if order.status != PurchaseOrder.Status.SENT:
        raise InvariantViolation("Only sent orders can be completed.")
    order.status = PurchaseOrder.Status.COMPLETED
    order.save(update_fields=["status", "updated_at"])
    record_history(order, OrderHistory.Action.COMPLETED, actor)
    logger.info("Order %s completed", order.order_number)
    return order


@transaction.atomic
def add_attachments(order: PurchaseOrder, uploads, actor) -> list[OrderAttachment]:
    created = [
        OrderAttachment.objects.create(
            order=order,
            file=upload,
            original_name=upload.name,
            file_size=upload.size,
            mime_type=getattr(upload, "content_type", None) or "application/octet-stream",
            uploaded_by=actor,
        )
        for upload in uploads
    ]
    logger.info("Attached %d files to order %s", len(created), order.order_number)
    return created
