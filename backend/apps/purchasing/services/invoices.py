"""Invoice lifecycle.

An invoice starts ``pending``, is verified once, and while verified can have
its tax invoice issued and cancelled any number of times. ``paid`` is only
set from the admin.
"""
import logging

from django.db import transaction
from django.utils import timezone

from apps.core.api.exceptions import InvariantViolation
from apps.purchasing.models import Invoice, VerificationLog
from apps.purchasing.services.verification_logs import append_log

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "invoice_number",
    "invoice_type",
    "issue_date",
    "due_date",
    "total_amount",
    "vat_amount",
    "notes",
)


def _lock(invoice: Invoice) -> Invoice:
    return Invoice.objects.select_for_update().get(pk=invoice.pk)


@transaction.atomic
def upload_invoice(order, fields: dict, actor, file=None) -> Invoice:
    invoice = Invoice.objects.create(
        order=order,
        status=Invoice.Status.PENDING,
        uploaded_by=actor,
        file=file,
        **{key: value for key, value in fields.items() if key in EDITABLE_FIELDS},
    )
    append_log(
        order,
        VerificationLog.Action.INVOICE_UPLOADED,
        performed_by=actor,
        details=f"Invoice {invoice.invoice_number} uploaded",
        invoice=invoice,
    )
    logger.info("Invoice %s uploaded for order %s", invoice.invoice_number, order.order_number)
    return invoice


@transaction.atomic
def verify_invoice(invoice: Invoice, actor) -> Invoice:
    invoice = _lock(invoice)
    if invoice.status == Invoice.Status.VERIFIED:
        return invoice
    if invoice.status != Invoice.Status.PENDING:
        logger.warning("Refused to verify invoice %s in status %s", invoice.invoice_number, invoice.status)
        raise InvariantViolation(f"Only pending invoices can be verified (current status: {invoice.status}).")

    invoice.status = Invoice.Status.VERIFIED
    invoice.verified_by = actor
    invoice.verified_at = timezone.now()
    invoice.save(update_fields=["status", "verified_by", "verified_at", "updated_at"])
    append_log(
        invoice.order,
        VerificationLog.Action.INVOICE_VERIFIED,
        performed_by=actor,
        details=f"Invoice {invoice.invoice_number} verified",
        invoice=invoice,
    )
    logger.info("Invoice %s verified by %s", invoice.invoice_number, actor.pk)
    return invoice


@transaction.atomic
def issue_tax_invoice(invoice: Invoice, actor) -> Invoice:
    invoice = _lock(invoice)
    if invoice.status != Invoice.Status.VERIFIED:
        logger.warning("Refused tax invoice issue for unverified invoice %s", invoice.invoice_number)
        raise InvariantViolation("A tax invoice can only be issued for a verified invoice.")
    if invoice.tax_invoice_issued:
        raise InvariantViolation("The tax invoice has already been issued.")

    invoice.tax_invoice_issued = True
    invoice.tax_invoice_issued_date = timezone.now()
    invoice.tax_invoice_issued_by = actor
    invoice.save(
        update_fields=["tax_invoice_issued", "tax_invoice_issued_date", "tax_invoice_issued_by", "updated_at"]
    )
    append_log(
        invoice.order,
        VerificationLog.Action.TAX_INVOICE_ISSUED,
        performed_by=actor,
        details=f"Tax invoice issued for {invoice.invoice_number}",
        invoice=invoice,
    )
    logger.info("Tax invoice issued for %s", invoice.invoice_number)
    return invoice


@transaction.atomic
def cancel_tax_invoice(invoice: Invoice, actor) -> Invoice:
    invoice = _lock(invoice)
    if not invoice.tax_invoice_issued:
        raise InvariantViolation("No issued tax invoice to cancel.")

    invoice.tax_invoice_issued = False
    invoice.tax_invoice_issued_date = None
    invoice.tax_invoice_issued_by = None
    invoice.save(
        update_fields=["tax_invoice_issued", "tax_invoice_issued_date", "tax_invoice_issued_by", "updated_at"]
    )
    append_log(
        invoice.order,
        VerificationLog.Action.TAX_INVOICE_CANCELLED,
        performed_by=actor,
        details=f"Tax invoice cancelled for {invoice.invoice_number}",
        invoice=invoice,
    )
    logger.info("Tax invoice cancelled for %s", invoice.invoice_number)
    return invoice


def update_invoice(invoice: Invoice, fields: dict) -> Invoice:
    changed = [key for key in fields if key in EDITABLE_FIELDS]
    for key in changed:
        setattr(invoice, key, fields[key])
    if changed:
        invoice.save(update_fields=[*changed, "updated_at"])
    return invoice


def delete_invoice(invoice: Invoice) -> None:
    # Linked receipts and log entries survive with their invoice link cleared.
    invoice_number = invoice.invoice_number
    invoice.delete()
    logger.info("Invoice %s deleted", invoice_number)
