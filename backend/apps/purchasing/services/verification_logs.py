from apps.purchasing.models import VerificationLog


def append_log(order, action: str, performed_by=None, details: str = "", invoice=None, item_receipt=None):
    return VerificationLog.objects.create(
        order=order,
        invoice=invoice,
        item_receipt=item_receipt,
        action=action,
        details=details,
        performed_by=performed_by,
    )


def list_logs(order_id=None, invoice_id=None):
    queryset = VerificationLog.objects.select_related("performed_by").order_by("-created_at")
    if order_id:
        queryset = queryset.filter(order_id=order_id)
    if invoice_id:
        queryset = queryset.filter(invoice_id=invoice_id)
    return queryset
