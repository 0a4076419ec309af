from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied, ValidationError
from rest_framework.response import Response

from apps.accounts.models import User
from apps.core.api.authentication import get_actor
from apps.core.api.permissions import HasValidApiKey, IsAdminActor
from apps.core.idempotency import run_idempotent
from apps.purchasing.api.v1.serializers import (
    InvoiceSerializer,
    ItemReceiptSerializer,
    OrderAttachmentSerializer,
    OrderHistorySerializer,
    PurchaseOrderSerializer,
    ReceiptSummarySerializer,
    VerificationLogSerializer,
)
from apps.purchasing.models import Invoice, ItemReceipt, PurchaseOrder
from apps.purchasing.services import invoices, orders, receipts, verification_logs


def _plain_data(data) -> dict:
    return {key: data.get(key) for key in data if key != "file"}


class PurchaseOrderViewSet(viewsets.ModelViewSet):
    serializer_class = PurchaseOrderSerializer

    def get_queryset(self):
        queryset = PurchaseOrder.objects.select_related("vendor", "project", "user").prefetch_related("items")
        params = self.request.query_params
        for param in ("status", "project", "vendor", "user"):
            value = params.get(param)
            if value:
                queryset = queryset.filter(**{param: value})
        query = (params.get("q") or "").strip()
        if query:
            queryset = queryset.filter(order_number__icontains=query)
        return queryset.order_by("-created_at")

    def get_serializer_context(self):
        context = super().get_serializer_context()
        if isinstance(self.request.user, User):
            context["actor"] = self.request.user
        return context

    def check_owner(self, order: PurchaseOrder) -> User:
        actor = get_actor(self.request)
        if not actor.is_admin and order.user_id != actor.pk:
            raise PermissionDenied("Access denied.")
        return actor

    def perform_create(self, serializer):
        get_actor(self.request)
        serializer.save()

    def perform_update(self, serializer):
        self.check_owner(serializer.instance)
        serializer.save()

    def perform_destroy(self, instance):
        self.check_owner(instance)
        instance.delete()

    @action(detail=True, methods=["post"], permission_classes=[HasValidApiKey, IsAdminActor])
    def approve(self, request, pk=None):
        order = orders.approve_order(self.get_object(), get_actor(request))
        return Response(self.get_serializer(order).data)

    @action(detail=True, methods=["post"])
    def send(self, request, pk=None):
        order = self.get_object()
        actor = self.check_owner(order)
        order = orders.send_order(order, actor)
        return Response(self.get_serializer(order).data)

    @action(detail=True, methods=["post"])
    def complete(self, request, pk=None):
        order = self.get_object()
        actor = self.check_owner(order)
        order = orders.complete_order(order, actor)
        return Response(self.get_serializer(order).data)

    @action(detail=True, methods=["get"])
    def history(self, request, pk=None):
        order = self.get_object()
        return Response(OrderHistorySerializer(order.history.all(), many=True).data)

    @action(detail=True, methods=["get", "post"])
    def attachments(self, request, pk=None):
        order = self.get_object()
        context = self.get_serializer_context()
        if request.method == "GET":
            return Response(OrderAttachmentSerializer(order.attachments.all(), many=True, context=context).data)

        actor = self.check_owner(order)
        uploads = request.FILES.getlist("files")
        if not uploads:
            raise ValidationError({"files": "No files uploaded."})
        created = orders.add_attachments(order, uploads, actor)
        return Response(
            OrderAttachmentSerializer(created, many=True, context=context).data,
            status=status.HTTP_201_CREATED,
        )

    @action(detail=True, methods=["get"], url_path="receipt-summary")
    def receipt_summary(self, request, pk=None):
        summary = receipts.receipt_summary(self.get_object())
        return Response(ReceiptSummarySerializer(summary).data)

    @action(detail=True, methods=["post"], url_path="bulk-receive")
    def bulk_receive(self, request, pk=None):
        order = self.get_object()
        actor = get_actor(request)

        def handle():
            created = receipts.bulk_receive(order, actor)
            status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
            return status_code, {
                "created": len(created),
                "receipts": ItemReceiptSerializer(created, many=True).data,
            }

        return run_idempotent(request, "bulk_receive", handle, {"order": str(order.pk)})


class InvoiceViewSet(viewsets.ModelViewSet):
    serializer_class = InvoiceSerializer

    def get_queryset(self):
        queryset = Invoice.objects.all()
        order_id = self.request.query_params.get("order")
        if order_id:
            queryset = queryset.filter(order_id=order_id)
        status_filter = self.request.query_params.get("status")
        if status_filter:
            queryset = queryset.filter(status=status_filter)
        return queryset.order_by("-created_at")

    def create(self, request, *args, **kwargs):
        actor = get_actor(request)

        def handle():
            serializer = self.get_serializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            fields = dict(serializer.validated_data)
            order = fields.pop("order")
            upload = fields.pop("file", None)
            invoice = invoices.upload_invoice(order, fields, actor, file=upload)
            return status.HTTP_201_CREATED, self.get_serializer(invoice).data

        return run_idempotent(request, "invoice_upload", handle, _plain_data(request.data))

    def perform_update(self, serializer):
        fields = dict(serializer.validated_data)
        fields.pop("order", None)
        upload = fields.pop("file", None)
        invoice = invoices.update_invoice(serializer.instance, fields)
        if upload is not None:
            invoice.file = upload
            invoice.save(update_fields=["file", "updated_at"])
        serializer.instance = invoice

    def perform_destroy(self, instance):
        invoices.delete_invoice(instance)

    @action(detail=True, methods=["post"])
    def verify(self, request, pk=None):
        invoice = invoices.verify_invoice(self.get_object(), get_actor(request))
        return Response(self.get_serializer(invoice).data)

    @action(detail=True, methods=["post"], url_path="issue-tax")
    def issue_tax(self, request, pk=None):
        invoice = invoices.issue_tax_invoice(self.get_object(), get_actor(request))
        return Response(self.get_serializer(invoice).data)

    @action(detail=True, methods=["post"], url_path="cancel-tax")
    def cancel_tax(self, request, pk=None):
        invoice = invoices.cancel_tax_invoice(self.get_object(), get_actor(request))
        return Response(self.get_serializer(invoice).data)


class ItemReceiptViewSet(viewsets.ModelViewSet):
    serializer_class = ItemReceiptSerializer

    def get_queryset(self):
        queryset = ItemReceipt.objects.select_related("order_item")
        order_item_id = self.request.query_params.get("order_item")
        if order_item_id:
            queryset = queryset.filter(order_item_id=order_item_id)
        order_id = self.request.query_params.get("order")
        if order_id:
            queryset = queryset.filter(order_item__order_id=order_id)
        return queryset.order_by("-created_at")

    def create(self, request, *args, **kwargs):
        actor = get_actor(request)
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        fields = dict(serializer.validated_data)
        order_item = fields.pop("order_item")
        receipt = receipts.register_receipt(order_item, fields, actor)
        data = self.get_serializer(receipt).data
        return Response(data, status=status.HTTP_201_CREATED, headers=self.get_success_headers(data))

    def perform_update(self, serializer):
        fields = dict(serializer.validated_data)
        fields.pop("order_item", None)
        actor = self.request.user if isinstance(self.request.user, User) else None
        serializer.instance = receipts.update_receipt(serializer.instance, fields, actor)

    def perform_destroy(self, instance):
        receipts.delete_receipt(instance)


class VerificationLogViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    serializer_class = VerificationLogSerializer

    def get_queryset(self):
        return verification_logs.list_logs(
            order_id=self.request.query_params.get("order"),
            invoice_id=self.request.query_params.get("invoice"),
        )
