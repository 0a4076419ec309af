from rest_framework.routers import SimpleRouter

from apps.purchasing.api.v1.views import (
    InvoiceViewSet,
    ItemReceiptViewSet,
    PurchaseOrderViewSet,
    VerificationLogViewSet,
)


router = SimpleRouter()
router.register("orders", PurchaseOrderViewSet, basename="order")
router.register("invoices", InvoiceViewSet, basename="invoice")
router.register("item-receipts", ItemReceiptViewSet, basename="item-receipt")
router.register("verification-logs", VerificationLogViewSet, basename="verification-log")

urlpatterns = router.urls
