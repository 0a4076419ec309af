from rest_framework import status
from rest_framework.test import APITestCase

from apps.purchasing.models import VerificationLog
from apps.purchasing.services.verification_logs import append_log
from apps.purchasing.tests.helpers import make_invoice, make_order, make_project, make_user


class VerificationLogApiTests(APITestCase):
    def setUp(self):
        self.user = make_user()
        project = make_project()
        self.order = make_order(self.user, project)
        self.other_order = make_order(self.user, project, number="PO-2026-002")
        self.invoice = make_invoice(self.order)
        self.client.credentials(HTTP_X_API_KEY="dev-api-key", HTTP_X_USER_ID=str(self.user.id))

    def test_list_filters_by_order_newest_first(self):
        append_log(self.order, VerificationLog.Action.INVOICE_UPLOADED, self.user, "first", invoice=self.invoice)
        append_log(self.order, VerificationLog.Action.INVOICE_VERIFIED, self.user, "second", invoice=self.invoice)
        append_log(self.other_order, VerificationLog.Action.ITEM_RECEIVED, self.user, "elsewhere")

        response = self.client.get("/api/v1/verification-logs/", {"order": str(self.order.id)})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([log["details"] for log in response.json()], ["second", "first"])
        self.assertEqual(response.json()[0]["performed_by_name"], self.user.name)

    def test_list_filters_by_invoice(self):
        append_log(self.order, VerificationLog.Action.INVOICE_UPLOADED, self.user, "invoice", invoice=self.invoice)
        append_log(self.order, VerificationLog.Action.ITEM_RECEIVED, self.user, "receipt")

        response = self.client.get("/api/v1/verification-logs/", {"invoice": str(self.invoice.id)})

        self.assertEqual([log["details"] for log in response.json()], ["invoice"])

    def test_logs_are_read_only(self):
        log = append_log(self.order, VerificationLog.Action.ITEM_RECEIVED, self.user, "receipt")

        created = self.client.post(
            "/api/v1/verification-logs/",
            {"order": str(self.order.id), "action": "item_received"},
            format="json",
        )
        deleted = self.client.delete(f"/api/v1/verification-logs/{log.id}/")

        self.assertEqual(created.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)
        self.assertEqual(deleted.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)
        self.assertEqual(VerificationLog.objects.count(), 1)
