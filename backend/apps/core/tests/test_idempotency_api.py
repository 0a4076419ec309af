from rest_framework import status
from rest_framework.test import APITestCase

from apps.core.models import IdempotentRequest
from apps.purchasing.models import Invoice
from apps.purchasing.tests.helpers import make_order, make_project, make_user


class IdempotencyApiTests(APITestCase):
    def setUp(self):
        self.user = make_user()
        self.order = make_order(self.user, make_project())
        self.client.credentials(HTTP_X_API_KEY="dev-api-key", HTTP_X_USER_ID=str(self.user.id))

    def payload(self, **overrides):
        payload = {
            "order": str(self.order.id),
            "invoice_number": "INV-IDEM-001",
            "issue_date": "2026-03-02",
            "total_amount": "50000",
        }
        payload.update(overrides)
        return payload

    def test_failed_request_is_recorded_and_can_be_retried(self):
        failed = self.client.post(
            "/api/v1/invoices/",
            self.payload(total_amount="-1"),
            format="json",
            HTTP_IDEMPOTENCY_KEY="idem-retry-001",
        )

        self.assertEqual(failed.status_code, status.HTTP_400_BAD_REQUEST)
        record = IdempotentRequest.objects.get(idempotency_key="idem-retry-001")
        self.assertEqual(record.status, IdempotentRequest.Status.FAILED)
        self.assertEqual(record.result["status_code"], status.HTTP_400_BAD_REQUEST)

        retried = self.client.post(
            "/api/v1/invoices/",
            self.payload(),
            format="json",
            HTTP_IDEMPOTENCY_KEY="idem-retry-001",
        )

        self.assertEqual(retried.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Invoice.objects.count(), 1)

    def test_same_key_on_another_operation_is_independent(self):
        self.client.post(
            "/api/v1/invoices/",
            self.payload(),
            format="json",
            HTTP_IDEMPOTENCY_KEY="idem-shared-001",
        )

        response = self.client.post(
            f"/api/v1/orders/{self.order.id}/bulk-receive/",
            HTTP_IDEMPOTENCY_KEY="idem-shared-001",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.json()["created"], 1)
        self.assertEqual(
            sorted(IdempotentRequest.objects.values_list("operation", flat=True)),
            ["bulk_receive", "invoice_upload"],
        )

    def test_reusing_a_key_with_another_body_returns_409(self):
        self.client.post(
            "/api/v1/invoices/",
            self.payload(),
            format="json",
            HTTP_IDEMPOTENCY_KEY="idem-mismatch-001",
        )

        response = self.client.post(
            "/api/v1/invoices/",
            self.payload(invoice_number="INV-IDEM-002", total_amount="70000"),
            format="json",
            HTTP_IDEMPOTENCY_KEY="idem-mismatch-001",
        )

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.json()["code"], "invariant_violation")
        self.assertIn("Idempotency-Key", response.json()["field_errors"])
        self.assertEqual(list(Invoice.objects.values_list("invoice_number", flat=True)), ["INV-IDEM-001"])

    def test_retry_after_failure_reuses_the_same_record(self):
        self.client.post(
            "/api/v1/invoices/",
            self.payload(total_amount="-1"),
            format="json",
            HTTP_IDEMPOTENCY_KEY="idem-reuse-001",
        )
        self.client.post(
            "/api/v1/invoices/",
            self.payload(),
            format="json",
            HTTP_IDEMPOTENCY_KEY="idem-reuse-001",
        )

        record = IdempotentRequest.objects.get(idempotency_key="idem-reuse-001")
        self.assertEqual(record.status, IdempotentRequest.Status.COMPLETED)
        self.assertEqual(record.payload["total_amount"], "50000")

    def test_request_still_in_progress_returns_409(self):
        IdempotentRequest.objects.create(
            operation="invoice_upload",
            idempotency_key="idem-running-001",
            payload=self.payload(),
        )

        response = self.client.post(
            "/api/v1/invoices/",
            self.payload(),
            format="json",
            HTTP_IDEMPOTENCY_KEY="idem-running-001",
        )

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(Invoice.objects.count(), 0)
