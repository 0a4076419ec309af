from decimal import Decimal

from django.test import SimpleTestCase

from apps.purchasing.services.receipts import (
    STATUS_COMPLETE,
    STATUS_PARTIAL,
    STATUS_PENDING,
    derive_status,
)


class DeriveStatusTests(SimpleTestCase):
    def test_nothing_received_is_pending(self):
        self.assertEqual(derive_status(Decimal("100"), Decimal("0")), STATUS_PENDING)

    def test_some_received_is_partial(self):
        self.assertEqual(derive_status(Decimal("100"), Decimal("80")), STATUS_PARTIAL)
        self.assertEqual(derive_status(Decimal("100"), Decimal("99.99")), STATUS_PARTIAL)

    def test_fully_received_is_complete(self):
        self.assertEqual(derive_status(Decimal("100"), Decimal("100")), STATUS_COMPLETE)

    def test_decimal_quantities_compare_exactly(self):
        total = Decimal("0.1") + Decimal("0.2")
        self.assertEqual(derive_status(Decimal("0.3"), total), STATUS_COMPLETE)
