from decimal import Decimal

from django.utils import timezone

from apps.accounts.models import User
from apps.catalog.models import Vendor
from apps.projects.models import Project
from apps.purchasing.models import Invoice, PurchaseOrder, PurchaseOrderItem


def make_user(name="Kim Minjun", role=User.Role.USER, **extra):
    return User.objects.create(name=name, role=role, **extra)


def make_vendor(name="Hanil Steel", email="sales@hanil.example", **extra):
    return Vendor.objects.create(
        name=name,
        contact="02-555-0100",
        contact_person="Lee Seojun",
        email=email,
        **extra,
    )


def make_project(code="PRJ-001", name="Seongsu Office Fit-out", **extra):
    return Project.objects.create(project_name=name, project_code=code, **extra)


def make_order(user, project, vendor=None, quantities=("100",), number="PO-2026-001", **extra):
    order = PurchaseOrder.objects.create(
        order_number=number,
        project=project,
        vendor=vendor,
        user=user,
        order_date=timezone.localdate(),
        **extra,
    )
    for index, quantity in enumerate(quantities, start=1):
        PurchaseOrderItem.objects.create(
            order=order,
            item_name=f"Item {index}",
            unit="ea",
            quantity=Decimal(quantity),
            unit_price=Decimal("1000"),
            total_amount=Decimal(quantity) * Decimal("1000"),
        )
    return order


def make_invoice(order, number="INV-001", **extra):
    extra.setdefault("issue_date", timezone.localdate())
    extra.setdefault("total_amount", Decimal("100000"))
    return Invoice.objects.create(order=order, invoice_number=number, **extra)
