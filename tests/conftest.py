"""Shared test fixtures for the invoice document test suite."""

from datetime import date
from decimal import Decimal

import pytest

from invoice_docs.domain.models.invoice import Invoice, IssuerProfile, LineItem, PurchaseOrderRef


def make_line_item(i: int, particulars: str | None = None) -> LineItem:
    basic = Decimal(100 * i)
    return LineItem(
        particulars=particulars or f"Mild steel bracket type {i}",
        hsn_code="7326",
        qty_dispatched=i,
        basic_amount=basic,
        line_total=basic * Decimal("1.18"),
    )


def make_invoice(item_count: int = 3, **overrides) -> Invoice:
    """Invoice with 18% GST whose totals are consistent with its line items."""
    items = overrides.pop("line_items", None)
    if items is None:
        items = tuple(make_line_item(i) for i in range(1, item_count + 1))
    subtotal = sum((item.basic_amount for item in items), Decimal("0"))
    transport = overrides.get("transportation_cost") or Decimal("0")
    total = subtotal * Decimal("1.18") + transport
    data = dict(
        invoice_number="INV-2025-001",
        invoice_date=date(2025, 1, 15),
        due_date=date(2025, 1, 30),
        vendor_name="XYZ Enterprises",
        gst_percent=Decimal("18"),
        line_items=items,
        total_cost=total,
        pending_amount=total,
    )
    data.update(overrides)
    return Invoice(**data)


@pytest.fixture
def delivery_address() -> str:
    return "Plot 14, MIDC Industrial Area\nBhosari, Pune 411026"


@pytest.fixture
def sample_invoice() -> Invoice:
    """Three items, subtotal 600, 18% GST, total 708."""
    return make_invoice(3)


@pytest.fixture
def po_invoice() -> Invoice:
    return make_invoice(
        2,
        purchase_order=PurchaseOrderRef(po_number="PO-7781", po_date=date(2025, 1, 2)),
        transportation_cost=Decimal("250"),
    )


@pytest.fixture
def long_invoice() -> Invoice:
    """Enough single-line rows to span at least three pages."""
    return make_invoice(80)


@pytest.fixture
def full_profile() -> IssuerProfile:
    return IssuerProfile(
        organization_name="ABC Traders Pvt Ltd",
        organization_address="12 Industrial Estate, Hyderabad, Telangana 500018",
        organization_phone="+91 98765 43210",
        organization_email="accounts@abctraders.in",
        organization_gst_tin="36AABCU9603R1ZM",
        bank_name="State Bank of India",
        account_name="ABC Traders Pvt Ltd",
        account_number="30012345678",
        ifsc_code="SBIN0001234",
        upi_id="abctraders@sbi",
    )


@pytest.fixture
def invoice_factory():
    return make_invoice


@pytest.fixture
def line_item_factory():
    return make_line_item
