"""Tests for invoice layout and pagination."""

from datetime import date
from decimal import Decimal

import pytest

from invoice_docs.domain.errors import InvalidAmount, InvalidDate, LayoutError
from invoice_docs.domain.models.drawing import (
    A4_GEOMETRY,
    DrawLine,
    DrawRect,
    PageGeometry,
    PlaceText,
    StartNewPage,
)
from invoice_docs.domain.models.invoice import IssuerProfile, PurchaseOrderRef
from invoice_docs.domain.services.formatters import format_amount
from invoice_docs.domain.services.invoice_layout import (
    CONTACT_MAX_LINES,
    DECLARATION,
    FOOTER_NOTE,
    HEADER_HEIGHT,
    MEDIUM_GRAY,
    NAME_MAX_LINES,
    ROW_SHADE,
    TABLE_LABELS,
    TERMS_AND_CONDITIONS,
    WHITE,
    layout_invoice,
)

ADDRESS = "Plot 14, MIDC Industrial Area, Bhosari, Pune 411026"


def split_pages(instructions):
    pages = [[]]
    for op in instructions:
        if isinstance(op, StartNewPage):
            pages.append([])
        else:
            pages[-1].append(op)
    return pages


def texts(instructions):
    return [op.text for op in instructions if isinstance(op, PlaceText)]


def value_after(instructions, label):
    """Text of the instruction that follows the PlaceText with ``label``."""
    ops = list(instructions)
    for i, op in enumerate(ops):
        if isinstance(op, PlaceText) and op.text == label:
            return ops[i + 1].text
    raise AssertionError(f"{label!r} not found")


class TestRejection:

    def test_no_line_items(self, invoice_factory):
        invoice = invoice_factory(line_items=(), total_cost=Decimal("0"), pending_amount=Decimal("0"))
        with pytest.raises(LayoutError):
            layout_invoice(invoice, None, ADDRESS)

    @pytest.mark.parametrize("address", ["", "   ", "\n\t"])
    def test_blank_delivery_address(self, sample_invoice, address):
        with pytest.raises(LayoutError):
            layout_invoice(sample_invoice, None, address)

    def test_invalid_date_fails_whole_call(self, invoice_factory):
        invoice = invoice_factory(due_date="31/31/2025")
        with pytest.raises(InvalidDate):
            layout_invoice(invoice, None, ADDRESS)

    def test_negative_tax_residual_is_invalid(self, invoice_factory):
        # total below subtotal leaves a negative tax residual
        invoice = invoice_factory(3, total_cost=Decimal("500"))
        with pytest.raises(InvalidAmount):
            layout_invoice(invoice, None, ADDRESS)

    def test_row_taller_than_a_page(self, invoice_factory, line_item_factory):
        huge = line_item_factory(1, particulars=" ".join(["verylongword"] * 2000))
        invoice = invoice_factory(line_items=(huge,))
        with pytest.raises(LayoutError):
            layout_invoice(invoice, None, ADDRESS)


class TestSinglePage:

    def test_idempotent(self, sample_invoice, full_profile):
        first = layout_invoice(sample_invoice, full_profile, ADDRESS)
        second = layout_invoice(sample_invoice, full_profile, ADDRESS)
        assert first.instructions == second.instructions
        assert first == second

    def test_one_page_no_breaks(self, sample_invoice):
        layout = layout_invoice(sample_invoice, None, ADDRESS)
        assert layout.page_count == 1
        assert not any(isinstance(op, StartNewPage) for op in layout.instructions)
        assert len(layout.table_segments) == 1

    def test_header_content(self, sample_invoice):
        content = texts(layout_invoice(sample_invoice, None, ADDRESS).instructions)
        assert "TAX INVOICE" in content
        assert "Invoice No: INV-2025-001" in content
        assert "Invoice Date: 15 Jan 2025" in content
        assert "Due Date: 30 Jan 2025" in content

    def test_table_labels(self, sample_invoice):
        content = texts(layout_invoice(sample_invoice, None, ADDRESS).instructions)
        for label in TABLE_LABELS:
            assert label in content

    def test_row_cells(self, sample_invoice):
        content = texts(layout_invoice(sample_invoice, None, ADDRESS).instructions)
        # item 2: qty 2, basic 200 -> rate 100.00, total 236.00
        assert "Mild steel bracket type 2" in content
        assert "236.00" in content
        assert "18%" in content
        assert "7326" in content

    def test_summary_values(self, sample_invoice):
        layout = layout_invoice(sample_invoice, None, ADDRESS)
        ops = layout.instructions
        assert value_after(ops, "Subtotal:") == "600.00"
        assert value_after(ops, "Tax (GST 18%):") == "108.00"
        assert value_after(ops, "Discount:") == "0.00"
        assert value_after(ops, "Total:") == "708.00"
        assert value_after(ops, "Amount Due:") == "708.00"
        assert layout.subtotal == Decimal("600")
        assert layout.tax_amount == Decimal("108")

    def test_amount_in_words(self, sample_invoice):
        content = texts(layout_invoice(sample_invoice, None, ADDRESS).instructions)
        assert "Seven Hundred Eight Rupees Only" in content

    def test_static_terms(self, sample_invoice):
        content = texts(layout_invoice(sample_invoice, None, ADDRESS).instructions)
        for clause in TERMS_AND_CONDITIONS:
            assert f"- {clause}" in content
        assert "Authorized Signatory" in content

    def test_never_emits_placeholders(self, sample_invoice):
        content = " ".join(texts(layout_invoice(sample_invoice, None, ADDRESS).instructions))
        assert "Invalid Date" not in content
        assert "N/A" not in content
        assert "Not Provided" not in content


class TestTaxResidual:

    def test_tax_is_total_minus_subtotal_minus_transport(self, invoice_factory):
        # 600 subtotal, 250 transport, total set with 0.03 rounding drift
        invoice = invoice_factory(
            3,
            transportation_cost=Decimal("250"),
            total_cost=Decimal("958.03"),
        )
        layout = layout_invoice(invoice, None, ADDRESS)
        assert layout.tax_amount == Decimal("108.03")
        assert value_after(layout.instructions, "Tax (GST 18%):") == "108.03"
        assert value_after(layout.instructions, "Transportation:") == "250.00"

    def test_transportation_omitted_when_zero(self, invoice_factory):
        for transport in (None, Decimal("0")):
            invoice = invoice_factory(3, transportation_cost=transport)
            assert "Transportation:" not in texts(layout_invoice(invoice, None, ADDRESS).instructions)


class TestOptionalBands:

    def test_po_band_present(self, po_invoice):
        layout = layout_invoice(po_invoice, None, ADDRESS)
        content = texts(layout.instructions)
        assert "PO Number: PO-7781" in content
        assert "PO Date: 02 Jan 2025" in content

    def test_po_band_absent(self, sample_invoice):
        content = texts(layout_invoice(sample_invoice, None, ADDRESS).instructions)
        assert not any(t.startswith("PO Number") for t in content)

    def test_po_band_shifts_table_down(self, invoice_factory):
        plain = layout_invoice(invoice_factory(2), None, ADDRESS)
        with_po = layout_invoice(
            invoice_factory(2, purchase_order=PurchaseOrderRef(po_number="PO-1")), None, ADDRESS
        )
        assert with_po.table_segments[0].top > plain.table_segments[0].top

    def test_empty_profile_renders_no_issuer_lines(self, sample_invoice):
        for profile in (None, IssuerProfile(), IssuerProfile(organization_name="  ")):
            layout = layout_invoice(sample_invoice, profile, ADDRESS)
            issuer_lines, buyer_lines = layout.party_line_counts
            assert issuer_lines == 0
            assert buyer_lines >= 3
            content = texts(layout.instructions)
            assert not any(t.startswith("GSTIN") for t in content)
            assert "PAYMENT DETAILS" not in content
            assert not any(t.startswith("For ") for t in content)

    def test_full_profile(self, sample_invoice, full_profile):
        layout = layout_invoice(sample_invoice, full_profile, ADDRESS)
        content = texts(layout.instructions)
        assert layout.party_line_counts[0] >= 4
        assert "ABC Traders Pvt Ltd" in content
        assert "GSTIN: 36AABCU9603R1ZM" in content
        assert "PAYMENT DETAILS" in content
        assert "IFSC Code: SBIN0001234" in content
        assert "UPI ID: abctraders@sbi" in content
        assert "For ABC Traders Pvt Ltd" in content

    def test_payment_band_lists_only_present_fields(self, sample_invoice):
        profile = IssuerProfile(upi_id="shop@upi")
        content = texts(layout_invoice(sample_invoice, profile, ADDRESS).instructions)
        assert "PAYMENT DETAILS" in content
        assert "UPI ID: shop@upi" in content
        assert not any(t.startswith("Bank Name") for t in content)
        assert not any(t.startswith("Account No") for t in content)

    def test_party_band_height_follows_taller_side(self, sample_invoice):
        tall_issuer = IssuerProfile(
            organization_name="ABC Traders",
            organization_address="Line one of a long address that certainly wraps onto several lines "
            "because it keeps going and going well past the column width",
            organization_phone="+91 98765 43210",
            organization_gst_tin="36AABCU9603R1ZM",
        )
        short = layout_invoice(sample_invoice, None, "Pune")
        tall = layout_invoice(sample_invoice, tall_issuer, "Pune")
        issuer_lines, buyer_lines = tall.party_line_counts
        assert issuer_lines > buyer_lines
        extra = (issuer_lines - short.party_line_counts[1]) * A4_GEOMETRY.line_height
        assert tall.table_segments[0].top == pytest.approx(short.table_segments[0].top + extra)

    def test_long_party_names_stay_on_first_page(self, invoice_factory):
        profile = IssuerProfile(
            organization_name="Traders " * 400,
            organization_phone="98765 " * 200,
            organization_gst_tin="36AABCU9603R1ZM" * 50,
        )
        invoice = invoice_factory(vendor_name="Enterprises " * 400)
        layout = layout_invoice(invoice, profile, "Pune")
        issuer_lines, buyer_lines = layout.party_line_counts
        assert issuer_lines <= NAME_MAX_LINES + CONTACT_MAX_LINES + 1
        assert buyer_lines <= 1 + NAME_MAX_LINES + 1
        first_page = split_pages(layout.instructions)[0]
        body = [op for op in first_page if isinstance(op, PlaceText) and op.text != FOOTER_NOTE]
        assert max(op.y for op in body) <= A4_GEOMETRY.printable_bottom
        assert layout.table_segments[0].top < 100

    def test_header_shows_issuer_name(self, sample_invoice, full_profile):
        layout = layout_invoice(sample_invoice, full_profile, ADDRESS)
        header = [
            op
            for op in layout.instructions
            if isinstance(op, PlaceText) and op.text == "ABC TRADERS PVT LTD"
        ]
        assert len(header) == 1
        assert header[0].y < layout.table_segments[0].top

    def test_header_without_issuer_name(self, sample_invoice):
        layout = layout_invoice(sample_invoice, IssuerProfile(upi_id="shop@upi"), ADDRESS)
        header_end = A4_GEOMETRY.margin + HEADER_HEIGHT
        names = [
            op
            for op in layout.instructions
            if isinstance(op, PlaceText) and op.y < header_end and op.font_size == 11
        ]
        assert names == []

    def test_declaration_above_signature(self, sample_invoice):
        layout = layout_invoice(sample_invoice, None, ADDRESS)
        ops = [op for op in layout.instructions if isinstance(op, PlaceText)]
        content = [op.text for op in ops]
        i = content.index("DECLARATION:")
        assert " ".join(content[i + 1:]).startswith(DECLARATION)
        heading = next(op for op in ops if op.text == "DECLARATION:")
        signatory = next(op for op in ops if op.text == "Authorized Signatory")
        assert heading.y < signatory.y


class TestPagination:

    def test_long_invoice_breaks_pages(self, long_invoice):
        layout = layout_invoice(long_invoice, None, ADDRESS)
        breaks = sum(isinstance(op, StartNewPage) for op in layout.instructions)
        assert breaks >= 2
        assert layout.page_count == breaks + 1
        assert len(layout.rows) == 80

    def test_rows_never_cross_printable_bottom(self, long_invoice):
        layout = layout_invoice(long_invoice, None, ADDRESS)
        limit = A4_GEOMETRY.printable_bottom
        for row in layout.rows:
            assert row.top >= A4_GEOMETRY.margin
            assert row.bottom <= limit

    def test_row_rectangles_do_not_straddle_pages(self, long_invoice):
        layout = layout_invoice(long_invoice, None, ADDRESS)
        for page in split_pages(layout.instructions):
            for op in page:
                if isinstance(op, DrawRect) and op.fill_color == ROW_SHADE:
                    assert op.bottom <= A4_GEOMETRY.printable_bottom

    @pytest.mark.parametrize("count", [1, 10, 21, 22, 23, 27, 28, 50, 55])
    def test_every_box_fits_its_page(self, invoice_factory, full_profile, count):
        layout = layout_invoice(invoice_factory(count), full_profile, ADDRESS)
        for page in split_pages(layout.instructions):
            for op in page:
                # Top accent strips start at y=0 and are outside the flow
                if isinstance(op, DrawRect) and op.y > 0:
                    assert op.bottom <= A4_GEOMETRY.printable_bottom + 1e-9

    def test_rows_are_in_order_and_contiguous_per_page(self, long_invoice):
        layout = layout_invoice(long_invoice, None, ADDRESS)
        rows = layout.rows
        assert [r.index for r in rows] == list(range(len(rows)))
        for prev, cur in zip(rows, rows[1:]):
            if cur.page == prev.page:
                assert cur.top == pytest.approx(prev.bottom)
            else:
                assert cur.page == prev.page + 1

    def test_subtotal_survives_page_breaks(self, long_invoice):
        layout = layout_invoice(long_invoice, None, ADDRESS)
        expected = sum(item.basic_amount for item in long_invoice.line_items)
        assert layout.page_count > 1
        assert layout.subtotal == expected
        assert value_after(layout.instructions, "Subtotal:") == format_amount(expected)

    def test_column_boundaries_identical_on_every_page(self, long_invoice):
        layout = layout_invoice(long_invoice, None, ADDRESS)
        per_page = []
        for page in split_pages(layout.instructions):
            labels = tuple(
                (op.text, op.x)
                for op in page
                if isinstance(op, PlaceText) and op.text in TABLE_LABELS and op.color == WHITE
            )
            rules = tuple(
                sorted(
                    op.x1
                    for op in page
                    if isinstance(op, DrawLine) and op.x1 == op.x2 and op.color == MEDIUM_GRAY
                )
            )
            if labels:
                per_page.append((labels, rules))
        assert len(per_page) == layout.page_count or len(per_page) == len(layout.table_segments)
        assert len(set(per_page)) == 1
        assert per_page[0][1] == tuple(A4_GEOMETRY.column_boundaries[1:-1])

    def test_continuation_header(self, long_invoice):
        layout = layout_invoice(long_invoice, None, ADDRESS)
        pages = split_pages(layout.instructions)
        assert "INVOICE INV-2025-001 (Continued)" not in texts(pages[0])
        for page in pages[1:]:
            assert "INVOICE INV-2025-001 (Continued)" in texts(page)


class TestMultiPageTableBorder:
    """One border per page segment, never one box across a page break."""

    def test_one_segment_per_table_page(self, long_invoice):
        layout = layout_invoice(long_invoice, None, ADDRESS)
        table_pages = sorted({row.page for row in layout.rows})
        assert [seg.page for seg in layout.table_segments] == table_pages
        assert len(layout.table_segments) >= 3

    def test_segment_borders_drawn_on_their_page(self, long_invoice):
        layout = layout_invoice(long_invoice, None, ADDRESS)
        pages = split_pages(layout.instructions)
        g = A4_GEOMETRY
        for seg in layout.table_segments:
            borders = [
                op
                for op in pages[seg.page]
                if isinstance(op, DrawRect)
                and op.fill_color is None
                and op.x == g.margin
                and op.width == g.table_width
                and op.y == seg.top
            ]
            assert len(borders) == 1
            assert borders[0].bottom == pytest.approx(seg.bottom)
            assert seg.bottom <= g.printable_bottom

    def test_segment_bottom_matches_last_row_on_page(self, long_invoice):
        layout = layout_invoice(long_invoice, None, ADDRESS)
        for seg in layout.table_segments:
            last = [row for row in layout.rows if row.page == seg.page][-1]
            assert seg.bottom == pytest.approx(last.bottom)


class TestGeometry:

    def test_default_columns_fill_usable_width(self):
        g = A4_GEOMETRY
        assert sum(g.column_widths) <= g.usable_width
        assert len(g.column_boundaries) == 7
        assert g.column_boundaries[0] == g.margin

    def test_rejects_columns_wider_than_page(self):
        with pytest.raises(ValueError):
            PageGeometry(column_widths=(100, 20, 20, 20, 20, 20))

    def test_custom_geometry(self, long_invoice):
        narrow = PageGeometry(height=200.0)
        layout = layout_invoice(long_invoice, None, ADDRESS, geometry=narrow)
        default = layout_invoice(long_invoice, None, ADDRESS)
        assert layout.page_count > default.page_count
        assert all(row.bottom <= narrow.printable_bottom for row in layout.rows)

    def test_custom_measure(self, sample_invoice):
        def wide(text, size, bold):
            return len(text) * 10.0

        layout = layout_invoice(sample_invoice, None, ADDRESS, measure=wide)
        default = layout_invoice(sample_invoice, None, ADDRESS)
        assert layout.rows[0].height > default.rows[0].height


def test_invoice_is_immutable(sample_invoice):
    with pytest.raises(Exception):
        sample_invoice.invoice_number = "X"


def test_dates_accept_iso_strings(invoice_factory):
    invoice = invoice_factory(invoice_date="2025-02-01", due_date=date(2025, 2, 15))
    content = texts(layout_invoice(invoice, None, ADDRESS).instructions)
    assert "Invoice Date: 01 Feb 2025" in content
