# invoice_docs/domain/services/invoice_layout.py
"""
Lay out an invoice into renderer-agnostic draw instructions.

Single forward pass over the bands of the document:

    header -> parties -> PO reference -> line items -> summary
    -> amount in words -> thank you -> payment details -> terms
    -> declaration and signature

A band or table row is never split. When it would cross the printable
bottom of the page a StartNewPage is emitted first and the cursor resets to
the top margin. The line-item table gets one border per page segment, and
its column header is repeated on every continuation page.

All text is formatted before the first instruction is produced, so invalid
dates or amounts abort the call with nothing emitted.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional, Sequence, Tuple

from invoice_docs.domain.errors import LayoutError
from invoice_docs.domain.models.drawing import (
    A4_GEOMETRY,
    DrawInstruction,
    DrawLine,
    DrawRect,
    PageGeometry,
    PlaceText,
    RGB,
    StartNewPage,
)
from invoice_docs.domain.models.invoice import Invoice, IssuerProfile, LineItem
from invoice_docs.domain.services.formatters import format_amount, format_date
from invoice_docs.domain.services.number_words import to_decimal, to_words
from invoice_docs.domain.services.text_wrap import TextMeasurer, core_font_width, wrap_text

logger = logging.getLogger("invoice_layout")

# ---------------------------------------------------------------------------
# Palette
# ---------------------------------------------------------------------------
PRIMARY: RGB = (41, 98, 255)
DARK_GRAY: RGB = (45, 55, 72)
LIGHT_GRAY: RGB = (247, 250, 252)
MEDIUM_GRAY: RGB = (203, 213, 225)
TEXT_GRAY: RGB = (71, 85, 105)
HIGHLIGHT: RGB = (16, 185, 129)
ROW_SHADE: RGB = (252, 252, 253)
WHITE: RGB = (255, 255, 255)

# ---------------------------------------------------------------------------
# Band metrics (mm)
# ---------------------------------------------------------------------------
ACCENT_STRIP_HEIGHT = 8.0
HEADER_HEIGHT = 24.0
PARTY_GAP = 10.0
NAME_MAX_LINES = 2
ISSUER_ADDRESS_MAX_LINES = 3
CONTACT_MAX_LINES = 2
DELIVERY_ADDRESS_MAX_LINES = 4
PO_BAND_HEIGHT = 10.0
BAND_GAP = 6.0
DESC_FONT_SIZE = 8.5
CELL_PADDING = 2.0
SUMMARY_WIDTH = 80.0
SUMMARY_LINE = 6.0
WORDS_LINE = 4.5
BOX_HEADER_HEIGHT = 7.0
SIGNATURE_BAND_HEIGHT = 24.0
SIGNATURE_WIDTH = 55.0
CONTINUATION_STRIP_HEIGHT = 12.0

TABLE_LABELS = ("DESCRIPTION", "HSN/SAC", "QTY", "RATE", "TAX %", "AMOUNT")
# Columns whose content is right-aligned (numbers)
_RIGHT_ALIGNED = (False, False, True, True, True, True)

TERMS_AND_CONDITIONS = (
    "Payment is due within 15 days of the invoice date.",
    "Late payments attract interest at 1.5% per month.",
    "Goods once sold will not be taken back.",
)
THANK_YOU = "Thank you for your business!"
DECLARATION = (
    "We declare that this invoice shows the actual price of the goods described "
    "and that all particulars are true and correct."
)
DECLARATION_MAX_LINES = 3
FOOTER_NOTE = "This is a computer-generated invoice and does not require a physical signature."


@dataclass(frozen=True)
class RowBox:
    """Where a line-item row landed."""

    index: int
    page: int
    top: float
    height: float

    @property
    def bottom(self) -> float:
        return self.top + self.height


@dataclass(frozen=True)
class TableSegment:
    """The part of the line-item table drawn on one page."""

    page: int
    top: float
    bottom: float


@dataclass(frozen=True)
class InvoiceLayout:
    instructions: Tuple[DrawInstruction, ...]
    geometry: PageGeometry
    page_count: int
    rows: Tuple[RowBox, ...]
    table_segments: Tuple[TableSegment, ...]
    # (issuer side, buyer side) rendered line counts in the party band
    party_line_counts: Tuple[int, int]
    subtotal: Decimal
    tax_amount: Decimal


@dataclass(frozen=True)
class _PreparedRow:
    item: LineItem
    description: Tuple[str, ...]
    height: float
    code: str
    qty: str
    rate: str
    tax: str
    total: str


@dataclass(frozen=True)
class _TextLine:
    text: str
    size: float = 9.0
    bold: bool = False
    color: RGB = TEXT_GRAY


def _clean(value: Optional[str]) -> str:
    return (value or "").strip()


def _fmt_percent(pct: Decimal) -> str:
    return f"{format(pct.normalize(), 'f')}%"


class _LayoutBuilder:
    """Cursor state for one layout call. Never shared between calls."""

    def __init__(
        self,
        invoice: Invoice,
        profile: IssuerProfile,
        delivery_address: str,
        geometry: PageGeometry,
        measure: TextMeasurer,
    ):
        self.invoice = invoice
        self.profile = profile
        self.delivery_address = delivery_address
        self.g = geometry
        self.measure = measure

        self.out: List[DrawInstruction] = []
        self.page = 0
        self.y = geometry.margin

        self.rows: List[RowBox] = []
        self.segments: List[TableSegment] = []
        self._segment_top: Optional[float] = None
        self.subtotal = Decimal("0")

        self._prepare()

    # ------------------------------------------------------------------
    # Preparation: everything that can fail happens here
    # ------------------------------------------------------------------

    def _wrap(self, text: str, width: float, font_size: float, bold: bool = False) -> List[str]:
        return wrap_text(text, width, font_size, bold=bold, measure=self.measure)

    def _prepare(self) -> None:
        inv = self.invoice
        g = self.g

        self.invoice_date = format_date(inv.invoice_date)
        self.due_date = format_date(inv.due_date)
        po = inv.purchase_order
        self.po_date = format_date(po.po_date) if po and po.po_date is not None else ""

        self.transport = to_decimal(inv.transportation_cost or 0)
        self.total = to_decimal(inv.total_cost)
        self.pending = to_decimal(inv.pending_amount)
        self.percent = _fmt_percent(to_decimal(inv.gst_percent))

        desc_width = g.column_widths[0] - 2 * CELL_PADDING
        max_row = g.printable_bottom - g.margin - g.header_row_height
        prepared = []
        subtotal = Decimal("0")
        for index, item in enumerate(inv.line_items):
            lines = tuple(self._wrap(item.particulars, desc_width, DESC_FONT_SIZE))
            height = max(len(lines) * g.line_height + g.row_padding, g.min_row_height)
            if height > max_row:
                raise LayoutError(
                    f"Line item {index + 1} description is too long to fit on one page"
                )
            basic = to_decimal(item.basic_amount)
            subtotal += basic
            prepared.append(
                _PreparedRow(
                    item=item,
                    description=lines,
                    height=height,
                    code=_clean(item.hsn_code),
                    qty=str(item.qty_dispatched),
                    rate=format_amount(basic / item.qty_dispatched),
                    tax=self.percent,
                    total=format_amount(item.line_total),
                )
            )
        self.prepared_rows = prepared

        # Residual, never re-derived from gst_percent
        self.tax_amount = self.total - subtotal - self.transport
        self.summary_lines = [
            ("Subtotal", format_amount(subtotal)),
            (f"Tax (GST {self.percent})", format_amount(self.tax_amount)),
        ]
        if self.transport > 0:
            self.summary_lines.append(("Transportation", format_amount(self.transport)))
        self.summary_lines.append(("Discount", format_amount(0)))
        self.total_text = format_amount(self.total)
        self.pending_text = format_amount(self.pending)

        self.words_lines = self._wrap(
            f"{to_words(self.total)} Only", g.usable_width - 6, 10, bold=True
        )

        half = (g.usable_width - PARTY_GAP) / 2
        self.party_width = half
        self.issuer_lines = self._issuer_lines(half)
        self.buyer_lines = self._buyer_lines(half)

        # One line under the title; the full name is in the party band
        name = _clean(self.profile.organization_name).upper()
        self.header_name = self._wrap(name, half, 11, bold=True)[:1]

        self.declaration_lines = self._wrap(
            DECLARATION, g.usable_width - SIGNATURE_WIDTH - PARTY_GAP, g.small_font_size
        )[:DECLARATION_MAX_LINES]

        p = self.profile
        self.payment_lines = [
            f"{label}: {_clean(value)}"
            for label, value in (
                ("Account Name", p.account_name),
                ("Bank Name", p.bank_name),
                ("Account No", p.account_number),
                ("IFSC Code", p.ifsc_code),
                ("UPI ID", p.upi_id),
            )
            if _clean(value)
        ]

    def _name_lines(self, text: str, width: float) -> List[_TextLine]:
        wrapped = self._wrap(text, width, 10, bold=True)[:NAME_MAX_LINES]
        return [_TextLine(line, 10, True, DARK_GRAY) for line in wrapped]

    def _plain_lines(self, text: str, width: float, limit: Optional[int] = None) -> List[_TextLine]:
        wrapped = self._wrap(text, width, 9)
        if limit is not None:
            wrapped = wrapped[:limit]
        return [_TextLine(line) for line in wrapped]

    def _issuer_lines(self, width: float) -> List[_TextLine]:
        p = self.profile
        lines: List[_TextLine] = []
        name = _clean(p.organization_name)
        if name:
            lines += self._name_lines(name, width)
        address = _clean(p.organization_address)
        if address:
            lines += self._plain_lines(address, width, ISSUER_ADDRESS_MAX_LINES)
        contact = " | ".join(v for v in (_clean(p.organization_phone), _clean(p.organization_email)) if v)
        if contact:
            lines += self._plain_lines(contact, width, CONTACT_MAX_LINES)
        gstin = _clean(p.organization_gst_tin)
        if gstin:
            lines += self._plain_lines(f"GSTIN: {gstin}", width, 1)
        return lines

    def _buyer_lines(self, width: float) -> List[_TextLine]:
        lines = [_TextLine("BILL TO", 9, True, PRIMARY)]
        vendor = _clean(self.invoice.vendor_name)
        if vendor:
            lines += self._name_lines(vendor, width)
        lines += self._plain_lines(self.delivery_address, width, DELIVERY_ADDRESS_MAX_LINES)
        return lines

    # ------------------------------------------------------------------
    # Cursor / pagination
    # ------------------------------------------------------------------

    def _emit(self, instruction: DrawInstruction) -> None:
        self.out.append(instruction)

    def _text(self, x, y, text, size=9.0, bold=False, color=DARK_GRAY, align="left") -> None:
        self._emit(PlaceText(x=x, y=y, text=text, font_size=size, bold=bold, color=color, align=align))

    def _fits(self, height: float) -> bool:
        return self.y + height <= self.g.printable_bottom

    def _new_page(self) -> None:
        g = self.g
        self._emit(StartNewPage())
        self.page += 1
        self._emit(DrawRect(0, 0, g.width, CONTINUATION_STRIP_HEIGHT, fill_color=PRIMARY))
        self._text(
            g.width / 2,
            7.5,
            f"INVOICE {self.invoice.invoice_number} (Continued)",
            size=10,
            bold=True,
            color=WHITE,
            align="center",
        )
        self.y = g.margin

    def _ensure_room(self, height: float) -> bool:
        """Break the page when ``height`` does not fit below the cursor. True if a break happened."""
        if self._fits(height):
            return False
        self._new_page()
        return True

    # ------------------------------------------------------------------
    # Bands
    # ------------------------------------------------------------------

    def _header_band(self) -> None:
        g = self.g
        inv = self.invoice
        top = self.y
        self._emit(DrawRect(0, 0, g.width, ACCENT_STRIP_HEIGHT, fill_color=PRIMARY))
        self._text(g.margin, top + 10, "TAX INVOICE", size=20, bold=True, color=PRIMARY)
        for line in self.header_name:
            self._text(g.margin, top + 16, line, size=11, bold=True)

        right = g.right_edge
        self._text(right, top + 3, f"Invoice No: {inv.invoice_number}", bold=True, align="right")
        self._text(right, top + 8, f"Invoice Date: {self.invoice_date}", color=TEXT_GRAY, align="right")
        self._text(right, top + 13, f"Due Date: {self.due_date}", color=TEXT_GRAY, align="right")

        self._emit(DrawLine(g.margin, top + 18, right, top + 18, width=0.5, color=MEDIUM_GRAY))
        self.y = top + HEADER_HEIGHT

    def _party_band(self) -> None:
        g = self.g
        top = self.y
        lh = g.line_height
        right_x = g.margin + self.party_width + PARTY_GAP

        # Each side wraps independently; the taller side decides the band height
        for x, lines in ((g.margin, self.issuer_lines), (right_x, self.buyer_lines)):
            for i, line in enumerate(lines):
                self._text(x, top + (i + 1) * lh - 1, line.text, size=line.size, bold=line.bold, color=line.color)

        height = max(len(self.issuer_lines), len(self.buyer_lines)) * lh
        self.y = top + height + BAND_GAP

    def _po_band(self) -> None:
        po = self.invoice.purchase_order
        if po is None:
            return
        g = self.g
        top = self.y
        self._emit(
            DrawRect(g.margin, top, g.usable_width, PO_BAND_HEIGHT, stroke_color=MEDIUM_GRAY, line_width=0.5)
        )
        self._text(g.margin + 3, top + 6.5, f"PO Number: {po.po_number}", bold=True)
        if self.po_date:
            self._text(g.right_edge - 3, top + 6.5, f"PO Date: {self.po_date}", color=TEXT_GRAY, align="right")
        self.y = top + PO_BAND_HEIGHT + BAND_GAP

    # -- line items ------------------------------------------------------

    def _cell_x(self, column: int) -> Tuple[float, str]:
        edges = self.g.column_boundaries
        if _RIGHT_ALIGNED[column]:
            return edges[column + 1] - CELL_PADDING, "right"
        return edges[column] + CELL_PADDING, "left"

    def _table_header(self) -> None:
        g = self.g
        top = self.y
        self._segment_top = top
        self._emit(DrawRect(g.margin, top, g.table_width, g.header_row_height, fill_color=DARK_GRAY))
        baseline = top + g.header_row_height / 2 + 1.5
        for column, label in enumerate(TABLE_LABELS):
            x, align = self._cell_x(column)
            self._text(x, baseline, label, bold=True, color=WHITE, align=align)
        self.y = top + g.header_row_height

    def _close_table_segment(self) -> None:
        """Border and column rules around the rows drawn on the current page."""
        g = self.g
        top, bottom = self._segment_top, self.y
        edges = g.column_boundaries
        for x in edges[1:-1]:
            self._emit(DrawLine(x, top, x, bottom, width=0.3, color=MEDIUM_GRAY))
        self._emit(
            DrawRect(g.margin, top, g.table_width, bottom - top, stroke_color=MEDIUM_GRAY, line_width=0.5)
        )
        self.segments.append(TableSegment(page=self.page, top=top, bottom=bottom))
        self._segment_top = None

    def _table_row(self, index: int, row: _PreparedRow) -> None:
        g = self.g
        top = self.y
        height = row.height

        if index % 2 == 0:
            self._emit(DrawRect(g.margin, top, g.table_width, height, fill_color=ROW_SHADE))

        desc_x, _ = self._cell_x(0)
        for i, line in enumerate(row.description):
            baseline = top + g.row_padding / 2 + (i + 1) * g.line_height - 1
            self._text(desc_x, baseline, line, size=DESC_FONT_SIZE)

        baseline = top + height / 2 + 1.5
        cells = (row.code, row.qty, row.rate, row.tax, row.total)
        for column, value in enumerate(cells, start=1):
            if not value:
                continue
            x, align = self._cell_x(column)
            bold = column == len(TABLE_LABELS) - 1
            self._text(x, baseline, value, bold=bold, color=DARK_GRAY if bold else TEXT_GRAY, align=align)

        self._emit(DrawLine(g.margin, top + height, g.margin + g.table_width, top + height, color=MEDIUM_GRAY))

        self.rows.append(RowBox(index=index, page=self.page, top=top, height=height))
        self.subtotal += to_decimal(row.item.basic_amount)
        self.y = top + height

    def _line_items_table(self) -> None:
        g = self.g
        first = self.prepared_rows[0]
        # Keep the header together with the first row
        self._ensure_room(g.header_row_height + first.height)
        self._table_header()

        for index, row in enumerate(self.prepared_rows):
            if not self._fits(row.height):
                self._close_table_segment()
                self._new_page()
                self._table_header()
            self._table_row(index, row)

        self._close_table_segment()
        self.y += BAND_GAP

    # -- totals and boilerplate ------------------------------------------

    def _summary_band(self) -> None:
        g = self.g
        n = len(self.summary_lines)
        height = 3 + n * SUMMARY_LINE + 3 + SUMMARY_LINE + 8 + 2
        self._ensure_room(height)

        top = self.y
        x = g.right_edge - SUMMARY_WIDTH
        label_x = x + 3
        value_x = g.right_edge - 3

        cy = top + 3
        for label, value in self.summary_lines:
            self._text(label_x, cy + 4, f"{label}:", color=TEXT_GRAY)
            self._text(value_x, cy + 4, value, bold=True, align="right")
            cy += SUMMARY_LINE

        self._emit(DrawLine(x + 2, cy + 1, g.right_edge - 2, cy + 1, width=0.5, color=MEDIUM_GRAY))
        cy += 3

        self._text(label_x, cy + 4, "Total:", bold=True)
        self._text(value_x, cy + 4, self.total_text, bold=True, align="right")
        cy += SUMMARY_LINE

        self._emit(DrawRect(x, cy, SUMMARY_WIDTH, 8, fill_color=HIGHLIGHT))
        self._text(label_x, cy + 5.5, "Amount Due:", size=11, bold=True, color=WHITE)
        self._text(value_x, cy + 5.5, self.pending_text, size=11, bold=True, color=WHITE, align="right")
        cy += 8 + 2

        self._emit(DrawRect(x, top, SUMMARY_WIDTH, cy - top, stroke_color=MEDIUM_GRAY, line_width=0.5))
        self.y = cy + BAND_GAP

    def _words_band(self) -> None:
        g = self.g
        height = 8 + len(self.words_lines) * WORDS_LINE + 2
        self._ensure_room(height)
        top = self.y
        self._emit(DrawRect(g.margin, top, g.usable_width, height, fill_color=LIGHT_GRAY))
        self._text(g.margin + 3, top + 5, "Amount in Words:", bold=True, color=TEXT_GRAY)
        for i, line in enumerate(self.words_lines):
            self._text(g.margin + 3, top + 10 + i * WORDS_LINE, line, size=10, bold=True)
        self.y = top + height + BAND_GAP

    def _thank_you_band(self) -> None:
        self._ensure_room(8)
        self._text(self.g.width / 2, self.y + 5, THANK_YOU, size=10, bold=True, color=PRIMARY, align="center")
        self.y += 8 + BAND_GAP / 2

    def _boxed_list_band(self, title: str, lines: Sequence[str]) -> None:
        g = self.g
        height = BOX_HEADER_HEIGHT + 2 + len(lines) * g.line_height + 2
        self._ensure_room(height)
        top = self.y
        self._emit(DrawRect(g.margin, top, g.usable_width, BOX_HEADER_HEIGHT, fill_color=LIGHT_GRAY))
        self._text(g.margin + 3, top + 4.5, title, bold=True)
        cy = top + BOX_HEADER_HEIGHT + 2
        for line in lines:
            self._text(g.margin + 3, cy + g.line_height - 1, line, size=g.small_font_size, color=TEXT_GRAY)
            cy += g.line_height
        self._emit(DrawRect(g.margin, top, g.usable_width, height, stroke_color=MEDIUM_GRAY, line_width=0.5))
        self.y = top + height + BAND_GAP

    def _signature_band(self) -> None:
        g = self.g
        self._ensure_room(SIGNATURE_BAND_HEIGHT)
        top = self.y

        self._text(g.margin, top + 4, "DECLARATION:", size=g.small_font_size, bold=True, color=TEXT_GRAY)
        for i, line in enumerate(self.declaration_lines):
            self._text(g.margin, top + 8 + i * g.line_height, line, size=g.small_font_size, color=TEXT_GRAY)

        left = g.right_edge - SIGNATURE_WIDTH
        name = _clean(self.profile.organization_name)
        if name:
            self._text(left, top + 4, f"For {name}", color=TEXT_GRAY)
        self._emit(DrawLine(left, top + 16, g.right_edge, top + 16, width=0.5, color=DARK_GRAY))
        self._text(left, top + 21, "Authorized Signatory", bold=True)
        self.y = top + SIGNATURE_BAND_HEIGHT

    def _footer(self) -> None:
        g = self.g
        self._text(
            g.width / 2,
            g.height - 6,
            FOOTER_NOTE,
            size=g.small_font_size,
            color=TEXT_GRAY,
            align="center",
        )

    # ------------------------------------------------------------------

    def build(self) -> InvoiceLayout:
        self._header_band()
        self._party_band()
        self._po_band()
        self._line_items_table()
        self._summary_band()
        self._words_band()
        self._thank_you_band()
        if self.payment_lines:
            self._boxed_list_band("PAYMENT DETAILS", self.payment_lines)
        self._boxed_list_band("TERMS & CONDITIONS", [f"- {t}" for t in TERMS_AND_CONDITIONS])
        self._signature_band()
        self._footer()

        return InvoiceLayout(
            instructions=tuple(self.out),
            geometry=self.g,
            page_count=self.page + 1,
            rows=tuple(self.rows),
            table_segments=tuple(self.segments),
            party_line_counts=(len(self.issuer_lines), len(self.buyer_lines)),
            subtotal=self.subtotal,
            tax_amount=self.tax_amount,
        )


def layout_invoice(
    invoice: Invoice,
    profile: Optional[IssuerProfile],
    delivery_address: str,
    geometry: PageGeometry = A4_GEOMETRY,
    measure: TextMeasurer = core_font_width,
) -> InvoiceLayout:
    """
    Lay out ``invoice`` into an ordered sequence of draw instructions.

    Args:
        invoice: The invoice to print. Must have at least one line item.
        profile: Issuer details; ``None`` or empty fields are simply omitted.
        delivery_address: Buyer delivery address, must not be blank.
        geometry: Page size, margins and column widths.
        measure: Text width function in mm, used for wrapping.

    Raises:
        LayoutError: no line items, blank address, or a row taller than a page.
        InvalidAmount / InvalidDate: from the formatters.
    """
    if not invoice.line_items:
        raise LayoutError(f"Invoice {invoice.invoice_number} has no line items")
    if not (delivery_address or "").strip():
        raise LayoutError("Delivery address is required")

    builder = _LayoutBuilder(
        invoice,
        profile or IssuerProfile(),
        delivery_address.strip(),
        geometry,
        measure,
    )
    result = builder.build()
    logger.debug(
        "Laid out invoice %s: %d rows, %d pages, %d instructions",
        invoice.invoice_number,
        len(result.rows),
        result.page_count,
        len(result.instructions),
    )
    return result
