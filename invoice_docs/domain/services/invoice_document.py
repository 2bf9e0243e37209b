# invoice_docs/domain/services/invoice_document.py
"""
Invoice -> PDF document, end to end.

Layout runs first and must succeed completely before the renderer is
called; any failure aborts the request so no partial document reaches a
delivery channel.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional

from invoice_docs.domain.models.drawing import A4_GEOMETRY, PageGeometry
from invoice_docs.domain.models.invoice import Invoice, IssuerProfile
from invoice_docs.domain.services.invoice_layout import layout_invoice
from invoice_docs.domain.services.invoice_pdf import render_pdf

logger = logging.getLogger("invoice_document")

PDF_MEDIA_TYPE = "application/pdf"

# Anything that cannot appear in a single file name component on Windows or POSIX
_UNSAFE_FILENAME_CHARS = re.compile(r"[\\/:*?\"<>|\x00-\x1f\x7f]+")


def artifact_filename(invoice_number: str) -> str:
    """
    File name used for every delivery channel: Invoice-{number}.pdf

    GST invoice numbers often contain "/" (INV/24-25/001); unsafe characters
    are replaced with "-" so the name is always a single path component.
    """
    safe = _UNSAFE_FILENAME_CHARS.sub("-", invoice_number.strip()).strip(".- ")
    return f"Invoice-{safe}.pdf"


@dataclass(frozen=True)
class InvoiceDocument:
    invoice_number: str
    filename: str
    content: bytes
    page_count: int
    media_type: str = PDF_MEDIA_TYPE


def generate_invoice_document(
    invoice: Invoice,
    profile: Optional[IssuerProfile],
    delivery_address: str,
    geometry: PageGeometry = A4_GEOMETRY,
) -> InvoiceDocument:
    """
    Lay out and render an invoice.

    Raises:
        LayoutError, InvalidAmount, InvalidDate: bad input, nothing rendered.
        RenderError: backend failure; safe to retry.
    """
    layout = layout_invoice(invoice, profile, delivery_address, geometry=geometry)
    content = render_pdf(
        layout.instructions,
        layout.geometry,
        title=f"Invoice {invoice.invoice_number}",
    )
    logger.info(
        "Generated invoice %s (%d pages, %d bytes)",
        invoice.invoice_number,
        layout.page_count,
        len(content),
    )
    return InvoiceDocument(
        invoice_number=invoice.invoice_number,
        filename=artifact_filename(invoice.invoice_number),
        content=content,
        page_count=layout.page_count,
    )
