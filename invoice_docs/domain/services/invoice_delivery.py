# invoice_docs/domain/services/invoice_delivery.py
"""
Delivery channels for a generated invoice document.

- file save: write the PDF under a directory
- email draft: mailto: link with subject/body (the PDF is attached by the user)
- chat message: WhatsApp click-to-chat link with a text summary

Only the file channel touches the PDF bytes; the link builders carry a text
summary because neither channel can attach files through a URL.
"""

from __future__ import annotations

import logging
from pathlib import Path
from urllib.parse import quote

from invoice_docs.config.settings import settings
from invoice_docs.domain.models.invoice import Invoice
from invoice_docs.domain.services.formatters import format_currency
from invoice_docs.domain.services.invoice_document import InvoiceDocument

logger = logging.getLogger("invoice_delivery")

WHATSAPP_BASE_URL = "https://wa.me/"


def save_to_directory(document: InvoiceDocument, directory: str | Path | None = None) -> Path:
    """Write the PDF as ``<directory>/Invoice-{number}.pdf`` and return the path."""
    out_dir = Path(directory or settings.DOCUMENT_OUTPUT_DIR)
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / document.filename
    path.write_bytes(document.content)
    logger.info("Saved %s (%d bytes)", path, len(document.content))
    return path


def share_caption(invoice: Invoice) -> str:
    """Short text used alongside a native share of the file."""
    return f"Invoice for {invoice.vendor_name} - {format_currency(invoice.total_cost)}"


def email_draft_url(invoice: Invoice, delivery_address: str, recipient: str = "") -> str:
    subject = f"Invoice {invoice.invoice_number}"
    body = (
        f"Please find attached invoice {invoice.invoice_number} for {invoice.vendor_name}.\n\n"
        f"Total Amount: {format_currency(invoice.total_cost)}\n"
        f"Amount Due: {format_currency(invoice.pending_amount)}\n\n"
        f"Delivery Address:\n{delivery_address.strip()}"
    )
    return f"mailto:{quote(recipient)}?subject={quote(subject)}&body={quote(body)}"


def chat_message_url(invoice: Invoice, delivery_address: str, phone: str = "") -> str:
    """
    WhatsApp click-to-chat link. ``phone`` is digits only with country code;
    empty lets the user pick the chat.
    """
    text = (
        f"Invoice {invoice.invoice_number}\n"
        f"Vendor: {invoice.vendor_name}\n"
        f"Total: {format_currency(invoice.total_cost)}\n"
        f"Due: {format_currency(invoice.pending_amount)}\n\n"
        f"Delivery Address:\n{delivery_address.strip()}"
    )
    digits = "".join(ch for ch in phone if ch.isdigit())
    return f"{WHATSAPP_BASE_URL}{digits}?text={quote(text)}"
