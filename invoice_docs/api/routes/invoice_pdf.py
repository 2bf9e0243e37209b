# invoice_docs/api/routes/invoice_pdf.py
"""
REST endpoints for invoice PDF generation and share links.

Stateless: the caller posts the invoice, the optional issuer profile and
the delivery address with every request.
"""

from __future__ import annotations

import io
import logging
import re
from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, HTTPException
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import StreamingResponse
from pydantic import BaseModel, Field

from invoice_docs.domain.errors import InvoiceDocumentError, RenderError
from invoice_docs.domain.models.invoice import Invoice, IssuerProfile
from invoice_docs.domain.services.invoice_delivery import (
    chat_message_url,
    email_draft_url,
    share_caption,
)
from invoice_docs.domain.services.invoice_document import artifact_filename, generate_invoice_document

logger = logging.getLogger("invoice_pdf_api")
router = APIRouter()

GENERIC_FAILURE = "Failed to generate invoice document. Please try again."


def _content_disposition(filename: str) -> str:
    """attachment header with an ASCII fallback and the RFC 5987 UTF-8 name."""
    fallback = re.sub(r'[^\x20-\x7e]|["\\]', "_", filename)
    encoded = quote(filename, safe="")
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{encoded}"


# ============================================================
# Request / Response Models
# ============================================================

class InvoicePdfRequest(BaseModel):
    """Request body for invoice PDF generation."""
    invoice: Invoice
    profile: Optional[IssuerProfile] = None
    delivery_address: str = Field(default="", description="Buyer delivery address (required)")


class ShareLinksRequest(InvoicePdfRequest):
    email_to: str = Field(default="", description="Optional email recipient")
    phone: str = Field(default="", description="Optional WhatsApp number with country code")


class ShareLinksResponse(BaseModel):
    filename: str
    caption: str
    email_url: str
    whatsapp_url: str


# ============================================================
# Endpoints
# ============================================================

@router.post("/pdf")
async def download_invoice_pdf(req: InvoicePdfRequest) -> StreamingResponse:
    """Lay out and render the invoice; returns Invoice-{number}.pdf as an attachment."""
    try:
        document = await run_in_threadpool(
            generate_invoice_document, req.invoice, req.profile, req.delivery_address
        )
    except RenderError:
        logger.exception("Invoice %s rendering failed", req.invoice.invoice_number)
        raise HTTPException(status_code=500, detail=GENERIC_FAILURE)
    except InvoiceDocumentError as e:
        logger.warning("Invoice %s rejected: %s", req.invoice.invoice_number, e)
        raise HTTPException(status_code=422, detail=GENERIC_FAILURE)

    return StreamingResponse(
        io.BytesIO(document.content),
        media_type=document.media_type,
        headers={
            "Content-Disposition": _content_disposition(document.filename),
            "Content-Length": str(len(document.content)),
            "X-Page-Count": str(document.page_count),
        },
    )


@router.post("/share-links", response_model=ShareLinksResponse)
async def invoice_share_links(req: ShareLinksRequest) -> ShareLinksResponse:
    """Email-draft and chat links for sharing an invoice alongside its PDF."""
    if not req.delivery_address.strip():
        logger.warning("Invoice %s share rejected: blank delivery address", req.invoice.invoice_number)
        raise HTTPException(status_code=422, detail=GENERIC_FAILURE)
    try:
        return ShareLinksResponse(
            filename=artifact_filename(req.invoice.invoice_number),
            caption=share_caption(req.invoice),
            email_url=email_draft_url(req.invoice, req.delivery_address, req.email_to),
            whatsapp_url=chat_message_url(req.invoice, req.delivery_address, req.phone),
        )
    except InvoiceDocumentError as e:
        logger.warning("Invoice %s share rejected: %s", req.invoice.invoice_number, e)
        raise HTTPException(status_code=422, detail=GENERIC_FAILURE)
