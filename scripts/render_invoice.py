# scripts/render_invoice.py
#
# Render an invoice JSON file to PDF without going through the API.
#
#   python scripts/render_invoice.py invoice.json "12 MG Road, Pune" [out_dir]
#
# The JSON file holds {"invoice": {...}, "profile": {...}} using the same
# shape as the POST /invoices/pdf request body.

import json
import os
import sys
from pathlib import Path

from loguru import logger

# Ensure project root (the folder containing 'invoice_docs') is on sys.path
CURRENT_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.dirname(CURRENT_DIR)
if PROJECT_ROOT not in sys.path:
    sys.path.append(PROJECT_ROOT)

from invoice_docs.core.logging_config import setup_logging
from invoice_docs.domain.errors import InvoiceDocumentError
from invoice_docs.domain.models.invoice import Invoice, IssuerProfile
from invoice_docs.domain.services.invoice_delivery import save_to_directory
from invoice_docs.domain.services.invoice_document import generate_invoice_document


def main() -> int:
    if len(sys.argv) < 3:
        print("usage: render_invoice.py <invoice.json> <delivery address> [out_dir]")
        return 2

    setup_logging()

    payload = json.loads(Path(sys.argv[1]).read_text(encoding="utf-8"))
    invoice = Invoice.model_validate(payload["invoice"])
    profile = IssuerProfile.model_validate(payload["profile"]) if payload.get("profile") else None

    try:
        document = generate_invoice_document(invoice, profile, sys.argv[2])
    except InvoiceDocumentError as e:
        logger.error(f"Could not generate invoice {invoice.invoice_number}: {e}")
        return 1

    try:
        path = save_to_directory(document, sys.argv[3] if len(sys.argv) > 3 else None)
    except OSError as e:
        logger.error(f"Could not save {document.filename}: {e}")
        return 1
    logger.success(f"Wrote {path} ({document.page_count} page(s))")
    return 0


if __name__ == "__main__":
    sys.exit(main())
