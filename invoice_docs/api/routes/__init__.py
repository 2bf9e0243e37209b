from fastapi import APIRouter

from invoice_docs.api.routes.health import router as health_router
from invoice_docs.api.routes.invoice_pdf import router as invoice_pdf_router

api_router = APIRouter()

# Public / health
api_router.include_router(health_router, tags=["health"])

# Invoice documents
api_router.include_router(invoice_pdf_router, prefix="/invoices", tags=["invoices"])
