# invoice_docs/domain/errors.py
"""
Failure taxonomy for invoice document generation.

Every error aborts the whole generation request: nothing partial is ever
handed to a renderer or a delivery channel.
"""

from __future__ import annotations


class InvoiceDocumentError(Exception):
    """Base class for all invoice document generation failures."""
    pass


class InvalidAmount(InvoiceDocumentError):
    """Raised when an amount is negative, non-finite or not a number."""

    def __init__(self, message: str, value: object = None):
        super().__init__(message)
        self.value = value


class InvalidDate(InvoiceDocumentError):
    """Raised when a date value cannot be parsed."""

    def __init__(self, message: str, value: object = None):
        super().__init__(message)
        self.value = value


class LayoutError(InvoiceDocumentError):
    """Raised when required layout input is missing (no line items, blank address)."""
    pass


class RenderError(InvoiceDocumentError):
    """Raised when the PDF backend fails to serialize draw instructions.

    Layout is deterministic and side-effect free, so callers may simply
    retry the whole generation.
    """
    pass
