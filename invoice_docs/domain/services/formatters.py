# invoice_docs/domain/services/formatters.py
"""
Display formatting for invoice documents.

Currency uses Indian digit grouping (12,34,567.89). Dates use a fixed
"05 Jan 2025" pattern. Both raise instead of producing placeholder text.
"""

from __future__ import annotations

from datetime import date, datetime

from invoice_docs.config.settings import settings
from invoice_docs.domain.errors import InvalidDate
from invoice_docs.domain.services.number_words import round_paise

DATE_FORMAT = "%d %b %Y"


def group_indian(digits: str) -> str:
    """Insert separators: last three digits, then groups of two ("1234567" -> "12,34,567")."""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_amount(amount) -> str:
    """Format as "1,50,000.00" with no currency symbol."""
    value = round_paise(amount)
    rupees, paise = f"{value:.2f}".split(".")
    return f"{group_indian(rupees)}.{paise}"


def format_currency(amount, symbol: str | None = None) -> str:
    """Format as "Rs. 1,50,000.00". Raises InvalidAmount on negative/non-finite input."""
    symbol = settings.CURRENCY_SYMBOL if symbol is None else symbol
    formatted = format_amount(amount)
    return f"{symbol} {formatted}" if symbol else formatted


def parse_date(value) -> date:
    """Accept date, datetime or an ISO-8601 string (date or datetime)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        text = value.strip()
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
        try:
            # "Z" suffix is not accepted by fromisoformat on older interpreters
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError:
            pass
    raise InvalidDate(f"Unparseable date: {value!r}", value)


def format_date(value) -> str:
    """Format as "05 Jan 2025". Raises InvalidDate on unparseable input."""
    return parse_date(value).strftime(DATE_FORMAT)
