# invoice_docs/domain/services/number_words.py
"""
Spell out rupee amounts in words using the South-Asian numbering scale.

The rightmost group is three digits wide (hundreds); every group after it
is two digits wide: Thousand, Lakh (10^5), Crore (10^7), Arab (10^9),
Kharab (10^11).

    >>> to_words(150000)
    'One Lakh Fifty Thousand Rupees'
    >>> to_words("99.50")
    'Ninety Nine Rupees and 50 Paise'

"Only" is appended by the document template, not here.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from invoice_docs.domain.errors import InvalidAmount

_ONES = [
    "", "One", "Two", "Three", "Four", "Five", "Six", "Seven", "Eight", "Nine",
    "Ten", "Eleven", "Twelve", "Thirteen", "Fourteen", "Fifteen", "Sixteen",
    "Seventeen", "Eighteen", "Nineteen",
]
_TENS = [
    "", "", "Twenty", "Thirty", "Forty", "Fifty", "Sixty", "Seventy", "Eighty", "Ninety",
]

# (divisor, name) from the largest two-digit group down to Thousand
_SCALES = [
    (10 ** 11, "Kharab"),
    (10 ** 9, "Arab"),
    (10 ** 7, "Crore"),
    (10 ** 5, "Lakh"),
    (10 ** 3, "Thousand"),
]

_PAISE = Decimal("0.01")


def to_decimal(amount) -> Decimal:
    """
    Coerce an int/float/str/Decimal into a finite, non-negative Decimal.

    Raises InvalidAmount otherwise. Floats go through ``str`` so that
    ``99.5`` becomes ``Decimal("99.5")`` rather than its binary expansion.
    """
    if isinstance(amount, bool) or amount is None:
        raise InvalidAmount(f"Not an amount: {amount!r}", amount)
    try:
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount).strip())
    except (InvalidOperation, ValueError, TypeError):
        raise InvalidAmount(f"Not an amount: {amount!r}", amount) from None

    if not value.is_finite():
        raise InvalidAmount(f"Amount must be finite, got {amount!r}", amount)
    if value < 0:
        raise InvalidAmount(f"Amount must not be negative, got {amount!r}", amount)
    return value


def round_paise(amount) -> Decimal:
    """Round to two decimal places, half-up (commercial rounding)."""
    return to_decimal(amount).quantize(_PAISE, rounding=ROUND_HALF_UP)


def _below_hundred(num: int) -> str:
    if num < 20:
        return _ONES[num]
    tens, ones = divmod(num, 10)
    return _TENS[tens] + (" " + _ONES[ones] if ones else "")


def _below_thousand(num: int) -> str:
    hundreds, rest = divmod(num, 100)
    parts = []
    if hundreds:
        parts.append(_ONES[hundreds] + " Hundred")
    if rest:
        parts.append(_below_hundred(rest))
    return " ".join(parts)


def _integer_words(num: int) -> str:
    """Words for a positive integer; empty string for zero."""
    parts = []
    for divisor, name in _SCALES:
        group, num = divmod(num, divisor)
        if not group:
            continue
        if divisor == _SCALES[0][0]:
            # Top group is open-ended: spell whatever is left recursively
            parts.append(f"{_integer_words(group)} {name}")
        else:
            parts.append(f"{_below_hundred(group)} {name}")
    if num:
        parts.append(_below_thousand(num))
    return " ".join(parts)


def to_words(amount) -> str:
    """
    Convert a non-negative amount into words.

    Args:
        amount: Decimal, int, float or numeric string with at most two
                fractional digits (more are rounded half-up to paise).

    Returns:
        "<words> Rupees" or "<words> Rupees and N Paise".

    Raises:
        InvalidAmount: negative, non-finite or non-numeric input.
    """
    value = round_paise(amount)
    rupees = int(value)
    paise = int((value - rupees) * 100)

    words = _integer_words(rupees) or "Zero"
    result = f"{words} Rupees"
    if paise:
        result += f" and {paise} Paise"
    return result
