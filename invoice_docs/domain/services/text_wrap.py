# invoice_docs/domain/services/text_wrap.py
"""
Width-aware line breaking for the layout engine.

Widths come from the standard PDF core-font metrics bundled with ReportLab
(no canvas is involved), converted to millimetres so they match the layout
coordinate system.
"""

from __future__ import annotations

from typing import Callable, List

from reportlab.lib.units import mm
from reportlab.pdfbase.pdfmetrics import stringWidth

REGULAR_FONT = "Helvetica"
BOLD_FONT = "Helvetica-Bold"

# (text, font_size_pt, bold) -> width in mm
TextMeasurer = Callable[[str, float, bool], float]


def core_font_width(text: str, font_size: float, bold: bool = False) -> float:
    """Width of ``text`` in millimetres using Helvetica metrics."""
    font = BOLD_FONT if bold else REGULAR_FONT
    return stringWidth(text, font, font_size) / mm


def _split_long_token(token: str, fits: Callable[[str], bool]) -> List[str]:
    """Break a single token wider than the line (emails, part numbers) into chunks."""
    if fits(token):
        return [token]
    chunks = []
    remaining = token
    while remaining:
        lo, hi = 1, len(remaining)
        fit = 1
        while lo <= hi:
            mid = (lo + hi) // 2
            if fits(remaining[:mid]):
                fit = mid
                lo = mid + 1
            else:
                hi = mid - 1
        chunks.append(remaining[:fit])
        remaining = remaining[fit:]
    return chunks


def wrap_text(
    text: str,
    max_width: float,
    font_size: float,
    bold: bool = False,
    measure: TextMeasurer = core_font_width,
) -> List[str]:
    """
    Greedy word wrap.

    Explicit newlines start a new line; blank lines are dropped. Returns an
    empty list for blank text, so callers can count rendered lines directly.
    """
    if max_width <= 0:
        raise ValueError("max_width must be positive")

    def fits(candidate: str) -> bool:
        return measure(candidate, font_size, bold) <= max_width

    lines: List[str] = []
    for paragraph in (text or "").splitlines():
        words: List[str] = []
        for word in paragraph.split():
            words.extend(_split_long_token(word, fits))

        current = ""
        for word in words:
            candidate = f"{current} {word}" if current else word
            if fits(candidate):
                current = candidate
            else:
                if current:
                    lines.append(current)
                current = word
        if current:
            lines.append(current)
    return lines
