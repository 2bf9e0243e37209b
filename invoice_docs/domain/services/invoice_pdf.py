# invoice_docs/domain/services/invoice_pdf.py
"""
Render draw instructions into PDF bytes using ReportLab.

The layout engine never talks to ReportLab directly: instructions are
replayed onto a DrawingSink. ReportLabSink is the production sink; tests can
use RecordingSink to inspect exactly what a backend would be asked to draw.
"""

from __future__ import annotations

import io
import logging
from typing import Iterable, List, Optional, Protocol, Tuple

from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from invoice_docs.config.settings import settings
from invoice_docs.domain.errors import RenderError
from invoice_docs.domain.models.drawing import (
    DrawInstruction,
    DrawLine,
    DrawRect,
    PageGeometry,
    PlaceText,
    StartNewPage,
)
from invoice_docs.domain.services.text_wrap import BOLD_FONT, REGULAR_FONT

logger = logging.getLogger("invoice_pdf")


class DrawingSink(Protocol):
    def place_text(self, op: PlaceText) -> None: ...

    def draw_line(self, op: DrawLine) -> None: ...

    def draw_rect(self, op: DrawRect) -> None: ...

    def start_new_page(self) -> None: ...


def replay(instructions: Iterable[DrawInstruction], sink: DrawingSink) -> None:
    """Feed instructions to ``sink`` in paint order."""
    for op in instructions:
        if isinstance(op, PlaceText):
            sink.place_text(op)
        elif isinstance(op, DrawLine):
            sink.draw_line(op)
        elif isinstance(op, DrawRect):
            sink.draw_rect(op)
        elif isinstance(op, StartNewPage):
            sink.start_new_page()
        else:
            raise RenderError(f"Unknown draw instruction: {op!r}")


class RecordingSink:
    """Collects (kind, instruction) pairs. Useful for tests and debugging."""

    def __init__(self) -> None:
        self.calls: List[Tuple[str, Optional[DrawInstruction]]] = []

    def place_text(self, op: PlaceText) -> None:
        self.calls.append(("place-text", op))

    def draw_line(self, op: DrawLine) -> None:
        self.calls.append(("draw-line", op))

    def draw_rect(self, op: DrawRect) -> None:
        self.calls.append(("draw-rect", op))

    def start_new_page(self) -> None:
        self.calls.append(("start-new-page", None))

    @property
    def page_count(self) -> int:
        return 1 + sum(1 for kind, _ in self.calls if kind == "start-new-page")


def _rgb(color) -> Tuple[float, float, float]:
    r, g, b = color
    return r / 255.0, g / 255.0, b / 255.0


class ReportLabSink:
    """Draws onto a ReportLab canvas. Layout units are mm with a top-left origin."""

    def __init__(self, buf: io.BytesIO, geometry: PageGeometry, title: Optional[str] = None):
        self.geometry = geometry
        self.canvas = canvas.Canvas(
            buf,
            pagesize=(geometry.width * mm, geometry.height * mm),
            invariant=1,
            pageCompression=1,
        )
        if title:
            self.canvas.setTitle(title)
        if settings.PDF_AUTHOR:
            self.canvas.setAuthor(settings.PDF_AUTHOR)

    def _y(self, y: float) -> float:
        return (self.geometry.height - y) * mm

    def place_text(self, op: PlaceText) -> None:
        c = self.canvas
        c.setFont(BOLD_FONT if op.bold else REGULAR_FONT, op.font_size)
        c.setFillColorRGB(*_rgb(op.color))
        x, y = op.x * mm, self._y(op.y)
        if op.align == "right":
            c.drawRightString(x, y, op.text)
        elif op.align == "center":
            c.drawCentredString(x, y, op.text)
        else:
            c.drawString(x, y, op.text)

    def draw_line(self, op: DrawLine) -> None:
        c = self.canvas
        c.setStrokeColorRGB(*_rgb(op.color))
        c.setLineWidth(op.width * mm)
        c.line(op.x1 * mm, self._y(op.y1), op.x2 * mm, self._y(op.y2))

    def draw_rect(self, op: DrawRect) -> None:
        c = self.canvas
        fill = op.fill_color is not None
        stroke = op.stroke_color is not None
        if fill:
            c.setFillColorRGB(*_rgb(op.fill_color))
        if stroke:
            c.setStrokeColorRGB(*_rgb(op.stroke_color))
            c.setLineWidth(op.line_width * mm)
        c.rect(
            op.x * mm,
            self._y(op.y + op.height),
            op.width * mm,
            op.height * mm,
            stroke=int(stroke),
            fill=int(fill),
        )

    def start_new_page(self) -> None:
        self.canvas.showPage()

    def finish(self) -> None:
        self.canvas.showPage()
        self.canvas.save()


def render_pdf(
    instructions: Iterable[DrawInstruction],
    geometry: PageGeometry,
    title: Optional[str] = None,
) -> bytes:
    """
    Replay draw instructions onto a ReportLab canvas.

    Args:
        instructions: Output of the layout engine, in paint order.
        geometry: Page geometry the instructions were laid out for.
        title: Optional PDF document title.

    Returns:
        PDF file as bytes.

    Raises:
        RenderError: the backend failed; nothing usable was produced.
    """
    buf = io.BytesIO()
    try:
        sink = ReportLabSink(buf, geometry, title=title)
        replay(instructions, sink)
        sink.finish()
    except RenderError:
        raise
    except Exception as exc:
        logger.error("PDF rendering failed: %s", exc)
        raise RenderError(f"PDF rendering failed: {exc}") from exc
    return buf.getvalue()
