"""
Renderer-agnostic draw instructions and page geometry.

Coordinates are millimetres with the origin at the top-left corner of the
page and y growing downwards. Colours are RGB tuples in the 0-255 range.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Literal, Optional, Tuple, Union

RGB = Tuple[int, int, int]
Align = Literal["left", "center", "right"]

BLACK: RGB = (0, 0, 0)


@dataclass(frozen=True)
class PlaceText:
    kind: ClassVar[str] = "place-text"

    x: float
    y: float
    text: str
    font_size: float = 9.0
    bold: bool = False
    color: RGB = BLACK
    align: Align = "left"


@dataclass(frozen=True)
class DrawLine:
    kind: ClassVar[str] = "draw-line"

    x1: float
    y1: float
    x2: float
    y2: float
    width: float = 0.3
    color: RGB = BLACK


@dataclass(frozen=True)
class DrawRect:
    """Filled rectangle when ``fill_color`` is set, border when only ``stroke_color`` is."""

    kind: ClassVar[str] = "draw-rect"

    x: float
    y: float
    width: float
    height: float
    fill_color: Optional[RGB] = None
    stroke_color: Optional[RGB] = None
    line_width: float = 0.5

    @property
    def bottom(self) -> float:
        return self.y + self.height


@dataclass(frozen=True)
class StartNewPage:
    kind: ClassVar[str] = "start-new-page"


DrawInstruction = Union[PlaceText, DrawLine, DrawRect, StartNewPage]


@dataclass(frozen=True)
class PageGeometry:
    """Fixed page size, margins and the six line-item column widths."""

    width: float = 210.0
    height: float = 297.0
    margin: float = 20.0
    # Content may not extend below ``height - bottom_threshold``
    bottom_threshold: float = 20.0

    # description, code, quantity, unit price, tax, line total
    column_widths: Tuple[float, float, float, float, float, float] = (
        68.0,
        20.0,
        14.0,
        22.0,
        16.0,
        30.0,
    )

    line_height: float = 4.0
    min_row_height: float = 9.0
    row_padding: float = 4.0
    header_row_height: float = 9.0

    font_size: float = 9.0
    small_font_size: float = 8.0

    def __post_init__(self):
        if len(self.column_widths) != 6:
            raise ValueError("PageGeometry needs exactly six column widths")
        if any(w <= 0 for w in self.column_widths):
            raise ValueError("Column widths must be positive")
        if sum(self.column_widths) > self.usable_width + 1e-9:
            raise ValueError(
                f"Column widths sum to {sum(self.column_widths)}mm, "
                f"usable width is {self.usable_width}mm"
            )
        if self.printable_bottom <= self.margin:
            raise ValueError("Bottom threshold leaves no printable area")

    @property
    def usable_width(self) -> float:
        return self.width - 2 * self.margin

    @property
    def printable_bottom(self) -> float:
        return self.height - self.bottom_threshold

    @property
    def right_edge(self) -> float:
        return self.width - self.margin

    @property
    def column_boundaries(self) -> Tuple[float, ...]:
        """Seven x positions: left edge of each column plus the table's right edge."""
        edges = [self.margin]
        for w in self.column_widths:
            edges.append(edges[-1] + w)
        return tuple(edges)

    @property
    def table_width(self) -> float:
        return sum(self.column_widths)


A4_GEOMETRY = PageGeometry()
