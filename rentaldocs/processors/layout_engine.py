"""Top-down millimetre layout on top of a reportlab canvas.

Callers work in millimetres measured from the top-left corner of the page,
the way a printed form is described. ``LayoutEngine`` converts to reportlab's
bottom-up point space at the last moment.
"""

import math
from typing import List, Optional, Sequence, Tuple

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen.canvas import Canvas

from ..models.data_models import ResolvedImage
from ..utils.exceptions import LayoutError

Color = Tuple[int, int, int]

FONT_REGULAR = "Helvetica"
FONT_BOLD = "Helvetica-Bold"

BLACK: Color = (0, 0, 0)
MUTED_TEXT: Color = (100, 100, 100)
BORDER: Color = (200, 200, 200)
HEADER_FILL: Color = (245, 245, 245)
SIGNATURE_RULE: Color = (150, 150, 150)
TITLE_RED: Color = (220, 38, 38)
SECTION_BLUE: Color = (0, 0, 139)

DEFAULT_MARGIN = 36 / 2.83465  # 36pt in mm
LINE_WIDTH = 0.5

# Table geometry, mm
ROW_HEIGHT = 8
HEADER_ROW_HEIGHT = 10
LINE_HEIGHT = 5
CELL_PADDING = 4
HEADER_FONT_SIZE = 10
BODY_FONT_SIZE = 9


class LayoutEngine:

    def __init__(self, canvas: Canvas, page_size: Tuple[float, float] = A4, margin: float = DEFAULT_MARGIN):
        self.canvas = canvas
        self.page_width = page_size[0] / mm
        self.page_height = page_size[1] / mm
        self.margin = margin

    @property
    def content_width(self) -> float:
        return self.page_width - 2 * self.margin

    @property
    def bottom_limit(self) -> float:
        return self.page_height - self.margin

    def _point(self, x: float, y: float) -> Tuple[float, float]:
        return x * mm, (self.page_height - y) * mm

    def _fill(self, color: Color):
        self.canvas.setFillColorRGB(*(c / 255 for c in color))

    def _stroke(self, color: Color, width: float = LINE_WIDTH):
        self.canvas.setStrokeColorRGB(*(c / 255 for c in color))
        self.canvas.setLineWidth(width * mm)

    def wrap_text(self, text: Optional[str], width: float, size: float = BODY_FONT_SIZE,
                  font: str = FONT_REGULAR) -> List[str]:
        """Split text into lines that fit ``width`` mm. Always returns at least one line."""
        if width <= 0:
            raise LayoutError(f"Cannot wrap text into non-positive width {width}", {'width': width})
        lines = simpleSplit(str(text or ""), font, size, width * mm)
        return lines or [""]

    def draw_text(self, x: float, y: float, text: str, size: float = BODY_FONT_SIZE,
                  bold: bool = False, color: Color = BLACK):
        """Draw one line with its baseline at ``y``."""
        self.canvas.setFont(FONT_BOLD if bold else FONT_REGULAR, size)
        self._fill(color)
        self.canvas.drawString(*self._point(x, y), text)

    def draw_centered_text(self, x: float, y: float, text: str, size: float = BODY_FONT_SIZE,
                           bold: bool = False, color: Color = BLACK):
        self.canvas.setFont(FONT_BOLD if bold else FONT_REGULAR, size)
        self._fill(color)
        self.canvas.drawCentredString(*self._point(x, y), text)

    def draw_line(self, x1: float, y1: float, x2: float, y2: float,
                  color: Color = BORDER, width: float = LINE_WIDTH):
        self._stroke(color, width)
        self.canvas.line(*self._point(x1, y1), *self._point(x2, y2))

    def draw_rect(self, x: float, y: float, width: float, height: float,
                  color: Color = BORDER, fill: Optional[Color] = None):
        """Rectangle whose top-left corner is (x, y)."""
        self._stroke(color)
        if fill is not None:
            self._fill(fill)
        left, bottom = self._point(x, y + height)
        self.canvas.rect(left, bottom, width * mm, height * mm, stroke=1, fill=1 if fill is not None else 0)

    def draw_image(self, image: ResolvedImage, x: float, y: float, width: float, height: float):
        """Draw an image stretched to exactly ``width`` x ``height`` mm, top-left at (x, y).

        Raises ImageResolutionError when the bytes cannot be decoded; nothing is drawn in that case.
        """
        reader = image.reader()
        left, bottom = self._point(x, y + height)
        self.canvas.drawImage(reader, left, bottom, width=width * mm, height=height * mm, mask='auto')

    def _check_geometry(self, origin: Tuple[float, float], rows: Sequence[Sequence[str]],
                        column_widths: Sequence[float]):
        geometry = {'origin': tuple(origin), 'column_widths': list(column_widths)}
        if len(origin) != 2 or not all(math.isfinite(v) for v in origin):
            raise LayoutError(f"Invalid table origin: {origin!r}", geometry)
        if not column_widths:
            raise LayoutError("Table needs at least one column width", geometry)
        for width in column_widths:
            if not math.isfinite(width) or width <= 2 * CELL_PADDING:
                raise LayoutError(f"Column width {width} leaves no room for text", geometry)
        for index, row in enumerate(rows):
            if len(row) != len(column_widths):
                raise LayoutError(
                    f"Row {index} has {len(row)} cells but the table has {len(column_widths)} columns",
                    {**geometry, 'row': index}
                )

    def _row_lines(self, row: Sequence[str], column_widths: Sequence[float], header: bool) -> List[List[str]]:
        font = FONT_BOLD if header else FONT_REGULAR
        size = HEADER_FONT_SIZE if header else BODY_FONT_SIZE
        return [self.wrap_text(cell, width - 2 * CELL_PADDING, size, font) for cell, width in zip(row, column_widths)]

    @staticmethod
    def _row_height(lines: List[List[str]], header: bool) -> float:
        minimum = HEADER_ROW_HEIGHT if header else ROW_HEIGHT
        return max(minimum, max(len(cell) for cell in lines) * LINE_HEIGHT + 2)

    def row_heights(self, rows: Sequence[Sequence[str]], column_widths: Sequence[float]) -> List[float]:
        self._check_geometry((0.0, 0.0), rows, column_widths)
        return [self._row_height(self._row_lines(row, column_widths, i == 0), i == 0) for i, row in enumerate(rows)]

    def table_height(self, rows: Sequence[Sequence[str]], column_widths: Sequence[float]) -> float:
        return sum(self.row_heights(rows, column_widths))

    def render_table(self, origin: Tuple[float, float], rows: Sequence[Sequence[str]],
                     column_widths: Sequence[float]) -> float:
        """Draw a bordered table with a shaded header row and return the bottom y.

        Row 0 is the header. Cell text is left aligned, padded and wrapped to
        the column width; a row is as tall as its tallest cell.
        """
        self._check_geometry(origin, rows, column_widths)

        x0, y = origin
        for index, row in enumerate(rows):
            header = index == 0
            lines = self._row_lines(row, column_widths, header)
            height = self._row_height(lines, header)

            x = x0
            for cell_lines, width in zip(lines, column_widths):
                self.draw_rect(x, y, width, height, BORDER, HEADER_FILL if header else None)
                baseline = y + (7 if header else 6)
                for line_index, line in enumerate(cell_lines):
                    self.draw_text(
                        x + CELL_PADDING, baseline + line_index * LINE_HEIGHT, line,
                        size=HEADER_FONT_SIZE if header else BODY_FONT_SIZE, bold=header
                    )
                x += width
            y += height
        return y
