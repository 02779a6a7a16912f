from io import BytesIO

import pdfplumber
import pytest
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfgen.canvas import Canvas

from rentaldocs.processors.layout_engine import DEFAULT_MARGIN, LayoutEngine
from rentaldocs.utils.exceptions import LayoutError

LONG_TEXT = ("Unit 4, The Old Brewery, 200 Burnt Oak Broadway, Edgware, Middlesex, HA8 0AP, United Kingdom. "
             "Deliveries to the rear entrance only, ring the bell twice and wait for the attendant to respond.")


@pytest.fixture
def canvas_buffer():
    buffer = BytesIO()
    return Canvas(buffer, pagesize=A4, invariant=1), buffer


def open_pdf(canvas, buffer):
    canvas.save()
    return pdfplumber.open(BytesIO(buffer.getvalue()))


def test_page_geometry_is_in_millimetres(canvas_buffer):
    layout = LayoutEngine(canvas_buffer[0])

    assert layout.page_width == pytest.approx(210, abs=0.1)
    assert layout.page_height == pytest.approx(297, abs=0.1)
    assert layout.margin == pytest.approx(12.7, abs=0.01)
    assert layout.content_width == pytest.approx(210 - 2 * DEFAULT_MARGIN, abs=0.1)


def test_row_heights_follow_wrapped_line_count(canvas_buffer):
    layout = LayoutEngine(canvas_buffer[0])
    rows = [["Name", "Jane Driver"], ["Email", "jane@example.com"], ["Address", LONG_TEXT]]

    heights = layout.row_heights(rows, [60, 120])
    address_lines = layout.wrap_text(LONG_TEXT, 120 - 8)

    assert heights[0] == 10
    assert heights[1] == 8
    assert len(address_lines) > 1
    assert heights[2] == len(address_lines) * 5 + 2


def test_render_table_returns_bottom_edge(canvas_buffer):
    layout = LayoutEngine(canvas_buffer[0])
    rows = [["Pickup", "01/06/2024 at 10:00"], ["Dropoff", "08/06/2024 at 10:00"]]

    bottom = layout.render_table((layout.margin, 40), rows, [60, 120])

    assert bottom == pytest.approx(40 + 10 + 8)


def test_render_table_draws_bordered_cells_with_shaded_header(canvas_buffer):
    canvas, buffer = canvas_buffer
    layout = LayoutEngine(canvas)
    layout.render_table((layout.margin, 40), [["Vehicle", "Toyota Prius"], ["Registration", "AB12 CDE"]], [60, 120])

    with open_pdf(canvas, buffer) as pdf:
        page = pdf.pages[0]
        rects = sorted(page.rects, key=lambda r: (round(r["top"]), r["x0"]))
        text = page.extract_text()

    assert len(rects) == 4
    assert [r["fill"] for r in rects] == [True, True, False, False]
    assert rects[0]["top"] == pytest.approx(40 * mm, abs=0.5)
    assert rects[0]["width"] == pytest.approx(60 * mm, abs=0.5)
    assert rects[1]["width"] == pytest.approx(120 * mm, abs=0.5)
    assert rects[0]["height"] == pytest.approx(10 * mm, abs=0.5)
    assert "Toyota Prius" in text
    assert "AB12 CDE" in text


def test_empty_cells_still_get_a_row(canvas_buffer):
    layout = LayoutEngine(canvas_buffer[0])

    assert layout.render_table((20, 20), [["Header", ""], ["", None]], [60, 120]) == pytest.approx(38)


@pytest.mark.parametrize("origin,rows,widths", [
    ((20, 20), [["a", "b"]], []),
    ((20, 20), [["a", "b"]], [60, 0]),
    ((20, 20), [["a", "b"]], [60, -10]),
    ((20, 20), [["a", "b"]], [60, 6]),
    ((20, 20), [["a", "b"], ["only one"]], [60, 120]),
    ((20, 20), [["a", "b", "c"]], [60, 120]),
    ((float("nan"), 20), [["a", "b"]], [60, 120]),
])
def test_malformed_geometry_raises_layout_error(canvas_buffer, origin, rows, widths):
    layout = LayoutEngine(canvas_buffer[0])

    with pytest.raises(LayoutError):
        layout.render_table(origin, rows, widths)


def test_wrap_text_always_returns_a_line(canvas_buffer):
    layout = LayoutEngine(canvas_buffer[0])

    assert layout.wrap_text("", 50) == [""]
    assert layout.wrap_text(None, 50) == [""]


def test_wrapped_lines_fit_width(canvas_buffer):
    canvas = canvas_buffer[0]
    layout = LayoutEngine(canvas)

    for line in layout.wrap_text(LONG_TEXT, 80):
        assert canvas.stringWidth(line, "Helvetica", 9) <= 80 * mm + 0.01


def test_top_down_coordinates(canvas_buffer):
    canvas, buffer = canvas_buffer
    layout = LayoutEngine(canvas)
    layout.draw_line(20, 100, 80, 100)
    layout.draw_rect(30, 150, 40, 20)

    with open_pdf(canvas, buffer) as pdf:
        page = pdf.pages[0]
        line = page.lines[0]
        rect = page.rects[0]

    assert line["top"] == pytest.approx(100 * mm, abs=0.5)
    assert line["x0"] == pytest.approx(20 * mm, abs=0.5)
    assert line["x1"] == pytest.approx(80 * mm, abs=0.5)
    assert rect["top"] == pytest.approx(150 * mm, abs=0.5)
    assert rect["bottom"] == pytest.approx(170 * mm, abs=0.5)
