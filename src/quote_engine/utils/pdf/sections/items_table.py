from __future__ import annotations

from decimal import Decimal
from typing import Callable, Iterable

from quote_engine.core.models.quote import LineItem
from quote_engine.utils.pdf.core.canvas import Canvas
from quote_engine.utils.pdf.core.layout_common import (
    BODY_SIZE,
    COLUMN_WIDTHS,
    ROW_PADDING,
    TABLE_HEADER_HEIGHT,
    TABLE_HEADERS,
    TABLE_TEXT_X,
    TABLE_W,
    TABLE_X,
)


def _column_x() -> list[float]:
    xs = []
    x = TABLE_TEXT_X
    for width in COLUMN_WIDTHS:
        xs.append(x)
        x += width
    return xs


def format_quantity(qty: Decimal, unit: str | None = None) -> str:
    qty = Decimal(str(qty))
    if qty == qty.to_integral_value():
        text = str(int(qty))
    else:
        text = format(qty.normalize(), "f")
    return f"{text} {unit}" if unit else text


def render_table_header(canvas: Canvas, y: float) -> float:
    canvas.draw_rect(TABLE_X, y, TABLE_W, TABLE_HEADER_HEIGHT, fill="header_bg", stroke="header_border")
    for index, (hx, text) in enumerate(zip(_column_x(), TABLE_HEADERS)):
        canvas.draw_text(
            text,
            hx,
            y + 5,
            width=COLUMN_WIDTHS[index],
            align="right" if index >= 2 else "left",
            font="bold",
            size=BODY_SIZE,
        )
    return y + TABLE_HEADER_HEIGHT + 5


def row_height(canvas: Canvas, item: LineItem) -> float:
    """Tallest of the wrapped name and description, measured before drawing."""
    return max(
        canvas.measure_text_height(item.display_name, COLUMN_WIDTHS[0], size=BODY_SIZE),
        canvas.measure_text_height(item.description, COLUMN_WIDTHS[1], size=BODY_SIZE),
        canvas.leading(BODY_SIZE),
    )


def render_items_table(
    canvas: Canvas,
    items: Iterable[LineItem],
    start_y: float,
    money: Callable[[Decimal], str],
    paginate: bool = False,
) -> float:
    """
    Render header + rows in input order. Returns the y below the last row.

    Without `paginate` the whole table stays on the current page even if it runs past
    the bottom margin; with it, rows that would cross the margin start a continuation
    page that repeats the header row.
    """
    col_x = _column_x()
    y = render_table_header(canvas, start_y)
    rows_on_page = 0
    for idx, item in enumerate(items):
        rh = row_height(canvas, item)
        if paginate and rows_on_page and y + rh > canvas.bottom:
            canvas.new_page()
            y = render_table_header(canvas, canvas.margin)
            rows_on_page = 0
        if idx % 2 == 0:
            canvas.draw_rect(TABLE_X, y - 2, TABLE_W, rh + 4, fill="row_alt")
        canvas.draw_text(item.display_name, col_x[0], y, width=COLUMN_WIDTHS[0], size=BODY_SIZE)
        canvas.draw_text(item.description, col_x[1], y, width=COLUMN_WIDTHS[1], size=BODY_SIZE)
        cells = (
            format_quantity(item.quantity, item.unit),
            money(Decimal(str(item.unit_price))),
            money(item.line_total),
        )
        for offset, text in enumerate(cells, start=2):
            canvas.draw_text(text, col_x[offset], y, width=COLUMN_WIDTHS[offset], align="right", size=BODY_SIZE)
        y += rh + ROW_PADDING
        rows_on_page += 1
    return y
