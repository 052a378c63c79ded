from __future__ import annotations

from datetime import timedelta
from typing import Iterable, Sequence

from quote_engine.core.models.quote import QuoteDocument
from quote_engine.utils.pdf.core.canvas import Canvas
from quote_engine.utils.pdf.core.layout_common import (
    BODY_SIZE,
    BOX_HEADER_GAP,
    BOX_HEIGHT,
    BOX_PADDING,
    CLIENT_BOX,
    DETAILS_BOX,
    QR_SIZE,
)


def build_detail_rows(quote: QuoteDocument, date_format: str, validity_days: int) -> list[tuple[str, str]]:
    created = quote.created_at
    valid_until = created + timedelta(days=validity_days)
    return [
        ("Quote #:", quote.number),
        ("Date:", created.strftime(date_format)),
        ("Valid Until:", valid_until.strftime(date_format)),
    ]


def render_client_box(canvas: Canvas, client_lines: Iterable[str], y: float) -> None:
    x, w = CLIENT_BOX
    canvas.draw_rect(x, y, w, BOX_HEIGHT, stroke="border")
    canvas.draw_text("QUOTE TO:", x + BOX_PADDING, y + BOX_PADDING, font="bold", size=BODY_SIZE)
    # overflow is clipped to the box
    canvas.draw_text(
        "\n".join(client_lines),
        x + BOX_PADDING,
        y + BOX_HEADER_GAP + BOX_PADDING,
        width=w - 2 * BOX_PADDING,
        size=BODY_SIZE,
        height=BOX_HEIGHT - BOX_HEADER_GAP - 2 * BOX_PADDING,
    )


def render_details_box(
    canvas: Canvas,
    rows: Sequence[tuple[str, str]],
    y: float,
    qr_matrix=None,
) -> None:
    x, w = DETAILS_BOX
    canvas.draw_rect(x, y, w, BOX_HEIGHT, stroke="border")
    canvas.draw_text("QUOTE DETAILS:", x + BOX_PADDING, y + BOX_PADDING, font="bold", size=BODY_SIZE)

    row_y = y + BOX_HEADER_GAP + BOX_PADDING
    leading = canvas.leading(BODY_SIZE)
    if qr_matrix:
        canvas.draw_qr(qr_matrix, x + w - QR_SIZE - BOX_PADDING, y + BOX_HEIGHT - QR_SIZE - BOX_PADDING, QR_SIZE)
    for label, value in rows:
        if row_y + leading > y + BOX_HEIGHT - BOX_PADDING:
            break
        canvas.draw_text(f"{label} ", x + BOX_PADDING, row_y, font="bold", size=BODY_SIZE, continued=True)
        canvas.draw_text(value, size=BODY_SIZE)
        row_y += leading
