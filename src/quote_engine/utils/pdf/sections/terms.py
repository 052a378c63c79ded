from __future__ import annotations

from quote_engine.utils.pdf.core.canvas import Canvas
from quote_engine.utils.pdf.core.layout_common import BODY_SIZE, SECTION_TITLE_SIZE


def render_terms(canvas: Canvas, terms: str) -> None:
    """
    Terms and conditions, starting at the top of the current page.
    Lines are wrapped up front; whatever does not fit continues on a new page.
    """
    y = canvas.margin
    canvas.draw_text(
        "Terms and Conditions",
        canvas.margin,
        y,
        width=canvas.content_width,
        align="center",
        font="bold",
        size=SECTION_TITLE_SIZE,
    )
    y += canvas.leading(SECTION_TITLE_SIZE) + 12

    leading = canvas.leading(BODY_SIZE)
    for line in canvas.wrap_text(terms.strip(), canvas.content_width, size=BODY_SIZE):
        if y + leading > canvas.bottom:
            canvas.new_page()
            y = canvas.margin
        canvas.draw_text(line, canvas.margin, y, size=BODY_SIZE)
        y += leading
