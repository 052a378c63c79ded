from __future__ import annotations

from quote_engine.core.models.company import Company
from quote_engine.core.services.assets import RasterImage
from quote_engine.utils.pdf.core.canvas import Canvas
from quote_engine.utils.pdf.core.layout_common import (
    COMPANY_NAME_SIZE,
    COMPANY_X,
    CONTACT_SIZE,
    HEADER_TOP,
    LOGO_WIDTH,
    TITLE_GAP,
    TITLE_SIZE,
)

LOGO_MAX_HEIGHT = 80


def render_header(canvas: Canvas, company: Company, logo: RasterImage | None, top: float = HEADER_TOP) -> float:
    """
    Logo slot on the left, company name and contact lines stacked on the right.
    Returns the lowest y used by the header block.
    """
    bottom = top
    if logo is not None:
        width = min(LOGO_WIDTH, LOGO_MAX_HEIGHT / logo.aspect)
        bottom = top + canvas.draw_image(logo, canvas.margin, top, width)

    text_w = canvas.page_width - canvas.margin - COMPANY_X
    name_h = canvas.draw_text(company.name, COMPANY_X, top, width=text_w, font="bold", size=COMPANY_NAME_SIZE)
    contact_top = top + max(name_h, 25)
    contact_h = canvas.draw_text("\n".join(company.contact_lines()), COMPANY_X, contact_top, width=text_w, size=CONTACT_SIZE)
    return max(bottom, contact_top + contact_h)


def render_title(canvas: Canvas, header_bottom: float) -> float:
    y = header_bottom + TITLE_GAP
    canvas.draw_text("QUOTE", canvas.margin, y, width=canvas.content_width, align="center", font="bold", size=TITLE_SIZE)
    return y + canvas.leading(TITLE_SIZE) + 6
