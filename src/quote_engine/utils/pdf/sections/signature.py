from __future__ import annotations

from quote_engine.core.models.quote import QuoteDocument
from quote_engine.core.services.assets import RasterImage
from quote_engine.utils.pdf.core.canvas import Canvas
from quote_engine.utils.pdf.core.layout_common import BODY_SIZE, SECTION_TITLE_SIZE, SIGNATURE_WIDTH, SMALL_SIZE

AGREEMENT_TEXT = (
    "By signing below, you agree to the terms and conditions outlined in this quote "
    "and authorize the work to proceed."
)
SIGNATURE_MAX_HEIGHT = 120


def render_signature(canvas: Canvas, quote: QuoteDocument, image: RasterImage | None, date_format: str) -> None:
    """
    Authorization page. The signer line, date and audit note only depend on the
    signature metadata, so they are drawn even when the image could not be decoded.
    """
    signature = quote.signature
    if signature is None:
        return
    left, width = canvas.margin, canvas.content_width
    y = left
    y += canvas.draw_text("Authorization", left, y, width=width, align="center", font="bold", size=SECTION_TITLE_SIZE) + 12
    y += canvas.draw_text(AGREEMENT_TEXT, left, y, width=width, align="center", size=BODY_SIZE) + 24

    if image is not None:
        img_w = min(SIGNATURE_WIDTH, SIGNATURE_MAX_HEIGHT / image.aspect)
        y += canvas.draw_image(image, left + (width - img_w) / 2, y, img_w) + 6

    label = "Signed by: "
    name = quote.signer_name
    line_w = canvas.text_width(label, "bold", BODY_SIZE) + canvas.text_width(name, "regular", BODY_SIZE)
    canvas.draw_text(label, left + (width - line_w) / 2, y, font="bold", size=BODY_SIZE, continued=True)
    y += canvas.draw_text(name, size=BODY_SIZE)
    y += canvas.draw_text(f"Date: {signature.timestamp.strftime(date_format)}", left, y, width=width, align="center", size=BODY_SIZE)
    y += 6
    canvas.draw_text(
        f"Document signed electronically. IP Address: {signature.ip_address}",
        left,
        y,
        width=width,
        align="center",
        size=SMALL_SIZE,
        color="muted",
    )
