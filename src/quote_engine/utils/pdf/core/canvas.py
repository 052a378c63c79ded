from __future__ import annotations

from typing import Mapping, Sequence

from quote_engine.core.errors import RenderError
from quote_engine.core.services.assets import RasterImage, decode_raster
from quote_engine.utils.pdf.core import metrics
from quote_engine.utils.pdf.core.builder import build_pdf_bytes
from quote_engine.utils.pdf.core.drawing import (
    _draw_image,
    _draw_qr,
    _draw_rect,
    _draw_text,
    _fill_color,
    _normalize_ascii,
    _stroke_color,
)
from quote_engine.utils.pdf.core.layout_common import MARGIN, PAGE_H, PAGE_W
from quote_engine.utils.pdf.core.layout_common import color as resolve_color

BASELINE_RATIO = 0.8


class Canvas:
    """
    Drawing surface for one document.

    Page coordinates use a top-left origin; every operation is appended to the current
    page's content stream and the PDF only materializes in `finish()`. Instances hold
    all mutable state of a render, so each call must create its own.
    """

    def __init__(self, page_size=(PAGE_W, PAGE_H), margin: float = MARGIN, info: Mapping[str, str] | None = None):
        self.page_width, self.page_height = page_size
        self.margin = margin
        self.info = dict(info or {})
        self._pages: list[list[str]] = [[]]
        self._images: dict[str, tuple[str, RasterImage]] = {}
        self._pen: tuple[float, float] | None = None
        self._finished = False

    # -------- Geometry --------
    @property
    def page_count(self) -> int:
        return len(self._pages)

    @property
    def content_width(self) -> float:
        return self.page_width - 2 * self.margin

    @property
    def bottom(self) -> float:
        return self.page_height - self.margin

    @staticmethod
    def leading(size: float) -> float:
        return size + 2

    # -------- Measuring --------
    def text_width(self, text: str, font: str = "regular", size: float = 10) -> float:
        return metrics.text_width(_normalize_ascii(text), font, size)

    def wrap_text(self, text: str | None, width: float | None, font: str = "regular", size: float = 10) -> list[str]:
        """Split text into lines no wider than `width`; explicit newlines are kept."""
        text = _normalize_ascii(text or "")
        if not text.strip():
            return []
        lines: list[str] = []
        for paragraph in text.replace("\r\n", "\n").split("\n"):
            if width is None:
                lines.append(paragraph)
                continue
            lines.extend(self._wrap_paragraph(paragraph, width, font, size))
        return lines

    def _wrap_paragraph(self, paragraph: str, width: float, font: str, size: float) -> list[str]:
        words = paragraph.split()
        if not words:
            return [""]
        lines: list[str] = []
        current = ""
        for word in words:
            while len(word) > 1 and self.text_width(word, font, size) > width:
                cut = 1
                while cut < len(word) and self.text_width(word[: cut + 1], font, size) <= width:
                    cut += 1
                if current:
                    lines.append(current)
                    current = ""
                lines.append(word[:cut])
                word = word[cut:]
            candidate = f"{current} {word}" if current else word
            if self.text_width(candidate, font, size) <= width:
                current = candidate
            else:
                lines.append(current)
                current = word
        lines.append(current)
        return lines

    def measure_text_height(self, text: str | None, width: float | None, font: str = "regular", size: float = 10) -> float:
        return len(self.wrap_text(text, width, font, size)) * self.leading(size)

    # -------- Drawing --------
    def _emit(self, op: str) -> None:
        if self._finished:
            raise RenderError("canvas already finished")
        self._pages[-1].append(op)

    def draw_text(
        self,
        text: str | None,
        x: float | None = None,
        y: float | None = None,
        width: float | None = None,
        align: str = "left",
        font: str = "regular",
        size: float = 10,
        color: str = "black",
        continued: bool = False,
        height: float | None = None,
    ) -> float:
        """
        Draw (wrapped) text with its first line's top edge at y. Returns the height used.

        With `continued=True` the pen stays after the last glyph, and a following call
        with x and y omitted continues the same line.
        """
        if x is None or y is None:
            if self._pen is None:
                raise RenderError("draw_text needs coordinates unless continuing a run")
            x, y = self._pen
        self._pen = None
        lines = self.wrap_text(text, width, font, size)
        leading = self.leading(size)
        if height is not None:
            lines = lines[: max(0, int(height // leading))]
        if not lines:
            if continued:
                self._pen = (x, y)
            return 0.0

        font_ref = metrics.resource_name(font)
        self._emit(_fill_color(resolve_color(color)))
        end_x = x
        for index, line in enumerate(lines):
            line_w = self.text_width(line, font, size)
            line_x = x
            if width is not None and align == "right":
                line_x = x + width - line_w
            elif width is not None and align == "center":
                line_x = x + (width - line_w) / 2
            baseline = y + index * leading + size * BASELINE_RATIO
            self._emit(_draw_text(line, line_x, self.page_height - baseline, font_ref, size))
            end_x = line_x + line_w
        if continued:
            self._pen = (end_x, y + (len(lines) - 1) * leading)
        return len(lines) * leading

    def draw_rect(self, x: float, y: float, w: float, h: float, fill: str | None = None, stroke: str | None = None) -> None:
        if fill is None and stroke is None:
            stroke = "black"
        if fill is not None:
            self._emit(_fill_color(resolve_color(fill)))
        if stroke is not None:
            self._emit(_stroke_color(resolve_color(stroke)))
        self._emit(_draw_rect(x, self.page_height - y - h, w, h, stroke=stroke is not None, fill=fill is not None))

    def draw_image(self, image: bytes | RasterImage, x: float, y: float, width: float, height: float | None = None) -> float:
        """Draw an image scaled to `width`; raises AssetError for undecodable bytes."""
        if not isinstance(image, RasterImage):
            image = decode_raster(image)
        entry = self._images.get(image.digest)
        if entry is None:
            entry = (f"Im{len(self._images) + 1}", image)
            self._images[image.digest] = entry
        h = height if height is not None else width * image.aspect
        self._emit(_draw_image(entry[0], x, self.page_height - y - h, width, h))
        return h

    def draw_qr(self, matrix: Sequence[Sequence[bool]] | None, x: float, y: float, size: float) -> None:
        if not matrix:
            return
        module = size / max(len(matrix), len(matrix[0]))
        self._emit(_fill_color(resolve_color("black")))
        self._emit(_draw_qr(matrix, x, self.page_height - y, module))

    # -------- Pages --------
    def new_page(self) -> None:
        if self._finished:
            raise RenderError("canvas already finished")
        self._pages.append([])
        self._pen = None

    def finish(self) -> bytes:
        """Assemble the PDF. May be called exactly once."""
        if self._finished:
            raise RenderError("finish() called twice")
        self._finished = True
        try:
            return build_pdf_bytes(
                ["".join(ops) for ops in self._pages],
                page_size=(self.page_width, self.page_height),
                images=list(self._images.values()),
                info=self.info,
            )
        except (ValueError, MemoryError) as exc:
            raise RenderError(f"cannot assemble PDF: {exc}") from exc
