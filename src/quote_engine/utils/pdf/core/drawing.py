"""
PDF content-stream operators. Coordinates here are native PDF space (origin bottom-left);
the Canvas converts from page space before calling in.
"""

from __future__ import annotations

import unicodedata
from typing import Sequence


def _num(value: float) -> str:
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


PUNCTUATION = str.maketrans(
    {
        "\u2018": "'",
        "\u2019": "'",
        "\u201c": '"',
        "\u201d": '"',
        "\u2013": "-",
        "\u2014": "-",
        "\u2022": "*",
        "\u2026": "...",
        "\u00a0": " ",
    }
)


def _normalize_ascii(text: str) -> str:
    """Fold quotes, dashes and diacritics to ASCII; Helvetica is only set up for that range."""
    normalized = unicodedata.normalize("NFKD", str(text).translate(PUNCTUATION))
    return normalized.encode("ascii", "ignore").decode("ascii")


def _escape_pdf_text(text: str) -> str:
    safe = _normalize_ascii(text)
    for char in ("\\", "(", ")"):
        safe = safe.replace(char, "\\" + char)
    return safe


def _draw_text(text: str, x: float, y: float, font: str, size: float) -> str:
    """Single text run with its baseline at (x, y)."""
    safe = _escape_pdf_text(text)
    return f"BT {font} {_num(size)} Tf {_num(x)} {_num(y)} Td ({safe}) Tj ET\n"


def _fill_color(rgb: str) -> str:
    return f"{rgb} rg\n"


def _stroke_color(rgb: str) -> str:
    return f"{rgb} RG\n"


def _draw_rect(x: float, y: float, w: float, h: float, stroke: bool = True, fill: bool = False) -> str:
    if fill and stroke:
        op = "B"
    elif fill:
        op = "f"
    else:
        op = "S"
    return f"{_num(x)} {_num(y)} {_num(w)} {_num(h)} re {op}\n"


def _draw_image(name: str, x: float, y: float, w: float, h: float) -> str:
    """Place image XObject `name` scaled to w x h with its lower-left corner at (x, y)."""
    return f"q {_num(w)} 0 0 {_num(h)} {_num(x)} {_num(y)} cm /{name} Do Q\n"


def _draw_qr(matrix: Sequence[Sequence[bool]] | None, x: float, y: float, size: float) -> str:
    """
    Dark modules as filled rectangles, one per horizontal run of adjacent modules.
    (x, y) is the top-left corner in PDF space.
    """
    ops = []
    for r, row in enumerate(matrix or ()):
        c = 0
        while c < len(row):
            if not row[c]:
                c += 1
                continue
            start = c
            while c < len(row) and row[c]:
                c += 1
            ops.append(_draw_rect(x + start * size, y - (r + 1) * size, (c - start) * size, size, stroke=False, fill=True))
    return "".join(ops)
