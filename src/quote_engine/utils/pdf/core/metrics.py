"""
Advance widths of the standard Helvetica pair (AFM, 1/1000 em) for printable ASCII.
Text is normalized to ASCII before drawing, so these tables cover everything we emit.
"""

from __future__ import annotations

# Widths for character codes 32..126 in order.
_HELVETICA = (
    278, 278, 355, 556, 556, 889, 667, 191, 333, 333, 389, 584, 278, 333, 278, 278,
    556, 556, 556, 556, 556, 556, 556, 556, 556, 556, 278, 278, 584, 584, 584, 556,
    1015, 667, 667, 722, 722, 667, 611, 778, 722, 278, 500, 667, 556, 833, 722, 778,
    667, 778, 722, 667, 611, 722, 667, 944, 667, 667, 611, 278, 278, 278, 469, 556,
    333, 556, 556, 500, 556, 556, 278, 556, 556, 222, 222, 500, 222, 833, 556, 556,
    556, 556, 333, 500, 278, 556, 500, 722, 500, 500, 500, 334, 260, 334, 584,
)

_HELVETICA_BOLD = (
    278, 333, 474, 556, 556, 889, 722, 238, 333, 333, 389, 584, 278, 333, 278, 278,
    556, 556, 556, 556, 556, 556, 556, 556, 556, 556, 333, 333, 584, 584, 584, 611,
    975, 722, 722, 722, 722, 667, 611, 778, 722, 278, 556, 722, 611, 833, 722, 778,
    667, 778, 722, 667, 611, 722, 667, 944, 667, 667, 611, 333, 278, 333, 584, 556,
    333, 556, 611, 556, 611, 556, 333, 611, 611, 278, 278, 556, 278, 889, 611, 611,
    611, 611, 389, 556, 333, 611, 556, 778, 556, 556, 500, 389, 280, 389, 584,
)

FONTS = {
    "regular": ("/F1", "Helvetica", _HELVETICA),
    "bold": ("/F2", "Helvetica-Bold", _HELVETICA_BOLD),
}

DEFAULT_WIDTH = 556


def resource_name(font: str) -> str:
    return FONTS[font][0]


def char_width(ch: str, font: str = "regular") -> int:
    code = ord(ch)
    if 32 <= code <= 126:
        return FONTS[font][2][code - 32]
    return DEFAULT_WIDTH


def text_width(text: str, font: str, size: float) -> float:
    return sum(char_width(ch, font) for ch in text) * size / 1000.0
