"""
QR matrix for the quote acceptance link, drawn in the details box.
`qrcode` is imported lazily; without it the box is simply rendered without a code.
"""

from __future__ import annotations

import logging
from typing import Optional

logger = logging.getLogger(__name__)

QrMatrix = tuple[tuple[bool, ...], ...]


def make_qr_matrix(link: str, border: int = 1) -> Optional[QrMatrix]:
    """Module matrix for `link` (True = dark), including a quiet zone of `border` modules."""
    try:
        import qrcode
    except ImportError:
        logger.debug("qrcode is not installed, acceptance link %s drawn without QR", link)
        return None

    code = qrcode.QRCode(border=border, box_size=1, error_correction=qrcode.ERROR_CORRECT_M)
    code.add_data(link)
    code.make(fit=True)
    return tuple(tuple(bool(cell) for cell in row) for row in code.get_matrix())
