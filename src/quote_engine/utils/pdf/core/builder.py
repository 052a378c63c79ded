"""
PDF object builder: assembles page content streams, the Helvetica font pair, embedded
images and the info dictionary into PDF 1.4 bytes.
"""

from __future__ import annotations

import zlib
from datetime import datetime
from typing import List, Mapping, Sequence

from quote_engine.core.services.assets import RasterImage
from quote_engine.utils.pdf.core.drawing import _escape_pdf_text, _num
from quote_engine.utils.pdf.core.metrics import FONTS


def pdf_date(moment: datetime) -> str:
    stamp = moment.strftime("D:%Y%m%d%H%M%S")
    offset = moment.utcoffset()
    if offset is None:
        return stamp
    minutes = int(offset.total_seconds() // 60)
    if minutes == 0:
        return stamp + "Z"
    sign = "+" if minutes > 0 else "-"
    hours, mins = divmod(abs(minutes), 60)
    return f"{stamp}{sign}{hours:02d}'{mins:02d}'"


def _image_obj(obj_id: int, image: RasterImage) -> bytes:
    data = zlib.compress(image.pixels, 6)
    return (
        f"{obj_id} 0 obj << /Type /XObject /Subtype /Image /Width {image.width} /Height {image.height} "
        f"/ColorSpace /DeviceRGB /BitsPerComponent 8 /Filter /FlateDecode /Length {len(data)} >> stream\n".encode("ascii")
        + data
        + b"\nendstream endobj\n"
    )


def _info_obj(obj_id: int, info: Mapping[str, str]) -> bytes:
    entries = " ".join(f"/{key} ({_escape_pdf_text(value)})" for key, value in info.items())
    return f"{obj_id} 0 obj << {entries} >> endobj\n".encode("ascii")


def build_pdf_bytes(
    content_streams: List[str],
    page_size=(595, 842),
    images: Sequence[tuple[str, RasterImage]] = (),
    info: Mapping[str, str] | None = None,
) -> bytes:
    """
    Given list of page content streams (str), return ready-to-write PDF bytes.
    `images` are (resource name, image) pairs shared by all pages.
    """
    if not content_streams:
        raise ValueError("a PDF needs at least one page")
    streams_bytes = [s.encode("ascii", "ignore") for s in content_streams]

    font_objs = [
        f"3 0 obj << /Type /Font /Subtype /Type1 /BaseFont /{FONTS['regular'][1]} /Encoding /WinAnsiEncoding >> endobj\n".encode("ascii"),
        f"4 0 obj << /Type /Font /Subtype /Type1 /BaseFont /{FONTS['bold'][1]} /Encoding /WinAnsiEncoding >> endobj\n".encode("ascii"),
    ]
    info_obj = _info_obj(5, info or {})
    next_obj_id = 6

    image_objs: list[bytes] = []
    xobject_refs: list[str] = []
    for name, image in images:
        image_objs.append(_image_obj(next_obj_id, image))
        xobject_refs.append(f"/{name} {next_obj_id} 0 R")
        next_obj_id += 1

    resources = "/Font << /F1 3 0 R /F2 4 0 R >>"
    if xobject_refs:
        resources += f" /XObject << {' '.join(xobject_refs)} >>"

    width, height = page_size
    page_objs: list[bytes] = []
    pages_kids: list[int] = []
    for stream in streams_bytes:
        content_id = next_obj_id
        page_id = next_obj_id + 1
        pages_kids.append(page_id)
        page_objs.append(
            f"{content_id} 0 obj << /Length {len(stream)} >> stream\n".encode("ascii") + stream + b"\nendstream endobj\n"
        )
        page_objs.append(
            f"{page_id} 0 obj << /Type /Page /Parent 2 0 R /MediaBox [0 0 {_num(width)} {_num(height)}] "
            f"/Contents {content_id} 0 R /Resources << {resources} >> >> endobj\n".encode("ascii")
        )
        next_obj_id += 2

    kids_ref = " ".join(f"{kid} 0 R" for kid in pages_kids)
    pages_obj = f"2 0 obj << /Type /Pages /Count {len(pages_kids)} /Kids [{kids_ref}] >> endobj\n".encode("ascii")
    catalog_obj = b"1 0 obj << /Type /Catalog /Pages 2 0 R >> endobj\n"

    objs = [catalog_obj, pages_obj] + font_objs + [info_obj] + image_objs + page_objs

    header = b"%PDF-1.4\n"
    offsets = [0]
    pdf_body = bytearray()
    current_offset = len(header)
    for obj in objs:
        offsets.append(current_offset)
        pdf_body += obj
        current_offset += len(obj)

    xref_entries = ["0000000000 65535 f \n"] + [_format_xref_entry(off) for off in offsets[1:]]
    xref = ("xref\n0 %d\n" % len(offsets)).encode("ascii") + "".join(xref_entries).encode("ascii")
    startxref = len(header) + len(pdf_body)
    trailer = f"trailer << /Size {len(offsets)} /Root 1 0 R /Info 5 0 R >>\nstartxref\n{startxref}\n%%EOF\n".encode("ascii")

    return header + bytes(pdf_body) + xref + trailer


def _format_xref_entry(offset: int) -> str:
    return f"{offset:010d} 00000 n \n"
