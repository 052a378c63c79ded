import builtins
from datetime import datetime, timedelta, timezone

from quote_engine.utils import qr
from quote_engine.utils.pdf.core.builder import pdf_date
from quote_engine.utils.pdf.core.drawing import _draw_qr, _escape_pdf_text, _num
from quote_engine.utils.pdf.core.layout_common import color
from quote_engine.utils.pdf.sections.items_table import format_quantity


def test_make_qr_matrix_without_qrcode(monkeypatch):
    real_import = builtins.__import__

    def fake_import(name, *args, **kwargs):
        if name == "qrcode":
            raise ImportError("missing qrcode")
        return real_import(name, *args, **kwargs)

    monkeypatch.setattr(builtins, "__import__", fake_import)

    assert qr.make_qr_matrix("https://quotes.test/a/1") is None


def test_make_qr_matrix_is_square():
    matrix = qr.make_qr_matrix("https://quotes.test/a/1")

    assert matrix is not None
    assert len(matrix) == len(matrix[0]) > 20


def test_escape_and_ascii_fold():
    assert _escape_pdf_text("Café (main) \\ side") == "Cafe \\(main\\) \\\\ side"


def test_number_formatting():
    assert _num(10) == "10"
    assert _num(12.5) == "12.5"
    assert _num(-0.001) == "0"


def test_pdf_date_offsets():
    moment = datetime(2024, 3, 2, 12, 0, 5)

    assert pdf_date(moment) == "D:20240302120005"
    assert pdf_date(moment.replace(tzinfo=timezone.utc)) == "D:20240302120005Z"
    assert pdf_date(moment.replace(tzinfo=timezone(timedelta(hours=-5, minutes=-30)))) == "D:20240302120005-05'30'"


def test_color_lookup():
    assert color("black") == "0 0 0"
    assert color("#ff0000") == "1.000 0.000 0.000"
    assert color("muted") == "0.4 0.4 0.4"


def test_format_quantity():
    assert format_quantity(10, "pcs") == "10 pcs"
    assert format_quantity("2.50") == "2.5"


def test_qr_runs_merge_into_one_rectangle():
    ops = _draw_qr([[True, True, False, True], [False, False, False, False]], 100, 700, 5)

    assert ops == "100 695 10 5 re f\n115 695 5 5 re f\n"
    assert _draw_qr(None, 0, 0, 5) == ""


def test_typographic_punctuation_is_folded():
    assert _escape_pdf_text("Client’s “final” price – net") == "Client's \"final\" price - net"
