import json

from quote_engine.app import main


def _write_quote(tmp_path, **overrides):
    data = {
        "number": "Q-3001",
        "createdAt": "2024-03-01T09:30:00Z",
        "clientName": "Jane Client",
        "company": {"name": "Acme Fencing LLC"},
        "items": [{"name": "Fence Panel", "quantity": 10, "unitPrice": 25}],
        "taxRate": 8,
    }
    data.update(overrides)
    path = tmp_path / "quote.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_writes_pdf_next_to_input(tmp_path):
    source = _write_quote(tmp_path)

    assert main([str(source)]) == 0
    assert (tmp_path / "quote-Q-3001.pdf").read_bytes().startswith(b"%PDF-1.4")


def test_explicit_output_and_flags(tmp_path):
    source = _write_quote(tmp_path)
    target = tmp_path / "pdf" / "out.pdf"

    code = main([str(source), "-o", str(target), "--assets", str(tmp_path), "--paginate-rows", "-v"])

    assert code == 0
    assert target.exists()


def test_invalid_quote_exit_code(tmp_path):
    source = _write_quote(tmp_path, taxRate=-1)

    assert main([str(source), "-o", str(tmp_path / "out.pdf")]) == 2
    assert not (tmp_path / "out.pdf").exists()


def test_missing_input_exit_code(tmp_path):
    assert main([str(tmp_path / "nope.json")]) == 1
