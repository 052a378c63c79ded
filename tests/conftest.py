import io
import struct
import sys
import zlib
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path

import pytest

# Ensure `src` is importable when running tests from repo root.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@pytest.fixture
def png_bytes():
    from PIL import Image

    def _make(size=(40, 20), mode="RGBA", color=(200, 30, 30, 255)):
        buf = io.BytesIO()
        Image.new(mode, size, color).save(buf, format="PNG")
        return buf.getvalue()

    return _make


@pytest.fixture
def png_header():
    """PNG whose IHDR declares width x height but carries no real pixel data."""

    def chunk(kind, data):
        return struct.pack(">I", len(data)) + kind + data + struct.pack(">I", zlib.crc32(kind + data) & 0xFFFFFFFF)

    def _make(width, height):
        ihdr = struct.pack(">IIBBBBB", width, height, 8, 2, 0, 0, 0)
        return b"\x89PNG\r\n\x1a\n" + chunk(b"IHDR", ihdr) + chunk(b"IDAT", zlib.compress(b"")) + chunk(b"IEND", b"")

    return _make


@pytest.fixture
def company():
    from quote_engine.core.models.company import Company

    return Company(
        name="Acme Fencing LLC",
        logo="logo.png",
        phone="555-0100",
        email="office@acme.test",
        website="acme.test",
    )


@pytest.fixture
def sample_items():
    from quote_engine.core.models.quote import LineItem

    return (
        LineItem(name="Fence Panel", quantity=Decimal("10"), unit_price=Decimal("25.00"), unit="pcs"),
        LineItem(
            name="Install",
            quantity=Decimal("1"),
            unit_price=Decimal("150.00"),
            description="Labor for setting posts and hanging panels",
        ),
    )


@pytest.fixture
def make_quote(company, sample_items):
    from quote_engine.core.models.quote import AmountKind, DiscountSpec, QuoteDocument

    def _make(**overrides):
        fields = dict(
            number="Q-1001",
            created_at=datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc),
            company=company,
            items=sample_items,
            client_name="Jane Client",
            client_email="jane@example.com",
            client_phone="555-0199",
            client_address="12 Oak Street, Springfield",
            discount=DiscountSpec(AmountKind.PERCENTAGE, Decimal("10")),
            tax_rate=Decimal("8"),
        )
        fields.update(overrides)
        return QuoteDocument(**fields)

    return _make


@pytest.fixture
def fixed_clock():
    return lambda: datetime(2024, 3, 2, 12, 0, tzinfo=timezone.utc)
