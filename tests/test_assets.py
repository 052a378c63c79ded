import base64
import logging
import threading
from datetime import datetime

import pytest

from quote_engine.core.errors import AssetError
from quote_engine.core.models.company import Company
from quote_engine.core.models.quote import Signature
from quote_engine.core.services.assets import (
    AssetResolver,
    FileAssetStore,
    MemoryAssetStore,
    decode_raster,
    decode_signature_payload,
)


def test_decode_raster_flattens_alpha_on_white(png_bytes):
    image = decode_raster(png_bytes(size=(2, 1), color=(0, 0, 0, 0)))

    assert (image.width, image.height) == (2, 1)
    assert image.pixels == b"\xff\xff\xff" * 2


def test_decode_raster_rejects_garbage():
    with pytest.raises(AssetError):
        decode_raster(b"\x89PNG broken")
    with pytest.raises(AssetError):
        decode_raster(b"")


def test_file_store_uses_basename_only(tmp_path, png_bytes):
    (tmp_path / "logo.png").write_bytes(png_bytes())
    store = FileAssetStore(tmp_path)

    assert store.resolve("/uploads/logo.png") == (tmp_path / "logo.png").read_bytes()
    assert store.resolve("../../logo.png") is not None
    assert store.resolve("missing.png") is None


def test_memory_store_is_content_addressed(png_bytes):
    store = MemoryAssetStore()
    data = png_bytes()

    key = store.put(data)

    assert len(key) == 64
    assert store.resolve(key) == data
    assert store.resolve("nope") is None


def test_missing_logo_is_logged_not_raised(caplog):
    resolver = AssetResolver(MemoryAssetStore())

    with caplog.at_level(logging.WARNING):
        logo = resolver.resolve_logo(Company(name="Acme", logo="logo.png"))

    assert logo is None
    assert "logo.png" in caplog.text


def test_unreadable_logo_is_skipped():
    resolver = AssetResolver(MemoryAssetStore({"logo.png": b"garbage"}))

    assert resolver.resolve_logo(Company(name="Acme", logo="logo.png")) is None


def test_company_without_logo_needs_no_store():
    assert AssetResolver(None).resolve_logo(Company(name="Acme")) is None


def test_slow_store_times_out_as_missing(caplog):
    release = threading.Event()

    class SlowStore:
        def resolve(self, reference):
            release.wait(5)
            return None

    resolver = AssetResolver(SlowStore(), timeout=0.05)
    try:
        assert resolver.resolve_logo(Company(name="Acme", logo="logo.png")) is None
    finally:
        release.set()
    assert "abandoning" in caplog.text


def test_signature_payload_strips_data_uri(png_bytes):
    raw = png_bytes()
    payload = "data:image/png;base64," + base64.b64encode(raw).decode("ascii")

    assert decode_signature_payload(payload) == raw
    assert decode_signature_payload(raw) == raw


def test_signature_payload_rejects_bad_base64():
    with pytest.raises(AssetError):
        decode_signature_payload("data:image/png;base64,@@not-base64@@")


def test_bad_signature_resolves_to_none():
    signature = Signature(data="data:image/png;base64,AAAA", timestamp=datetime(2024, 3, 5))

    assert AssetResolver(None).resolve_signature(signature) is None


def test_failing_store_is_treated_as_missing(caplog):
    class BrokenStore:
        def resolve(self, reference):
            raise RuntimeError("asset service unavailable")

    for timeout in (None, 1.0):
        resolver = AssetResolver(BrokenStore(), timeout=timeout)

        assert resolver.resolve_logo(Company(name="Acme", logo="logo.png")) is None
    assert "asset service unavailable" in caplog.text


def test_decode_raster_refuses_decompression_bomb(png_header):
    with pytest.raises(AssetError):
        decode_raster(png_header(20000, 20000))


def test_decode_raster_refuses_oversized_image_before_decoding(png_header):
    with pytest.raises(AssetError, match="too large"):
        decode_raster(png_header(6000, 6000))


def test_oversized_logo_and_signature_are_skipped(png_header):
    bomb = png_header(20000, 20000)
    resolver = AssetResolver(MemoryAssetStore({"logo.png": bomb}))
    signature = Signature(
        data="data:image/png;base64," + base64.b64encode(bomb).decode("ascii"),
        timestamp=datetime(2024, 3, 5),
    )

    assert resolver.resolve_logo(Company(name="Acme", logo="logo.png")) is None
    assert resolver.resolve_signature(signature) is None
