"""
Raster asset lookup and decoding for logos and signatures.

Stores return encoded bytes (PNG, JPEG, ...); the resolver decodes them with Pillow
into flat RGB pixels ready for PDF embedding. Every failure on this path is logged
and reported as "no image": a missing logo never aborts a quote.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import io
import logging
import re
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Protocol

from PIL import Image, UnidentifiedImageError

from quote_engine.core.errors import AssetError
from quote_engine.core.models.company import Company
from quote_engine.core.models.quote import Signature

logger = logging.getLogger(__name__)

_DATA_URI_PREFIX = re.compile(r"^data:image/[\w.+-]+;base64,", re.IGNORECASE)

# Logos and signatures are small; anything bigger is refused before decoding.
MAX_IMAGE_PIXELS = 25_000_000


@dataclass(frozen=True)
class RasterImage:
    width: int
    height: int
    pixels: bytes  # 8-bit RGB, row-major, no padding
    digest: str

    @property
    def aspect(self) -> float:
        return self.height / self.width


class AssetStore(Protocol):
    def resolve(self, reference: str) -> bytes | None:
        ...


class FileAssetStore:
    """Path-addressed store: references resolve to `root / basename(reference)`."""

    def __init__(self, root: Path | str):
        self.root = Path(root)

    def resolve(self, reference: str) -> bytes | None:
        name = Path(str(reference).replace("\\", "/")).name
        if not name:
            return None
        path = self.root / name
        if not path.is_file():
            logger.warning("Asset not found at path: %s", path)
            return None
        return path.read_bytes()


class MemoryAssetStore:
    """In-memory store; `put` addresses content by its SHA-256 digest."""

    def __init__(self, assets: Mapping[str, bytes] | None = None):
        self._assets = dict(assets or {})

    def put(self, data: bytes, reference: str | None = None) -> str:
        key = reference or hashlib.sha256(data).hexdigest()
        self._assets[key] = bytes(data)
        return key

    def resolve(self, reference: str) -> bytes | None:
        return self._assets.get(reference)


def decode_raster(data: bytes) -> RasterImage:
    """Decode any Pillow-readable image into RGB, flattening transparency on white."""
    if not data:
        raise AssetError("empty image payload")
    try:
        with Image.open(io.BytesIO(data)) as img:
            if img.width * img.height > MAX_IMAGE_PIXELS:
                raise AssetError(f"image is too large ({img.width}x{img.height} pixels)")
            img.load()
            if img.mode in ("RGBA", "LA") or (img.mode == "P" and "transparency" in img.info):
                rgba = img.convert("RGBA")
                flat = Image.new("RGB", rgba.size, (255, 255, 255))
                flat.paste(rgba, mask=rgba.getchannel("A"))
            else:
                flat = img.convert("RGB")
            width, height = flat.size
            pixels = flat.tobytes()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
        raise AssetError(f"cannot decode image: {exc}") from exc
    if width <= 0 or height <= 0:
        raise AssetError("image has no pixels")
    return RasterImage(width=width, height=height, pixels=pixels, digest=hashlib.sha256(data).hexdigest())


def decode_signature_payload(payload: str | bytes) -> bytes:
    """Strip a `data:image/...;base64,` prefix and base64-decode; raw bytes pass through."""
    if isinstance(payload, (bytes, bytearray)):
        return bytes(payload)
    text = _DATA_URI_PREFIX.sub("", str(payload).strip())
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise AssetError(f"signature is not valid base64: {exc}") from exc


class AssetResolver:
    """
    Resolves the images of one render call.

    `timeout` bounds a single store lookup (seconds); a store that is slower is
    treated as having no such asset.
    """

    def __init__(self, store: AssetStore | None, timeout: float | None = None):
        self.store = store
        self.timeout = timeout

    def lookup(self, reference: str) -> bytes | None:
        if self.store is None:
            return None
        if self.timeout is None:
            return self._resolve(reference)
        executor = ThreadPoolExecutor(max_workers=1)
        try:
            future = executor.submit(self._resolve, reference)
            return future.result(timeout=self.timeout)
        except FutureTimeout as exc:
            # The worker cannot be interrupted; it is left to finish on its own.
            logger.warning("Asset lookup %r still running after %ss, abandoning it", reference, self.timeout)
            raise AssetError(f"lookup of {reference!r} timed out after {self.timeout}s") from exc
        finally:
            executor.shutdown(wait=False)

    def _resolve(self, reference: str) -> bytes | None:
        try:
            return self.store.resolve(reference)
        except Exception as exc:
            raise AssetError(f"asset store failed for {reference!r}: {exc}") from exc

    def resolve_logo(self, company: Company) -> RasterImage | None:
        if not company.logo:
            return None
        try:
            data = self.lookup(company.logo)
            if data is None:
                logger.warning("Company logo %r not found", company.logo)
                return None
            return decode_raster(data)
        except AssetError as exc:
            logger.warning("Skipping company logo %r: %s", company.logo, exc)
        return None

    def resolve_signature(self, signature: Signature | None) -> RasterImage | None:
        if signature is None or not signature.data:
            return None
        try:
            return decode_raster(decode_signature_payload(signature.data))
        except AssetError as exc:
            logger.warning("Skipping signature image: %s", exc)
            return None
