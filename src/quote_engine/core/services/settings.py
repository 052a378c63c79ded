from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path

from quote_engine.core.errors import ValidationError

logger = logging.getLogger(__name__)

SETTINGS_ENV = "QUOTE_ENGINE_SETTINGS"
ASSET_DIR_ENV = "QUOTE_ENGINE_ASSET_DIR"


@dataclass(frozen=True)
class RenderSettings:
    """Per-document rendering configuration. Immutable, safe to share between renders."""

    page_width: float = 595
    page_height: float = 842
    margin: float = 50
    currency_symbol: str = "$"
    date_format: str = "%m/%d/%Y"
    quote_validity_days: int = 30
    paginate_rows: bool = False
    asset_timeout: float | None = 5.0
    asset_dir: str | None = None

    def __post_init__(self) -> None:
        if self.page_width <= 0 or self.page_height <= 0:
            raise ValidationError("page size must be positive")
        if self.margin < 0 or self.margin * 2 >= min(self.page_width, self.page_height):
            raise ValidationError(f"margin {self.margin} does not fit the page")
        if self.quote_validity_days < 0:
            raise ValidationError("quote_validity_days cannot be negative")
        if self.asset_timeout is not None and self.asset_timeout <= 0:
            raise ValidationError("asset_timeout must be positive or null")

    @property
    def page_size(self) -> tuple[float, float]:
        return (self.page_width, self.page_height)


def load_settings(path: Path | str | None = None) -> RenderSettings:
    """
    Read settings from a JSON object file; missing keys keep their defaults.

    Lookup order: explicit path, then $QUOTE_ENGINE_SETTINGS. $QUOTE_ENGINE_ASSET_DIR
    overrides `asset_dir` in either case.
    """
    target = path or os.environ.get(SETTINGS_ENV)
    data: dict = {}
    if target:
        target = Path(target)
        try:
            raw = json.loads(target.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Cannot read settings from %s, using defaults: %s", target, exc)
            raw = {}
        if isinstance(raw, dict):
            data = raw
        else:
            logger.warning("Settings file %s is not a JSON object, using defaults", target)

    known = {f.name for f in fields(RenderSettings)}
    unknown = sorted(set(data) - known)
    if unknown:
        logger.debug("Ignoring unknown settings keys: %s", ", ".join(unknown))
    try:
        settings = RenderSettings(**{k: v for k, v in data.items() if k in known})
    except TypeError as exc:
        raise ValidationError(f"Invalid settings: {exc}") from exc

    asset_dir = os.environ.get(ASSET_DIR_ENV)
    if asset_dir:
        settings = replace(settings, asset_dir=asset_dir)
    return settings
