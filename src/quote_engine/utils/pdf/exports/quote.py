from __future__ import annotations

import os
from pathlib import Path
from typing import Callable

from quote_engine.core.errors import RenderError
from quote_engine.core.models.quote import QuoteDocument
from quote_engine.core.services.assets import AssetStore
from quote_engine.core.services.settings import RenderSettings
from quote_engine.utils.pdf.renderers.pdf_renderer import render_quote_pdf


def export_quote_pdf(
    path: Path | str,
    quote: QuoteDocument,
    settings: RenderSettings | None = None,
    asset_store: AssetStore | None = None,
    clock: Callable | None = None,
) -> Path:
    """
    Render and write the quote. The file only appears once the whole PDF is ready.
    """
    target = Path(path)
    document = render_quote_pdf(quote, settings=settings, asset_store=asset_store, clock=clock)
    tmp = target.with_name(target.name + ".part")
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        tmp.write_bytes(document.data)
        os.replace(tmp, target)
    except OSError as exc:
        tmp.unlink(missing_ok=True)
        raise RenderError(f"Cannot write {target}: {exc}") from exc
    return target
