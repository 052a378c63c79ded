from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from quote_engine.core.calculations.pricing_engine import PricingBreakdown, PricingEngine
from quote_engine.core.errors import QuoteEngineError, RenderError
from quote_engine.core.models.quote import QuoteDocument, RenderedDocument
from quote_engine.core.services.assets import AssetResolver, AssetStore, FileAssetStore
from quote_engine.core.services.settings import RenderSettings
from quote_engine.utils.pdf.core.builder import pdf_date
from quote_engine.utils.pdf.core.canvas import Canvas
from quote_engine.utils.pdf.core.layout_common import BOX_HEIGHT, SUMMARY_GAP, TABLE_GAP
from quote_engine.utils.pdf.renderers.flow import FRESH_PAGE_STATES, FlowState, plan_flow
from quote_engine.utils.pdf.sections.boxes import build_detail_rows, render_client_box, render_details_box
from quote_engine.utils.pdf.sections.header import render_header, render_title
from quote_engine.utils.pdf.sections.items_table import render_items_table
from quote_engine.utils.pdf.sections.signature import render_signature
from quote_engine.utils.pdf.sections.summary import (
    build_payment_lines,
    build_summary_rows,
    render_payment_terms,
    render_summary,
    summary_height,
)
from quote_engine.utils.pdf.sections.terms import render_terms
from quote_engine.utils.qr import make_qr_matrix

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now().astimezone()


def document_info(quote: QuoteDocument, rendered_at: datetime) -> dict[str, str]:
    return {
        "Title": f"Quote {quote.number}",
        "Author": quote.company.name,
        "Subject": "Quote Document",
        "Keywords": "quote, estimate, proposal",
        "Creator": "quote-engine",
        "CreationDate": pdf_date(rendered_at),
    }


def render_quote_pdf(
    quote: QuoteDocument,
    settings: RenderSettings | None = None,
    asset_store: AssetStore | None = None,
    clock: Callable[[], datetime] | None = None,
) -> RenderedDocument:
    """
    Render `quote` into a complete PDF.

    Totals are validated before anything is drawn (ValidationError). Missing or broken
    images are skipped. Any other failure surfaces as RenderError and no bytes are
    returned.
    """
    settings = settings or RenderSettings()
    engine = PricingEngine(settings.currency_symbol)
    totals = engine.summarize(quote)

    if asset_store is None and settings.asset_dir:
        asset_store = FileAssetStore(settings.asset_dir)
    resolver = AssetResolver(asset_store, timeout=settings.asset_timeout)
    rendered_at = (clock or _now)()

    logger.debug("Rendering quote %s (%d items)", quote.number, len(quote.items))
    try:
        data = _render(quote, totals, engine, settings, resolver, rendered_at)
    except QuoteEngineError:
        raise
    except Exception as exc:
        raise RenderError(f"Rendering quote {quote.number} failed: {exc}") from exc
    logger.info("Rendered quote %s: %d bytes", quote.number, len(data))
    return RenderedDocument(data)


def _render(
    quote: QuoteDocument,
    totals: PricingBreakdown,
    engine: PricingEngine,
    settings: RenderSettings,
    resolver: AssetResolver,
    rendered_at: datetime,
) -> bytes:
    canvas = Canvas(settings.page_size, settings.margin, info=document_info(quote, rendered_at))
    for state in plan_flow(quote):
        if state in FRESH_PAGE_STATES:
            canvas.new_page()
        if state is FlowState.MAIN:
            _render_main(canvas, quote, totals, engine, settings, resolver)
        elif state is FlowState.TERMS:
            render_terms(canvas, quote.template.terms_and_conditions)
        elif state is FlowState.SIGNATURE:
            image = resolver.resolve_signature(quote.signature)
            render_signature(canvas, quote, image, settings.date_format)
    logger.debug("Quote %s laid out on %d page(s)", quote.number, canvas.page_count)
    return canvas.finish()


def _render_main(
    canvas: Canvas,
    quote: QuoteDocument,
    totals: PricingBreakdown,
    engine: PricingEngine,
    settings: RenderSettings,
    resolver: AssetResolver,
) -> None:
    logo = resolver.resolve_logo(quote.company)
    header_bottom = render_header(canvas, quote.company, logo)
    y = render_title(canvas, header_bottom)

    render_client_box(canvas, quote.client_lines(), y)
    qr_matrix = make_qr_matrix(quote.acceptance_url) if quote.acceptance_url else None
    detail_rows = build_detail_rows(quote, settings.date_format, settings.quote_validity_days)
    render_details_box(canvas, detail_rows, y, qr_matrix)
    y += BOX_HEIGHT + TABLE_GAP

    money = engine.format_currency
    y = render_items_table(canvas, quote.items, y, money, paginate=settings.paginate_rows)

    summary_rows = build_summary_rows(totals, money)
    payment_lines = build_payment_lines(totals, money)
    if settings.paginate_rows and y + summary_height(payment_lines, quote.notes, canvas, canvas.content_width) > canvas.bottom:
        canvas.new_page()
        y = canvas.margin - SUMMARY_GAP
    y = render_summary(canvas, summary_rows, y)
    render_payment_terms(canvas, payment_lines, quote.notes, y)
