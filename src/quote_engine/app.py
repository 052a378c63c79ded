from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

from quote_engine.core.errors import RenderError, ValidationError
from quote_engine.core.services.quote_loader import load_quote
from quote_engine.core.services.settings import load_settings
from quote_engine.utils.pdf.exports.quote import export_quote_pdf

logger = logging.getLogger("quote_engine")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="quote-pdf", description="Render a quote JSON file to PDF.")
    parser.add_argument("input", type=Path, help="quote JSON file")
    parser.add_argument("-o", "--output", type=Path, help="output PDF (default: quote-<number>.pdf)")
    parser.add_argument("--assets", help="directory holding logo files")
    parser.add_argument("--settings", type=Path, help="settings JSON file")
    parser.add_argument("--paginate-rows", action="store_true", help="continue long item tables on new pages")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        settings = load_settings(args.settings)
        if args.assets:
            settings = replace(settings, asset_dir=args.assets)
        if args.paginate_rows:
            settings = replace(settings, paginate_rows=True)
        quote = load_quote(args.input)
        output = args.output or args.input.with_name(f"quote-{quote.number}.pdf")
        export_quote_pdf(output, quote, settings=settings)
    except ValidationError as exc:
        logger.error("Invalid quote: %s", exc)
        return 2
    except (RenderError, OSError) as exc:
        logger.error("Rendering failed: %s", exc)
        return 1
    logger.info("Wrote %s", output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
