from __future__ import annotations

from decimal import Decimal
from typing import Callable, Sequence

from quote_engine.core.calculations.pricing_engine import PricingBreakdown
from quote_engine.utils.pdf.core.canvas import Canvas
from quote_engine.utils.pdf.core.layout_common import (
    BODY_SIZE,
    SUMMARY_GAP,
    SUMMARY_H,
    SUMMARY_ROW,
    SUMMARY_W,
    SUMMARY_X,
)

Money = Callable[[Decimal], str]


def build_summary_rows(totals: PricingBreakdown, money: Money) -> list[tuple[str, str, bool]]:
    """(label, value, emphasized) rows; optional lines only when their feature is present."""
    rows = [("Subtotal:", money(totals.subtotal), False)]
    if totals.discount is not None:
        rows.append((totals.discount.label, money(-totals.discount.amount), False))
    if totals.tax is not None:
        rows.append((totals.tax.label, money(totals.tax.amount), False))
    rows.append(("Total:", money(totals.total), True))
    return rows


def build_payment_lines(totals: PricingBreakdown, money: Money) -> list[str]:
    down = totals.down_payment
    if down is None:
        return []
    return [
        f"Down Payment Required: {money(down.amount)} ({down.kind.value})",
        f"Remaining Balance: {money(down.remaining_balance)}",
    ]


def summary_height(payment_lines: Sequence[str], notes: str | None, canvas: Canvas, width: float) -> float:
    height = SUMMARY_GAP + SUMMARY_H
    if payment_lines:
        height += SUMMARY_GAP + canvas.leading(BODY_SIZE) * (len(payment_lines) + 1) + 4
    if notes:
        height += SUMMARY_GAP + canvas.leading(BODY_SIZE) + canvas.measure_text_height(notes, width, size=BODY_SIZE)
    return height


def render_summary(canvas: Canvas, rows: Sequence[tuple[str, str, bool]], table_end: float) -> float:
    """Fixed-size totals box right of center; returns its bottom edge."""
    box_y = table_end + SUMMARY_GAP
    canvas.draw_rect(SUMMARY_X, box_y, SUMMARY_W, SUMMARY_H, stroke="border")
    y = box_y + 10
    for label, value, emphasized in rows:
        font = "bold" if emphasized else "regular"
        canvas.draw_text(label, SUMMARY_X + 10, y, font=font, size=BODY_SIZE)
        canvas.draw_text(value, SUMMARY_X + 10, y, width=SUMMARY_W - 20, align="right", font=font, size=BODY_SIZE)
        y += SUMMARY_ROW
    return box_y + SUMMARY_H


def render_payment_terms(canvas: Canvas, payment_lines: Sequence[str], notes: str | None, y: float) -> float:
    width = canvas.content_width
    if payment_lines:
        y += SUMMARY_GAP
        y += canvas.draw_text("Payment Terms:", canvas.margin, y, font="bold", size=BODY_SIZE) + 4
        y += canvas.draw_text("\n".join(payment_lines), canvas.margin, y, width=width, size=BODY_SIZE)
    if notes:
        y += SUMMARY_GAP
        y += canvas.draw_text("Notes:", canvas.margin, y, font="bold", size=BODY_SIZE)
        y += canvas.draw_text(notes, canvas.margin, y, width=width, size=BODY_SIZE)
    return y
