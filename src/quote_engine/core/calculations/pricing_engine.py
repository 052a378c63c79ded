from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterable

from quote_engine.core.errors import ValidationError
from quote_engine.core.models.quote import AmountKind, DiscountSpec, DownPaymentSpec, LineItem, QuoteDocument

CENT = Decimal("0.01")
HUNDRED = Decimal("100")
ZERO = Decimal("0")


def to_decimal(value, field: str) -> Decimal:
    """Coerce int/float/str/Decimal into a finite Decimal or raise ValidationError."""
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"{field} must be a number, got {value!r}")
    try:
        number = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as exc:
        raise ValidationError(f"{field} must be a number, got {value!r}") from exc
    if not number.is_finite():
        raise ValidationError(f"{field} must be finite, got {value!r}")
    return number


def round_money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def format_percent(value: Decimal) -> str:
    return format(Decimal(value).normalize(), "f")


def _kind(raw, field: str) -> AmountKind:
    try:
        return AmountKind(getattr(raw, "value", raw))
    except ValueError as exc:
        raise ValidationError(f"{field} must be PERCENTAGE or FIXED, got {raw!r}") from exc


@dataclass(frozen=True)
class DiscountLine:
    kind: AmountKind
    value: Decimal
    amount: Decimal

    @property
    def label(self) -> str:
        if self.kind is AmountKind.PERCENTAGE:
            return f"Discount ({format_percent(self.value)}%):"
        return "Discount (fixed):"


@dataclass(frozen=True)
class TaxLine:
    rate: Decimal
    amount: Decimal

    @property
    def label(self) -> str:
        return f"Tax ({format_percent(self.rate)}%):"


@dataclass(frozen=True)
class DownPaymentLine:
    kind: AmountKind
    value: Decimal
    amount: Decimal
    remaining_balance: Decimal


@dataclass(frozen=True)
class PricingBreakdown:
    """
    Rounded totals plus one optional line per pricing feature.
    A line is None when the feature is absent, so the layout never guesses
    from zero amounts.
    """

    subtotal: Decimal
    discount_amount: Decimal
    tax_amount: Decimal
    total: Decimal
    down_payment_amount: Decimal
    remaining_balance: Decimal
    discount: DiscountLine | None = None
    tax: TaxLine | None = None
    down_payment: DownPaymentLine | None = None


def validate_items(items: Iterable[LineItem]) -> list[tuple[LineItem, Decimal, Decimal]]:
    checked: list[tuple[LineItem, Decimal, Decimal]] = []
    for index, item in enumerate(items):
        qty = to_decimal(item.quantity, f"items[{index}].quantity")
        price = to_decimal(item.unit_price, f"items[{index}].unit_price")
        if qty < ZERO:
            raise ValidationError(f"items[{index}].quantity cannot be negative, got {qty}")
        if price < ZERO:
            raise ValidationError(f"items[{index}].unit_price cannot be negative, got {price}")
        checked.append((item, qty, price))
    return checked


def _checked_amount(spec, field: str, cap_percentage: bool = True) -> tuple[AmountKind, Decimal]:
    kind = _kind(spec.kind, f"{field}.kind")
    value = to_decimal(spec.value, f"{field}.value")
    if value < ZERO:
        raise ValidationError(f"{field}.value cannot be negative, got {value}")
    if cap_percentage and kind is AmountKind.PERCENTAGE and value > HUNDRED:
        raise ValidationError(f"{field}.value cannot exceed 100%, got {value}")
    return kind, value


def calculate_totals(
    items: Iterable[LineItem],
    discount: DiscountSpec | None = None,
    tax_rate=None,
    down_payment: DownPaymentSpec | None = None,
) -> PricingBreakdown:
    """
    Compute quote totals at full precision; round to cents only on output.
    Raises ValidationError for negative or malformed inputs.
    """
    checked = validate_items(items)
    subtotal = sum((qty * price for _, qty, price in checked), ZERO)

    discount_amount = ZERO
    discount_kind: AmountKind | None = None
    discount_value = ZERO
    if discount is not None:
        discount_kind, discount_value = _checked_amount(discount, "discount")
        if discount_kind is AmountKind.PERCENTAGE:
            discount_amount = subtotal * discount_value / HUNDRED
        else:
            discount_amount = min(discount_value, subtotal)

    rate: Decimal | None = None
    tax_amount = ZERO
    if tax_rate is not None:
        rate = to_decimal(tax_rate, "tax_rate")
        if rate < ZERO:
            raise ValidationError(f"tax_rate cannot be negative, got {rate}")
        tax_amount = (subtotal - discount_amount) * rate / HUNDRED

    total = subtotal - discount_amount + tax_amount

    down_amount = ZERO
    down_kind: AmountKind | None = None
    down_value = ZERO
    if down_payment is not None:
        # percentages above 100 clamp to the total
        down_kind, down_value = _checked_amount(down_payment, "down_payment", cap_percentage=False)
        if down_kind is AmountKind.PERCENTAGE:
            down_amount = total * down_value / HUNDRED
        else:
            down_amount = down_value
        down_amount = min(max(down_amount, ZERO), total)
    remaining = max(total - down_amount, ZERO)

    discount_line = None
    if discount_kind is not None and round_money(discount_amount) > ZERO:
        discount_line = DiscountLine(discount_kind, discount_value, round_money(discount_amount))
    tax_line = TaxLine(rate, round_money(tax_amount)) if rate is not None else None
    down_line = None
    if down_kind is not None:
        down_line = DownPaymentLine(down_kind, down_value, round_money(down_amount), round_money(remaining))

    return PricingBreakdown(
        subtotal=round_money(subtotal),
        discount_amount=round_money(discount_amount),
        tax_amount=round_money(tax_amount),
        total=round_money(total),
        down_payment_amount=round_money(down_amount),
        remaining_balance=round_money(remaining),
        discount=discount_line,
        tax=tax_line,
        down_payment=down_line,
    )


class PricingEngine:
    """Stateless calculator bound to a currency symbol for display."""

    def __init__(self, currency_symbol: str = "$"):
        self.currency_symbol = currency_symbol

    def summarize(self, quote: QuoteDocument) -> PricingBreakdown:
        return calculate_totals(quote.items, quote.discount, quote.tax_rate, quote.down_payment)

    def format_currency(self, value) -> str:
        return format_money(value, self.currency_symbol)


def format_money(value, symbol: str = "$") -> str:
    amount = round_money(value if isinstance(value, Decimal) else Decimal(str(value)))
    sign = "-" if amount < ZERO else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"
