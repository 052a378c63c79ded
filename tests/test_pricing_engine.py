from decimal import Decimal

import pytest

from quote_engine.core.calculations.pricing_engine import PricingEngine, calculate_totals, format_money
from quote_engine.core.errors import ValidationError
from quote_engine.core.models.quote import AmountKind, DiscountSpec, DownPaymentSpec, LineItem


def _item(qty, price, name="Item"):
    return LineItem(name=name, quantity=Decimal(qty), unit_price=Decimal(price))


def test_fence_example_totals(sample_items):
    totals = calculate_totals(
        sample_items,
        discount=DiscountSpec(AmountKind.PERCENTAGE, Decimal("10")),
        tax_rate=Decimal("8"),
    )

    assert totals.subtotal == Decimal("400.00")
    assert totals.discount_amount == Decimal("40.00")
    assert totals.tax_amount == Decimal("28.80")
    assert totals.total == Decimal("388.80")
    assert totals.discount.label == "Discount (10%):"
    assert totals.tax.label == "Tax (8%):"
    assert totals.down_payment is None


def test_subtotal_rounds_once_not_per_line():
    items = [_item("1", "0.3333"), _item("1", "0.3333"), _item("1", "0.3333")]

    totals = calculate_totals(items)

    # rounding each line first would give 0.99
    assert totals.subtotal == Decimal("1.00")


def test_fixed_discount_is_clamped_to_subtotal():
    totals = calculate_totals(
        [_item("2", "50")],
        discount=DiscountSpec(AmountKind.FIXED, Decimal("500")),
        tax_rate=Decimal("10"),
    )

    assert totals.discount_amount == Decimal("100.00")
    assert totals.tax_amount == Decimal("0.00")
    assert totals.total == Decimal("0.00")
    assert totals.discount.label == "Discount (fixed):"


def test_zero_discount_has_no_summary_line():
    totals = calculate_totals([_item("1", "10")], discount=DiscountSpec(AmountKind.PERCENTAGE, Decimal("0")))

    assert totals.discount is None
    assert totals.total == Decimal("10.00")


def test_zero_tax_rate_still_yields_tax_line():
    totals = calculate_totals([_item("1", "10")], tax_rate=Decimal("0"))

    assert totals.tax is not None
    assert totals.tax.amount == Decimal("0.00")


def test_percentage_down_payment():
    totals = calculate_totals(
        [_item("4", "100")],
        tax_rate=Decimal("5"),
        down_payment=DownPaymentSpec(AmountKind.PERCENTAGE, Decimal("50")),
    )

    assert totals.total == Decimal("420.00")
    assert totals.down_payment_amount == Decimal("210.00")
    assert totals.remaining_balance == Decimal("210.00")
    assert totals.down_payment.kind is AmountKind.PERCENTAGE


def test_fixed_down_payment_above_total_is_clamped():
    totals = calculate_totals(
        [_item("1", "80")],
        down_payment=DownPaymentSpec(AmountKind.FIXED, Decimal("1000")),
    )

    assert totals.down_payment_amount == Decimal("80.00")
    assert totals.remaining_balance == Decimal("0.00")


def test_percentage_down_payment_above_hundred_is_clamped():
    totals = calculate_totals(
        [_item("1", "80")],
        tax_rate=Decimal("10"),
        down_payment=DownPaymentSpec(AmountKind.PERCENTAGE, Decimal("150")),
    )

    assert totals.total == Decimal("88.00")
    assert totals.down_payment_amount == Decimal("88.00")
    assert totals.remaining_balance == Decimal("0.00")
    assert totals.down_payment.value == Decimal("150")


@pytest.mark.parametrize(
    "items, kwargs",
    [
        ([_item("-1", "10")], {}),
        ([_item("1", "-10")], {}),
        ([_item("1", "10")], {"discount": DiscountSpec(AmountKind.FIXED, Decimal("-5"))}),
        ([_item("1", "10")], {"discount": DiscountSpec(AmountKind.PERCENTAGE, Decimal("150"))}),
        ([_item("1", "10")], {"discount": DiscountSpec("BOGUS", Decimal("5"))}),
        ([_item("1", "10")], {"tax_rate": Decimal("-1")}),
        ([_item("1", "10")], {"tax_rate": "abc"}),
    ],
)
def test_malformed_inputs_raise_validation_error(items, kwargs):
    with pytest.raises(ValidationError):
        calculate_totals(items, **kwargs)


def test_engine_accepts_float_inputs(make_quote):
    quote = make_quote(items=(LineItem(name="Post", quantity=3, unit_price=19.99),), discount=None, tax_rate=None)

    totals = PricingEngine().summarize(quote)

    assert totals.total == Decimal("59.97")


def test_format_money():
    assert format_money(Decimal("1234.5")) == "$1,234.50"
    assert format_money(Decimal("-40")) == "-$40.00"
    assert PricingEngine("EUR ").format_currency(Decimal("2")) == "EUR 2.00"
