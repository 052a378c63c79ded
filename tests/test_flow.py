from datetime import datetime

import pytest

from quote_engine.core.models.company import Template
from quote_engine.core.models.quote import Signature
from quote_engine.utils.pdf.renderers.flow import FlowState, next_state, plan_flow

TERMS = Template(name="Standard", terms_and_conditions="Payment due within 30 days.")
SIGNATURE = Signature(data="", timestamp=datetime(2024, 3, 5, 14, 0))


@pytest.mark.parametrize(
    "overrides, expected",
    [
        ({}, [FlowState.MAIN, FlowState.DONE]),
        ({"template": TERMS}, [FlowState.MAIN, FlowState.TERMS, FlowState.DONE]),
        ({"signature": SIGNATURE}, [FlowState.MAIN, FlowState.SIGNATURE, FlowState.DONE]),
        (
            {"template": TERMS, "signature": SIGNATURE},
            [FlowState.MAIN, FlowState.TERMS, FlowState.SIGNATURE, FlowState.DONE],
        ),
    ],
)
def test_plan_flow(make_quote, overrides, expected):
    assert plan_flow(make_quote(**overrides)) == expected


def test_blank_terms_are_skipped(make_quote):
    quote = make_quote(template=Template(name="Empty", terms_and_conditions="  \n "))

    assert plan_flow(quote) == [FlowState.MAIN, FlowState.DONE]


def test_done_is_terminal(make_quote):
    quote = make_quote(template=TERMS, signature=SIGNATURE)

    assert next_state(FlowState.DONE, quote) is FlowState.DONE
    assert next_state(FlowState.SIGNATURE, quote) is FlowState.DONE
