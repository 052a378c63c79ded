"""
Section-to-page flow: MAIN always, then TERMS and SIGNATURE each on a fresh page when
present, then DONE.
"""

from __future__ import annotations

from enum import Enum

from quote_engine.core.models.quote import QuoteDocument


class FlowState(str, Enum):
    MAIN = "MAIN"
    TERMS = "TERMS"
    SIGNATURE = "SIGNATURE"
    DONE = "DONE"


# States after MAIN that open a new page before rendering.
FRESH_PAGE_STATES = frozenset({FlowState.TERMS, FlowState.SIGNATURE})


def next_state(state: FlowState, quote: QuoteDocument) -> FlowState:
    if state is FlowState.MAIN and quote.has_terms:
        return FlowState.TERMS
    if state in (FlowState.MAIN, FlowState.TERMS) and quote.signature is not None:
        return FlowState.SIGNATURE
    return FlowState.DONE


def plan_flow(quote: QuoteDocument) -> list[FlowState]:
    """Ordered states for `quote`, ending with DONE; no state appears twice."""
    states = [FlowState.MAIN]
    while states[-1] is not FlowState.DONE:
        states.append(next_state(states[-1], quote))
    return states
