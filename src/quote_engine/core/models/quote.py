from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Mapping

from quote_engine.core.models.company import Company, Template


class AmountKind(str, Enum):
    PERCENTAGE = "PERCENTAGE"
    FIXED = "FIXED"


@dataclass(frozen=True)
class LineItem:
    """Single row of the itemized table."""

    name: str
    quantity: Decimal
    unit_price: Decimal
    variation: str | None = None
    description: str | None = None
    unit: str | None = None

    @property
    def line_total(self) -> Decimal:
        return Decimal(str(self.quantity)) * Decimal(str(self.unit_price))

    @property
    def display_name(self) -> str:
        if self.variation:
            return f"{self.name} ({self.variation})"
        return self.name


@dataclass(frozen=True)
class DiscountSpec:
    kind: AmountKind
    value: Decimal


@dataclass(frozen=True)
class DownPaymentSpec:
    kind: AmountKind
    value: Decimal


@dataclass(frozen=True)
class Signature:
    """Electronic signature captured when the client accepted the quote."""

    data: str | bytes
    timestamp: datetime
    metadata: Mapping[str, str] = field(default_factory=dict)
    signer_name: str | None = None

    @property
    def ip_address(self) -> str:
        meta = self.metadata or {}
        return str(meta.get("ipAddress") or meta.get("ip_address") or "-")


@dataclass(frozen=True)
class QuoteDocument:
    number: str
    created_at: datetime
    company: Company
    items: tuple[LineItem, ...] = ()
    client_name: str | None = None
    client_email: str | None = None
    client_phone: str | None = None
    client_address: str | None = None
    discount: DiscountSpec | None = None
    tax_rate: Decimal | None = None
    down_payment: DownPaymentSpec | None = None
    signature: Signature | None = None
    template: Template | None = None
    acceptance_url: str | None = None
    notes: str | None = None

    def client_lines(self) -> list[str]:
        raw = [self.client_name, self.client_email, self.client_phone, self.client_address]
        return [str(line) for line in raw if line]

    @property
    def has_terms(self) -> bool:
        return self.template is not None and self.template.has_terms

    @property
    def signer_name(self) -> str:
        if self.signature and self.signature.signer_name:
            return self.signature.signer_name
        return self.client_name or "-"


@dataclass(frozen=True)
class RenderedDocument:
    """Opaque PDF output of a single render call."""

    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    def __len__(self) -> int:
        return len(self.data)

    def __bytes__(self) -> bytes:
        return self.data
