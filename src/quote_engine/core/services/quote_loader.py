from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Mapping

from quote_engine.core.calculations.pricing_engine import to_decimal
from quote_engine.core.errors import ValidationError
from quote_engine.core.models.company import Company, Template
from quote_engine.core.models.quote import (
    AmountKind,
    DiscountSpec,
    DownPaymentSpec,
    LineItem,
    QuoteDocument,
    Signature,
)


def _get(data: Mapping, *keys: str, default: Any = None) -> Any:
    """First non-empty value among alternative spellings (camelCase / snake_case)."""
    for key in keys:
        value = data.get(key)
        if value not in (None, ""):
            return value
    return default


def _text(value: Any) -> str | None:
    if value in (None, ""):
        return None
    return str(value)


def parse_datetime(value: Any, field: str) -> datetime:
    if isinstance(value, datetime):
        return value
    if not value:
        raise ValidationError(f"{field} is required")
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError as exc:
        raise ValidationError(f"{field} is not an ISO date/time: {value!r}") from exc


def _amount_kind(value: Any, field: str) -> AmountKind:
    try:
        return AmountKind(str(value or "").strip().upper())
    except ValueError as exc:
        raise ValidationError(f"{field} must be PERCENTAGE or FIXED, got {value!r}") from exc


def _line_item(raw: Mapping, index: int) -> LineItem:
    if not isinstance(raw, Mapping):
        raise ValidationError(f"items[{index}] must be an object")
    name = _get(raw, "name", "productName")
    if not name:
        raise ValidationError(f"items[{index}].name is required")
    return LineItem(
        name=str(name),
        quantity=to_decimal(_get(raw, "quantity", "qty", default=0), f"items[{index}].quantity"),
        unit_price=to_decimal(
            _get(raw, "unitPrice", "unit_price", "price", default=0), f"items[{index}].unit_price"
        ),
        variation=_text(raw.get("variation")),
        description=_text(raw.get("description")),
        unit=_text(raw.get("unit")),
    )


def _items(data: Mapping) -> tuple[LineItem, ...]:
    raw_items = data.get("items")
    if raw_items is None:
        content = data.get("content") or {}
        raw_items = content.get("products", []) if isinstance(content, Mapping) else []
    if not isinstance(raw_items, list):
        raise ValidationError("items must be a list")
    return tuple(_line_item(raw, i) for i, raw in enumerate(raw_items))


def _company(raw: Any) -> Company:
    if not isinstance(raw, Mapping) or not raw.get("name"):
        raise ValidationError("company.name is required")
    return Company(
        name=str(raw["name"]),
        logo=_text(raw.get("logo")),
        phone=_text(raw.get("phone")),
        email=_text(raw.get("email")),
        website=_text(raw.get("website")),
    )


def _template(raw: Any) -> Template | None:
    if not isinstance(raw, Mapping):
        return None
    return Template(
        name=str(raw.get("name") or ""),
        terms_and_conditions=_text(_get(raw, "termsAndConditions", "terms_and_conditions")),
    )


def _signature(raw: Any) -> Signature | None:
    if not isinstance(raw, Mapping) or not raw.get("data"):
        return None
    metadata = raw.get("metadata") or {}
    if not isinstance(metadata, Mapping):
        raise ValidationError("signature.metadata must be an object")
    return Signature(
        data=raw["data"],
        timestamp=parse_datetime(raw.get("timestamp"), "signature.timestamp"),
        metadata={str(k): str(v) for k, v in metadata.items()},
        signer_name=_text(_get(raw, "signerName", "signer_name")),
    )


def quote_from_dict(data: Mapping) -> QuoteDocument:
    """
    Build a QuoteDocument from an API-style payload.

    Accepts the web API's camelCase keys (`clientName`, `discountType`/`discountValue`,
    `content.products`, ...) as well as snake_case equivalents.
    """
    if not isinstance(data, Mapping):
        raise ValidationError("quote payload must be an object")
    number = _get(data, "number")
    if not number:
        raise ValidationError("number is required")

    discount = None
    discount_value = _get(data, "discountValue", "discount_value")
    if discount_value is not None:
        discount = DiscountSpec(
            kind=_amount_kind(_get(data, "discountType", "discount_type"), "discount_type"),
            value=to_decimal(discount_value, "discount_value"),
        )

    down_payment = None
    down_value = _get(data, "downPaymentValue", "down_payment_value")
    if down_value is not None:
        down_payment = DownPaymentSpec(
            kind=_amount_kind(_get(data, "downPaymentType", "down_payment_type"), "down_payment_type"),
            value=to_decimal(down_value, "down_payment_value"),
        )

    tax_rate = _get(data, "taxRate", "tax_rate")
    return QuoteDocument(
        number=str(number),
        created_at=parse_datetime(_get(data, "createdAt", "created_at"), "created_at"),
        company=_company(data.get("company")),
        items=_items(data),
        client_name=_text(_get(data, "clientName", "client_name")),
        client_email=_text(_get(data, "clientEmail", "client_email")),
        client_phone=_text(_get(data, "clientPhone", "client_phone")),
        client_address=_text(_get(data, "clientAddress", "client_address")),
        discount=discount,
        tax_rate=to_decimal(tax_rate, "tax_rate") if tax_rate is not None else None,
        down_payment=down_payment,
        signature=_signature(data.get("signature")),
        template=_template(data.get("template")),
        acceptance_url=_text(_get(data, "acceptanceUrl", "acceptance_url")),
        notes=_text(data.get("notes")),
    )


def load_quote(path: Path | str) -> QuoteDocument:
    target = Path(path)
    try:
        data = json.loads(target.read_text(encoding="utf-8"))
    except ValueError as exc:
        raise ValidationError(f"{target} is not valid JSON: {exc}") from exc
    return quote_from_dict(data)
