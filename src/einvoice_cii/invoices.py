"""Invoice and line item value objects."""

from __future__ import annotations

import json
from dataclasses import dataclass, fields
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Any, Iterable, Mapping

from .formatting import Amount
from .parties import Party, TradeParty


@dataclass(frozen=True)
class LineItem:
    """One invoice position; its place in :attr:`Invoice.line_items` is its line id."""

    name: str
    quantity: Amount
    net_amount: Amount
    charge_amount: Amount
    tax_percent: Amount
    tax_amount: Amount
    gross_amount: Amount | None = None
    description: str = ""
    unit: str | None = None
    tax_category: str | None = None
    discount_amount: Amount | None = None
    discount_reason: str = ""
    origin_country_code: str = ""
    currency_code: str = ""
    buyer_id: str = ""
    invoice_start: date | None = None
    invoice_end: date | None = None
    invoice_text: str = ""
    item_id: str = ""

    @property
    def has_discount(self) -> bool:
        return self.discount_amount is not None and self.discount_amount != ""


@dataclass(frozen=True)
class Invoice:
    """Complete invoice document as handed to the serialiser."""

    id: str
    issue_date: date
    seller: Party | None
    buyer: Party | None
    line_items: tuple[LineItem, ...]
    currency_code: str
    tax_percent: Amount
    tax_amount: Amount
    basis_amount: Amount
    grand_total_amount: Amount
    due_amount: Amount
    recipient: Party | None = None
    paid_amount: Amount | None = None
    tax_category: str | None = None
    tax_reason: str | None = None
    payment_type: str | None = None
    payment_text: str = ""
    payment_iban: str = ""
    payment_bic: str = ""
    payment_account_name: str = ""
    buyer_reference: str | None = None
    payment_description: str = ""
    payment_status: str | None = None
    payment_due_date: date | None = None
    header_text: str = ""
    footer_text: str = ""
    project_id: str = ""
    project_name: str = ""
    invoice_start: date | None = None
    invoice_end: date | None = None
    invoice_type: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "line_items", tuple(self.line_items))

    def tax_reason_text(self, exemption_reasons: Mapping[str, str]) -> str | None:
        """Explicit override first, otherwise the category default."""

        if self.tax_reason:
            return self.tax_reason
        return exemption_reasons.get(self.tax_category or "")


_DATE_FIELDS = {"issue_date", "payment_due_date", "invoice_start", "invoice_end"}
_PARTY_FIELDS = {"seller", "buyer", "recipient"}
# Annotations stay strings under ``from __future__ import annotations``.
_TEXT_ANNOTATIONS = {"str", "str | None"}


def _parse_date(value: Any) -> date | None:
    if value in (None, ""):
        return None
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value))


def _known_fields(cls: type, payload: Mapping[str, Any]) -> dict[str, Any]:
    """Reject unknown keys and turn JSON numbers in text fields into strings."""

    text_fields = {item.name for item in fields(cls) if item.type in _TEXT_ANNOTATIONS}
    names = {item.name for item in fields(cls)}
    unknown = sorted(set(payload) - names)
    if unknown:
        raise ValueError(f"Unknown {cls.__name__} fields: {', '.join(unknown)}")
    data = dict(payload)
    for key in text_fields & data.keys():
        if data[key] is not None and not isinstance(data[key], str):
            data[key] = str(data[key])
    return data


def _party_from_dict(payload: Mapping[str, Any] | None) -> TradeParty | None:
    if payload is None:
        return None
    return TradeParty(**_known_fields(TradeParty, payload))


def line_item_from_dict(payload: Mapping[str, Any]) -> LineItem:
    data = _known_fields(LineItem, payload)
    for key in ("invoice_start", "invoice_end"):
        if key in data:
            data[key] = _parse_date(data[key])
    return LineItem(**data)


def invoice_from_dict(payload: Mapping[str, Any]) -> Invoice:
    """Build an :class:`Invoice` from plain JSON-compatible data.

    Dates are ISO ``YYYY-MM-DD`` strings, parties are objects with the
    :class:`~einvoice_cii.parties.TradeParty` fields and amounts stay strings.
    """

    data = _known_fields(Invoice, payload)
    for key in _DATE_FIELDS & data.keys():
        data[key] = _parse_date(data[key])
    for key in _PARTY_FIELDS & data.keys():
        data[key] = _party_from_dict(data[key])
    items: Iterable[Mapping[str, Any]] = data.get("line_items", ())
    data["line_items"] = tuple(line_item_from_dict(item) for item in items)
    data.setdefault("seller", None)
    data.setdefault("buyer", None)
    return Invoice(**data)


def load_invoice(path: Path) -> Invoice:
    """Read an invoice JSON document from ``path``."""

    with Path(path).open("r", encoding="utf-8") as handle:
        payload = json.load(handle, parse_float=Decimal)
    if not isinstance(payload, dict):
        raise ValueError(f"Invoice file '{path}' must contain a JSON object")
    return invoice_from_dict(payload)


__all__ = [
    "Invoice",
    "LineItem",
    "invoice_from_dict",
    "line_item_from_dict",
    "load_invoice",
]
