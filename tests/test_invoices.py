from __future__ import annotations

import json
from datetime import date
from decimal import Decimal

import pytest

from einvoice_cii import serialize
from einvoice_cii.invoices import invoice_from_dict, load_invoice
from einvoice_cii.parties import TradeParty

PAYLOAD = {
    "id": "R2024-001",
    "issue_date": "2024-01-15",
    "seller": {"name": "Depfu inc", "city": "Hamburg", "country_id": "DE", "vat_id": "DE304755032"},
    "buyer": {"name": "Depfu inc", "city": "Hamburg", "country_id": "DE"},
    "currency_code": "EUR",
    "payment_type": "CREDITCARD",
    "tax_category": "STANDARDRATE",
    "tax_percent": "19",
    "tax_amount": "19.00",
    "basis_amount": "100.00",
    "grand_total_amount": "119.00",
    "due_amount": "119.00",
    "payment_due_date": "2024-02-14",
    "line_items": [
        {
            "name": "Depfu Starter Plan",
            "quantity": 1,
            "unit": "PIECE",
            "net_amount": 100.00,
            "charge_amount": "100.00",
            "tax_percent": "19",
            "tax_amount": "19.00",
            "invoice_start": "2024-01-01",
            "invoice_end": "2024-01-31",
        }
    ],
}


def test_invoice_from_dict_converts_types() -> None:
    invoice = invoice_from_dict(PAYLOAD)
    assert invoice.issue_date == date(2024, 1, 15)
    assert invoice.payment_due_date == date(2024, 2, 14)
    assert isinstance(invoice.seller, TradeParty)
    assert invoice.recipient is None
    assert isinstance(invoice.line_items, tuple)
    assert invoice.line_items[0].invoice_start == date(2024, 1, 1)


def test_unknown_fields_are_rejected() -> None:
    with pytest.raises(ValueError, match="Unknown Invoice fields: colour"):
        invoice_from_dict({**PAYLOAD, "colour": "blue"})


def test_load_invoice_keeps_json_numbers_exact(tmp_path) -> None:
    path = tmp_path / "invoice.json"
    path.write_text(json.dumps(PAYLOAD), encoding="utf-8")
    invoice = load_invoice(path)
    assert invoice.line_items[0].net_amount == Decimal("100.0")
    assert "<ram:GrandTotalAmount>119.00</ram:GrandTotalAmount>" in serialize(invoice)


def test_load_invoice_requires_object(tmp_path) -> None:
    path = tmp_path / "invoice.json"
    path.write_text("[]", encoding="utf-8")
    with pytest.raises(ValueError):
        load_invoice(path)


def test_tax_reason_prefers_explicit_text() -> None:
    invoice = invoice_from_dict({**PAYLOAD, "tax_category": "REVERSECHARGE"})
    reasons = {"REVERSECHARGE": "Reverse Charge"}
    assert invoice.tax_reason_text(reasons) == "Reverse Charge"
    explicit = invoice_from_dict({**PAYLOAD, "tax_reason": "§13b UStG"})
    assert explicit.tax_reason_text(reasons) == "§13b UStG"


def test_numeric_text_fields_become_strings() -> None:
    payload = {**PAYLOAD, "id": 2024001, "buyer_reference": 991}
    payload["line_items"] = [{**PAYLOAD["line_items"][0], "buyer_id": 12, "item_id": 4711}]
    invoice = invoice_from_dict(payload)
    assert invoice.id == "2024001"
    assert invoice.buyer_reference == "991"
    assert invoice.line_items[0].buyer_id == "12"
    assert invoice.line_items[0].item_id == "4711"
    assert invoice.tax_percent == "19"
    assert invoice.line_items[0].quantity == 1
