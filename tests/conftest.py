"""Shared fixtures for the CII serialiser tests."""

from __future__ import annotations

import sys
from dataclasses import replace
from datetime import date
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from einvoice_cii.invoices import Invoice, LineItem  # noqa: E402
from einvoice_cii.parties import TradeParty  # noqa: E402


SELLER = TradeParty(
    name="Depfu inc",
    street1="Quickbornstr. 46",
    city="Hamburg",
    postal_code="20253",
    country_id="DE",
    vat_id="DE304755032",
)

BUYER = TradeParty(
    name="Depfu inc",
    street1="Quickbornstr. 46",
    city="Hamburg",
    postal_code="20253",
    country_id="DE",
    vat_id="DE304755032",
)


def make_line_item(**overrides) -> LineItem:
    values = dict(
        name="Depfu Starter Plan",
        quantity="1",
        unit="PIECE",
        gross_amount="100.00",
        net_amount="100.00",
        charge_amount="100.00",
        tax_category="STANDARDRATE",
        tax_percent="19",
        tax_amount="19.00",
        origin_country_code="DE",
        currency_code="EUR",
    )
    values.update(overrides)
    return LineItem(**values)


def make_invoice(**overrides) -> Invoice:
    values = dict(
        id="R2024-001",
        issue_date=date(2024, 1, 15),
        seller=SELLER,
        buyer=BUYER,
        line_items=(make_line_item(),),
        currency_code="EUR",
        payment_type="CREDITCARD",
        payment_text="Kreditkarte",
        tax_category="STANDARDRATE",
        tax_percent="19",
        tax_amount="19.00",
        basis_amount="100.00",
        grand_total_amount="119.00",
        due_amount="119.00",
        paid_amount="0",
        payment_due_date=date(2024, 2, 14),
    )
    values.update(overrides)
    return Invoice(**values)


@pytest.fixture
def invoice() -> Invoice:
    return make_invoice()


@pytest.fixture
def line_item() -> LineItem:
    return make_line_item()


@pytest.fixture
def discounted_invoice() -> Invoice:
    item = make_line_item(
        quantity="2",
        gross_amount="50.00",
        discount_amount="5.00",
        discount_reason="Rabatt",
        net_amount="45.00",
        charge_amount="90.00",
        tax_amount="17.10",
    )
    return replace(
        make_invoice(),
        line_items=(item,),
        basis_amount="90.00",
        tax_amount="17.10",
        grand_total_amount="107.10",
        due_amount="107.10",
    )
