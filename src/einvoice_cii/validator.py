"""Business arithmetic checks run before an invoice is serialised.

Every check compares a stated amount with the value recomputed from the other
fields, rounding half-up to two places.  Checking stops at the first mismatch:
the result holds a list, but that list has at most one entry.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Iterable

from .formatting import HUNDRED, is_blank, parse_decimal, q2
from .invoices import Invoice, LineItem

LOGGER = logging.getLogger("einvoice_cii.validator")


class ValidationIssue:
    """Representation of a problem detected during validation."""

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        details: dict[str, str] | None = None,
    ) -> None:
        self.message = message
        self.code = code or "GENERIC"
        self.details = details or {}

    def __repr__(self) -> str:
        return f"ValidationIssue(code={self.code!r}, message={self.message!r})"

    def as_cells(self) -> list[str]:
        """Serialise the issue for tabular export."""

        return [self.code, self.message]


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a validation run; ``ok`` is true when no issue was found."""

    issues: list[ValidationIssue] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.issues

    @property
    def messages(self) -> list[str]:
        return [issue.message for issue in self.issues]

    def __bool__(self) -> bool:
        return self.ok


def _failed(message: str, code: str, **details: str) -> ValidationResult:
    return ValidationResult([ValidationIssue(message, code=code, details=details)])


def validate_invoice(invoice: Invoice) -> ValidationResult:
    """Check the invoice level totals.

    All amounts are parsed before the first comparison so a malformed value
    raises :class:`~einvoice_cii.errors.MalformedAmountError` instead of
    producing a validation message.
    """

    tax = parse_decimal(invoice.tax_amount, field="tax_amount")
    basis = parse_decimal(invoice.basis_amount, field="basis_amount")
    percent = parse_decimal(invoice.tax_percent, field="tax_percent")
    grand_total = parse_decimal(invoice.grand_total_amount, field="grand_total_amount")
    charges = [
        parse_decimal(item.charge_amount, field="line_items.charge_amount")
        for item in invoice.line_items
    ]

    calc_tax = q2(basis * percent / HUNDRED)
    if tax != calc_tax:
        return _failed(
            f"Tax amount and calculated tax amount deviate: {tax} / {calc_tax}",
            "INVOICE_TAX_MISMATCH",
            stated=str(tax),
            calculated=str(calc_tax),
        )

    calc_grand_total = basis + tax
    if grand_total != calc_grand_total:
        return _failed(
            "Grand total amount and calculated grand total amount deviate: "
            f"{grand_total} / {calc_grand_total}",
            "INVOICE_GRAND_TOTAL_MISMATCH",
            stated=str(grand_total),
            calculated=str(calc_grand_total),
        )

    line_item_sum = sum(charges, Decimal(0))
    if line_item_sum != basis:
        return _failed(
            f"Line items do not add up to basis amount {line_item_sum} / {basis}",
            "INVOICE_LINE_SUM_MISMATCH",
            stated=str(basis),
            calculated=str(line_item_sum),
        )

    return ValidationResult()


def validate_line_item(item: LineItem, index: int | None = None) -> ValidationResult:
    """Check a single line item; ``index`` is only used to annotate issues."""

    net_price = parse_decimal(item.net_amount, field="net_amount")
    charge_price = parse_decimal(item.charge_amount, field="charge_amount")
    tax = parse_decimal(item.tax_amount, field="tax_amount")
    quantity = parse_decimal(item.quantity, field="quantity")
    percent = parse_decimal(item.tax_percent, field="tax_percent")
    discount = None
    gross_price = None
    if item.has_discount:
        discount = parse_decimal(item.discount_amount, field="discount_amount")
        gross_price = parse_decimal(item.gross_amount, field="gross_amount")
    elif not is_blank(item.gross_amount):
        gross_price = parse_decimal(item.gross_amount, field="gross_amount")

    line = {"line": str(index)} if index is not None else {}

    calc_charge = q2(net_price * quantity)
    if charge_price != calc_charge:
        return _failed(
            "charge price and gross price times quantity deviate: "
            f"{charge_price} / {calc_charge}",
            "LINE_CHARGE_MISMATCH",
            stated=str(charge_price),
            calculated=str(calc_charge),
            **line,
        )

    if discount is not None and gross_price is not None:
        calc_net_price = q2(gross_price - discount)
        if calc_net_price != net_price:
            return _failed(
                "Calculated net price and net price deviate: "
                f"{calc_net_price} / {net_price}",
                "LINE_NET_PRICE_MISMATCH",
                stated=str(net_price),
                calculated=str(calc_net_price),
                **line,
            )

    calc_tax = q2(charge_price * percent / HUNDRED)
    if calc_tax != tax:
        return _failed(
            f"Tax and calculated tax deviate: {tax} / {calc_tax}",
            "LINE_TAX_MISMATCH",
            stated=str(tax),
            calculated=str(calc_tax),
            **line,
        )

    return ValidationResult()


def validate_document(invoice: Invoice) -> list[ValidationIssue]:
    """Run the invoice check and every line check, one result each.

    Each individual check keeps its fail-fast behaviour; this only gathers the
    first issue of the invoice and of every line for reporting.
    """

    issues = list(validate_invoice(invoice).issues)
    for index, item in enumerate(invoice.line_items, start=1):
        issues.extend(validate_line_item(item, index).issues)
    if issues:
        LOGGER.warning("Invoice %s has %d validation issue(s)", invoice.id, len(issues))
    return issues


def export_report(issues: Iterable[ValidationIssue], *, destination: Path) -> None:
    """Export validation issues to an Excel report."""

    from .logging import ExcelLogger, ExcelLoggerConfig

    logger = ExcelLogger(
        ExcelLoggerConfig(columns=("code", "message"), filename=str(destination))
    )
    logger.write_rows(issues)


__all__ = [
    "ValidationIssue",
    "ValidationResult",
    "export_report",
    "validate_document",
    "validate_invoice",
    "validate_line_item",
]
