"""Emission of ``IncludedSupplyChainTradeLineItem`` blocks."""

from __future__ import annotations

import logging

from lxml import etree

from ..errors import ValidationError
from ..formatting import format_decimal
from ..invoices import LineItem
from ..tables import CodeTables
from ..validator import validate_line_item
from ..versions import Concept
from ._tree import CiiWriter

LOGGER = logging.getLogger("einvoice_cii.emit.line")

BASIS_QUANTITY = 1
REFERENCED_DOCUMENT_TYPE_CODE = "130"


def _allowance(writer: CiiWriter, parent: etree._Element, item: LineItem) -> None:
    allowance = writer.ram(parent, "AppliedTradeAllowanceCharge")
    indicator = writer.ram(allowance, "ChargeIndicator")
    writer.element(indicator, "udt", "Indicator", "false")
    writer.amount(allowance, "ActualAmount", item.discount_amount, item.currency_code)
    writer.ram(allowance, "Reason", item.discount_reason)


def _basis_quantity(writer: CiiWriter, parent: etree._Element, unit_code: str) -> None:
    writer.ram(
        parent,
        "BasisQuantity",
        format_decimal(BASIS_QUANTITY, digits=4),
        unitCode=unit_code,
    )


def emit_line_item(
    writer: CiiWriter,
    parent: etree._Element,
    item: LineItem,
    index: int,
    *,
    tables: CodeTables,
    skip_validation: bool = False,
) -> etree._Element:
    """Append line ``index`` (one-indexed) to ``parent``."""

    if not skip_validation:
        result = validate_line_item(item, index)
        if not result.ok:
            LOGGER.warning("Line item %d rejected: %s", index, result.messages)
            raise ValidationError(f"LineItem {index} is invalid", result.messages)

    policy = writer.policy
    unit_code = tables.unit_code(item.unit)
    category_code = tables.tax_category_code(item.tax_category, version=policy.version)

    line = writer.ram(parent, "IncludedSupplyChainTradeLineItem")
    document = writer.ram(line, "AssociatedDocumentLineDocument")
    writer.ram(document, "LineID", str(index))
    if item.invoice_text:
        note = writer.ram(line, "IncludedNote")
        writer.ram(note, "Content", item.invoice_text)

    if policy.has_product_detail:
        product = writer.ram(line, "SpecifiedTradeProduct")
        if item.buyer_id and policy.has_buyer_assigned_id:
            writer.ram(product, "BuyerAssignedID", item.buyer_id)
        writer.ram(product, "Name", item.name)
        if item.description:
            writer.ram(product, "Description", item.description)
        origin = writer.ram(product, "OriginTradeCountry")
        writer.ram(origin, "ID", item.origin_country_code)

    agreement = writer.ram(line, policy.tag(Concept.LINE_AGREEMENT))
    gross = writer.ram(agreement, "GrossPriceProductTradePrice")
    writer.amount(gross, "ChargeAmount", item.gross_amount, item.currency_code, digits=4)
    if item.has_discount:
        if policy.has_basis_quantity:
            _basis_quantity(writer, gross, unit_code)
        _allowance(writer, gross, item)
    net = writer.ram(agreement, "NetPriceProductTradePrice")
    writer.amount(net, "ChargeAmount", item.net_amount, item.currency_code, digits=4)
    if policy.has_basis_quantity:
        _basis_quantity(writer, net, unit_code)

    delivery = writer.ram(line, policy.tag(Concept.LINE_DELIVERY))
    writer.ram(
        delivery,
        "BilledQuantity",
        format_decimal(item.quantity, digits=4),
        unitCode=unit_code,
    )

    settlement = writer.ram(line, policy.tag(Concept.LINE_SETTLEMENT))
    tax = writer.ram(settlement, "ApplicableTradeTax")
    writer.ram(tax, "TypeCode", "VAT")
    writer.ram(tax, "CategoryCode", category_code)
    writer.ram(tax, policy.tag(Concept.RATE_PERCENT), format_decimal(item.tax_percent))
    writer.billing_period(settlement, item.invoice_start, item.invoice_end)
    summation = writer.ram(settlement, policy.tag(Concept.LINE_SUMMATION))
    writer.amount(summation, "LineTotalAmount", item.charge_amount, item.currency_code)
    if item.item_id:
        reference = writer.ram(settlement, "AdditionalReferencedDocument")
        writer.ram(reference, "IssuerAssignedID", item.item_id)
        writer.ram(reference, "TypeCode", REFERENCED_DOCUMENT_TYPE_CODE)

    if not policy.has_product_detail:
        product = writer.ram(line, "SpecifiedTradeProduct")
        writer.ram(product, "Name", item.name)

    LOGGER.debug("Line item %d emitted", index)
    return line


__all__ = ["BASIS_QUANTITY", "emit_line_item"]
