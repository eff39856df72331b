"""Invoice level CII document builder.

The builder walks an :class:`~einvoice_cii.invoices.Invoice` in the fixed order
required by the CII schemas: document context, header, then the trade
transaction (agreement, delivery, settlement), with the line items placed
according to the document version.  Empty elements are pruned once the tree is
complete.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from lxml import etree

from ..errors import ValidationError
from ..formatting import format_decimal, is_zero
from ..invoices import Invoice
from ..parties import Party
from ..tables import CodeTables, load_code_tables
from ..validator import validate_invoice
from ..versions import BUSINESS_PROCESS_ID, MODE_STANDARD, Concept, VersionPolicy
from ._line import emit_line_item
from ._tree import CiiWriter, prune_empty_elements

LOGGER = logging.getLogger("einvoice_cii.emit.builder")

SELLER_NOTE_SUBJECT_CODE = "SUR"
TAX_TYPE_CODE = "VAT"
UNPAID_STATUS = "unpaid"


class DocumentBuilder:
    """Build CII documents for one version/mode combination."""

    def __init__(
        self,
        policy: VersionPolicy,
        *,
        tables: CodeTables | None = None,
        skip_validation: bool = False,
    ) -> None:
        self.policy = policy
        self.tables = tables if tables is not None else load_code_tables()
        self.skip_validation = skip_validation
        self.writer = CiiWriter(policy)

    def build(self, invoice: Invoice) -> etree._Element:
        """Validate ``invoice`` (unless skipped) and return the pruned tree."""

        if not self.skip_validation:
            result = validate_invoice(invoice)
            if not result.ok:
                LOGGER.warning("Invoice %s rejected: %s", invoice.id, result.messages)
                raise ValidationError("Invoice is invalid", result.messages)

        LOGGER.debug(
            "Building invoice %s (version=%s, mode=%s)",
            invoice.id,
            self.policy.version,
            self.policy.mode,
        )
        root = self.writer.root()
        self._document_context(root)
        self._header(root, invoice)
        self._transaction(root, invoice)
        return prune_empty_elements(root)

    def serialize(self, invoice: Invoice) -> str:
        root = self.build(invoice)
        payload = etree.tostring(
            root, xml_declaration=True, encoding="UTF-8", pretty_print=True
        )
        return payload.decode("utf-8")

    def _document_context(self, root: etree._Element) -> None:
        writer, policy = self.writer, self.policy
        context = writer.rsm(root, policy.tag(Concept.DOCUMENT_CONTEXT))
        if policy.emits_business_process:
            process = writer.ram(context, "BusinessProcessSpecifiedDocumentContextParameter")
            writer.ram(process, "ID", BUSINESS_PROCESS_ID)
        guideline = writer.ram(context, "GuidelineSpecifiedDocumentContextParameter")
        writer.ram(guideline, "ID", policy.guideline_id)

    def _header(self, root: etree._Element, invoice: Invoice) -> None:
        writer, policy = self.writer, self.policy
        header = writer.rsm(root, policy.tag(Concept.HEADER))
        writer.ram(header, "ID", invoice.id)
        name, type_code = self.tables.invoice_type(invoice.invoice_type)
        if policy.version == 1:
            writer.ram(header, "Name", name)
        writer.ram(header, "TypeCode", type_code)
        writer.date_time(header, "IssueDateTime", invoice.issue_date)
        for text in (invoice.header_text, invoice.footer_text):
            if text:
                note = writer.ram(header, "IncludedNote")
                writer.ram(note, "Content", text)
                writer.ram(note, "SubjectCode", SELLER_NOTE_SUBJECT_CODE)

    def _transaction(self, root: etree._Element, invoice: Invoice) -> None:
        writer, policy = self.writer, self.policy
        transaction = writer.rsm(root, policy.tag(Concept.TRANSACTION))
        if policy.lines_before_agreement:
            self._line_items(transaction, invoice)
        self._agreement(transaction, invoice)
        self._delivery(transaction, invoice)
        self._settlement(transaction, invoice)
        if not policy.lines_before_agreement:
            self._line_items(transaction, invoice)

    def _line_items(self, parent: etree._Element, invoice: Invoice) -> None:
        for index, item in enumerate(invoice.line_items, start=1):
            emit_line_item(
                self.writer,
                parent,
                item,
                index,
                tables=self.tables,
                skip_validation=self.skip_validation,
            )

    def _party(
        self,
        parent: etree._Element,
        tag: str,
        party: Party | None,
        *,
        exclude_tax: bool = False,
    ) -> None:
        wrapper = self.writer.ram(parent, tag)
        if party is not None:
            party.to_xml(wrapper, version=self.policy.version, exclude_tax=exclude_tax)

    def _agreement(self, parent: etree._Element, invoice: Invoice) -> None:
        writer, policy = self.writer, self.policy
        agreement = writer.ram(parent, policy.tag(Concept.HEADER_AGREEMENT))
        if policy.has_buyer_reference and invoice.buyer_reference is not None:
            writer.ram(agreement, "BuyerReference", invoice.buyer_reference)
        self._party(agreement, "SellerTradeParty", invoice.seller)
        self._party(agreement, "BuyerTradeParty", invoice.buyer)
        if invoice.project_id or invoice.project_name:
            project = writer.ram(agreement, "SpecifiedProcuringProject")
            if invoice.project_id:
                writer.ram(project, "ID", invoice.project_id)
            if invoice.project_name:
                writer.ram(project, "Name", invoice.project_name)

    def _delivery(self, parent: etree._Element, invoice: Invoice) -> None:
        writer, policy = self.writer, self.policy
        delivery = writer.ram(parent, policy.tag(Concept.HEADER_DELIVERY))
        if policy.has_ship_to:
            ship_to = invoice.recipient if invoice.recipient is not None else invoice.buyer
            self._party(delivery, "ShipToTradeParty", ship_to, exclude_tax=True)
        event = writer.ram(delivery, "ActualDeliverySupplyChainEvent")
        writer.date_time(event, "OccurrenceDateTime", invoice.issue_date)

    def _settlement(self, parent: etree._Element, invoice: Invoice) -> None:
        writer, policy = self.writer, self.policy
        currency = invoice.currency_code
        settlement = writer.ram(parent, policy.tag(Concept.HEADER_SETTLEMENT))
        writer.ram(settlement, "InvoiceCurrencyCode", currency)
        self._payment_means(settlement, invoice)

        tax = writer.ram(settlement, "ApplicableTradeTax")
        writer.amount(tax, "CalculatedAmount", invoice.tax_amount, currency)
        writer.ram(tax, "TypeCode", TAX_TYPE_CODE)
        reason = invoice.tax_reason_text(self.tables.tax_exemption_reasons)
        if reason:
            writer.ram(tax, "ExemptionReason", reason)
        writer.amount(tax, "BasisAmount", invoice.basis_amount, currency)
        writer.ram(
            tax,
            "CategoryCode",
            self.tables.tax_category_code(invoice.tax_category, version=policy.version),
        )
        writer.ram(tax, policy.tag(Concept.RATE_PERCENT), format_decimal(invoice.tax_percent))

        writer.billing_period(settlement, invoice.invoice_start, invoice.invoice_end)
        self._payment_terms(settlement, invoice)
        self._monetary_summation(settlement, invoice)

    def _payment_means(self, parent: etree._Element, invoice: Invoice) -> None:
        writer = self.writer
        means = writer.ram(parent, "SpecifiedTradeSettlementPaymentMeans")
        writer.ram(means, "TypeCode", self.tables.payment_code(invoice.payment_type))
        writer.ram(means, "Information", invoice.payment_text)
        if not invoice.payment_iban:
            return
        account = writer.ram(means, "PayeePartyCreditorFinancialAccount")
        writer.ram(account, "IBANID", invoice.payment_iban)
        if invoice.payment_account_name:
            writer.ram(account, "AccountName", invoice.payment_account_name)
        if invoice.payment_bic:
            institution = writer.ram(means, "PayeeSpecifiedCreditorFinancialInstitution")
            writer.ram(institution, "BICID", invoice.payment_bic)

    def _payment_terms(self, parent: etree._Element, invoice: Invoice) -> None:
        writer = self.writer
        terms = writer.ram(parent, "SpecifiedTradePaymentTerms")
        status = invoice.payment_status or ""
        if status == UNPAID_STATUS or status == "":
            if invoice.payment_description:
                writer.ram(terms, "Description", invoice.payment_description)
            writer.date_time(terms, "DueDateDateTime", invoice.payment_due_date)
        else:
            writer.ram(terms, "Description", status.capitalize())

    def _monetary_summation(self, parent: etree._Element, invoice: Invoice) -> None:
        writer, policy = self.writer, self.policy
        currency = invoice.currency_code
        summation = writer.ram(parent, policy.tag(Concept.HEADER_SUMMATION))
        writer.amount(summation, "LineTotalAmount", invoice.basis_amount, currency)
        # TODO: derive from document level surcharges and discounts once the
        # invoice model carries them.
        charge_total = Decimal(0)
        allowance_total = Decimal(0)
        if not is_zero(charge_total):
            writer.amount(summation, "ChargeTotalAmount", charge_total, currency)
        if not is_zero(allowance_total):
            writer.amount(summation, "AllowanceTotalAmount", allowance_total, currency)
        writer.amount(summation, "TaxBasisTotalAmount", invoice.basis_amount, currency)
        if not is_zero(invoice.tax_amount):
            writer.amount(
                summation, "TaxTotalAmount", invoice.tax_amount, currency, add_currency=True
            )
        writer.amount(summation, "GrandTotalAmount", invoice.grand_total_amount, currency)
        if not is_zero(invoice.paid_amount):
            writer.amount(summation, "TotalPrepaidAmount", invoice.paid_amount, currency)
        writer.amount(summation, "DuePayableAmount", invoice.due_amount, currency)


def serialize(
    invoice: Invoice,
    version: int = 2,
    mode: str = MODE_STANDARD,
    skip_validation: bool = False,
    *,
    tables: CodeTables | None = None,
) -> str:
    """Serialise ``invoice`` to a UTF-8 CII document string.

    Raises :class:`~einvoice_cii.errors.ConfigurationError` for unsupported
    version/mode combinations before the invoice is inspected and
    :class:`~einvoice_cii.errors.ValidationError` when business validation
    fails and ``skip_validation`` is false.
    """

    policy = VersionPolicy.resolve(version, mode)
    builder = DocumentBuilder(policy, tables=tables, skip_validation=skip_validation)
    return builder.serialize(invoice)


__all__ = ["DocumentBuilder", "serialize"]
