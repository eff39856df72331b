"""Resolution of the CII vocabulary for a document version and mode.

ZUGFeRD 1 uses the ``CrossIndustryDocument`` schema (UN/CEFACT revision 12/15),
ZUGFeRD 2 and 3 use ``CrossIndustryInvoice`` (revision 100).  Almost every
difference between the two is a renamed element, so the names live in one
table keyed by :class:`Concept` and are picked by :meth:`VersionPolicy.by_version`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping, TypeVar

from .errors import ConfigurationError

T = TypeVar("T")

SUPPORTED_VERSIONS = (1, 2, 3)

MODE_STANDARD = "standard"
MODE_XRECHNUNG = "xrechnung"
_MODE_ALIASES = {
    MODE_STANDARD: MODE_STANDARD,
    "zugferd": MODE_STANDARD,
    MODE_XRECHNUNG: MODE_XRECHNUNG,
}

NAMESPACES_V1: Mapping[str, str] = MappingProxyType(
    {
        "ram": "urn:un:unece:uncefact:data:standard:ReusableAggregateBusinessInformationEntity:12",
        "udt": "urn:un:unece:uncefact:data:standard:UnqualifiedDataType:15",
        "rsm": "urn:ferd:CrossIndustryDocument:invoice:1p0",
        "xsi": "http://www.w3.org/2001/XMLSchema-instance",
        "xs": "http://www.w3.org/2001/XMLSchema",
    }
)

NAMESPACES_V2: Mapping[str, str] = MappingProxyType(
    {
        "qdt": "urn:un:unece:uncefact:data:standard:QualifiedDataType:100",
        "ram": "urn:un:unece:uncefact:data:standard:ReusableAggregateBusinessInformationEntity:100",
        "udt": "urn:un:unece:uncefact:data:standard:UnqualifiedDataType:100",
        "rsm": "urn:un:unece:uncefact:data:standard:CrossIndustryInvoice:100",
        "xsi": "http://www.w3.org/2001/XMLSchema-instance",
        "xs": "http://www.w3.org/2001/XMLSchema",
    }
)

GUIDELINE_V1 = "urn:ferd:CrossIndustryDocument:invoice:1p0:comfort"
GUIDELINE_EN16931 = "urn:cen.eu:en16931:2017"
XRECHNUNG_SUFFIXES: Mapping[int, str] = MappingProxyType(
    {
        2: "#compliant#urn:xoev-de:kosit:standard:xrechnung_2.3",
        3: "#compliant#urn:xeinkauf.de:kosit:xrechnung_3.0",
    }
)
BUSINESS_PROCESS_ID = "urn:fdc:peppol.eu:2017:poacc:billing:01:1.0"


class Concept(Enum):
    """Abstract document parts whose element name depends on the version."""

    ROOT = "root"
    DOCUMENT_CONTEXT = "document_context"
    HEADER = "header"
    TRANSACTION = "transaction"
    HEADER_AGREEMENT = "header_agreement"
    HEADER_DELIVERY = "header_delivery"
    HEADER_SETTLEMENT = "header_settlement"
    HEADER_SUMMATION = "header_summation"
    LINE_AGREEMENT = "line_agreement"
    LINE_DELIVERY = "line_delivery"
    LINE_SETTLEMENT = "line_settlement"
    LINE_SUMMATION = "line_summation"
    RATE_PERCENT = "rate_percent"


# (version 1 name, version 2+ name)
TAG_NAMES: Mapping[Concept, tuple[str, str]] = MappingProxyType(
    {
        Concept.ROOT: ("CrossIndustryDocument", "CrossIndustryInvoice"),
        Concept.DOCUMENT_CONTEXT: (
            "SpecifiedExchangedDocumentContext",
            "ExchangedDocumentContext",
        ),
        Concept.HEADER: ("HeaderExchangedDocument", "ExchangedDocument"),
        Concept.TRANSACTION: (
            "SpecifiedSupplyChainTradeTransaction",
            "SupplyChainTradeTransaction",
        ),
        Concept.HEADER_AGREEMENT: (
            "ApplicableSupplyChainTradeAgreement",
            "ApplicableHeaderTradeAgreement",
        ),
        Concept.HEADER_DELIVERY: (
            "ApplicableSupplyChainTradeDelivery",
            "ApplicableHeaderTradeDelivery",
        ),
        Concept.HEADER_SETTLEMENT: (
            "ApplicableSupplyChainTradeSettlement",
            "ApplicableHeaderTradeSettlement",
        ),
        Concept.HEADER_SUMMATION: (
            "SpecifiedTradeSettlementMonetarySummation",
            "SpecifiedTradeSettlementHeaderMonetarySummation",
        ),
        Concept.LINE_AGREEMENT: (
            "SpecifiedSupplyChainTradeAgreement",
            "SpecifiedLineTradeAgreement",
        ),
        Concept.LINE_DELIVERY: (
            "SpecifiedSupplyChainTradeDelivery",
            "SpecifiedLineTradeDelivery",
        ),
        Concept.LINE_SETTLEMENT: (
            "SpecifiedSupplyChainTradeSettlement",
            "SpecifiedLineTradeSettlement",
        ),
        Concept.LINE_SUMMATION: (
            "SpecifiedTradeSettlementMonetarySummation",
            "SpecifiedTradeSettlementLineMonetarySummation",
        ),
        Concept.RATE_PERCENT: ("ApplicablePercent", "RateApplicablePercent"),
    }
)


def normalise_mode(mode: str) -> str:
    """Return the canonical mode name or raise :class:`ConfigurationError`."""

    key = str(mode).strip().lower() if mode is not None else ""
    try:
        return _MODE_ALIASES[key]
    except KeyError:
        raise ConfigurationError(f"Unsupported document mode: {mode!r}") from None


@dataclass(frozen=True)
class VersionPolicy:
    """Pure lookup of names, namespaces and toggles for ``(version, mode)``."""

    version: int
    mode: str

    @classmethod
    def resolve(cls, version: int, mode: str = MODE_STANDARD) -> "VersionPolicy":
        """Validate the combination and return the matching policy.

        The checks run in a fixed order: version, mode, then compatibility.
        """

        if isinstance(version, bool) or not isinstance(version, int):
            raise ConfigurationError(f"Unsupported document version: {version!r}")
        if version not in SUPPORTED_VERSIONS:
            raise ConfigurationError(f"Unsupported document version: {version!r}")
        canonical = normalise_mode(mode)
        if canonical == MODE_XRECHNUNG and version < 2:
            raise ConfigurationError(
                "Incompatible mode/version combination: xrechnung requires document version 2 or later"
            )
        return cls(version=version, mode=canonical)

    def by_version(self, before: T, after: T) -> T:
        """Pick ``before`` for version 1 and ``after`` for every later version."""

        return before if self.version == 1 else after

    def tag(self, concept: Concept) -> str:
        before, after = TAG_NAMES[concept]
        return self.by_version(before, after)

    @property
    def is_xrechnung(self) -> bool:
        return self.mode == MODE_XRECHNUNG

    @property
    def root_name(self) -> str:
        return self.tag(Concept.ROOT)

    @property
    def namespaces(self) -> Mapping[str, str]:
        return self.by_version(NAMESPACES_V1, NAMESPACES_V2)

    @property
    def guideline_id(self) -> str:
        guideline = self.by_version(GUIDELINE_V1, GUIDELINE_EN16931)
        if self.is_xrechnung:
            guideline += XRECHNUNG_SUFFIXES.get(self.version, "")
        return guideline

    @property
    def emits_business_process(self) -> bool:
        if self.version >= 2 and self.mode == MODE_STANDARD:
            return True
        return self.version == 3 and self.is_xrechnung

    @property
    def has_product_detail(self) -> bool:
        """Buyer reference, ship-to party, product block and basis quantities."""

        return self.version >= 2

    @property
    def lines_before_agreement(self) -> bool:
        return self.version >= 2

    @property
    def amounts_carry_currency(self) -> bool:
        return self.version == 1

    # Version 2+ only structures.
    has_buyer_reference = has_product_detail
    has_ship_to = has_product_detail
    has_basis_quantity = has_product_detail
    has_buyer_assigned_id = has_product_detail


__all__ = [
    "BUSINESS_PROCESS_ID",
    "Concept",
    "GUIDELINE_EN16931",
    "GUIDELINE_V1",
    "MODE_STANDARD",
    "MODE_XRECHNUNG",
    "NAMESPACES_V1",
    "NAMESPACES_V2",
    "SUPPORTED_VERSIONS",
    "TAG_NAMES",
    "VersionPolicy",
    "XRECHNUNG_SUFFIXES",
    "normalise_mode",
]
