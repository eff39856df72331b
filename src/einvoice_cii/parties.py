"""Trade party rendering (seller, buyer and ship-to blocks)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from lxml import etree


class Party(Protocol):
    """Anything able to fill a ``*TradeParty`` wrapper element."""

    def to_xml(
        self, parent: etree._Element, *, version: int, exclude_tax: bool = False
    ) -> None:
        """Append the party children to ``parent``."""


@dataclass(frozen=True, slots=True)
class TradeParty:
    """Default :class:`Party` implementation with postal and tax data."""

    name: str
    street1: str = ""
    street2: str = ""
    city: str = ""
    postal_code: str = ""
    country_id: str = ""
    vat_id: str = ""
    tax_id: str = ""
    global_id: str = ""
    global_id_scheme_id: str = ""
    person_name: str = ""

    def to_xml(
        self, parent: etree._Element, *, version: int, exclude_tax: bool = False
    ) -> None:
        namespace = etree.QName(parent).namespace

        def sub(node: etree._Element, tag: str, text: str | None = None, **attrib: str):
            child = etree.SubElement(node, f"{{{namespace}}}{tag}", attrib)
            if text is not None:
                child.text = text
            return child

        if self.global_id and self.global_id_scheme_id:
            sub(parent, "GlobalID", self.global_id, schemeID=self.global_id_scheme_id)
        sub(parent, "Name", self.name)
        if self.person_name:
            contact = sub(parent, "DefinedTradeContact")
            sub(contact, "PersonName", self.person_name)

        address = sub(parent, "PostalTradeAddress")
        sub(address, "PostcodeCode", self.postal_code)
        sub(address, "LineOne", self.street1)
        if self.street2:
            sub(address, "LineTwo", self.street2)
        sub(address, "CityName", self.city)
        sub(address, "CountryID", self.country_id)

        if exclude_tax:
            return
        if self.vat_id:
            registration = sub(parent, "SpecifiedTaxRegistration")
            sub(registration, "ID", self.vat_id, schemeID="VA")
        if self.tax_id:
            registration = sub(parent, "SpecifiedTaxRegistration")
            sub(registration, "ID", self.tax_id, schemeID="FC")


__all__ = ["Party", "TradeParty"]
