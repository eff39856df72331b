from __future__ import annotations

from lxml import etree

from einvoice_cii.parties import TradeParty
from einvoice_cii.versions import NAMESPACES_V2

RAM = NAMESPACES_V2["ram"]
NS = {"ram": RAM}


def _wrapper() -> etree._Element:
    return etree.Element(f"{{{RAM}}}SellerTradeParty", nsmap={"ram": RAM})


def test_full_party_block() -> None:
    party = TradeParty(
        name="Depfu inc",
        street1="Quickbornstr. 46",
        street2="Hinterhaus",
        city="Hamburg",
        postal_code="20253",
        country_id="DE",
        vat_id="DE304755032",
        tax_id="22/815/0815/4",
        global_id="4000001123452",
        global_id_scheme_id="0088",
        person_name="Max Mustermann",
    )
    wrapper = _wrapper()
    party.to_xml(wrapper, version=2)

    names = [etree.QName(child).localname for child in wrapper]
    assert names == [
        "GlobalID",
        "Name",
        "DefinedTradeContact",
        "PostalTradeAddress",
        "SpecifiedTaxRegistration",
        "SpecifiedTaxRegistration",
    ]
    assert wrapper.find("ram:GlobalID", NS).get("schemeID") == "0088"
    assert wrapper.findtext("ram:DefinedTradeContact/ram:PersonName", namespaces=NS) == "Max Mustermann"
    address = wrapper.find("ram:PostalTradeAddress", NS)
    assert [etree.QName(child).localname for child in address] == [
        "PostcodeCode",
        "LineOne",
        "LineTwo",
        "CityName",
        "CountryID",
    ]
    schemes = [node.get("schemeID") for node in wrapper.iterfind("ram:SpecifiedTaxRegistration/ram:ID", NS)]
    assert schemes == ["VA", "FC"]


def test_exclude_tax_omits_registrations() -> None:
    wrapper = _wrapper()
    TradeParty(name="Depfu inc", vat_id="DE304755032").to_xml(wrapper, version=2, exclude_tax=True)
    assert wrapper.find("ram:SpecifiedTaxRegistration", NS) is None
    assert wrapper.findtext("ram:Name", namespaces=NS) == "Depfu inc"


def test_global_id_requires_scheme() -> None:
    wrapper = _wrapper()
    TradeParty(name="Depfu inc", global_id="4000001123452").to_xml(wrapper, version=2)
    assert wrapper.find("ram:GlobalID", NS) is None


def test_party_follows_parent_namespace() -> None:
    ram_v1 = "urn:un:unece:uncefact:data:standard:ReusableAggregateBusinessInformationEntity:12"
    wrapper = etree.Element(f"{{{ram_v1}}}BuyerTradeParty")
    TradeParty(name="Käufer GmbH").to_xml(wrapper, version=1)
    assert etree.QName(wrapper[0]).namespace == ram_v1
