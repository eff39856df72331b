"""lxml helpers for writing CII elements in the policy's namespaces."""

from __future__ import annotations

from datetime import date

from lxml import etree

from ..formatting import DATE_FORMAT_CODE, Amount, format_date, format_decimal
from ..versions import VersionPolicy


class CiiWriter:
    """Creates ``rsm``/``ram``/``udt`` elements for one :class:`VersionPolicy`."""

    def __init__(self, policy: VersionPolicy) -> None:
        self.policy = policy
        self.nsmap = dict(policy.namespaces)

    def _qualified(self, prefix: str, tag: str) -> str:
        return f"{{{self.nsmap[prefix]}}}{tag}"

    def root(self) -> etree._Element:
        return etree.Element(self._qualified("rsm", self.policy.root_name), nsmap=self.nsmap)

    def element(
        self,
        parent: etree._Element,
        prefix: str,
        tag: str,
        text: str | None = None,
        **attrib: str,
    ) -> etree._Element:
        node = etree.SubElement(parent, self._qualified(prefix, tag), attrib)
        if text is not None:
            node.text = text
        return node

    def rsm(self, parent: etree._Element, tag: str, text: str | None = None) -> etree._Element:
        return self.element(parent, "rsm", tag, text)

    def ram(
        self, parent: etree._Element, tag: str, text: str | None = None, **attrib: str
    ) -> etree._Element:
        return self.element(parent, "ram", tag, text, **attrib)

    def date_time(self, parent: etree._Element, tag: str, value: date | None) -> etree._Element:
        """``ram:<tag>/udt:DateTimeString[@format='102']``."""

        wrapper = self.ram(parent, tag)
        self.element(
            wrapper, "udt", "DateTimeString", format_date(value), format=DATE_FORMAT_CODE
        )
        return wrapper

    def amount(
        self,
        parent: etree._Element,
        tag: str,
        value: Amount | None,
        currency: str | None,
        *,
        add_currency: bool | None = None,
        digits: int = 2,
    ) -> etree._Element:
        """Monetary literal; version 1 documents carry ``currencyID``."""

        if add_currency is None:
            add_currency = self.policy.amounts_carry_currency
        attrib = {"currencyID": currency} if add_currency and currency else {}
        text = format_decimal(value, digits=digits, truncate=True)
        return self.ram(parent, tag, text, **attrib)

    def billing_period(
        self, parent: etree._Element, start: date | None, end: date | None
    ) -> None:
        if start is None or end is None:
            return
        period = self.ram(parent, "BillingSpecifiedPeriod")
        self.date_time(period, "StartDateTime", start)
        self.date_time(period, "EndDateTime", end)


def prune_empty_elements(element: etree._Element) -> etree._Element:
    """Remove every descendant whose combined text content is empty.

    Attributes do not count as content.  Applying the pass twice yields the
    same tree as applying it once.
    """

    for child in list(element):
        if not isinstance(child.tag, str):
            continue
        if "".join(child.itertext()) == "":
            element.remove(child)
        else:
            prune_empty_elements(child)
    return element


__all__ = ["CiiWriter", "prune_empty_elements"]
