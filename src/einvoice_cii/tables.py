"""Code tables used when resolving CII code lists.

The built-in values cover the usual ZUGFeRD/XRechnung code lists.  A JSON file
can extend or override them; it is read once and cached until the file on disk
changes, in the same way as the rest of the runtime configuration.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

_TABLES_ENV_VAR = "EINVOICE_CII_TABLES_PATH"

DEFAULT_TAX_CATEGORY = "S"
DEFAULT_PAYMENT_CODE = "1"
DEFAULT_UNIT_CODE = "C62"
DEFAULT_INVOICE_TYPE = ("RECHNUNG", "380")


class TablesLoaderError(RuntimeError):
    """Raised when the code table file cannot be parsed."""


def _frozen(values: Mapping[str, Any]) -> Mapping[str, Any]:
    return MappingProxyType(dict(values))


_TAX_CATEGORY_CODES = {
    "STANDARDRATE": "S",
    "REVERSECHARGE": "AE",
    "TAXEXEMPT": "E",
    "ZEROTAXPRODUCTS": "Z",
    "UNTAXEDSERVICE": "O",
    "INTRACOMMUNITY": "K",
}

# ZUGFeRD 1 predates the EN16931 code list and still uses "IC".
_TAX_CATEGORY_CODES_V1 = {
    **_TAX_CATEGORY_CODES,
    "INTRACOMMUNITY": "IC",
}

_TAX_EXEMPTION_REASONS = {
    "REVERSECHARGE": "Reverse Charge",
    "INTRACOMMUNITY": "Intra-Community supply",
    "TAXEXEMPT": "Exempt from VAT",
    "UNTAXEDSERVICE": "Not subject to VAT",
}

_PAYMENT_CODES = {
    "CASH": "10",
    "CHEQUE": "20",
    "CREDITTRANSFER": "30",
    "DEBITTRANSFER": "31",
    "BANKCARD": "48",
    "CREDITCARD": "54",
    "BANKTRANSFER": "58",
    "SEPA": "58",
    "DIRECTDEBIT": "59",
}

_UNIT_CODES = {
    "PIECE": "C62",
    "DAY": "DAY",
    "HECTARE": "HAR",
    "HOUR": "HUR",
    "KILOGRAM": "KGM",
    "KILOMETER": "KTM",
    "KILOWATTHOUR": "KWH",
    "LUMPSUM": "LS",
    "MINUTE": "MIN",
    "SQUAREMETER": "MTK",
    "METER": "MTR",
    "CUBICMETER": "MTQ",
    "LITER": "LTR",
    "TON": "TNE",
    "WEEK": "WEE",
    "MONTH": "MON",
    "YEAR": "ANN",
    "SECOND": "SEC",
}

_INVOICE_TYPES = {
    "STANDARD": ("RECHNUNG", "380"),
    "PARTIAL": ("TEILRECHNUNG", "326"),
    "CREDIT_NOTE": ("GUTSCHRIFT", "381"),
    "CORRECTION": ("KORREKTURRECHNUNG", "384"),
    "PREPAYMENT": ("VORAUSZAHLUNGSRECHNUNG", "386"),
    "SELF_BILLED": ("GUTSCHRIFTSANZEIGE", "389"),
}


@dataclass(frozen=True)
class CodeTables:
    """Immutable lookup tables injected into the validator and the emitter."""

    tax_category_codes: Mapping[str, str] = field(
        default_factory=lambda: _frozen(_TAX_CATEGORY_CODES)
    )
    tax_category_codes_v1: Mapping[str, str] = field(
        default_factory=lambda: _frozen(_TAX_CATEGORY_CODES_V1)
    )
    tax_exemption_reasons: Mapping[str, str] = field(
        default_factory=lambda: _frozen(_TAX_EXEMPTION_REASONS)
    )
    payment_codes: Mapping[str, str] = field(
        default_factory=lambda: _frozen(_PAYMENT_CODES)
    )
    unit_codes: Mapping[str, str] = field(default_factory=lambda: _frozen(_UNIT_CODES))
    invoice_types: Mapping[str, tuple[str, str]] = field(
        default_factory=lambda: _frozen(_INVOICE_TYPES)
    )

    def tax_category_code(self, category: str | None, *, version: int) -> str:
        table = self.tax_category_codes_v1 if version == 1 else self.tax_category_codes
        return table.get(category or "", DEFAULT_TAX_CATEGORY)

    def exemption_reason(self, category: str | None) -> str | None:
        return self.tax_exemption_reasons.get(category or "")

    def payment_code(self, payment_type: str | None) -> str:
        return self.payment_codes.get(payment_type or "", DEFAULT_PAYMENT_CODE)

    def unit_code(self, unit: str | None) -> str:
        return self.unit_codes.get(unit or "", DEFAULT_UNIT_CODE)

    def invoice_type(self, invoice_type: str | None) -> tuple[str, str]:
        """Return the ``(name, type code)`` pair for ``invoice_type``."""

        return self.invoice_types.get(invoice_type or "", DEFAULT_INVOICE_TYPE)


_CACHED_TABLES: tuple[Path | None, float, CodeTables] | None = None


def _resolve_tables_path(path: Path | None) -> Path | None:
    if path is not None:
        return Path(path)
    candidate = os.getenv(_TABLES_ENV_VAR)
    if candidate:
        return Path(candidate)
    return None


def _merged(defaults: Mapping[str, Any], overrides: Any, name: str) -> Mapping[str, Any]:
    if overrides is None:
        return defaults
    if not isinstance(overrides, dict):
        msg = f"Code table '{name}' must be a JSON object"
        raise TablesLoaderError(msg)
    return _frozen({**defaults, **overrides})


def _load_tables_from_disk(path: Path) -> CodeTables:
    if not path.exists():
        msg = f"Code tables file '{path}' not found"
        raise TablesLoaderError(msg)

    with path.open("r", encoding="utf-8") as handle:
        try:
            payload = json.load(handle)
        except json.JSONDecodeError as exc:
            msg = f"Code tables file '{path}' is not valid JSON"
            raise TablesLoaderError(msg) from exc

    if not isinstance(payload, dict):
        msg = f"Code tables file '{path}' must contain a JSON object"
        raise TablesLoaderError(msg)

    defaults = CodeTables()
    raw_types = payload.get("invoice_types")
    invoice_types = defaults.invoice_types
    if raw_types is not None:
        try:
            parsed = {
                key: (str(item["name"]), str(item["code"]))
                for key, item in raw_types.items()
            }
        except (AttributeError, KeyError, TypeError) as exc:
            msg = "Invoice types must map to objects with 'name' and 'code'"
            raise TablesLoaderError(msg) from exc
        invoice_types = _frozen({**defaults.invoice_types, **parsed})

    return CodeTables(
        tax_category_codes=_merged(
            defaults.tax_category_codes, payload.get("tax_category_codes"), "tax_category_codes"
        ),
        tax_category_codes_v1=_merged(
            defaults.tax_category_codes_v1,
            payload.get("tax_category_codes_v1"),
            "tax_category_codes_v1",
        ),
        tax_exemption_reasons=_merged(
            defaults.tax_exemption_reasons,
            payload.get("tax_exemption_reasons"),
            "tax_exemption_reasons",
        ),
        payment_codes=_merged(defaults.payment_codes, payload.get("payment_codes"), "payment_codes"),
        unit_codes=_merged(defaults.unit_codes, payload.get("unit_codes"), "unit_codes"),
        invoice_types=invoice_types,
    )


def load_code_tables(path: Path | None = None, force_reload: bool = False) -> CodeTables:
    """Return the active code tables, honouring ``EINVOICE_CII_TABLES_PATH``."""

    global _CACHED_TABLES

    tables_path = _resolve_tables_path(path)
    mtime = tables_path.stat().st_mtime if tables_path and tables_path.exists() else 0.0

    if not force_reload and _CACHED_TABLES:
        cached_path, cached_mtime, cached_tables = _CACHED_TABLES
        if cached_path == tables_path and cached_mtime == mtime:
            return cached_tables

    tables = CodeTables() if tables_path is None else _load_tables_from_disk(tables_path)
    _CACHED_TABLES = (tables_path, mtime, tables)
    return tables


__all__ = [
    "CodeTables",
    "DEFAULT_INVOICE_TYPE",
    "DEFAULT_PAYMENT_CODE",
    "DEFAULT_TAX_CATEGORY",
    "DEFAULT_UNIT_CODE",
    "TablesLoaderError",
    "load_code_tables",
]
