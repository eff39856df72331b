"""Cross Industry Invoice (ZUGFeRD 1-3 / XRechnung) serialisation.

Typical use::

    from einvoice_cii import serialize

    xml = serialize(invoice, version=2, mode="standard")
"""

from .emit import DocumentBuilder, prune_empty_elements, serialize
from .errors import (
    ConfigurationError,
    EInvoiceError,
    MalformedAmountError,
    ValidationError,
)
from .invoices import Invoice, LineItem, load_invoice
from .parties import Party, TradeParty
from .tables import CodeTables, load_code_tables
from .validator import ValidationResult, validate_invoice, validate_line_item
from .versions import MODE_STANDARD, MODE_XRECHNUNG, VersionPolicy

__version__ = "0.1.0"

__all__ = [
    "CodeTables",
    "ConfigurationError",
    "DocumentBuilder",
    "EInvoiceError",
    "Invoice",
    "LineItem",
    "MODE_STANDARD",
    "MODE_XRECHNUNG",
    "MalformedAmountError",
    "Party",
    "TradeParty",
    "ValidationError",
    "ValidationResult",
    "VersionPolicy",
    "load_code_tables",
    "load_invoice",
    "prune_empty_elements",
    "serialize",
    "validate_invoice",
    "validate_line_item",
]
