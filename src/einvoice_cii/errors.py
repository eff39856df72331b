"""Exception hierarchy shared by the CII serialisation modules."""

from __future__ import annotations

from typing import Iterable


class EInvoiceError(Exception):
    """Base class for every error raised by :mod:`einvoice_cii`."""


class ConfigurationError(EInvoiceError, ValueError):
    """Raised when a document version/mode combination is not supported."""


class MalformedAmountError(EInvoiceError, ValueError):
    """Raised when a monetary field cannot be parsed as an exact decimal."""

    def __init__(self, value: object, *, field: str | None = None) -> None:
        self.value = value
        self.field = field
        label = f" for '{field}'" if field else ""
        super().__init__(f"Malformed decimal value{label}: {value!r}")


class ValidationError(EInvoiceError):
    """Raised when business validation fails before emission.

    ``messages`` keeps the list-shaped container produced by the validator,
    even though the fail-fast checks only ever contribute one entry.
    """

    def __init__(self, message: str, messages: Iterable[str] = ()) -> None:
        super().__init__(message)
        self.messages = list(messages)

    def __str__(self) -> str:
        base = super().__str__()
        if not self.messages:
            return base
        return f"{base}: {'; '.join(self.messages)}"


__all__ = [
    "ConfigurationError",
    "EInvoiceError",
    "MalformedAmountError",
    "ValidationError",
]
