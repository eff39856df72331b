"""Decimal and date literal helpers shared by the validator and the emitter."""

from __future__ import annotations

from datetime import date, datetime
from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal, InvalidOperation

from .errors import MalformedAmountError

AMT2 = Decimal("0.01")
AMT4 = Decimal("0.0001")
HUNDRED = Decimal("100")

DATE_FORMAT_CODE = "102"
_DATE_PATTERN = "%Y%m%d"

Amount = Decimal | str | int


def is_blank(value: object) -> bool:
    """Return ``True`` for ``None`` and for strings that are empty."""

    return value is None or (isinstance(value, str) and value == "")


def parse_decimal(value: Amount | None, *, field: str | None = None) -> Decimal:
    """Convert ``value`` to :class:`~decimal.Decimal` without any fallback.

    Missing or unparsable input raises :class:`MalformedAmountError`; floats
    are rejected because they carry binary rounding errors.
    """

    if isinstance(value, Decimal):
        if not value.is_finite():
            raise MalformedAmountError(value, field=field)
        return value
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise MalformedAmountError(value, field=field)

    text = str(value).strip()
    if not text:
        raise MalformedAmountError(value, field=field)
    try:
        result = Decimal(text)
    except (InvalidOperation, ValueError) as exc:
        raise MalformedAmountError(value, field=field) from exc
    if not result.is_finite():
        raise MalformedAmountError(value, field=field)
    return result


def q2(value: Decimal) -> Decimal:
    """Round half-up to two decimal places."""

    return value.quantize(AMT2, rounding=ROUND_HALF_UP)


def is_zero(value: Amount | None) -> bool:
    """Treat absent amounts as zero, parse everything else strictly."""

    if is_blank(value):
        return True
    return parse_decimal(value) == 0


def format_decimal(
    value: Amount | None, *, digits: int = 2, truncate: bool = False
) -> str:
    """Render ``value`` as a fixed-point literal with ``digits`` places.

    With ``truncate`` (monetary amounts) the value is first cut down to four
    decimal places; it is then rounded half-up to the requested precision.
    ``None`` renders as an empty string so the element carrying it is dropped
    by the pruning pass.
    """

    if is_blank(value):
        return ""
    number = parse_decimal(value)
    if truncate:
        number = number.quantize(AMT4, rounding=ROUND_DOWN)
    exponent = Decimal(1).scaleb(-digits)
    return format(number.quantize(exponent, rounding=ROUND_HALF_UP), "f")


def format_date(value: date | datetime | None) -> str:
    """Return ``value`` as ``YYYYMMDD`` (format code ``102``)."""

    if value is None:
        return ""
    return value.strftime(_DATE_PATTERN)


__all__ = [
    "AMT2",
    "AMT4",
    "Amount",
    "DATE_FORMAT_CODE",
    "HUNDRED",
    "format_date",
    "format_decimal",
    "is_blank",
    "is_zero",
    "parse_decimal",
    "q2",
]
