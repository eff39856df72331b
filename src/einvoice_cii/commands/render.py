"""Render an invoice JSON document as CII XML."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence

from ..emit import serialize
from ..errors import EInvoiceError
from ..invoices import load_invoice
from ..tables import load_code_tables
from ..versions import MODE_STANDARD, MODE_XRECHNUNG, SUPPORTED_VERSIONS

LOGGER = logging.getLogger("einvoice_cii.commands.render")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="einvoice-cii render",
        description="Serialise an invoice JSON file as a ZUGFeRD/XRechnung CII document.",
    )
    parser.add_argument("invoice", type=Path, help="Invoice JSON file")
    parser.add_argument(
        "--version",
        type=int,
        default=2,
        choices=SUPPORTED_VERSIONS,
        help="Document version (default: 2)",
    )
    parser.add_argument(
        "--mode",
        default=MODE_STANDARD,
        choices=(MODE_STANDARD, MODE_XRECHNUNG),
        help="Compliance mode (default: standard)",
    )
    parser.add_argument(
        "--skip-validation",
        action="store_true",
        help="Emit the document even when the amounts do not add up",
    )
    parser.add_argument("--tables", type=Path, help="JSON file overriding the code tables")
    parser.add_argument("-o", "--output", type=Path, help="Destination file (default: stdout)")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    invoice = load_invoice(args.invoice)
    tables = load_code_tables(args.tables) if args.tables else None
    try:
        xml = serialize(
            invoice,
            version=args.version,
            mode=args.mode,
            skip_validation=args.skip_validation,
            tables=tables,
        )
    except EInvoiceError as exc:
        LOGGER.error("Rendering %s failed: %s", args.invoice, exc)
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(xml, encoding="utf-8")
        print(f"Document written to: {args.output}")
    else:
        sys.stdout.write(xml)
    return 0


if __name__ == "__main__":  # pragma: no cover - direct execution
    raise SystemExit(main())
