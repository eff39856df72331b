"""Report business validation issues for an invoice JSON document."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence

from ..errors import EInvoiceError
from ..invoices import load_invoice
from ..validator import export_report, validate_document

LOGGER = logging.getLogger("einvoice_cii.commands.check")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="einvoice-cii check",
        description=(
            "Check the invoice totals and every line item, optionally writing "
            "the issues to an Excel report."
        ),
    )
    parser.add_argument("invoice", type=Path, help="Invoice JSON file")
    parser.add_argument("--report", type=Path, help="Excel report destination (.xlsx)")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    invoice = load_invoice(args.invoice)
    try:
        issues = validate_document(invoice)
    except EInvoiceError as exc:
        LOGGER.error("Checking %s failed: %s", args.invoice, exc)
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    for issue in issues:
        print(f"[{issue.code}] {issue.message}")

    if args.report:
        export_report(issues, destination=args.report)
        print(f"Report written to: {args.report}")

    if issues:
        return 1
    print(f"Invoice {invoice.id}: OK")
    return 0


if __name__ == "__main__":  # pragma: no cover - direct execution
    raise SystemExit(main())
