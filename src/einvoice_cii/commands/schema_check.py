"""Check a serialised document against the XSD/Schematron artefacts."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Sequence

from ..schema import SchemaValidator
from ..versions import SUPPORTED_VERSIONS


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="einvoice-cii schema",
        description="Validate a CII document against the schema of its version.",
    )
    parser.add_argument("xml", type=Path, help="CII XML file")
    parser.add_argument("--version", type=int, required=True, choices=SUPPORTED_VERSIONS)
    parser.add_argument("--xsd", type=Path, help="Explicit XSD (default: schema directory)")
    parser.add_argument(
        "--schematron",
        nargs="?",
        const=True,
        default=None,
        help="Also run Schematron; optionally pass the .sch file",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    schematron_path = args.schematron if isinstance(args.schematron, str) else None
    validator = SchemaValidator(
        args.xml.read_bytes(),
        args.version,
        schema_path=args.xsd,
        schematron_path=Path(schematron_path) if schematron_path else None,
    )
    errors = validator.validate_against_schema()
    if args.schematron is not None:
        errors.extend(validator.validate_against_schematron())

    for error in errors:
        print(error)
    if errors:
        return 1
    print(f"{args.xml.name}: OK")
    return 0


if __name__ == "__main__":  # pragma: no cover - direct execution
    raise SystemExit(main())
