"""XSD and Schematron checks for emitted documents.

The schema artefacts are not shipped with the package.  They are looked up in
``<schema root>/zugferd_<version>/`` where the root defaults to the repository
``schemas`` directory and can be moved with ``EINVOICE_CII_SCHEMA_DIR``.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import IO

from lxml import etree
from lxml.isoschematron import Schematron

LOGGER = logging.getLogger("einvoice_cii.schema")

_SCHEMA_ENV_VAR = "EINVOICE_CII_SCHEMA_DIR"
_PACKAGE_ROOT = Path(__file__).resolve().parent
_SCHEMA_ROOT = (_PACKAGE_ROOT / ".." / ".." / "schemas").resolve()


def schema_dir(version: int) -> Path:
    """Return the directory holding the artefacts for ``version``."""

    candidate = os.getenv(_SCHEMA_ENV_VAR)
    base = Path(candidate).expanduser() if candidate else _SCHEMA_ROOT
    return base / f"zugferd_{version}"


def _pick(directory: Path, pattern: str) -> Path:
    matches = sorted(directory.glob(pattern))
    if not matches:
        raise FileNotFoundError(f"No {pattern} found in {directory}")
    # Main schemas are named after the root element; imported modules are not.
    preferred = [path for path in matches if "CrossIndustry" in path.name]
    return (preferred or matches)[0]


def load_schema(version: int) -> Path:
    """Return the path of the main XSD for ``version``."""

    return _pick(schema_dir(version), "*.xsd")


def load_schematron(version: int) -> Path:
    """Return the path of the Schematron rules for ``version``."""

    return _pick(schema_dir(version), "*.sch")


def _read(source: str | bytes | IO[bytes] | IO[str]) -> bytes:
    if hasattr(source, "read"):
        source = source.read()  # type: ignore[union-attr]
    if isinstance(source, str):
        return source.encode("utf-8")
    return source  # type: ignore[return-value]


def _format_log(error_log: etree._ListErrorLog) -> list[str]:
    return [f"line {entry.line}: {entry.message}" for entry in error_log]


class SchemaValidator:
    """Check one serialised document against the artefacts of its version."""

    def __init__(
        self,
        xml: str | bytes | IO[bytes] | IO[str],
        version: int,
        *,
        schema_path: Path | None = None,
        schematron_path: Path | None = None,
    ) -> None:
        self.version = version
        self.document = etree.fromstring(_read(xml))
        self.schema_path = schema_path
        self.schematron_path = schematron_path

    def validate_against_schema(self) -> list[str]:
        """Return the XSD errors; an empty list means the document conforms."""

        path = self.schema_path or load_schema(self.version)
        schema = etree.XMLSchema(etree.parse(str(path)))
        if schema.validate(self.document):
            return []
        errors = _format_log(schema.error_log)
        LOGGER.info("Schema %s reported %d error(s)", path.name, len(errors))
        return errors

    def validate_against_schematron(self) -> list[str]:
        """Return the failed Schematron assertions."""

        path = self.schematron_path or load_schematron(self.version)
        schematron = Schematron(etree.parse(str(path)))
        if schematron.validate(self.document):
            return []
        errors = _format_log(schematron.error_log)
        LOGGER.info("Schematron %s reported %d error(s)", path.name, len(errors))
        return errors


__all__ = ["SchemaValidator", "load_schema", "load_schematron", "schema_dir"]
