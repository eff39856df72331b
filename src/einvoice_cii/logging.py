"""Logging set-up and tabular issue reports.

``configure_logging`` wires the package logger to a rotating log file; the
``ExcelLogger`` writes validation issues to a spreadsheet through
:mod:`openpyxl`.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Iterable, Protocol, Sequence

PACKAGE_LOGGER = "einvoice_cii"
_LOG_DIR_ENV_VAR = "EINVOICE_CII_LOG_DIR"
LOG_FILENAME = "einvoice_cii.log"


def default_log_dir() -> Path:
    candidate = os.getenv(_LOG_DIR_ENV_VAR)
    if candidate:
        return Path(candidate).expanduser()
    return Path.cwd() / "logs"


def configure_logging(
    log_dir: Path | None = None, *, level: int = logging.INFO
) -> logging.Logger:
    """Attach a rotating file handler to the package logger once."""

    logger = logging.getLogger(PACKAGE_LOGGER)
    if not logger.handlers:
        directory = log_dir or default_log_dir()
        directory.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            directory / LOG_FILENAME,
            maxBytes=1_000_000,
            backupCount=5,
            encoding="utf-8",
        )
        formatter = logging.Formatter(
            "%(asctime)s %(levelname)s [%(name)s] %(message)s"
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.propagate = False
    logger.setLevel(level)

    logging.captureWarnings(True)
    return logger


class RowLike(Protocol):
    """Protocol for rows serialisable in tabular form."""

    def as_cells(self) -> Iterable[str]:
        """Return the ordered values to write to the sheet."""


@dataclass(slots=True)
class ExcelLoggerConfig:
    """Configuration used by :class:`ExcelLogger`."""

    columns: Sequence[str]
    filename: str = "einvoice-issues.xlsx"
    sheet_title: str = "Issues"


class ExcelLogger:
    """Write rows to an Excel workbook using :mod:`openpyxl`.

    Every call to :meth:`write_rows` creates a fresh workbook with the header
    from :class:`ExcelLoggerConfig` followed by the given rows.
    """

    def __init__(self, config: ExcelLoggerConfig) -> None:
        self.config = config

    def write_rows(self, rows: Iterable[RowLike | Iterable[str]]) -> Path:
        """Persist ``rows`` to the configured file and return its path."""

        from openpyxl import Workbook

        destination = Path(self.config.filename)
        destination.parent.mkdir(parents=True, exist_ok=True)

        workbook = Workbook()
        worksheet = workbook.active
        worksheet.title = self.config.sheet_title

        if self.config.columns:
            worksheet.append(list(self.config.columns))

        for row in rows:
            if hasattr(row, "as_cells"):
                cells = list(row.as_cells())  # type: ignore[union-attr]
            else:
                cells = list(row)  # type: ignore[arg-type]
            worksheet.append(cells)

        workbook.save(destination)
        return destination


__all__ = [
    "ExcelLogger",
    "ExcelLoggerConfig",
    "PACKAGE_LOGGER",
    "RowLike",
    "configure_logging",
    "default_log_dir",
]
