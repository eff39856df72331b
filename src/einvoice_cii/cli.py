"""Command line entry points for the CII serialiser."""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass
from typing import Callable, Iterable, Mapping, Sequence

from .commands import check, render, schema_check
from .logging import configure_logging

CommandCallable = Callable[[list[str] | None], int | None]


@dataclass(frozen=True)
class CommandSpec:
    """Metadata describing a CLI command exposed by :mod:`einvoice_cii.cli`."""

    name: str
    summary: str
    handler: CommandCallable
    module: str

    def run(self, argv: list[str] | None) -> int:
        """Execute the command and normalise the resulting exit code."""

        try:
            result = self.handler(argv)
        except SystemExit as exc:  # argparse exits on --help and usage errors
            code = exc.code
            if code is None:
                return 0
            if isinstance(code, int):
                return code
            print(str(code), file=sys.stderr)
            return 1
        if result is None:
            return 0
        return int(result)


_COMMANDS: tuple[CommandSpec, ...] = (
    CommandSpec(
        name="render",
        summary="Serialise an invoice JSON file as CII XML.",
        handler=render.main,
        module="einvoice_cii.commands.render",
    ),
    CommandSpec(
        name="check",
        summary="Check invoice and line item totals, with optional Excel report.",
        handler=check.main,
        module="einvoice_cii.commands.check",
    ),
    CommandSpec(
        name="schema",
        summary="Validate a CII document against the XSD/Schematron of its version.",
        handler=schema_check.main,
        module="einvoice_cii.commands.schema_check",
    ),
)

_COMMAND_INDEX: Mapping[str, CommandSpec] = {spec.name: spec for spec in _COMMANDS}


def available_commands() -> Iterable[CommandSpec]:
    """Return the commands registered in the CLI."""

    return _COMMANDS


def build_parser() -> argparse.ArgumentParser:
    """Return the base argument parser shared across commands."""

    parser = argparse.ArgumentParser(
        prog="einvoice-cii", description="ZUGFeRD / XRechnung CII tools"
    )
    subparsers = parser.add_subparsers(dest="command", metavar="command")
    subparsers.required = True

    for spec in _COMMANDS:
        subparser = subparsers.add_parser(
            spec.name,
            help=spec.summary,
            description=spec.summary,
            add_help=False,
        )
        subparser.add_argument("args", nargs=argparse.REMAINDER, help=argparse.SUPPRESS)

    return parser


def _normalise_args(namespace: argparse.Namespace) -> tuple[str, list[str]]:
    command = getattr(namespace, "command")
    remainder = getattr(namespace, "args", [])
    return command, list(remainder)


def run(command: str, argv: Sequence[str] | None = None) -> int:
    """Execute *command* forwarding ``argv`` to the underlying handler."""

    spec = _COMMAND_INDEX.get(command)
    if spec is None:
        raise ValueError(f"Unknown command: {command}")
    return spec.run(list(argv or []))


def main(argv: Sequence[str] | None = None) -> int:
    """Execute the command line interface."""

    parser = build_parser()
    namespace, extras = parser.parse_known_args(argv)
    command, remainder = _normalise_args(namespace)

    configure_logging()
    return run(command, remainder + extras)


if __name__ == "__main__":  # pragma: no cover - direct execution
    raise SystemExit(main())
