"""Command-line entry point."""

from __future__ import annotations

import argparse
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _distribution_version

# Filled in by release builds.
VERSION = ""
DATE = ""


def version_stamp(version: str, date: str) -> str:
    """Format the version line, e.g. ``v1.2.3, built 2022-01-01``."""
    date = date.partition("T")[0]
    if not date:
        date = "unknown"
    if not version:
        try:
            version = _distribution_version("ctlptl")
        except PackageNotFoundError:
            version = "0.0.0-main"
    return f"v{version}, built {date}"


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ctlptl",
        description="Mess around with local Kubernetes clusters without consequences",
    )
    commands = parser.add_subparsers(dest="command")
    commands.add_parser("version", help="Current ctlptl version")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _parser()
    args = parser.parse_args(argv)
    if args.command == "version":
        print(version_stamp(VERSION, DATE))
        return 0
    parser.print_help()
    return 0