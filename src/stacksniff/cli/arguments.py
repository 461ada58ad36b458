"""Argument parser construction for stacksniff CLI.

This module builds the argument parser with subcommands:
- stacksniff sniff   - Detect the stack of a project
- stacksniff catalog - List what the detection catalog knows about
"""

from __future__ import annotations

import argparse
from pathlib import Path

CATALOG_KINDS = ["languages", "services", "technologies"]


def _add_global_options(parser: argparse.ArgumentParser) -> None:
    """Add global options available to all commands."""
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show stacksniff version and exit.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging.",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (info-level) logging.",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Reduce logging output to errors only.",
    )


def _build_sniff_parser(subparsers: argparse._SubParsersAction) -> None:
    """Build the 'sniff' subcommand parser."""
    sniff_parser = subparsers.add_parser(
        "sniff",
        help="Detect the languages, services and tooling of a project.",
        description=(
            "Inspect manifests, config files and the git remote of a project, "
            "print what was found and record it in the stack file."
        ),
    )
    sniff_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Project directory to inspect (default: current directory).",
    )

    output_group = sniff_parser.add_argument_group("output")
    output_group.add_argument(
        "--format",
        choices=["console", "json"],
        default=None,
        help="Output format (default: console, or output.format from config).",
    )
    output_group.add_argument(
        "--no-write",
        action="store_true",
        help="Do not write the stack file.",
    )
    output_group.add_argument(
        "--stack-file",
        metavar="NAME",
        default=None,
        help="Stack file to write, relative to the project (default: stacksniff.yml).",
    )

    config_group = sniff_parser.add_argument_group("configuration")
    config_group.add_argument(
        "--config",
        metavar="PATH",
        type=Path,
        default=None,
        help="Path to a config file (default: .stacksniff.yml in the project).",
    )
    config_group.add_argument(
        "--remote",
        metavar="NAME",
        default=None,
        help="Git remote used for the repository URL (default: origin).",
    )


def _build_catalog_parser(subparsers: argparse._SubParsersAction) -> None:
    """Build the 'catalog' subcommand parser."""
    catalog_parser = subparsers.add_parser(
        "catalog",
        help="List catalog entries.",
        description="Show the languages, services and technologies stacksniff detects.",
    )
    catalog_parser.add_argument(
        "--kind",
        choices=CATALOG_KINDS,
        default=None,
        help="Only list one kind of entry.",
    )
    catalog_parser.add_argument(
        "--catalog",
        metavar="DIR",
        type=Path,
        default=None,
        help="Catalog directory to use instead of the bundled one.",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the main argument parser with subcommands.

    Returns:
        Configured ArgumentParser instance.
    """
    parser = argparse.ArgumentParser(
        prog="stacksniff",
        description="stacksniff - Detect the technology stack of a project.",
    )
    _add_global_options(parser)

    subparsers = parser.add_subparsers(
        title="commands",
        dest="command",
        metavar="<command>",
    )
    _build_sniff_parser(subparsers)
    _build_catalog_parser(subparsers)

    return parser
