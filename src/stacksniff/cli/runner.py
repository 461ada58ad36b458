"""CLI runner orchestration.

This module handles command dispatch and execution for the stacksniff CLI.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Iterable, Optional

from stacksniff.cli.arguments import build_parser
from stacksniff.cli.commands.catalog import CatalogCommand
from stacksniff.cli.commands.sniff import SniffCommand
from stacksniff.cli.config_bridge import ConfigBridge
from stacksniff.cli.exit_codes import EXIT_INVALID_USAGE, EXIT_SUCCESS
from stacksniff.config import ConfigError, load_config
from stacksniff.core.logging import configure_logging, get_logger

LOGGER = get_logger(__name__)


def get_version() -> str:
    """Get stacksniff version.

    Returns:
        Version string from package metadata or fallback.
    """
    try:
        return version("stacksniff")
    except PackageNotFoundError:
        # Not installed, e.g. running from a source checkout
        from stacksniff import __version__
        return __version__


class CLIRunner:
    """Orchestrates CLI execution with subcommand dispatch."""

    def __init__(self) -> None:
        self.parser = build_parser()
        self._version = get_version()
        self.sniff_cmd = SniffCommand()
        self.catalog_cmd = CatalogCommand()

    def run(self, argv: Optional[Iterable[str]] = None) -> int:
        """Run the CLI.

        Args:
            argv: Command-line arguments (defaults to sys.argv).

        Returns:
            Exit code.
        """
        argv_list = list(argv) if argv is not None else None
        if argv_list is not None and argv_list and argv_list[0] in ("--help", "-h"):
            self.parser.print_help()
            return EXIT_SUCCESS

        args = self.parser.parse_args(argv_list)

        configure_logging(
            debug=args.debug,
            verbose=args.verbose,
            quiet=args.quiet,
        )

        if args.version:
            print(self._version)
            return EXIT_SUCCESS

        command = getattr(args, "command", None)

        if command == "sniff":
            return self._handle_sniff(args)
        elif command == "catalog":
            return self.catalog_cmd.execute(args)
        else:
            self.parser.print_help()
            return EXIT_SUCCESS

    def _handle_sniff(self, args) -> int:
        """Load configuration and run the sniff command."""
        project_root = Path(args.path).resolve()
        if not project_root.is_dir():
            LOGGER.error(f"Not a directory: {project_root}")
            return EXIT_INVALID_USAGE

        try:
            config = load_config(
                project_root=project_root,
                cli_config_path=args.config,
                cli_overrides=ConfigBridge.args_to_overrides(args),
            )
        except ConfigError as e:
            LOGGER.error(str(e))
            return EXIT_INVALID_USAGE

        return self.sniff_cmd.execute(args, config)
