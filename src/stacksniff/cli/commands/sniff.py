"""Sniff command implementation."""

from __future__ import annotations

import sys
from argparse import Namespace
from pathlib import Path

from stacksniff.catalog import CatalogError, load_catalog
from stacksniff.catalog.models import Catalog
from stacksniff.cli.commands import Command
from stacksniff.cli.exit_codes import EXIT_CATALOG_ERROR, EXIT_INVALID_USAGE, EXIT_SUCCESS
from stacksniff.config.ignore import load_exclude_patterns
from stacksniff.config.models import SniffConfig
from stacksniff.core.logging import get_logger
from stacksniff.core.models import DetectionReport
from stacksniff.detection import build_default_coordinator
from stacksniff.detection.languages import profile_stack
from stacksniff.reporters import get_reporter
from stacksniff.stackfile import StackFileError, write_stack_file

LOGGER = get_logger(__name__)


class SniffCommand(Command):
    """Detects the stack of a project and records it."""

    @property
    def name(self) -> str:
        return "sniff"

    def execute(self, args: Namespace, config: SniffConfig | None = None) -> int:
        """Execute the sniff command.

        Args:
            args: Parsed command-line arguments.
            config: Loaded configuration (defaults when None).

        Returns:
            Exit code: 0 = done, 2 = catalog could not be loaded,
            3 = bad project path or unknown output format.
        """
        config = config or SniffConfig()
        project_root = Path(args.path).resolve()
        if not project_root.is_dir():
            LOGGER.error(f"Not a directory: {project_root}")
            return EXIT_INVALID_USAGE

        try:
            catalog = load_catalog(config.catalog_path)
        except CatalogError as e:
            LOGGER.error(f"Failed to load catalog: {e}")
            return EXIT_CATALOG_ERROR

        reporter = get_reporter(config.output.format, catalog)
        if reporter is None:
            LOGGER.error(f"Reporter '{config.output.format}' not found")
            return EXIT_INVALID_USAGE

        report = self._run(project_root, catalog, config)
        reporter.report(report, sys.stdout)

        if config.output.write:
            self._write_stack_file(report, catalog, config)

        return EXIT_SUCCESS

    def _run(self, project_root: Path, catalog: Catalog, config: SniffConfig) -> DetectionReport:
        exclude = load_exclude_patterns(project_root, config.exclude)
        coordinator = build_default_coordinator(catalog, remote=config.remote, exclude=exclude)

        report = coordinator.run(project_root)
        report.stack = profile_stack(project_root, catalog, exclude)
        report.project_name = config.project_name or project_root.name
        return report

    def _write_stack_file(self, report: DetectionReport, catalog: Catalog, config: SniffConfig) -> None:
        """Merge the results into the stack file; failures only warn."""
        stack_path = report.project_root / config.output.stack_file
        try:
            write_stack_file(stack_path, report.project_name, report.results, catalog)
        except (OSError, StackFileError) as e:
            LOGGER.warning(f"Could not write stack file {stack_path}: {e}")
            return
        if config.output.format == "console":
            print(f"Saved to {stack_path}")
