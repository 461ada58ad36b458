"""Base class for reporters."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import IO, Optional

from stacksniff.catalog.models import REPO_DISPLAY_NAME, Catalog
from stacksniff.core.models import REPO_KEY, DetectionReport


class ReporterPlugin(ABC):
    """Base class for all reporters.

    Reporters format a detection report for output. Each reporter implements
    one format (console, JSON, ...).
    """

    def __init__(self, catalog: Optional[Catalog] = None) -> None:
        self._catalog = catalog

    @property
    @abstractmethod
    def name(self) -> str:
        """Reporter identifier (e.g., 'console', 'json')."""

    @abstractmethod
    def report(self, report: DetectionReport, output: IO[str]) -> None:
        """Format and write the detection report.

        Args:
            report: The detection report to format.
            output: Output stream to write the formatted report.
        """

    def display_name(self, key: str) -> str:
        """Display name of a result key, with or without a catalog."""
        if self._catalog is not None:
            return self._catalog.display_name(key)
        return REPO_DISPLAY_NAME if key == REPO_KEY else key.title()
