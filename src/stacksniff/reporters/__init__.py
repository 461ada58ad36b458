"""Reporters for stacksniff output formatting.

The console and JSON reporters are built in. Additional reporters are
discovered via Python entry points (``stacksniff.reporters`` group):

    [project.entry-points."stacksniff.reporters"]
    markdown = "my_package.reporters:MarkdownReporter"
"""

from __future__ import annotations

from importlib.metadata import entry_points
from typing import Dict, List, Optional, Type

from stacksniff.catalog.models import Catalog
from stacksniff.core.logging import get_logger
from stacksniff.reporters.base import ReporterPlugin
from stacksniff.reporters.console_reporter import ConsoleReporter
from stacksniff.reporters.json_reporter import JSONReporter

LOGGER = get_logger(__name__)

REPORTER_ENTRY_POINT_GROUP = "stacksniff.reporters"

BUILTIN_REPORTERS: Dict[str, Type[ReporterPlugin]] = {
    "console": ConsoleReporter,
    "json": JSONReporter,
}


def discover_reporters() -> Dict[str, Type[ReporterPlugin]]:
    """Built-in reporters plus those installed via entry points."""
    reporters = dict(BUILTIN_REPORTERS)

    for ep in entry_points(group=REPORTER_ENTRY_POINT_GROUP):
        if ep.name in reporters:
            continue
        try:
            reporter_class = ep.load()
        except Exception as e:
            LOGGER.warning(f"Failed to load reporter '{ep.name}': {e}")
            continue
        if not (isinstance(reporter_class, type) and issubclass(reporter_class, ReporterPlugin)):
            LOGGER.warning(f"Reporter '{ep.name}' does not inherit from ReporterPlugin, skipping")
            continue
        reporters[ep.name] = reporter_class
        LOGGER.debug(f"Discovered reporter: {ep.name}")

    return reporters


def get_reporter(name: str, catalog: Optional[Catalog] = None) -> Optional[ReporterPlugin]:
    """Get an instantiated reporter by name, or None if there is none."""
    reporter_class = discover_reporters().get(name)
    if reporter_class is None:
        return None
    return reporter_class(catalog=catalog)


def list_available_reporters() -> List[str]:
    """List names of all available reporters."""
    return sorted(discover_reporters())


__all__ = [
    "ConsoleReporter",
    "JSONReporter",
    "ReporterPlugin",
    "discover_reporters",
    "get_reporter",
    "list_available_reporters",
]
