"""Catalog command implementation."""

from __future__ import annotations

from argparse import Namespace
from typing import List

from stacksniff.catalog import CatalogError, load_catalog
from stacksniff.catalog.models import Catalog
from stacksniff.cli.commands import Command
from stacksniff.cli.exit_codes import EXIT_CATALOG_ERROR, EXIT_SUCCESS
from stacksniff.config.models import SniffConfig
from stacksniff.core.logging import get_logger

LOGGER = get_logger(__name__)


class CatalogCommand(Command):
    """Lists the entries of the detection catalog."""

    @property
    def name(self) -> str:
        return "catalog"

    def execute(self, args: Namespace, config: SniffConfig | None = None) -> int:
        """Print languages, services and technologies, or one kind of them.

        Returns:
            Exit code: 0 = listed, 2 = catalog could not be loaded.
        """
        try:
            catalog = load_catalog(getattr(args, "catalog", None))
        except CatalogError as e:
            LOGGER.error(f"Failed to load catalog: {e}")
            return EXIT_CATALOG_ERROR

        kind = getattr(args, "kind", None)
        sections = []
        if kind in (None, "languages"):
            sections.append(("Languages", self._language_lines(catalog)))
        if kind in (None, "services"):
            sections.append(("Services", self._service_lines(catalog)))
        if kind in (None, "technologies"):
            sections.append(("Technologies", self._technology_lines(catalog)))

        for index, (title, lines) in enumerate(sections):
            if index:
                print()
            print(f"{title} ({len(lines)}):")
            for line in lines:
                print(f"  {line}")

        return EXIT_SUCCESS

    def _language_lines(self, catalog: Catalog) -> List[str]:
        return [
            f"{language.id}: {', '.join(language.package_managers)}"
            for language in catalog.languages.values()
        ]

    def _service_lines(self, catalog: Catalog) -> List[str]:
        lines = []
        for service in catalog.services.values():
            languages = ", ".join(sorted(service.packages))
            lines.append(f"{service.id} ({service.display_name}) [{languages}]")
        return lines

    def _technology_lines(self, catalog: Catalog) -> List[str]:
        return [
            f"{technology.id} ({technology.display_name}) category={technology.category_key}"
            for technology in catalog.technologies.values()
        ]
