"""Catalog loading.

The bundled catalog lives in ``stacksniff/catalog/data``:

- ``languages.yml``: languages, their package managers and manifest files
- ``technologies.yml``: technologies detected by file presence
- ``services/<id>.yml``: one file per service with its packages per language

A directory with the same layout can be loaded instead (``catalog.path``).
"""

from __future__ import annotations

from importlib.resources import files
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Optional, Union

import yaml

from stacksniff.catalog.models import (
    Catalog,
    LanguageEntry,
    PackageManagerEntry,
    ServiceEntry,
    TechnologyEntry,
)
from stacksniff.catalog.validation import (
    CatalogValidationIssue,
    ValidationSeverity,
    validate_display_names,
    validate_key_ownership,
    validate_languages,
    validate_service,
    validate_technologies,
)
from stacksniff.core.logging import get_logger

LOGGER = get_logger(__name__)

LANGUAGES_FILE = "languages.yml"
TECHNOLOGIES_FILE = "technologies.yml"
SERVICES_DIR = "services"
SERVICE_SUFFIXES = (".yml", ".yaml")


class CatalogError(Exception):
    """Catalog loading or validation error."""

    pass


def bundled_catalog_dir():
    """Return the directory of the catalog shipped with the package."""
    return files("stacksniff.catalog").joinpath("data")


def load_catalog(catalog_dir: Optional[Union[str, Path]] = None) -> Catalog:
    """Load and validate a catalog.

    Args:
        catalog_dir: Directory containing the catalog files. Defaults to
            the bundled catalog.

    Returns:
        Immutable Catalog instance.

    Raises:
        CatalogError: If a file is missing, is not valid YAML or fails
            validation.
    """
    if catalog_dir is None:
        root = bundled_catalog_dir()
    else:
        root = Path(catalog_dir)
        if not root.is_dir():
            raise CatalogError(f"Catalog directory not found: {catalog_dir}")

    issues: List[CatalogValidationIssue] = []

    languages_source = root.joinpath(LANGUAGES_FILE)
    languages_data = _load_document(languages_source).get("languages") or {}
    issues.extend(validate_languages(languages_data, str(languages_source)))

    technologies_source = root.joinpath(TECHNOLOGIES_FILE)
    technologies_data = _load_document(technologies_source).get("technologies") or {}
    issues.extend(validate_technologies(technologies_data, str(technologies_source)))

    services_data: Dict[str, Dict[str, Any]] = {}
    services_root = root.joinpath(SERVICES_DIR)
    if services_root.is_dir():
        for entry in sorted(services_root.iterdir(), key=lambda e: e.name):
            if not entry.is_file() or not entry.name.endswith(SERVICE_SUFFIXES):
                continue
            service_id = entry.name.rsplit(".", 1)[0]
            data = _load_document(entry)
            issues.extend(validate_service(service_id, data, str(entry)))
            services_data[service_id] = data
    else:
        LOGGER.debug(f"No services directory in {root}")

    _raise_on_errors(issues)

    ownership_issues = validate_key_ownership(
        list(services_data), list(technologies_data), str(root)
    )
    _raise_on_errors(ownership_issues)

    catalog = Catalog.build(
        languages=[_parse_language(k, v) for k, v in languages_data.items()],
        services=[_parse_service(k, v) for k, v in services_data.items()],
        technologies=[_parse_technology(k, v) for k, v in technologies_data.items()],
    )

    display_names = {key: catalog.display_name(key) for key in (*catalog.technologies, *catalog.services)}
    validate_display_names(display_names, str(root))

    LOGGER.debug(
        f"Loaded catalog from {root}: {len(catalog.languages)} languages, "
        f"{len(catalog.services)} services, {len(catalog.technologies)} technologies"
    )
    return catalog


def _load_document(source) -> Dict[str, Any]:
    """Read one YAML document that must be a mapping (or empty)."""
    try:
        content = source.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise CatalogError(f"Cannot read catalog file {source}: {e}") from e

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise CatalogError(f"Invalid YAML in {source}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise CatalogError(f"Catalog file {source} must be a YAML mapping, got {type(data).__name__}")
    return data


def _raise_on_errors(issues: List[CatalogValidationIssue]) -> None:
    errors = [issue for issue in issues if issue.severity == ValidationSeverity.ERROR]
    if errors:
        details = "; ".join(f"{issue.message} ({issue.source})" for issue in errors)
        raise CatalogError(f"Invalid catalog: {details}")


def _parse_language(language_id: str, data: Dict[str, Any]) -> LanguageEntry:
    managers = {
        manager_id: PackageManagerEntry(id=manager_id, files=tuple(manager["files"]))
        for manager_id, manager in data["package_managers"].items()
    }
    return LanguageEntry(id=language_id, package_managers=MappingProxyType(managers))


def _parse_service(service_id: str, data: Dict[str, Any]) -> ServiceEntry:
    stacks = data.get("stacks") or {}
    return ServiceEntry(
        id=service_id,
        display_name=data.get("name") or service_id.title(),
        url=data.get("url") or "",
        packages=MappingProxyType({lang: frozenset(pkgs) for lang, pkgs in stacks.items()}),
    )


def _parse_technology(tech_id: str, data: Dict[str, Any]) -> TechnologyEntry:
    return TechnologyEntry(
        id=tech_id,
        display_name=data.get("display_name") or tech_id.replace("-", " ").title(),
        files=tuple(data["files"]),
        category=data.get("category"),
        url_template=data.get("url_template"),
        hosting_match=data.get("hosting_match"),
        fallback_url=data.get("fallback_url"),
    )
