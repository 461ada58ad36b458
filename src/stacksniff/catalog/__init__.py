"""Detection catalog: languages, services and technologies.

Usage:
    from stacksniff.catalog import load_catalog

    catalog = load_catalog()
    catalog.display_name("github-actions")
"""

from stacksniff.catalog.loader import CatalogError, bundled_catalog_dir, load_catalog
from stacksniff.catalog.models import (
    Catalog,
    LanguageEntry,
    PackageManagerEntry,
    ServiceEntry,
    TechnologyEntry,
)

__all__ = [
    "Catalog",
    "CatalogError",
    "LanguageEntry",
    "PackageManagerEntry",
    "ServiceEntry",
    "TechnologyEntry",
    "bundled_catalog_dir",
    "load_catalog",
]
