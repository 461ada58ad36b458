"""Immutable catalog types.

The catalog is loaded once and then shared by every detector. All containers
are tuples, frozensets or read-only mapping proxies so that no component can
change what another one sees.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterator, Mapping, Optional, Set, Tuple

from stacksniff.core.models import REPO_KEY

REPO_DISPLAY_NAME = "Repository"


@dataclass(frozen=True)
class PackageManagerEntry:
    """A package manager and the manifest files that indicate it."""

    id: str
    files: Tuple[str, ...]


@dataclass(frozen=True)
class LanguageEntry:
    """A language ecosystem, keyed by package manager."""

    id: str
    package_managers: Mapping[str, PackageManagerEntry]

    def file_patterns(self) -> Iterator[str]:
        """Yield every manifest pattern of every package manager, in order."""
        for manager in self.package_managers.values():
            yield from manager.files


@dataclass(frozen=True)
class ServiceEntry:
    """A third-party service confirmed by package names in manifests."""

    id: str
    display_name: str
    url: str
    packages: Mapping[str, frozenset]

    def packages_for(self, language: str) -> frozenset:
        return self.packages.get(language, frozenset())


@dataclass(frozen=True)
class TechnologyEntry:
    """A technology detected by file presence alone (CI, hosting, IaC)."""

    id: str
    display_name: str
    files: Tuple[str, ...]
    category: Optional[str] = None
    url_template: Optional[str] = None
    hosting_match: Optional[str] = None
    fallback_url: Optional[str] = None

    @property
    def category_key(self) -> str:
        """Category used for conflict resolution; uncategorized entries stand alone."""
        return self.category or self.id


@dataclass(frozen=True)
class Catalog:
    """The complete detection dataset."""

    languages: Mapping[str, LanguageEntry]
    services: Mapping[str, ServiceEntry]
    technologies: Mapping[str, TechnologyEntry]

    @classmethod
    def build(cls, languages, services, technologies) -> "Catalog":
        """Create a catalog from iterables of entries, preserving their order."""
        return cls(
            languages=MappingProxyType({entry.id: entry for entry in languages}),
            services=MappingProxyType({entry.id: entry for entry in services}),
            technologies=MappingProxyType({entry.id: entry for entry in technologies}),
        )

    def packages_for_language(self, language: str) -> Set[str]:
        """All package names any service lists for a language."""
        names: Set[str] = set()
        for service in self.services.values():
            names.update(service.packages_for(language))
        return names

    def display_name(self, key: str) -> str:
        """Human readable name for a result key."""
        if key == REPO_KEY:
            return REPO_DISPLAY_NAME
        if key in self.technologies:
            return self.technologies[key].display_name
        if key in self.services:
            return self.services[key].display_name
        return key.title()

    def key_for_display_name(self, display_name: str) -> str:
        """Inverse of display_name for keys produced by detection."""
        if display_name == REPO_DISPLAY_NAME:
            return REPO_KEY
        for technology in self.technologies.values():
            if technology.display_name == display_name:
                return technology.id
        for service in self.services.values():
            if service.display_name == display_name:
                return service.id
        return display_name.lower()
