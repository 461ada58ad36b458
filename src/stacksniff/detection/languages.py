"""Language detection module.

Detects language ecosystems in a project by looking for the manifest files
the catalog lists for their package managers (Gemfile, package.json,
requirements.txt, go.mod, ...).
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Set

from stacksniff.catalog.models import Catalog, LanguageEntry
from stacksniff.config.ignore import ExcludePatterns
from stacksniff.core.logging import get_logger
from stacksniff.core.models import StackProfile
from stacksniff.detection.patterns import has_match

LOGGER = get_logger(__name__)


def detect_languages(
    project_root: Path,
    catalog: Catalog,
    exclude: Optional[ExcludePatterns] = None,
) -> Set[str]:
    """Detect the language ecosystems present in a project.

    A language is present if any file pattern of any of its package
    managers matches under project_root.

    Args:
        project_root: Path to the project root directory.
        catalog: Detection catalog.
        exclude: Optional exclusion set.

    Returns:
        Set of detected language ids (empty when nothing matches).
    """
    detected = set()

    for language in catalog.languages.values():
        if has_match(project_root, language.file_patterns(), exclude):
            detected.add(language.id)

    LOGGER.debug(f"Detected languages in {project_root}: {sorted(detected)}")
    return detected


def detect_package_managers(
    project_root: Path,
    language: LanguageEntry,
    exclude: Optional[ExcludePatterns] = None,
) -> List[str]:
    """Detect which package managers of a language are in use.

    Args:
        project_root: Path to the project root directory.
        language: Catalog entry of the language.
        exclude: Optional exclusion set.

    Returns:
        Package manager ids in catalog order.
    """
    return [
        manager.id
        for manager in language.package_managers.values()
        if has_match(project_root, manager.files, exclude)
    ]


def order_languages(languages: Set[str], catalog: Catalog) -> List[str]:
    """Order detected language ids by their position in the catalog."""
    return [language_id for language_id in catalog.languages if language_id in languages]


def primary_language(languages: Set[str], catalog: Catalog) -> Optional[str]:
    """Get the primary language: the first detected one in catalog order."""
    ordered = order_languages(languages, catalog)
    return ordered[0] if ordered else None


def profile_stack(
    project_root: Path,
    catalog: Catalog,
    exclude: Optional[ExcludePatterns] = None,
) -> StackProfile:
    """Summarize the languages of a project.

    The package manager reported is the first matching one of the primary
    language, so lockfile-specific managers win over generic manifests.
    """
    languages = order_languages(detect_languages(project_root, catalog, exclude), catalog)
    if not languages:
        return StackProfile()

    managers = detect_package_managers(project_root, catalog.languages[languages[0]], exclude)
    return StackProfile(
        languages=tuple(languages),
        package_manager=managers[0] if managers else None,
    )
