"""Technology detection module.

Detects CI systems, hosting platforms and infrastructure tooling from the
files they leave in a project (.github/workflows/, .gitlab-ci.yml, fly.toml,
*.tf, ...) and links each one to a URL.

When several technologies of one category are present at once, the
repository URL published by the repository detector decides: the technology
whose ``hosting_match`` occurs in it wins. Without a winner every candidate
is reported with its fallback URL.
"""

from __future__ import annotations

from typing import Dict, List, Mapping

from stacksniff.catalog.models import Catalog, TechnologyEntry
from stacksniff.catalog.validation import REPO_PLACEHOLDER
from stacksniff.core.logging import get_logger
from stacksniff.core.models import REPO_KEY
from stacksniff.detection.base import DetectionContext, Detector
from stacksniff.detection.patterns import has_match

LOGGER = get_logger(__name__)


def fallback_value(technology: TechnologyEntry) -> str:
    """Value used when no repository-specific URL can be built."""
    return technology.fallback_url or technology.id


def matches_hosting(technology: TechnologyEntry, repo_url: str | None) -> bool:
    """Check whether a technology belongs to the repository's hosting."""
    return bool(technology.hosting_match and repo_url and technology.hosting_match in repo_url)


def build_technology_url(technology: TechnologyEntry, published: Mapping[str, str]) -> str:
    """Build the URL reported for a detected technology.

    Args:
        technology: The detected technology.
        published: Results of earlier detection phases.

    Returns:
        The url_template filled with the repository URL when a repository
        is known and its hosting fits the technology; otherwise the
        fallback URL, or the technology id when there is none.
    """
    repo_url = published.get(REPO_KEY)

    if not repo_url or not technology.url_template:
        return fallback_value(technology)

    if technology.hosting_match and technology.hosting_match not in repo_url:
        return fallback_value(technology)

    return technology.url_template.replace(REPO_PLACEHOLDER, repo_url)


class TechnologyDetector(Detector):
    """Detects technologies by file presence, using published context for URLs."""

    def __init__(self, catalog: Catalog) -> None:
        self._catalog = catalog

    @property
    def name(self) -> str:
        return "files"

    def detect(self, context: DetectionContext) -> Dict[str, str]:
        """Detect technologies and resolve per-category conflicts."""
        categories: Dict[str, List[TechnologyEntry]] = {}
        for technology in self._catalog.technologies.values():
            if has_match(context.project_root, technology.files, context.exclude):
                categories.setdefault(technology.category_key, []).append(technology)

        results: Dict[str, str] = {}
        for category, candidates in categories.items():
            if len(candidates) == 1:
                technology = candidates[0]
                results[technology.id] = build_technology_url(technology, context.published)
                continue

            results.update(self._resolve_conflict(category, candidates, context))

        return results

    def _resolve_conflict(
        self,
        category: str,
        candidates: List[TechnologyEntry],
        context: DetectionContext,
    ) -> Dict[str, str]:
        """Pick between several technologies detected for one category.

        Candidates are in catalog order, so the first hosting match is
        stable across runs.
        """
        repo_url = context.repo
        for technology in candidates:
            if matches_hosting(technology, repo_url):
                LOGGER.debug(
                    f"Category '{category}': {technology.id} matches repository hosting, "
                    f"dropping {[c.id for c in candidates if c is not technology]}"
                )
                return {technology.id: build_technology_url(technology, context.published)}

        LOGGER.info(
            f"Category '{category}' is ambiguous ({', '.join(c.id for c in candidates)}); "
            "reporting every candidate"
        )
        return {technology.id: fallback_value(technology) for technology in candidates}
