from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Mapping, Optional

from stacksniff.config.ignore import ExcludePatterns
from stacksniff.core.models import REPO_KEY


@dataclass(frozen=True)
class DetectionContext:
    """What a detector can see while it runs.

    ``published`` holds the results of earlier phases and is read-only.
    Detectors return their findings instead of writing them here.
    """

    project_root: Path
    published: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    exclude: Optional[ExcludePatterns] = None

    @classmethod
    def snapshot(
        cls,
        project_root: Path,
        published: Mapping[str, str],
        exclude: Optional[ExcludePatterns] = None,
    ) -> "DetectionContext":
        """Create a context over a frozen copy of published results."""
        return cls(
            project_root=project_root,
            published=MappingProxyType(dict(published)),
            exclude=exclude,
        )

    @property
    def repo(self) -> Optional[str]:
        """Published repository URL, if the repository detector found one."""
        return self.published.get(REPO_KEY)


class Detector(ABC):
    """Base class for all detectors.

    A detector inspects the project and returns a mapping of result keys to
    values. It must not depend on other detectors except through
    ``context.published``.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Detector identifier (e.g., 'git', 'services', 'files')."""

    @abstractmethod
    def detect(self, context: DetectionContext) -> Dict[str, str]:
        """Run detection.

        Args:
            context: Project root, published results and exclusions.

        Returns:
            Mapping of result key to value; empty when nothing was found.
        """
