from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, FrozenSet, List, Optional, Tuple

REPO_KEY = "repo"


class DetectionPhase(str, Enum):
    """Pipeline phase a detector runs in."""

    PHASE1 = "phase1"
    PHASE2 = "phase2"


@dataclass(frozen=True)
class ManifestFinding:
    """A package name confirmed in one manifest file."""

    language: str
    file_path: Path
    package_name: str


@dataclass(frozen=True)
class ServiceDetection:
    """A service confirmed by one or more manifest findings.

    ``languages`` keeps every language the service was seen in, sorted, so
    merging is order independent. ``language`` is the first of them.
    """

    service_id: str
    languages: Tuple[str, ...]
    matched_packages: FrozenSet[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        object.__setattr__(self, "languages", tuple(sorted(set(self.languages))))

    @property
    def language(self) -> str:
        return self.languages[0] if self.languages else ""

    def merge(self, other: "ServiceDetection") -> "ServiceDetection":
        """Union two detections of the same service."""
        if other.service_id != self.service_id:
            raise ValueError(
                f"Cannot merge detections of different services: "
                f"{self.service_id!r} and {other.service_id!r}"
            )
        return ServiceDetection(
            service_id=self.service_id,
            languages=tuple(set(self.languages) | set(other.languages)),
            matched_packages=self.matched_packages | other.matched_packages,
        )


@dataclass(frozen=True)
class DetectorFailure:
    """A detector that raised during a scan; its contribution was dropped."""

    detector: str
    phase: DetectionPhase
    message: str


@dataclass(frozen=True)
class StackProfile:
    """Languages of a project and the package manager of the primary one."""

    languages: Tuple[str, ...] = ()
    package_manager: Optional[str] = None

    @property
    def language(self) -> Optional[str]:
        return self.languages[0] if self.languages else None


@dataclass
class DetectionReport:
    """Final output of one coordinator run."""

    project_root: Path
    results: Dict[str, str] = field(default_factory=dict)
    failures: List[DetectorFailure] = field(default_factory=list)
    stack: StackProfile = field(default_factory=StackProfile)
    project_name: str = ""

    @property
    def repo(self) -> str | None:
        return self.results.get(REPO_KEY)

    @property
    def services(self) -> Dict[str, str]:
        """All detected entries except the repository URL."""
        return {k: v for k, v in self.results.items() if k != REPO_KEY}

    @property
    def ok(self) -> bool:
        return not self.failures
