"""Two-phase detection coordinator.

Phase 1 detectors see only the project; their results are merged into the
published context. Phase 2 detectors then run against a read-only snapshot
of that context. A failing detector is logged and skipped, never fatal.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence

from stacksniff.catalog.models import Catalog
from stacksniff.config.ignore import ExcludePatterns
from stacksniff.core.logging import get_logger
from stacksniff.core.models import DetectionPhase, DetectionReport, DetectorFailure
from stacksniff.detection.base import DetectionContext, Detector
from stacksniff.detection.repository import RepositoryDetector
from stacksniff.detection.services import ServicesDetector
from stacksniff.detection.technologies import TechnologyDetector

LOGGER = get_logger(__name__)


class CoordinatorState(str, Enum):
    """Lifecycle of a coordinator run."""

    IDLE = "idle"
    PHASE1_RUNNING = "phase1_running"
    PHASE2_RUNNING = "phase2_running"
    DONE = "done"


class DetectionCoordinator:
    """Runs phase 1 and phase 2 detectors and merges their results."""

    def __init__(
        self,
        phase1: Sequence[Detector],
        phase2: Sequence[Detector],
        exclude: Optional[ExcludePatterns] = None,
    ) -> None:
        """Initialize the coordinator.

        Args:
            phase1: Detectors that need no context, in run order.
            phase2: Detectors that read phase 1 results, in run order.
            exclude: Optional exclusion set handed to every detector.
        """
        self._phase1 = list(phase1)
        self._phase2 = list(phase2)
        self._exclude = exclude
        self.state = CoordinatorState.IDLE

    def run(self, project_root: Path) -> DetectionReport:
        """Detect the stack of a project.

        Args:
            project_root: Project root directory.

        Returns:
            DetectionReport with the merged results and any detector failures.
        """
        project_root = project_root.resolve()
        report = DetectionReport(project_root=project_root)

        self.state = CoordinatorState.PHASE1_RUNNING
        published: Dict[str, str] = {}
        phase1_context = DetectionContext.snapshot(project_root, {}, self._exclude)
        for detector in self._phase1:
            results = self._run_detector(detector, phase1_context, DetectionPhase.PHASE1, report)
            if results is None:
                continue
            published.update(results)
            report.results.update(results)

        self.state = CoordinatorState.PHASE2_RUNNING
        phase2_context = DetectionContext.snapshot(project_root, published, self._exclude)
        for detector in self._phase2:
            results = self._run_detector(detector, phase2_context, DetectionPhase.PHASE2, report)
            if results is None:
                continue
            self._merge_phase2(detector, results, report.results)

        self.state = CoordinatorState.DONE
        LOGGER.info(
            f"Detection finished: {len(report.results)} result(s), "
            f"{len(report.failures)} failed detector(s)"
        )
        return report

    def _run_detector(
        self,
        detector: Detector,
        context: DetectionContext,
        phase: DetectionPhase,
        report: DetectionReport,
    ) -> Optional[Dict[str, str]]:
        """Run one detector, recording a failure instead of raising."""
        LOGGER.debug(f"Running {detector.name} detector ({phase.value})")
        try:
            results = dict(detector.detect(context))
        except Exception as e:
            LOGGER.error(f"Error running {detector.name} detector: {e}")
            report.failures.append(
                DetectorFailure(detector=detector.name, phase=phase, message=str(e))
            )
            return None

        LOGGER.debug(f"{detector.name}: {len(results)} result(s)")
        return results

    def _merge_phase2(
        self,
        detector: Detector,
        results: Mapping[str, str],
        merged: Dict[str, str],
    ) -> None:
        """Merge phase 2 results; the last writer wins on a key collision."""
        for key, value in results.items():
            if key in merged and merged[key] != value:
                LOGGER.warning(
                    f"{detector.name} detector overrides '{key}': {merged[key]!r} -> {value!r}"
                )
            merged[key] = value


def build_default_coordinator(
    catalog: Catalog,
    remote: str = "origin",
    exclude: Optional[ExcludePatterns] = None,
) -> DetectionCoordinator:
    """Create the standard pipeline: git and services, then files."""
    phase1: List[Detector] = [RepositoryDetector(remote=remote), ServicesDetector(catalog)]
    phase2: List[Detector] = [TechnologyDetector(catalog)]
    return DetectionCoordinator(phase1, phase2, exclude=exclude)
