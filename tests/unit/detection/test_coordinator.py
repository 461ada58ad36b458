"""Tests for the detection coordinator."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List

import pytest

from stacksniff.catalog.models import Catalog
from stacksniff.core.models import DetectionPhase
from stacksniff.detection.base import DetectionContext, Detector
from stacksniff.detection.coordinator import (
    CoordinatorState,
    DetectionCoordinator,
    build_default_coordinator,
)
from stacksniff.detection.repository import RepositoryDetector
from stacksniff.detection.services import ServicesDetector
from stacksniff.detection.technologies import TechnologyDetector


class StaticDetector(Detector):
    """Returns fixed results and records the context it saw."""

    def __init__(self, name: str, results: Dict[str, str]) -> None:
        self._name = name
        self._results = results
        self.seen: List[DetectionContext] = []

    @property
    def name(self) -> str:
        return self._name

    def detect(self, context: DetectionContext) -> Dict[str, str]:
        self.seen.append(context)
        return dict(self._results)


class FailingDetector(Detector):
    @property
    def name(self) -> str:
        return "broken"

    def detect(self, context: DetectionContext) -> Dict[str, str]:
        raise RuntimeError("boom")


class MutatingDetector(Detector):
    @property
    def name(self) -> str:
        return "mutating"

    def detect(self, context: DetectionContext) -> Dict[str, str]:
        context.published["repo"] = "hijacked"  # type: ignore[index]
        return {}


class NoneDetector(Detector):
    @property
    def name(self) -> str:
        return "none"

    def detect(self, context: DetectionContext) -> Dict[str, str]:
        return None  # type: ignore[return-value]


class TestDetectionCoordinator:
    """Tests for DetectionCoordinator.run."""

    def test_phase2_sees_phase1_results(self, tmp_path: Path) -> None:
        phase1 = StaticDetector("git", {"repo": "https://github.com/a/b"})
        phase2 = StaticDetector("files", {"github-actions": "https://github.com/a/b/actions"})

        report = DetectionCoordinator([phase1], [phase2]).run(tmp_path)

        assert phase1.seen[0].published == {}
        assert phase2.seen[0].repo == "https://github.com/a/b"
        assert report.results == {
            "repo": "https://github.com/a/b",
            "github-actions": "https://github.com/a/b/actions",
        }
        assert report.ok

    def test_phase1_detectors_do_not_see_each_other(self, tmp_path: Path) -> None:
        first = StaticDetector("git", {"repo": "x"})
        second = StaticDetector("services", {})

        DetectionCoordinator([first, second], []).run(tmp_path)

        assert second.seen[0].published == {}

    def test_failure_is_isolated(self, tmp_path: Path) -> None:
        services = StaticDetector("services", {"stripe": "https://dashboard.stripe.com"})
        files = StaticDetector("files", {"docker": "docker"})

        report = DetectionCoordinator([FailingDetector(), services], [files]).run(tmp_path)

        assert report.results == {"stripe": "https://dashboard.stripe.com", "docker": "docker"}
        assert len(report.failures) == 1
        assert report.failures[0].detector == "broken"
        assert report.failures[0].phase == DetectionPhase.PHASE1
        assert "boom" in report.failures[0].message
        assert not report.ok

    def test_non_mapping_result_is_a_failure(self, tmp_path: Path) -> None:
        services = StaticDetector("services", {"stripe": "https://dashboard.stripe.com"})

        report = DetectionCoordinator([NoneDetector(), services], []).run(tmp_path)

        assert report.results == {"stripe": "https://dashboard.stripe.com"}
        assert len(report.failures) == 1
        assert report.failures[0].detector == "none"
        assert not report.ok

    def test_phase2_failure(self, tmp_path: Path) -> None:
        report = DetectionCoordinator([StaticDetector("git", {"repo": "r"})], [FailingDetector()]).run(tmp_path)

        assert report.results == {"repo": "r"}
        assert report.failures[0].phase == DetectionPhase.PHASE2

    def test_published_context_is_read_only(self, tmp_path: Path) -> None:
        phase1 = StaticDetector("git", {"repo": "https://github.com/a/b"})

        report = DetectionCoordinator([phase1], [MutatingDetector()]).run(tmp_path)

        assert report.results["repo"] == "https://github.com/a/b"
        assert report.failures[0].detector == "mutating"

    def test_phase2_collision_last_write_wins(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        first = StaticDetector("files", {"docker": "a"})
        second = StaticDetector("other", {"docker": "b"})

        report = DetectionCoordinator([], [first, second]).run(tmp_path)

        assert report.results == {"docker": "b"}
        assert "overrides 'docker'" in caplog.text

    def test_state_transitions(self, tmp_path: Path) -> None:
        coordinator = DetectionCoordinator([], [])
        assert coordinator.state == CoordinatorState.IDLE

        coordinator.run(tmp_path)

        assert coordinator.state == CoordinatorState.DONE

    def test_report_root_is_resolved(self, tmp_path: Path) -> None:
        report = DetectionCoordinator([], []).run(tmp_path / "." / "")
        assert report.project_root == tmp_path.resolve()


class TestBuildDefaultCoordinator:
    """Tests for build_default_coordinator."""

    def test_wiring(self, catalog: Catalog) -> None:
        coordinator = build_default_coordinator(catalog, remote="upstream")

        assert [type(d) for d in coordinator._phase1] == [RepositoryDetector, ServicesDetector]
        assert [type(d) for d in coordinator._phase2] == [TechnologyDetector]
