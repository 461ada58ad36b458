"""Stack detection module.

This module provides automatic detection of:
- The repository URL (git remote)
- Language ecosystems and their manifests
- Third-party services declared as dependencies
- CI systems, hosting platforms and infrastructure tooling

Usage:
    from stacksniff.catalog import load_catalog
    from stacksniff.detection import build_default_coordinator

    coordinator = build_default_coordinator(load_catalog())
    report = coordinator.run(Path("."))
"""

from stacksniff.detection.base import DetectionContext, Detector
from stacksniff.detection.coordinator import (
    CoordinatorState,
    DetectionCoordinator,
    build_default_coordinator,
)
from stacksniff.detection.repository import RepositoryDetector, normalize_remote_url
from stacksniff.detection.services import ServicesDetector, resolve_services
from stacksniff.detection.technologies import TechnologyDetector, build_technology_url

__all__ = [
    "CoordinatorState",
    "DetectionContext",
    "DetectionCoordinator",
    "Detector",
    "RepositoryDetector",
    "ServicesDetector",
    "TechnologyDetector",
    "build_default_coordinator",
    "build_technology_url",
    "normalize_remote_url",
    "resolve_services",
]
