"""Service detection module.

Confirms third-party services from the packages declared in a project's
manifests: language presence, then manifest scanning, then resolution of
package findings against the catalog's per-service package lists.
"""

from __future__ import annotations

from typing import Dict, Iterable, List

from stacksniff.catalog.models import Catalog
from stacksniff.core.logging import get_logger
from stacksniff.core.models import ManifestFinding, ServiceDetection
from stacksniff.detection.base import DetectionContext, Detector
from stacksniff.detection.languages import detect_languages, order_languages
from stacksniff.detection.manifests import collect_findings

LOGGER = get_logger(__name__)


def resolve_services(findings: Iterable[ManifestFinding], catalog: Catalog) -> List[ServiceDetection]:
    """Turn manifest findings into service detections.

    A finding confirms every service that lists its package for its
    language. Detections of the same service from several files or
    languages are merged into one.

    Args:
        findings: Package findings from the manifest scanner.
        catalog: Detection catalog.

    Returns:
        One detection per confirmed service, in catalog order.
    """
    detections: Dict[str, ServiceDetection] = {}

    for finding in findings:
        for service in catalog.services.values():
            if finding.package_name not in service.packages_for(finding.language):
                continue
            detection = ServiceDetection(
                service_id=service.id,
                languages=(finding.language,),
                matched_packages=frozenset({finding.package_name}),
            )
            existing = detections.get(service.id)
            detections[service.id] = existing.merge(detection) if existing else detection

    return [detections[service_id] for service_id in catalog.services if service_id in detections]


class ServicesDetector(Detector):
    """Detects services referenced by dependency manifests."""

    def __init__(self, catalog: Catalog) -> None:
        self._catalog = catalog

    @property
    def name(self) -> str:
        return "services"

    def detect(self, context: DetectionContext) -> Dict[str, str]:
        """Detect services and map each service id to its dashboard URL.

        Services without a URL map to their id.
        """
        languages = detect_languages(context.project_root, self._catalog, context.exclude)
        if not languages:
            LOGGER.debug("No languages detected, skipping service detection")
            return {}

        findings: List[ManifestFinding] = []
        for language in order_languages(languages, self._catalog):
            findings.extend(
                collect_findings(context.project_root, language, self._catalog, context.exclude)
            )

        results: Dict[str, str] = {}
        for detection in resolve_services(findings, self._catalog):
            service = self._catalog.services[detection.service_id]
            results[service.id] = service.url or service.id
            LOGGER.debug(
                f"Service {service.id} confirmed by {sorted(detection.matched_packages)} "
                f"({', '.join(detection.languages)})"
            )

        LOGGER.info(f"Detected {len(results)} service(s)")
        return results
