"""JSON reporter for stacksniff."""

from __future__ import annotations

import json
from typing import IO, Any, Dict

from stacksniff.core.models import DetectionReport
from stacksniff.reporters.base import ReporterPlugin


class JSONReporter(ReporterPlugin):
    """Reporter that outputs the detection report as JSON.

    Produces machine-readable JSON output containing:
    - Status ("ok", or "partial" when a detector failed)
    - Project name and root
    - Languages, primary language and package manager
    - Detected services and technologies keyed by id
    - Repository URL
    - Detector errors
    """

    @property
    def name(self) -> str:
        return "json"

    def report(self, report: DetectionReport, output: IO[str]) -> None:
        json.dump(self._format_report(report), output, indent=2)
        output.write("\n")

    def _format_report(self, report: DetectionReport) -> Dict[str, Any]:
        return {
            "status": "ok" if report.ok else "partial",
            "project": report.project_name,
            "project_root": str(report.project_root),
            "language": report.stack.language,
            "package_manager": report.stack.package_manager,
            "languages": list(report.stack.languages),
            "services": report.services,
            "repo": report.repo,
            "errors": [
                {
                    "detector": failure.detector,
                    "phase": failure.phase.value,
                    "message": failure.message,
                }
                for failure in report.failures
            ],
        }
