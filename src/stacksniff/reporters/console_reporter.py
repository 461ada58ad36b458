"""Console reporter for stacksniff."""

from __future__ import annotations

from typing import IO, List

from stacksniff.core.models import DetectionReport
from stacksniff.reporters.base import ReporterPlugin


class ConsoleReporter(ReporterPlugin):
    """Human readable listing of everything that was detected."""

    @property
    def name(self) -> str:
        return "console"

    def report(self, report: DetectionReport, output: IO[str]) -> None:
        output.write("\n".join(self._format_lines(report)))
        output.write("\n")

    def _format_lines(self, report: DetectionReport) -> List[str]:
        lines: List[str] = []

        stack = report.stack
        if stack.language:
            smell = f"Smells like {stack.language}"
            if stack.package_manager:
                smell += f" ({stack.package_manager})"
            if len(stack.languages) > 1:
                smell += f", with a hint of {', '.join(stack.languages[1:])}"
            lines.append(smell)
        else:
            lines.append("No language detected")

        services = report.services
        count = len(services) + (1 if report.repo else 0)
        lines.append(f"Detected {count} item(s):")

        for key, value in services.items():
            lines.append(f"  {self.display_name(key)}: {value}")
        if report.repo:
            lines.append(f"  {self.display_name('repo')}: {report.repo}")

        for failure in report.failures:
            lines.append(f"Warning: {failure.detector} detector failed: {failure.message}")

        return lines
