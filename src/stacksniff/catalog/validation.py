"""Catalog validation.

Checks the raw YAML documents before they are converted to catalog entries.
Structural problems are errors (the catalog is unusable); unknown keys are
warnings with a close-match suggestion.
"""

from __future__ import annotations

from dataclasses import dataclass
from difflib import get_close_matches
from enum import Enum
from typing import Any, Dict, List, Optional, Set

from stacksniff.core.logging import get_logger
from stacksniff.core.models import REPO_KEY

LOGGER = get_logger(__name__)

REPO_PLACEHOLDER = "{repo}"


class ValidationSeverity(Enum):
    """Severity level for validation issues."""

    ERROR = "error"  # Catalog cannot be used
    WARNING = "warning"  # Likely mistake but catalog usable


@dataclass
class CatalogValidationIssue:
    """A validation issue found in a catalog document."""

    message: str
    source: str
    severity: ValidationSeverity
    key: Optional[str] = None
    suggestion: Optional[str] = None


VALID_LANGUAGE_KEYS: Set[str] = {"package_managers"}

VALID_PACKAGE_MANAGER_KEYS: Set[str] = {"files"}

VALID_SERVICE_KEYS: Set[str] = {"name", "url", "stacks"}

VALID_TECHNOLOGY_KEYS: Set[str] = {
    "display_name",
    "category",
    "hosting_match",
    "files",
    "url_template",
    "fallback_url",
}


def validate_languages(data: Any, source: str) -> List[CatalogValidationIssue]:
    """Validate the ``languages`` document.

    Args:
        data: Parsed ``languages`` mapping.
        source: File the data came from, for messages.

    Returns:
        List of validation issues.
    """
    issues: List[CatalogValidationIssue] = []

    if not isinstance(data, dict):
        issues.append(_error(f"'languages' must be a mapping, got {type(data).__name__}", source))
        return issues

    for language_id, language in data.items():
        prefix = f"languages.{language_id}"
        if not isinstance(language, dict):
            issues.append(_error(f"'{prefix}' must be a mapping", source, prefix))
            continue

        issues.extend(_unknown_keys(language, VALID_LANGUAGE_KEYS, prefix, source))

        managers = language.get("package_managers")
        if not isinstance(managers, dict) or not managers:
            issues.append(_error(
                f"'{prefix}.package_managers' must be a non-empty mapping",
                source,
                f"{prefix}.package_managers",
            ))
            continue

        for manager_id, manager in managers.items():
            manager_prefix = f"{prefix}.package_managers.{manager_id}"
            if not isinstance(manager, dict):
                issues.append(_error(f"'{manager_prefix}' must be a mapping", source, manager_prefix))
                continue
            issues.extend(_unknown_keys(manager, VALID_PACKAGE_MANAGER_KEYS, manager_prefix, source))
            issues.extend(_check_file_list(manager.get("files"), f"{manager_prefix}.files", source))

    return issues


def validate_service(service_id: str, data: Any, source: str) -> List[CatalogValidationIssue]:
    """Validate one service document (``services/<id>.yml``)."""
    issues: List[CatalogValidationIssue] = []

    if not isinstance(data, dict):
        issues.append(_error(f"Service '{service_id}' must be a mapping", source))
        return issues

    issues.extend(_unknown_keys(data, VALID_SERVICE_KEYS, f"services.{service_id}", source))

    name = data.get("name")
    if name is not None and not isinstance(name, str):
        issues.append(_error(f"'services.{service_id}.name' must be a string", source, "name"))

    url = data.get("url")
    if url is not None and not isinstance(url, str):
        issues.append(_error(f"'services.{service_id}.url' must be a string", source, "url"))

    stacks = data.get("stacks", {})
    if not isinstance(stacks, dict):
        issues.append(_error(f"'services.{service_id}.stacks' must be a mapping", source, "stacks"))
        return issues

    for language_id, packages in stacks.items():
        key = f"services.{service_id}.stacks.{language_id}"
        if not isinstance(packages, list) or not all(isinstance(p, str) for p in packages):
            issues.append(_error(f"'{key}' must be a list of package names", source, key))

    return issues


def validate_technologies(data: Any, source: str) -> List[CatalogValidationIssue]:
    """Validate the ``technologies`` document."""
    issues: List[CatalogValidationIssue] = []

    if not isinstance(data, dict):
        issues.append(_error(f"'technologies' must be a mapping, got {type(data).__name__}", source))
        return issues

    for tech_id, tech in data.items():
        prefix = f"technologies.{tech_id}"
        if not isinstance(tech, dict):
            issues.append(_error(f"'{prefix}' must be a mapping", source, prefix))
            continue

        issues.extend(_unknown_keys(tech, VALID_TECHNOLOGY_KEYS, prefix, source))
        issues.extend(_check_file_list(tech.get("files"), f"{prefix}.files", source))

        for key in ("display_name", "category", "hosting_match", "url_template", "fallback_url"):
            value = tech.get(key)
            if value is not None and not isinstance(value, str):
                issues.append(_error(f"'{prefix}.{key}' must be a string", source, f"{prefix}.{key}"))

        template = tech.get("url_template")
        if isinstance(template, str) and REPO_PLACEHOLDER not in template:
            issues.append(_error(
                f"'{prefix}.url_template' must contain the {REPO_PLACEHOLDER} placeholder",
                source,
                f"{prefix}.url_template",
            ))

    return issues


def validate_key_ownership(
    service_ids: List[str],
    technology_ids: List[str],
    source: str,
) -> List[CatalogValidationIssue]:
    """Check that every result key is owned by exactly one catalog entry.

    Services and technologies share the detection output namespace, and
    ``repo`` is reserved for the repository detector.
    """
    issues: List[CatalogValidationIssue] = []

    for key in sorted(set(service_ids) & set(technology_ids)):
        issues.append(_error(f"'{key}' is defined both as a service and as a technology", source, key))

    for key in (*service_ids, *technology_ids):
        if key == REPO_KEY:
            issues.append(_error(f"'{REPO_KEY}' is a reserved key", source, key))

    return issues


def validate_display_names(names: Dict[str, str], source: str) -> List[CatalogValidationIssue]:
    """Warn about display names shared by several entries.

    Stack files are keyed by display name, so shared names cannot be mapped
    back to a single entry.
    """
    issues: List[CatalogValidationIssue] = []
    seen: Dict[str, str] = {}

    for key, display_name in names.items():
        if display_name in seen:
            issue = CatalogValidationIssue(
                message=f"Display name '{display_name}' is used by both '{seen[display_name]}' and '{key}'",
                source=source,
                severity=ValidationSeverity.WARNING,
                key=key,
            )
            issues.append(issue)
            _log_warning(issue)
        else:
            seen[display_name] = key

    return issues


def _check_file_list(files: Any, key: str, source: str) -> List[CatalogValidationIssue]:
    if not isinstance(files, list) or not files:
        return [_error(f"'{key}' must be a non-empty list of file patterns", source, key)]
    if not all(isinstance(pattern, str) and pattern for pattern in files):
        return [_error(f"'{key}' must only contain non-empty strings", source, key)]
    return []


def _unknown_keys(
    data: Dict[str, Any],
    valid_keys: Set[str],
    prefix: str,
    source: str,
) -> List[CatalogValidationIssue]:
    issues = []
    for key in data.keys():
        if key not in valid_keys:
            issue = CatalogValidationIssue(
                message=f"Unknown key '{prefix}.{key}'",
                source=source,
                severity=ValidationSeverity.WARNING,
                key=f"{prefix}.{key}",
                suggestion=_suggest_key(str(key), valid_keys),
            )
            issues.append(issue)
            _log_warning(issue)
    return issues


def _error(message: str, source: str, key: Optional[str] = None) -> CatalogValidationIssue:
    return CatalogValidationIssue(
        message=message,
        source=source,
        severity=ValidationSeverity.ERROR,
        key=key,
    )


def _suggest_key(invalid_key: str, valid_keys: Set[str]) -> Optional[str]:
    """Suggest a valid key for a potential typo.

    Args:
        invalid_key: The invalid key entered.
        valid_keys: Set of valid keys.

    Returns:
        Closest matching valid key, or None if no good match.
    """
    matches = get_close_matches(invalid_key, list(valid_keys), n=1, cutoff=0.6)
    return matches[0] if matches else None


def _log_warning(issue: CatalogValidationIssue) -> None:
    """Log a validation warning."""
    msg = f"{issue.message} in {issue.source}"
    if issue.suggestion:
        msg += f" (did you mean '{issue.suggestion}'?)"
    LOGGER.warning(msg)
