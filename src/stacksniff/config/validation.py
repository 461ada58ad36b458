"""Project configuration validation.

Unknown keys and ill-typed values are reported as warnings; a config file
with a typo still loads, falling back to defaults for what it got wrong.
"""

from __future__ import annotations

from dataclasses import dataclass
from difflib import get_close_matches
from typing import Any, Dict, List, Optional, Set

from stacksniff.core.logging import get_logger

LOGGER = get_logger(__name__)


@dataclass
class ConfigValidationWarning:
    """A non-fatal problem found in a config file."""

    message: str
    source: str
    key: Optional[str] = None
    suggestion: Optional[str] = None


VALID_TOP_LEVEL_KEYS: Set[str] = {
    "exclude",
    "git",
    "catalog",
    "output",
    "project",
}

VALID_SECTION_KEYS: Dict[str, Set[str]] = {
    "git": {"remote"},
    "catalog": {"path"},
    "output": {"format", "stack_file", "write"},
    "project": {"name"},
}

VALID_OUTPUT_FORMATS: Set[str] = {"console", "json"}


def validate_config(data: Dict[str, Any], source: str) -> List[ConfigValidationWarning]:
    """Validate a configuration dictionary.

    Args:
        data: Parsed config mapping.
        source: Source file path for warning messages.

    Returns:
        List of validation warnings (already logged).
    """
    warnings: List[ConfigValidationWarning] = []

    for key, value in data.items():
        if key not in VALID_TOP_LEVEL_KEYS:
            _warn(
                warnings,
                f"Unknown top-level key '{key}'",
                source,
                str(key),
                _suggest_key(str(key), VALID_TOP_LEVEL_KEYS),
            )
            continue

        if key == "exclude":
            if not isinstance(value, list) or not all(isinstance(p, str) for p in value):
                _warn(warnings, "'exclude' must be a list of patterns", source, key)
            continue

        if not isinstance(value, dict):
            _warn(warnings, f"'{key}' must be a mapping, got {type(value).__name__}", source, key)
            continue

        valid_keys = VALID_SECTION_KEYS[key]
        for sub_key in value:
            if sub_key not in valid_keys:
                _warn(
                    warnings,
                    f"Unknown key '{sub_key}' in '{key}'",
                    source,
                    f"{key}.{sub_key}",
                    _suggest_key(str(sub_key), valid_keys),
                )

    output = data.get("output")
    output_format = output.get("format") if isinstance(output, dict) else None
    if output_format is not None and output_format not in VALID_OUTPUT_FORMATS:
        _warn(
            warnings,
            f"Invalid output format '{output_format}'. "
            f"Valid values: {', '.join(sorted(VALID_OUTPUT_FORMATS))}",
            source,
            "output.format",
            _suggest_key(str(output_format), VALID_OUTPUT_FORMATS),
        )

    return warnings


def _warn(
    warnings: List[ConfigValidationWarning],
    message: str,
    source: str,
    key: Optional[str] = None,
    suggestion: Optional[str] = None,
) -> None:
    warning = ConfigValidationWarning(message=message, source=source, key=key, suggestion=suggestion)
    warnings.append(warning)
    _log_warning(warning)


def _suggest_key(invalid_key: str, valid_keys: Set[str]) -> Optional[str]:
    """Suggest a valid key for a potential typo."""
    matches = get_close_matches(invalid_key, list(valid_keys), n=1, cutoff=0.6)
    return matches[0] if matches else None


def _log_warning(warning: ConfigValidationWarning) -> None:
    """Log a validation warning."""
    msg = f"{warning.message} in {warning.source}"
    if warning.suggestion:
        msg += f" (did you mean '{warning.suggestion}'?)"
    LOGGER.warning(msg)
