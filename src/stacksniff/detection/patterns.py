"""File pattern matching against a project tree.

Catalog patterns come in four shapes:
- ``Gemfile``: a literal file name
- ``*.tf``: a glob with wildcards
- ``k8s/*.yml``: a glob with subdirectory segments (``**`` recurses)
- ``.github/workflows/``: a trailing slash, meaning "this directory exists"

Catalog patterns are trusted static data, so a pattern that glob cannot
handle counts as "no match" instead of failing the scan.
"""

from __future__ import annotations

import glob
import os
import re
from pathlib import Path
from typing import Iterable, List, Optional

from stacksniff.config.ignore import ExcludePatterns
from stacksniff.core.logging import get_logger

LOGGER = get_logger(__name__)

WILDCARD_CHARS = "*?["


def is_directory_pattern(pattern: str) -> bool:
    return pattern.endswith("/")


def has_wildcard(pattern: str) -> bool:
    return any(ch in pattern for ch in WILDCARD_CHARS)


def find_matches(
    project_root: Path,
    pattern: str,
    exclude: Optional[ExcludePatterns] = None,
) -> List[Path]:
    """Return the paths under project_root that match a catalog pattern.

    Args:
        project_root: Directory the pattern is relative to.
        pattern: Catalog file pattern.
        exclude: Optional exclusion set applied to every match.

    Returns:
        Sorted list of matching paths (empty when nothing matches).
    """
    if is_directory_pattern(pattern):
        candidate = project_root / pattern.rstrip("/")
        matches = [candidate] if candidate.is_dir() else []
    elif has_wildcard(pattern):
        full_pattern = os.path.join(glob.escape(str(project_root)), pattern)
        try:
            matches = [Path(p) for p in glob.glob(full_pattern, recursive=True)]
        except (OSError, ValueError, re.error) as e:
            LOGGER.debug(f"Ignoring pattern {pattern!r}: {e}")
            return []
    else:
        candidate = project_root / pattern
        matches = [candidate] if candidate.exists() else []

    if exclude:
        matches = [m for m in matches if not exclude.matches(m, project_root)]

    return sorted(matches)


def has_match(
    project_root: Path,
    patterns: Iterable[str],
    exclude: Optional[ExcludePatterns] = None,
) -> bool:
    """Check whether any of the patterns matches at least one path."""
    for pattern in patterns:
        if find_matches(project_root, pattern, exclude):
            return True
    return False
