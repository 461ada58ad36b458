"""Gitignore-style exclusion of project paths from detection.

Patterns come from:
- the built-in defaults (dependency and VCS directories)
- the ``exclude`` list of the project config
- a ``.stacksniffignore`` file in the project root

Matching is done by pathspec with gitwildmatch semantics, so ``**``,
trailing ``/`` directory patterns and ``!`` negation behave as in .gitignore.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional

import pathspec

from stacksniff.core.logging import get_logger

LOGGER = get_logger(__name__)

IGNORE_FILE_NAME = ".stacksniffignore"

DEFAULT_EXCLUDE = ["node_modules/", ".git/"]


class ExcludePatterns:
    """A compiled set of exclusion patterns."""

    def __init__(self, patterns: Iterable[str], source: str = "config") -> None:
        """Compile gitignore-style patterns.

        Args:
            patterns: Patterns; blank lines and ``#`` comments are skipped.
            source: Where the patterns came from, for logging.
        """
        self._source = source
        self._patterns: List[str] = [
            p.strip() for p in patterns if p.strip() and not p.strip().startswith("#")
        ]
        self._spec = pathspec.PathSpec.from_lines(
            pathspec.patterns.GitWildMatchPattern,
            self._patterns,
        )

        if self._patterns:
            LOGGER.debug(f"Loaded {len(self._patterns)} exclude patterns from {source}")

    @property
    def patterns(self) -> List[str]:
        return list(self._patterns)

    def __bool__(self) -> bool:
        return bool(self._patterns)

    def matches(self, path: Path, root: Path) -> bool:
        """Check whether a path is excluded.

        Args:
            path: Absolute path, or a path relative to root.
            root: Project root the patterns are relative to.

        Returns:
            True if the path should be ignored.
        """
        if not self._patterns:
            return False

        try:
            path_res = path.resolve() if path.is_absolute() else (root / path).resolve()
            rel_path = path_res.relative_to(root.resolve())
        except ValueError:
            # Outside the project root: nothing to exclude
            return False

        rel_str = rel_path.as_posix()
        if path_res.is_dir():
            rel_str += "/"
        return self._spec.match_file(rel_str)

    @classmethod
    def from_file(cls, file_path: Path) -> Optional["ExcludePatterns"]:
        """Load patterns from an ignore file, or None if it does not exist."""
        if not file_path.is_file():
            return None

        try:
            content = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            LOGGER.warning(f"Failed to read ignore file {file_path}: {e}")
            return None
        return cls(content.splitlines(), source=str(file_path))

    @classmethod
    def merge(cls, *pattern_sets: Optional["ExcludePatterns"]) -> "ExcludePatterns":
        """Combine several pattern sets; later sets can negate earlier ones."""
        patterns: List[str] = []
        sources: List[str] = []
        for pattern_set in pattern_sets:
            if pattern_set is None:
                continue
            patterns.extend(pattern_set._patterns)
            sources.append(pattern_set._source)
        return cls(patterns, source=", ".join(sources) or "merged")


def load_exclude_patterns(
    project_root: Path,
    config_patterns: Optional[List[str]] = None,
) -> ExcludePatterns:
    """Build the exclusion set for a project.

    Args:
        project_root: Project root directory.
        config_patterns: ``exclude`` list from the project config, or None
            to use the defaults.

    Returns:
        Merged ExcludePatterns (config/defaults first, ignore file last).
    """
    base = ExcludePatterns(
        DEFAULT_EXCLUDE if config_patterns is None else config_patterns,
        source="defaults" if config_patterns is None else "config",
    )
    from_file = ExcludePatterns.from_file(project_root / IGNORE_FILE_NAME)
    return ExcludePatterns.merge(base, from_file)
