"""Thin wrappers around the git command line.

Every helper degrades to ``None``/``False`` instead of raising: a missing git
binary, a directory outside any work tree or an unknown remote all mean
"hosting unknown" to the callers.
"""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import List, Optional

from stacksniff.core.logging import get_logger

LOGGER = get_logger(__name__)

GIT_TIMEOUT = 10


def _run_git(args: List[str], cwd: Path) -> Optional[str]:
    """Run a git subcommand and return its stripped stdout, or None on failure."""
    cmd = ["git", *args]
    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            cwd=str(cwd),
            timeout=GIT_TIMEOUT,
        )
    except FileNotFoundError:
        LOGGER.debug("git executable not found")
        return None
    except (subprocess.TimeoutExpired, OSError) as e:
        LOGGER.debug(f"git {' '.join(args)} failed: {e}")
        return None

    if result.returncode != 0:
        LOGGER.debug(f"git {' '.join(args)} exited with {result.returncode}: {result.stderr.strip()}")
        return None

    return result.stdout.strip()


def is_git_repository(project_root: Path) -> bool:
    """Check whether project_root lies inside a git work tree."""
    return _run_git(["rev-parse", "--git-dir"], project_root) is not None


def get_remote_url(project_root: Path, remote: str = "origin") -> Optional[str]:
    """Return the configured URL of a remote.

    Args:
        project_root: Directory to run git in.
        remote: Remote name (default: origin).

    Returns:
        The raw remote URL, or None if the directory is not a repository,
        the remote does not exist or git is unavailable.
    """
    if not project_root.is_dir():
        return None

    if not is_git_repository(project_root):
        LOGGER.debug(f"{project_root} is not a git repository")
        return None

    url = _run_git(["remote", "get-url", remote], project_root)
    if not url:
        LOGGER.debug(f"No '{remote}' remote configured in {project_root}")
        return None
    return url
