"""Repository origin detection module.

Reads the git remote of a project and publishes it as a canonical HTTPS URL
under the ``repo`` key, where later detectors use it to build links.
"""

from __future__ import annotations

import re
from typing import Dict

from stacksniff.core import git
from stacksniff.core.logging import get_logger
from stacksniff.core.models import REPO_KEY
from stacksniff.detection.base import DetectionContext, Detector

LOGGER = get_logger(__name__)

# user@host:org/repo or user@host:org/repo.git
SSH_REMOTE = re.compile(r"^[\w.-]+@([^:/]+):(.+?)(?:\.git)?$")

GIT_SUFFIX = ".git"

# user:token@ (or user@) right after the scheme
HTTP_CREDENTIALS = re.compile(r"^(https?://)[^/@]+@")


def normalize_remote_url(remote_url: str) -> str:
    """Convert a git remote URL to a browsable HTTPS URL.

    - ``git@github.com:org/repo.git`` → ``https://github.com/org/repo``
    - ``https://gitlab.com/org/repo.git`` → ``https://gitlab.com/org/repo``
    - credentials in an HTTP(S) remote are removed
    - anything else is returned unchanged
    """
    remote_url = remote_url.strip()

    match = SSH_REMOTE.match(remote_url)
    if match:
        host, path = match.groups()
        return f"https://{host}/{path}"

    if remote_url.startswith(("http://", "https://")):
        remote_url = HTTP_CREDENTIALS.sub(r"\1", remote_url)
        if remote_url.endswith(GIT_SUFFIX):
            return remote_url[: -len(GIT_SUFFIX)]

    return remote_url


class RepositoryDetector(Detector):
    """Detects the repository URL from the configured git remote."""

    def __init__(self, remote: str = "origin") -> None:
        self._remote = remote

    @property
    def name(self) -> str:
        return "git"

    def detect(self, context: DetectionContext) -> Dict[str, str]:
        remote_url = git.get_remote_url(context.project_root, self._remote)
        if not remote_url:
            return {}

        repo_url = normalize_remote_url(remote_url)
        LOGGER.info(f"Repository: {repo_url}")
        return {REPO_KEY: repo_url}
