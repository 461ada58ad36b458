"""Stack file reading and writing.

The stack file is a YAML document with one section per project::

    my-app:
      Repository: https://github.com/acme/my-app
      GitHub Actions: https://github.com/acme/my-app/actions
      Stripe: https://dashboard.stripe.com

Writing merges into an existing file: other project sections and keys of
the same section that were not re-detected are kept.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Mapping

import yaml

from stacksniff.catalog.models import Catalog
from stacksniff.core.logging import get_logger
from stacksniff.core.models import REPO_KEY

LOGGER = get_logger(__name__)


class StackFileError(Exception):
    """The stack file exists but cannot be parsed."""

    pass


def _load_sections(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise StackFileError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise StackFileError(f"Stack file must be a YAML mapping, got {type(data).__name__}")
    return data


def render_section(results: Mapping[str, str], catalog: Catalog) -> Dict[str, str]:
    """Map result keys to display names, repository first."""
    section: Dict[str, str] = {}
    if REPO_KEY in results:
        section[catalog.display_name(REPO_KEY)] = results[REPO_KEY]
    for key, value in results.items():
        if key != REPO_KEY:
            section[catalog.display_name(key)] = value
    return section


def write_stack_file(
    path: Path,
    project_name: str,
    results: Mapping[str, str],
    catalog: Catalog,
) -> Dict[str, Any]:
    """Write detection results into the project's section of a stack file.

    Args:
        path: Stack file path.
        project_name: Section to write.
        results: Detection results keyed by catalog id.
        catalog: Catalog used to resolve display names.

    Returns:
        The full document as written.

    Raises:
        StackFileError: If an existing file cannot be parsed.
        OSError: If the file cannot be written.
    """
    document = _load_sections(path)

    existing = document.get(project_name)
    section: Dict[str, Any] = dict(existing) if isinstance(existing, dict) else {}
    section.update(render_section(results, catalog))
    document[project_name] = section

    content = yaml.dump(
        document,
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
    )
    path.write_text(content, encoding="utf-8")

    LOGGER.info(f"Wrote {len(section)} entries for '{project_name}' to {path}")
    return document


def read_stack_file(path: Path, project_name: str, catalog: Catalog) -> Dict[str, str]:
    """Read one project section back as a result map keyed by catalog id.

    Returns an empty dict when the file or the section does not exist.
    """
    section = _load_sections(path).get(project_name)
    if not isinstance(section, dict):
        return {}

    return {
        catalog.key_for_display_name(str(display_name)): str(value)
        for display_name, value in section.items()
    }
