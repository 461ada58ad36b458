"""Typed project configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

DEFAULT_STACK_FILE = "stacksniff.yml"
DEFAULT_REMOTE = "origin"
DEFAULT_OUTPUT_FORMAT = "console"


@dataclass
class OutputConfig:
    """Where and how results are written."""

    format: str = DEFAULT_OUTPUT_FORMAT
    stack_file: str = DEFAULT_STACK_FILE
    write: bool = True


@dataclass
class SniffConfig:
    """Complete configuration for one detection run.

    ``exclude`` is None when no patterns were configured, in which case the
    built-in defaults apply.
    """

    exclude: Optional[List[str]] = None
    remote: str = DEFAULT_REMOTE
    catalog_path: Optional[Path] = None
    output: OutputConfig = field(default_factory=OutputConfig)
    project_name: str = ""
    sources: List[str] = field(default_factory=list)
