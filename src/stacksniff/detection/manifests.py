"""Manifest scanning module.

Finds the dependency manifests of a language and tells which package names
they declare. Manifests are never evaluated: JSON and TOML manifests are
parsed, every other format is inspected line by line.

Supported formats, chosen by file name:
- JSON (package.json, composer.json): keys of the dependency sections
- TOML (pyproject.toml, Pipfile, Cargo.toml): dependency tables and lists
- Gemfile: quoted names on ``gem`` lines
- requirements*.txt: first token of every requirement line
- yarn.lock: package names of section headers
- *.gemspec: quoted names on ``add_*dependency`` lines
- anything else: exact whitespace-separated tokens
"""

from __future__ import annotations

import json
import re
import tomllib
from dataclasses import dataclass, field
from enum import Enum
from functools import cached_property
from pathlib import Path
from typing import Callable, Dict, FrozenSet, Iterable, List, Optional, Set

from stacksniff.catalog.models import Catalog
from stacksniff.config.ignore import ExcludePatterns
from stacksniff.core.logging import get_logger
from stacksniff.core.models import ManifestFinding
from stacksniff.detection.patterns import find_matches

LOGGER = get_logger(__name__)

JSON_MANIFESTS = {"package.json", "composer.json"}
TOML_MANIFESTS = {"pyproject.toml", "Pipfile", "Cargo.toml"}

# npm uses dependencies/devDependencies, composer uses require/require-dev
JSON_DEPENDENCY_SECTIONS = ("dependencies", "devDependencies", "require", "require-dev")

# Cargo and Pipfile keep dependencies in top-level tables
TOML_DEPENDENCY_TABLES = ("dependencies", "dev-dependencies", "build-dependencies", "packages", "dev-packages")

QUOTED = re.compile(r"""(['"])(.+?)\1""")
GEMSPEC_DEPENDENCY = re.compile(r"\badd_(?:runtime_|development_)?dependency\b")
REQUIREMENT_DELIMITERS = re.compile(r"[=<>!~;\[\s]+")

# Surrounding characters stripped from tokens of unknown formats. "@", "/",
# "-", "_" and "." are part of package names and must survive.
TOKEN_PUNCTUATION = "\"'`,;:()[]{}<>="


class ManifestFormat(str, Enum):
    """Manifest formats with a dedicated parser."""

    JSON = "json"
    TOML = "toml"
    GEMFILE = "gemfile"
    REQUIREMENTS = "requirements"
    LOCKFILE = "lockfile"
    GEMSPEC = "gemspec"
    DEFAULT = "default"

    @classmethod
    def for_path(cls, path: Path) -> "ManifestFormat":
        """Pick the format of a manifest from its file name."""
        name = path.name
        if name in JSON_MANIFESTS:
            return cls.JSON
        if name in TOML_MANIFESTS:
            return cls.TOML
        if name == "Gemfile":
            return cls.GEMFILE
        if name == "yarn.lock":
            return cls.LOCKFILE
        if name.endswith(".gemspec"):
            return cls.GEMSPEC
        if name.endswith(".txt") and (name.startswith("requirements") or path.parent.name == "requirements"):
            return cls.REQUIREMENTS
        return cls.DEFAULT


def _json_names(content: str) -> Optional[Set[str]]:
    """Dependency keys of a JSON manifest, or None if it is not valid JSON."""
    try:
        data = json.loads(content)
    except ValueError:
        return None

    names: Set[str] = set()
    if not isinstance(data, dict):
        return names
    for section in JSON_DEPENDENCY_SECTIONS:
        deps = data.get(section)
        if isinstance(deps, dict):
            names.update(deps.keys())
    return names


def _gemfile_names(content: str) -> Set[str]:
    # The gem name is the first quoted argument; later ones are versions
    names: Set[str] = set()
    for line in content.splitlines():
        stripped = line.strip()
        if not stripped.startswith("gem "):
            continue
        match = QUOTED.search(stripped)
        if match:
            names.add(match.group(2))
    return names


def _requirements_names(content: str) -> Set[str]:
    names: Set[str] = set()
    for line in content.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        token = REQUIREMENT_DELIMITERS.split(stripped, maxsplit=1)[0]
        if token:
            names.add(token)
    return names


def _toml_names(content: str) -> Optional[Set[str]]:
    """Dependency names of pyproject.toml, Pipfile or Cargo.toml."""
    try:
        data = tomllib.loads(content)
    except tomllib.TOMLDecodeError:
        return None

    names: Set[str] = set()
    requirement_lists: List[object] = []

    for section in TOML_DEPENDENCY_TABLES:
        names.update(_table_keys(data.get(section)))

    project = _table(data.get("project"))
    requirement_lists.append(project.get("dependencies"))
    requirement_lists.extend(_table(project.get("optional-dependencies")).values())
    requirement_lists.extend(_table(data.get("dependency-groups")).values())

    poetry = _table(_table(data.get("tool")).get("poetry"))
    names.update(_table_keys(poetry.get("dependencies")))
    names.update(_table_keys(poetry.get("dev-dependencies")))
    for group in _table(poetry.get("group")).values():
        names.update(_table_keys(_table(group).get("dependencies")))

    # PEP 508 strings share the requirements.txt syntax
    for requirements in requirement_lists:
        if isinstance(requirements, list):
            lines = "\n".join(r for r in requirements if isinstance(r, str))
            names.update(_requirements_names(lines))

    # Every Python project depends on "python" in poetry; it is not a package
    names.discard("python")
    return names


def _table(value: object) -> Dict[str, object]:
    return value if isinstance(value, dict) else {}


def _table_keys(value: object) -> Set[str]:
    return set(_table(value).keys())


def _lockfile_names(content: str) -> Set[str]:
    names: Set[str] = set()
    for line in content.splitlines():
        header = line.rstrip()
        if not header.endswith(":") or "@" not in header:
            continue
        for entry in header[:-1].split(","):
            entry = entry.strip().strip("\"'")
            # Scoped packages start with "@"; the version separator is the next one
            at = entry.find("@", 1) if entry.startswith("@") else entry.find("@")
            if at > 0:
                names.add(entry[:at])
    return names


def _gemspec_names(content: str) -> Set[str]:
    names: Set[str] = set()
    for line in content.splitlines():
        dependency = GEMSPEC_DEPENDENCY.search(line)
        if not dependency:
            continue
        match = QUOTED.search(line, dependency.end())
        if match:
            names.add(match.group(2))
    return names


def _token_names(content: str) -> Set[str]:
    names: Set[str] = set()
    for line in content.splitlines():
        for token in line.split():
            token = token.strip(TOKEN_PUNCTUATION)
            if token:
                names.add(token)
    return names


_EXTRACTORS: Dict[ManifestFormat, Callable[[str], Optional[Set[str]]]] = {
    ManifestFormat.JSON: _json_names,
    ManifestFormat.TOML: _toml_names,
    ManifestFormat.GEMFILE: _gemfile_names,
    ManifestFormat.REQUIREMENTS: _requirements_names,
    ManifestFormat.LOCKFILE: _lockfile_names,
    ManifestFormat.GEMSPEC: _gemspec_names,
    ManifestFormat.DEFAULT: _token_names,
}


@dataclass
class Manifest:
    """A manifest file read into memory."""

    path: Path
    content: str
    format: ManifestFormat = field(default=ManifestFormat.DEFAULT)

    @cached_property
    def names(self) -> Optional[FrozenSet[str]]:
        """Package names declared in the manifest.

        None when the format parser could not make sense of the file (a
        malformed JSON manifest); ``declares`` then falls back to a quoted
        substring search.
        """
        names = _EXTRACTORS[self.format](self.content)
        return frozenset(names) if names is not None else None

    def declares(self, package: str) -> bool:
        """Check whether the manifest declares a package."""
        if self.names is None:
            return f'"{package}"' in self.content
        return package in self.names

    def declared_packages(self, candidates: Iterable[str]) -> Set[str]:
        """Return the candidate names this manifest declares."""
        return {package for package in candidates if self.declares(package)}


def read_manifest(path: Path) -> Optional[Manifest]:
    """Read a manifest file.

    Returns:
        The Manifest, or None if the file cannot be read.
    """
    try:
        content = path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        LOGGER.debug(f"Skipping unreadable manifest {path}: {e}")
        return None
    return Manifest(path=path, content=content, format=ManifestFormat.for_path(path))


def scan_manifests(
    project_root: Path,
    language: str,
    catalog: Catalog,
    exclude: Optional[ExcludePatterns] = None,
) -> Set[Path]:
    """Collect the manifest files of a language.

    Every pattern of every package manager is matched; a file matched by
    several patterns appears once.

    Args:
        project_root: Path to the project root directory.
        language: Language id.
        catalog: Detection catalog.
        exclude: Optional exclusion set.

    Returns:
        Set of absolute manifest paths.
    """
    entry = catalog.languages.get(language)
    if entry is None:
        return set()

    found: Set[Path] = set()
    for pattern in entry.file_patterns():
        for match in find_matches(project_root, pattern, exclude):
            if match.is_file():
                found.add(match.resolve())
    return found


def collect_findings(
    project_root: Path,
    language: str,
    catalog: Catalog,
    exclude: Optional[ExcludePatterns] = None,
) -> List[ManifestFinding]:
    """Find every catalog package of a language declared in its manifests.

    Args:
        project_root: Path to the project root directory.
        language: Language id.
        catalog: Detection catalog.
        exclude: Optional exclusion set.

    Returns:
        Findings ordered by file path, then package name.
    """
    candidates = catalog.packages_for_language(language)
    if not candidates:
        return []

    findings: List[ManifestFinding] = []
    for path in sorted(scan_manifests(project_root, language, catalog, exclude)):
        manifest = read_manifest(path)
        if manifest is None:
            continue
        for package in sorted(manifest.declared_packages(candidates)):
            findings.append(ManifestFinding(language=language, file_path=path, package_name=package))

    LOGGER.debug(f"{language}: {len(findings)} package finding(s)")
    return findings
