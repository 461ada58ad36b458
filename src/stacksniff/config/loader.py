"""Configuration file loading and merging.

Handles loading configuration from YAML files with:
- Project-level config (.stacksniff.yml) or an explicit --config file
- Environment variable expansion (${VAR})
- Config merging with CLI flags taking precedence
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from stacksniff.config.models import (
    DEFAULT_OUTPUT_FORMAT,
    DEFAULT_REMOTE,
    DEFAULT_STACK_FILE,
    OutputConfig,
    SniffConfig,
)
from stacksniff.config.validation import VALID_OUTPUT_FORMATS, validate_config
from stacksniff.core.logging import get_logger

LOGGER = get_logger(__name__)

PROJECT_CONFIG_NAMES = [".stacksniff.yml", ".stacksniff.yaml", "stacksniff.config.yml"]

# ${VAR} or ${VAR:-default}
ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+)(?::-([^}]*))?\}")


class ConfigError(Exception):
    """Configuration loading or parsing error."""

    pass


def load_config(
    project_root: Path,
    cli_config_path: Optional[Path] = None,
    cli_overrides: Optional[Dict[str, Any]] = None,
) -> SniffConfig:
    """Load configuration with proper precedence.

    Precedence (highest to lowest):
    1. CLI flags (cli_overrides)
    2. Custom config file (cli_config_path) OR project config (.stacksniff.yml)
    3. Built-in defaults

    Args:
        project_root: Project root directory for finding .stacksniff.yml.
        cli_config_path: Optional path to custom config file (--config flag).
        cli_overrides: Nested dict of CLI flag overrides.

    Returns:
        Merged SniffConfig instance.

    Raises:
        ConfigError: If the config file is missing, unreadable or malformed.
    """
    sources: List[str] = []
    merged: Dict[str, Any] = {}

    if cli_config_path:
        if not cli_config_path.exists():
            raise ConfigError(f"Config file not found: {cli_config_path}")
        merged = merge_configs(merged, _load_validated(cli_config_path))
        sources.append(f"custom:{cli_config_path}")
    else:
        project_path = find_project_config(project_root)
        if project_path:
            merged = merge_configs(merged, _load_validated(project_path))
            sources.append(f"project:{project_path}")

    if cli_overrides:
        merged = merge_configs(merged, cli_overrides)
        sources.append("cli")

    config = dict_to_config(merged, base_dir=project_root)
    config.sources = sources
    LOGGER.debug(f"Config loaded from sources: {sources or ['defaults']}")
    return config


def _load_validated(path: Path) -> Dict[str, Any]:
    try:
        data = load_yaml_file(path)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    validate_config(data, source=str(path))
    return data


def find_project_config(project_root: Path) -> Optional[Path]:
    """Find the first config file present in the project root.

    Args:
        project_root: Directory to search in.

    Returns:
        Path to config file if found, None otherwise.
    """
    for name in PROJECT_CONFIG_NAMES:
        config_path = project_root / name
        if config_path.is_file():
            return config_path
    return None


def load_yaml_file(path: Path) -> Dict[str, Any]:
    """Load and parse a YAML config file.

    Performs environment variable expansion on string values.

    Raises:
        yaml.YAMLError: If YAML parsing fails.
        ConfigError: If the document is not a mapping.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        return {}

    if not isinstance(data, dict):
        raise ConfigError(f"Config file must be a YAML mapping, got {type(data).__name__}")

    return expand_env_vars(data)


def expand_env_vars(data: Any) -> Any:
    """Recursively expand ${VAR} and ${VAR:-default} in config values."""
    if isinstance(data, dict):
        return {k: expand_env_vars(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [expand_env_vars(item) for item in data]
    elif isinstance(data, str):
        return ENV_VAR_PATTERN.sub(_env_var_replacer, data)
    else:
        return data


def _env_var_replacer(match: re.Match[str]) -> str:
    var_name = match.group(1)
    default_value = match.group(2)

    value = os.environ.get(var_name)
    if value is not None:
        return value
    if default_value is not None:
        return default_value

    LOGGER.warning(f"Environment variable ${var_name} is not set and has no default")
    return ""


def merge_configs(base: Dict[str, Any], overlay: Dict[str, Any]) -> Dict[str, Any]:
    """Deep merge two config dicts, with overlay taking precedence.

    Dicts merge recursively; scalars and lists in the overlay replace the
    base value. None values in the overlay are skipped so unset CLI flags
    never mask file values.
    """
    result = base.copy()

    for key, overlay_value in overlay.items():
        if overlay_value is None:
            continue
        if key in result and isinstance(result[key], dict) and isinstance(overlay_value, dict):
            result[key] = merge_configs(result[key], overlay_value)
        else:
            result[key] = overlay_value

    return result


def _section(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = data.get(key)
    return value if isinstance(value, dict) else {}


def dict_to_config(data: Dict[str, Any], base_dir: Optional[Path] = None) -> SniffConfig:
    """Convert a merged config dict to a typed SniffConfig.

    Values that failed validation fall back to their defaults.

    Args:
        data: Configuration dictionary.
        base_dir: Directory relative catalog paths are resolved against.

    Returns:
        Typed SniffConfig instance.
    """
    exclude = data.get("exclude")
    if not (isinstance(exclude, list) and all(isinstance(p, str) for p in exclude)):
        exclude = None

    output_data = _section(data, "output")
    output_format = output_data.get("format", DEFAULT_OUTPUT_FORMAT)
    if output_format not in VALID_OUTPUT_FORMATS:
        output_format = DEFAULT_OUTPUT_FORMAT
    output = OutputConfig(
        format=output_format,
        stack_file=str(output_data.get("stack_file") or DEFAULT_STACK_FILE),
        write=bool(output_data.get("write", True)),
    )

    catalog_path: Optional[Path] = None
    raw_catalog_path = _section(data, "catalog").get("path")
    if raw_catalog_path:
        catalog_path = Path(str(raw_catalog_path)).expanduser()
        if base_dir is not None and not catalog_path.is_absolute():
            catalog_path = base_dir / catalog_path

    return SniffConfig(
        exclude=exclude,
        remote=str(_section(data, "git").get("remote") or DEFAULT_REMOTE),
        catalog_path=catalog_path,
        output=output,
        project_name=str(_section(data, "project").get("name") or ""),
    )
