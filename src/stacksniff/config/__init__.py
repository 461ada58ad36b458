"""Project configuration for stacksniff."""

from stacksniff.config.ignore import ExcludePatterns, load_exclude_patterns
from stacksniff.config.loader import ConfigError, find_project_config, load_config
from stacksniff.config.models import OutputConfig, SniffConfig

__all__ = [
    "ConfigError",
    "ExcludePatterns",
    "OutputConfig",
    "SniffConfig",
    "find_project_config",
    "load_config",
    "load_exclude_patterns",
]
