"""CLI commands package.

This module provides the base Command class and exports all command implementations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from argparse import Namespace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from stacksniff.config.models import SniffConfig


class Command(ABC):
    """Base class for CLI commands."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Command identifier."""

    @abstractmethod
    def execute(self, args: Namespace, config: "SniffConfig | None" = None) -> int:
        """Execute the command.

        Args:
            args: Parsed command-line arguments.
            config: Loaded configuration, for commands that need one.

        Returns:
            Exit code (0 for success, non-zero for error).
        """


# ruff: noqa: E402
from stacksniff.cli.commands.catalog import CatalogCommand
from stacksniff.cli.commands.sniff import SniffCommand

__all__ = [
    "CatalogCommand",
    "Command",
    "SniffCommand",
]
