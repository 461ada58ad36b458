"""Bridge between CLI arguments and configuration."""

from __future__ import annotations

import argparse
from typing import Any, Dict


class ConfigBridge:
    """Translates CLI arguments to configuration overrides."""

    @staticmethod
    def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
        """Convert CLI arguments to a config override dict.

        Only flags given on the command line appear in the result, so file
        values survive for everything else.

        Args:
            args: Parsed CLI arguments.

        Returns:
            Nested dictionary shaped like the config file.
        """
        overrides: Dict[str, Any] = {}
        output: Dict[str, Any] = {}

        if getattr(args, "format", None):
            output["format"] = args.format
        if getattr(args, "stack_file", None):
            output["stack_file"] = args.stack_file
        if getattr(args, "no_write", False):
            output["write"] = False
        if output:
            overrides["output"] = output

        if getattr(args, "remote", None):
            overrides["git"] = {"remote": args.remote}

        return overrides
