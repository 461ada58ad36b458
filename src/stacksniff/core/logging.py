"""Logging setup shared by the CLI and the detection pipeline."""

from __future__ import annotations

import logging
from typing import Optional

PACKAGE_LOGGER = "stacksniff"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def resolve_level(*, debug: bool = False, verbose: bool = False, quiet: bool = False) -> int:
    """Map CLI verbosity flags to a logging level.

    Precedence:
    - quiet → ERROR
    - debug → DEBUG
    - verbose → INFO
    - default → WARNING
    """
    if quiet:
        return logging.ERROR
    if debug:
        return logging.DEBUG
    if verbose:
        return logging.INFO
    return logging.WARNING


def configure_logging(*, debug: bool = False, verbose: bool = False, quiet: bool = False) -> None:
    """Configure logging for a CLI run.

    Log records go to stderr so that JSON written to stdout stays parseable.
    """
    level = resolve_level(debug=debug, verbose=verbose, quiet=quiet)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger(PACKAGE_LOGGER).setLevel(level)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a module-level logger."""

    return logging.getLogger(name if name is not None else PACKAGE_LOGGER)
