"""Tests for logging setup."""

from __future__ import annotations

import logging

from stacksniff.core.logging import PACKAGE_LOGGER, configure_logging, get_logger, resolve_level


class TestResolveLevel:
    """Tests for resolve_level."""

    def test_default_is_warning(self) -> None:
        assert resolve_level() == logging.WARNING

    def test_verbose_is_info(self) -> None:
        assert resolve_level(verbose=True) == logging.INFO

    def test_debug_beats_verbose(self) -> None:
        assert resolve_level(debug=True, verbose=True) == logging.DEBUG

    def test_quiet_beats_everything(self) -> None:
        assert resolve_level(debug=True, verbose=True, quiet=True) == logging.ERROR


class TestConfigureLogging:
    """Tests for configure_logging and get_logger."""

    def test_sets_package_level(self) -> None:
        configure_logging(debug=True)
        assert logging.getLogger(PACKAGE_LOGGER).level == logging.DEBUG

        configure_logging()
        assert logging.getLogger(PACKAGE_LOGGER).level == logging.WARNING

    def test_get_logger_names(self) -> None:
        assert get_logger("stacksniff.detection").name == "stacksniff.detection"
        assert get_logger().name == PACKAGE_LOGGER
