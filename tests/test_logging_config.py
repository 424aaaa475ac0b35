"""Tests for logging setup."""

import logging

import pytest

from code_pulse.logging_config import get_logger, resolve_level, setup_logging


@pytest.fixture
def restore_package_logger():
    logger = logging.getLogger("code_pulse")
    handlers, level = list(logger.handlers), logger.level
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    for handler in handlers:
        logger.addHandler(handler)
    logger.setLevel(level)


class TestResolveLevel:
    def test_default_is_warning(self):
        assert resolve_level() == logging.WARNING

    def test_detailed_is_info(self):
        assert resolve_level(detailed=True) == logging.INFO

    def test_verbose_beats_detailed(self):
        assert resolve_level(verbose=True, detailed=True) == logging.DEBUG

    def test_quiet_wins(self):
        assert resolve_level(verbose=True, quiet=True, detailed=True) == logging.ERROR


class TestSetupLogging:
    def test_repeated_setup_replaces_handlers(self, restore_package_logger):
        setup_logging()
        logger = setup_logging(detailed=True)
        assert logger is restore_package_logger
        assert len(logger.handlers) == 1
        assert logger.level == logging.INFO

    def test_log_file(self, tmp_path, restore_package_logger):
        log_file = tmp_path / "pulse.log"
        setup_logging(log_file=str(log_file))
        get_logger("tracking.scheduler").warning("flush failed")
        for handler in restore_package_logger.handlers:
            handler.flush()
        text = log_file.read_text()
        assert "code_pulse.tracking.scheduler - WARNING - flush failed" in text


class TestGetLogger:
    def test_namespaced(self):
        assert get_logger("cache").name == "code_pulse.cache"
        assert get_logger("code_pulse.cache").name == "code_pulse.cache"
        assert get_logger().name == "code_pulse"
