"""Tests for the logging setup."""

import logging

import pytest

from lab_manager_api.app.core.logging_config import resolve_level, setup_logging


@pytest.fixture
def root_logger():
    root = logging.getLogger()
    level = root.level
    yield root
    setup_logging(level="INFO", logfile="", debug=False)
    root.setLevel(level)


def test_debug_flag_overrides_level():
    assert resolve_level("WARNING", debug=True) == logging.DEBUG
    assert resolve_level("warning", debug=False) == logging.WARNING
    assert resolve_level("NOISY", debug=False) == logging.INFO


def test_repeated_setup_does_not_duplicate_handlers(root_logger):
    setup_logging(level="INFO", logfile="", debug=False)
    count = len(root_logger.handlers)

    setup_logging(level="INFO", logfile="", debug=False)

    assert len(root_logger.handlers) == count


def test_log_file_receives_records(root_logger, tmp_path):
    log_file = tmp_path / "logs" / "lab.log"
    setup_logging(level="INFO", logfile=str(log_file), debug=False)

    logging.getLogger("lab_manager_api.test").info("rotation reordered")
    for handler in root_logger.handlers:
        handler.flush()

    assert "[INFO] lab_manager_api.test: rotation reordered" in log_file.read_text(encoding="utf-8")
