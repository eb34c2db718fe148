# tests/shared/test_logging_config.py
"""
Tests for logging setup.
"""

import logging
import sys

import pytest

from Sigflow.shared.logging_config import setup_logging


@pytest.fixture
def package_logger():
    logger = logging.getLogger("Sigflow")
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def test_dev_mode_writes_debug_to_file(package_logger, tmp_path):
    logger = setup_logging(dev_mode=True, log_dir=tmp_path, log_filename="run.log")
    assert logger is package_logger
    assert len(logger.handlers) == 2

    logging.getLogger("Sigflow.core.test").debug("debug message")
    for handler in logger.handlers:
        handler.flush()

    text = (tmp_path / "run.log").read_text()
    assert "DEVELOPMENT" in text
    assert "debug message" in text
    assert "test_logging_config.py:" in text


def test_production_mode_drops_debug(package_logger, tmp_path):
    setup_logging(log_dir=tmp_path / "logs")
    logging.getLogger("Sigflow.core.test").debug("hidden")
    logging.getLogger("Sigflow.core.test").info("shown")
    for handler in package_logger.handlers:
        handler.flush()

    text = (tmp_path / "logs" / "sigflow.log").read_text()
    assert "PRODUCTION" in text
    assert "shown" in text
    assert "hidden" not in text


def test_console_output_goes_to_stderr(package_logger, tmp_path):
    setup_logging(log_dir=tmp_path)
    assert package_logger.handlers[0].stream is sys.stderr


def test_setup_logging_is_idempotent(package_logger, tmp_path):
    setup_logging(log_dir=tmp_path, log_filename="a.log")
    setup_logging(log_dir=tmp_path, log_filename="b.log")
    assert len(package_logger.handlers) == 2
    assert package_logger.handlers[1].baseFilename == str(tmp_path / "b.log")
