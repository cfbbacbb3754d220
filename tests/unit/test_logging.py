"""Test logging setup."""

import logging
import logging.handlers

import pytest

from auto_subtitle.config import LoggingConfig
from auto_subtitle.infrastructure import setup_logging


@pytest.fixture
def root_logger():
    """Root logger restored to its original handlers after the test."""
    logger = logging.getLogger()
    handlers = list(logger.handlers)
    level = logger.level
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    for handler in handlers:
        logger.addHandler(handler)
    logger.setLevel(level)


@pytest.mark.unit
def test_console_only(root_logger):
    """Test setup without a log file."""
    setup_logging(LoggingConfig(level="debug"))

    assert root_logger.level == logging.DEBUG
    assert len(root_logger.handlers) == 1
    assert logging.getLogger("watchdog").level == logging.WARNING


@pytest.mark.unit
def test_rotating_file_handler(root_logger, tmp_path):
    """Test that a log file gets a rotating handler in a created directory."""
    log_file = tmp_path / "logs" / "auto-subtitle.log"

    setup_logging(LoggingConfig(file=str(log_file), max_size_mb=1, backup_count=2))

    file_handlers = [
        h for h in root_logger.handlers if isinstance(h, logging.handlers.RotatingFileHandler)
    ]
    assert len(file_handlers) == 1
    assert file_handlers[0].maxBytes == 1024 * 1024
    assert file_handlers[0].backupCount == 2
    assert log_file.parent.is_dir()


@pytest.mark.unit
def test_repeated_setup_replaces_handlers(root_logger):
    """Test that calling setup twice does not duplicate output."""
    setup_logging(LoggingConfig())
    setup_logging(LoggingConfig(level="WARNING"))

    assert len(root_logger.handlers) == 1
    assert root_logger.level == logging.WARNING
