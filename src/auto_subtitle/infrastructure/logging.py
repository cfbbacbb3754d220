"""Logging setup for the CLI and the watcher."""

import logging
import logging.handlers
from pathlib import Path
from typing import List

from ..config.models import LoggingConfig

# Libraries that log every request or filesystem event
NOISY_LOGGERS = ("aiohttp", "watchdog", "httpx", "httpcore", "openai", "anthropic")


def _build_handlers(config: LoggingConfig) -> List[logging.Handler]:
    """Console handler plus a rotating file handler when a log file is set."""
    handlers: List[logging.Handler] = [logging.StreamHandler()]

    if config.file:
        log_path = Path(config.file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            logging.handlers.RotatingFileHandler(
                log_path,
                maxBytes=config.max_size_mb * 1024 * 1024,
                backupCount=config.backup_count,
                encoding="utf-8",
            )
        )

    return handlers


def setup_logging(config: LoggingConfig) -> None:
    """Configure the root logger, replacing handlers from earlier calls.

    Args:
        config: Logging configuration.
    """
    level = logging.getLevelName(config.level)
    formatter = logging.Formatter(config.format)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    for handler in _build_handlers(config):
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    root_logger.debug(f"Logging configured with level {config.level}")


class LoggerMixin:
    """Mixin class that provides logging functionality."""

    @property
    def logger(self) -> logging.Logger:
        """Get logger for this class."""
        return logging.getLogger(f"{self.__class__.__module__}.{self.__class__.__name__}")
