"""Configuration management module."""

from .config_manager import ConfigManager
from .models import (
    Config,
    FilesConfig,
    LLMConfig,
    LoggingConfig,
    OpenSubtitlesConfig,
    SubtitlesConfig,
    TMDbConfig,
    WatcherConfig,
)

__all__ = [
    "ConfigManager",
    "Config",
    "LLMConfig",
    "TMDbConfig",
    "OpenSubtitlesConfig",
    "WatcherConfig",
    "SubtitlesConfig",
    "FilesConfig",
    "LoggingConfig",
]
