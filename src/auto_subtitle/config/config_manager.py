"""Configuration management."""

import os
import re
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from .models import Config

# Placeholders left over after expansion refer to unset variables
_UNSET_PLACEHOLDER = re.compile(r"\$\{[^}]*\}")


def _expand_environment(value: Any) -> Any:
    """Expand environment variables in every string of a parsed YAML tree.

    Placeholders naming unset variables become empty strings, so an unset
    key reads as "not configured" instead of a literal ${VAR}.
    """
    if isinstance(value, dict):
        return {key: _expand_environment(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_expand_environment(item) for item in value]
    if isinstance(value, str):
        return _UNSET_PLACEHOLDER.sub("", os.path.expandvars(value))
    return value


class ConfigManager:
    """Manages application configuration loading and validation."""

    def __init__(self, config_path: Optional[Path] = None, env_file: Optional[Path] = None):
        """Initialize config manager.

        Args:
            config_path: Path to configuration file. If None, searches standard locations.
            env_file: Path to a dotenv file. If None, ``.env`` is searched from the
                working directory upwards.
        """
        self._config_path = config_path
        self._env_file = env_file
        self._config: Optional[Config] = None

    def load_config(self) -> Config:
        """Load and validate configuration.

        Returns:
            Validated configuration object.

        Raises:
            FileNotFoundError: If configuration file is not found.
            ValueError: If configuration is invalid.
            yaml.YAMLError: If YAML parsing fails.
        """
        if self._config is not None:
            return self._config

        self._load_environment()
        config_path = self._find_config_file()
        raw_config = self._load_yaml_file(config_path)

        try:
            self._config = Config(**raw_config)
        except ValidationError as e:
            raise ValueError(f"Configuration validation failed: {e}")

        return self._config

    def reload_config(self) -> Config:
        """Reload configuration from file.

        Returns:
            Newly loaded configuration object.
        """
        self._config = None
        return self.load_config()

    def get_config(self) -> Config:
        """Get current configuration, loading if necessary.

        Returns:
            Current configuration object.
        """
        if self._config is None:
            return self.load_config()
        return self._config

    def _load_environment(self) -> None:
        """Load variables from a dotenv file without overriding the real environment."""
        if self._env_file is not None:
            load_dotenv(self._env_file, override=False)
        else:
            load_dotenv(override=False)

    def _find_config_file(self) -> Path:
        """Find configuration file in standard locations.

        Returns:
            Path to configuration file.

        Raises:
            FileNotFoundError: If no configuration file is found.
        """
        if self._config_path is not None:
            if self._config_path.exists():
                return self._config_path
            raise FileNotFoundError(f"Configuration file not found: {self._config_path}")

        # Search standard locations
        search_paths = [
            Path.cwd() / "config" / "config.yaml",
            Path.cwd() / "config.yaml",
            Path.home() / ".config" / "auto_subtitle" / "config.yaml",
            Path.home() / ".auto_subtitle" / "config.yaml",
        ]

        # Add environment variable path if set
        env_config = os.getenv("AUTO_SUBTITLE_CONFIG")
        if env_config:
            search_paths.insert(0, Path(env_config))

        for path in search_paths:
            if path.exists():
                return path

        raise FileNotFoundError(
            f"Configuration file not found in any of these locations: "
            f"{[str(p) for p in search_paths]}"
        )

    def _load_yaml_file(self, path: Path) -> Dict[str, Any]:
        """Load YAML file with environment variable expansion.

        Args:
            path: Path to YAML file.

        Returns:
            Parsed YAML data with environment variables expanded.

        Raises:
            yaml.YAMLError: If YAML parsing fails.
        """
        with open(path, "r", encoding="utf-8") as f:
            try:
                result = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise yaml.YAMLError(f"Failed to parse YAML file {path}: {e}")

        if not isinstance(result, dict):
            raise yaml.YAMLError(f"YAML file {path} must contain a dictionary at root level")
        return _expand_environment(result)

    @classmethod
    def create_default_config(cls, output_path: Path) -> None:
        """Create a default configuration file.

        Args:
            output_path: Path where to create the configuration file.
        """
        default_config = {
            "llm": {
                "provider": "deepseek",
                "model": "deepseek-chat",
                "api_key": "${DEEPSEEK_API_KEY}",
            },
            "tmdb": {
                "api_key": "${TMDB_API_KEY}",
            },
            "opensubtitles": {
                "api_key": "${OPENSUBTITLES_API_KEY}",
                "username": "${OPENSUBTITLES_USERNAME}",
                "password": "${OPENSUBTITLES_PASSWORD}",
            },
            "watcher": {
                "watch_dir": "${MOVIE_WATCH_DIR}",
                "scan_depth": 1,
                "stability_threshold_ms": 2000,
                "poll_interval_ms": 100,
                "processing_delay_ms": 3000,
            },
            "subtitles": {
                "preferred_languages": ["zh-CN", "zh", "en"],
                "target_language": "zh-CN",
                "download_dir": "downloads",
            },
        }

        with open(output_path, "w", encoding="utf-8") as f:
            yaml.dump(default_config, f, default_flow_style=False, indent=2, sort_keys=False)

    def validate_config_file(self, config_path: Path) -> bool:
        """Validate a configuration file without loading it as current config.

        Args:
            config_path: Path to configuration file to validate.

        Returns:
            True if configuration is valid, False otherwise.
        """
        try:
            raw_config = self._load_yaml_file(config_path)
            Config(**raw_config)
            return True
        except (ValidationError, yaml.YAMLError, FileNotFoundError):
            return False
