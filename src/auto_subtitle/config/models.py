"""Configuration data models."""

import os
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


class LLMConfig(BaseModel):
    """LLM provider configuration."""

    provider: str = Field(default="deepseek", description="LLM provider name")
    model: str = Field(default="deepseek-chat", description="Model identifier")
    api_key: str = Field(..., description="API key for the provider")
    base_url: Optional[str] = Field(
        default=None, description="Override for OpenAI-compatible endpoints"
    )
    max_tokens: int = Field(default=100, gt=0, description="Maximum tokens for title cleanup")
    temperature: float = Field(default=0.1, ge=0.0, le=2.0, description="Sampling temperature")
    translation_max_tokens: int = Field(
        default=2000, gt=0, description="Maximum tokens for subtitle translation"
    )
    translation_temperature: float = Field(
        default=0.3, ge=0.0, le=2.0, description="Sampling temperature for translation"
    )
    timeout: int = Field(default=60, gt=0, description="Request timeout in seconds")

    @field_validator("provider")
    @classmethod
    def validate_provider(cls, v: str) -> str:
        """Validate LLM provider."""
        allowed = {"deepseek", "openai", "anthropic"}
        if v.lower() not in allowed:
            raise ValueError(f"Provider must be one of: {allowed}")
        return v.lower()

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Expand environment variables in API key."""
        return os.path.expandvars(v)

    @property
    def resolved_base_url(self) -> Optional[str]:
        """Base URL to use for the configured provider."""
        if self.base_url:
            return self.base_url
        if self.provider == "deepseek":
            return "https://api.deepseek.com/v1"
        return None


class TMDbConfig(BaseModel):
    """TMDb API configuration."""

    api_key: str = Field(..., description="TMDb API key")
    base_url: str = Field(default="https://api.themoviedb.org/3", description="TMDb API base URL")
    language: str = Field(default="en-US", description="Default language for requests")
    timeout: int = Field(default=10, gt=0, description="Request timeout in seconds")

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Expand environment variables in API key."""
        return os.path.expandvars(v)


class OpenSubtitlesConfig(BaseModel):
    """OpenSubtitles REST API configuration."""

    api_key: str = Field(default="", description="OpenSubtitles API key")
    username: str = Field(default="", description="OpenSubtitles account username")
    password: str = Field(default="", description="OpenSubtitles account password")
    user_agent: str = Field(default=DEFAULT_USER_AGENT, description="User-Agent header")
    base_url: str = Field(
        default="https://api.opensubtitles.com/api/v1", description="API base URL"
    )
    timeout: int = Field(default=30, gt=0, description="Request timeout in seconds")
    download_timeout: int = Field(default=20, gt=0, description="File fetch timeout in seconds")
    proxy: Optional[str] = Field(default=None, description="HTTP proxy URL")

    @field_validator("api_key", "username", "password")
    @classmethod
    def validate_credentials(cls, v: str) -> str:
        """Expand environment variables in credentials."""
        return os.path.expandvars(v)

    @field_validator("proxy")
    @classmethod
    def validate_proxy(cls, v: Optional[str]) -> Optional[str]:
        """Treat an empty proxy string as no proxy."""
        if v is None:
            return None
        v = os.path.expandvars(v).strip()
        return v or None


class WatcherConfig(BaseModel):
    """Directory monitor configuration."""

    watch_dir: Optional[str] = Field(default=None, description="Root directory to watch")
    scan_depth: int = Field(default=1, ge=0, description="Subdirectory levels to watch")
    stability_threshold_ms: int = Field(
        default=2000, ge=0, description="Quiet period before a file counts as written"
    )
    poll_interval_ms: int = Field(default=100, gt=0, description="Write-stability poll interval")
    processing_delay_ms: int = Field(
        default=3000, ge=0, description="Delay before a changed directory is processed"
    )
    ignore_hidden: bool = Field(default=True, description="Ignore hidden files and folders")

    @field_validator("watch_dir")
    @classmethod
    def validate_watch_dir(cls, v: Optional[str]) -> Optional[str]:
        """Expand environment variables and user home in the watch directory."""
        if v is None:
            return None
        v = os.path.expanduser(os.path.expandvars(v)).strip()
        return v or None


class SubtitlesConfig(BaseModel):
    """Subtitle selection configuration."""

    preferred_languages: List[str] = Field(
        default_factory=lambda: ["zh-CN", "zh", "en"],
        description="Language codes in order of preference",
    )
    target_language: str = Field(default="zh-CN", description="Translation target language")
    download_dir: str = Field(
        default="downloads", description="Directory for manual subtitle downloads"
    )

    @field_validator("preferred_languages", mode="before")
    @classmethod
    def split_languages(cls, v: object) -> object:
        """Accept a comma separated string as well as a list."""
        if isinstance(v, str):
            return [lang.strip() for lang in v.split(",") if lang.strip()]
        return v

    @field_validator("preferred_languages")
    @classmethod
    def validate_languages(cls, v: List[str]) -> List[str]:
        """Require at least one language."""
        if not v:
            raise ValueError("At least one preferred language is required")
        return v


class FilesConfig(BaseModel):
    """File processing configuration."""

    extensions: Dict[str, List[str]] = Field(
        default_factory=lambda: {
            "video": [".mp4", ".avi", ".mkv", ".mov", ".wmv", ".flv", ".webm", ".m4v"],
            "subtitle": [".srt", ".ass", ".ssa", ".sub", ".vtt"],
        },
        description="File extensions by type",
    )
    sample_keywords: List[str] = Field(
        default_factory=lambda: ["sample", "trailer", "preview", "teaser", "promo"],
        description="Keywords marking sample files",
    )
    max_sample_size_mb: float = Field(
        default=50, ge=0, description="Size tokens below this many MB mark a sample"
    )
    max_sample_size_gb: float = Field(
        default=0.1, ge=0, description="Size tokens below this many GB mark a sample"
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Logging level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format string",
    )
    file: Optional[str] = Field(default=None, description="Log file path")
    max_size_mb: int = Field(default=10, gt=0, description="Maximum log file size in MB")
    backup_count: int = Field(default=5, ge=0, description="Number of backup log files")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate logging level."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Logging level must be one of: {allowed}")
        return v.upper()


class Config(BaseModel):
    """Main configuration model."""

    llm: LLMConfig = Field(..., description="LLM configuration")
    tmdb: TMDbConfig = Field(..., description="TMDb configuration")
    opensubtitles: OpenSubtitlesConfig = Field(
        default_factory=OpenSubtitlesConfig, description="OpenSubtitles configuration"
    )
    watcher: WatcherConfig = Field(
        default_factory=WatcherConfig, description="Directory monitor configuration"
    )
    subtitles: SubtitlesConfig = Field(
        default_factory=SubtitlesConfig, description="Subtitle selection configuration"
    )
    files: FilesConfig = Field(
        default_factory=FilesConfig, description="File processing configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )

    model_config = ConfigDict(
        validate_assignment=True,
        populate_by_name=True,
    )
