"""Custom exceptions for the application."""


class AutoSubtitleError(Exception):
    """Base exception for all application errors."""

    pass


class ConfigurationError(AutoSubtitleError):
    """Configuration-related errors."""

    pass


class LLMServiceError(AutoSubtitleError):
    """LLM service errors."""

    pass


class MetadataServiceError(AutoSubtitleError):
    """Movie metadata service errors."""

    pass


class SubtitleServiceError(AutoSubtitleError):
    """Subtitle search service errors."""

    pass


class DownloadError(AutoSubtitleError):
    """Subtitle download errors."""

    pass


class CandidateSelectorError(AutoSubtitleError):
    """Candidate selection errors."""

    pass


class MonitorError(AutoSubtitleError):
    """Directory monitor errors."""

    pass
