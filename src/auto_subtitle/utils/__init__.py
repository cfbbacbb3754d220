"""Utility functions and classes."""

from .exceptions import (
    AutoSubtitleError,
    CandidateSelectorError,
    ConfigurationError,
    DownloadError,
    LLMServiceError,
    MetadataServiceError,
    MonitorError,
    SubtitleServiceError,
)
from .file_utils import (
    ensure_directory,
    get_file_size,
    is_hidden_file,
    relative_depth,
    with_language_suffix,
)
from .text_utils import (
    clean_completion,
    extract_size_token,
    filename_from_url,
    has_language_marker,
    is_sample_file,
    names_overlap,
)

__all__ = [
    "AutoSubtitleError",
    "ConfigurationError",
    "LLMServiceError",
    "MetadataServiceError",
    "SubtitleServiceError",
    "DownloadError",
    "CandidateSelectorError",
    "MonitorError",
    "get_file_size",
    "is_hidden_file",
    "ensure_directory",
    "with_language_suffix",
    "relative_depth",
    "is_sample_file",
    "extract_size_token",
    "names_overlap",
    "has_language_marker",
    "filename_from_url",
    "clean_completion",
]
