"""Core data models."""

from .file_info import DownloadedFile, MovieCandidateFile, WatchEvent, WatchEventKind
from .movie import MovieRecord, MovieSearchResult
from .processing_result import MonitorStatus, PipelineResult, PipelineStatus
from .subtitle import SessionToken, SubtitleRecord

__all__ = [
    "WatchEvent",
    "WatchEventKind",
    "MovieCandidateFile",
    "DownloadedFile",
    "MovieSearchResult",
    "MovieRecord",
    "SubtitleRecord",
    "SessionToken",
    "PipelineStatus",
    "PipelineResult",
    "MonitorStatus",
]
