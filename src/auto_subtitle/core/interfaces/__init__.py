"""Core interfaces for dependency injection."""

from .candidate_selector import ICandidateSelector
from .directory_monitor import IDirectoryMonitor
from .directory_pipeline import IDirectoryPipeline
from .download_manager import IDownloadManager
from .llm_service import ILLMService
from .metadata_service import IMetadataService
from .subtitle_resolver import ISubtitleResolver
from .subtitle_service import ISubtitleService
from .title_resolver import ITitleResolver
from .translation_fallback import ITranslationFallback

__all__ = [
    "ILLMService",
    "IMetadataService",
    "ISubtitleService",
    "ICandidateSelector",
    "ITitleResolver",
    "ISubtitleResolver",
    "IDownloadManager",
    "ITranslationFallback",
    "IDirectoryPipeline",
    "IDirectoryMonitor",
]
