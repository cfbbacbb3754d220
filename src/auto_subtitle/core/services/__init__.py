"""Core service implementations."""

from .candidate_selector import CandidateSelector
from .directory_monitor import DirectoryMonitor
from .directory_pipeline import DirectoryPipeline
from .download_manager import DownloadManager
from .llm_services import AnthropicLLMService, OpenAILLMService
from .opensubtitles_service import OpenSubtitlesService
from .quality_ranker import QualityRanker
from .subtitle_resolver import SubtitleResolver
from .title_resolver import TitleResolver
from .tmdb_service import TMDbService
from .translation_fallback import TranslationFallback

__all__ = [
    "OpenAILLMService",
    "AnthropicLLMService",
    "TMDbService",
    "OpenSubtitlesService",
    "CandidateSelector",
    "TitleResolver",
    "SubtitleResolver",
    "QualityRanker",
    "DownloadManager",
    "TranslationFallback",
    "DirectoryPipeline",
    "DirectoryMonitor",
]
