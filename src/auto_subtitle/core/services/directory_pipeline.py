"""Directory pipeline service implementation."""

import time
from pathlib import Path
from typing import Set

from ...config.models import Config
from ...infrastructure.logging import LoggerMixin
from ..interfaces import (
    ICandidateSelector,
    IDirectoryPipeline,
    IDownloadManager,
    ISubtitleResolver,
    ITitleResolver,
    ITranslationFallback,
)
from ..models import PipelineResult, PipelineStatus
from .quality_ranker import QualityRanker


class DirectoryPipeline(IDirectoryPipeline, LoggerMixin):
    """Runs the subtitle pipeline for a directory.

    Flow:
    - Pick the main movie file of the directory
    - Resolve the movie title to a metadata record
    - Search subtitles in preferred-language order
    - Rank them and pick the best one
    - Download it next to the movie unless a subtitle is already there
    - Translate it if it is English and English is not wanted

    A directory is processed by at most one run at a time; overlapping calls
    return a ``busy`` result immediately.
    """

    def __init__(
        self,
        config: Config,
        candidate_selector: ICandidateSelector,
        title_resolver: ITitleResolver,
        subtitle_resolver: ISubtitleResolver,
        quality_ranker: QualityRanker,
        download_manager: IDownloadManager,
        translation_fallback: ITranslationFallback,
    ):
        """Initialize directory pipeline.

        Args:
            config: Application configuration.
            candidate_selector: Movie file selector.
            title_resolver: Title resolver.
            subtitle_resolver: Subtitle resolver.
            quality_ranker: Subtitle ranker.
            download_manager: Subtitle download manager.
            translation_fallback: Translation fallback.
        """
        self._config = config
        self._candidate_selector = candidate_selector
        self._title_resolver = title_resolver
        self._subtitle_resolver = subtitle_resolver
        self._quality_ranker = quality_ranker
        self._download_manager = download_manager
        self._translation_fallback = translation_fallback

        self._processing: Set[Path] = set()
        self._processed_files: Set[Path] = set()

    def register_file(self, path: Path) -> bool:
        """Record a file as handed off for processing.

        Args:
            path: File path.

        Returns:
            True if the file was not registered before.
        """
        if path in self._processed_files:
            return False
        self._processed_files.add(path)
        return True

    def is_processing(self, directory: Path) -> bool:
        """Check whether a pipeline run holds the directory."""
        return directory in self._processing

    @property
    def processed_files_count(self) -> int:
        """Number of files registered so far."""
        return len(self._processed_files)

    async def process_directory(self, directory: Path) -> PipelineResult:
        """Run the pipeline for a directory.

        Args:
            directory: Directory to process.

        Returns:
            Pipeline result. Overlapping calls for the same directory return
            a ``busy`` result without doing any work.
        """
        if self.is_processing(directory):
            self.logger.info(f"Directory is already being processed: {directory}")
            return PipelineResult(directory=directory, status=PipelineStatus.BUSY)

        self._processing.add(directory)
        start_time = time.time()
        result = PipelineResult(directory=directory, status=PipelineStatus.FAILED)

        try:
            self.logger.info(f"Processing directory: {directory}")

            candidate = await self._candidate_selector.select_candidate(directory)
            if candidate is None:
                self.logger.warning(f"No movie file found in: {directory}")
                result.status = PipelineStatus.NO_CANDIDATE
                return result

            await self._run_for_movie(result, candidate.path)

        except Exception as e:
            result.status = PipelineStatus.FAILED
            result.error_message = str(e)
            self.logger.error(f"Failed to process {directory}: {e}")

        finally:
            self._processing.discard(directory)
            result.processing_time_seconds = time.time() - start_time

        return result

    async def process_file(self, movie_file: Path) -> PipelineResult:
        """Run the pipeline for a given movie file, skipping candidate selection.

        Args:
            movie_file: Movie file to process.

        Returns:
            Pipeline result.
        """
        directory = movie_file.parent
        if self.is_processing(directory):
            self.logger.info(f"Directory is already being processed: {directory}")
            return PipelineResult(directory=directory, status=PipelineStatus.BUSY)

        self._processing.add(directory)
        start_time = time.time()
        result = PipelineResult(directory=directory, status=PipelineStatus.FAILED)

        try:
            self.logger.info(f"Processing movie file: {movie_file}")
            await self._run_for_movie(result, movie_file)

        except Exception as e:
            result.status = PipelineStatus.FAILED
            result.error_message = str(e)
            self.logger.error(f"Failed to process {movie_file.name}: {e}")

        finally:
            self._processing.discard(directory)
            result.processing_time_seconds = time.time() - start_time

        return result

    async def _run_for_movie(self, result: PipelineResult, movie_file: Path) -> None:
        """Run every stage after candidate selection, filling in the result.

        Args:
            result: Result to update.
            movie_file: Selected movie file.
        """
        result.movie_file = movie_file

        # Step 1: Resolve title to metadata
        working_title, movie = await self._title_resolver.resolve(movie_file)
        result.working_title = working_title
        if movie is None:
            result.status = PipelineStatus.NO_METADATA
            return
        result.movie = movie

        # Step 2: Find subtitles
        subtitles = await self._subtitle_resolver.resolve(movie)
        preferred_language = self._config.subtitles.preferred_languages[0]
        best = self._quality_ranker.select_best(subtitles, preferred_language)
        if best is None:
            self.logger.warning(f"No subtitles found for: {movie.display_title}")
            result.status = PipelineStatus.NO_SUBTITLE
            return
        result.subtitle = best

        # Step 3: Download next to the movie
        subtitle_path = await self._download_manager.download_for_movie(best, movie_file)
        if subtitle_path is None:
            result.status = PipelineStatus.SUBTITLE_EXISTS
            return
        result.subtitle_path = subtitle_path
        result.status = PipelineStatus.SUCCESS

        # Step 4: Translate if needed, keeping the download on failure
        try:
            result.translated_path = await self._translation_fallback.maybe_translate(
                best, subtitle_path
            )
        except Exception as e:
            result.error_message = f"Translation failed: {e}"
            self.logger.error(f"Translation failed for {subtitle_path.name}: {e}")

        self.logger.info(f"Subtitle ready for {movie.display_title}: {subtitle_path}")
