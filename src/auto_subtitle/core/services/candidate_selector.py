"""Candidate selector service implementation."""

from pathlib import Path
from typing import List, Optional

from ...config.models import Config
from ...infrastructure.logging import LoggerMixin
from ...utils import CandidateSelectorError, get_file_size, is_hidden_file, is_sample_file
from ..interfaces import ICandidateSelector
from ..models import MovieCandidateFile


class CandidateSelector(ICandidateSelector, LoggerMixin):
    """Picks the main movie file of a directory."""

    def __init__(self, config: Config):
        """Initialize candidate selector.

        Args:
            config: Application configuration.
        """
        self._config = config
        self._video_extensions = set(
            ext.lower() for ext in config.files.extensions.get("video", [])
        )
        self._sample_keywords = [keyword.lower() for keyword in config.files.sample_keywords]
        self._max_sample_mb = config.files.max_sample_size_mb
        self._max_sample_gb = config.files.max_sample_size_gb

    def is_video_file(self, path: Path) -> bool:
        """Check if file is a video file.

        Args:
            path: File path to check.

        Returns:
            True if file is a video file.
        """
        return path.suffix.lower() in self._video_extensions

    def is_sample(self, filename: str) -> bool:
        """Check if a file name looks like a sample clip.

        Args:
            filename: File name to check.

        Returns:
            True if the file is a sample.
        """
        return is_sample_file(
            filename,
            keywords=self._sample_keywords,
            max_sample_mb=self._max_sample_mb,
            max_sample_gb=self._max_sample_gb,
        )

    async def list_video_files(self, directory: Path) -> List[MovieCandidateFile]:
        """List video files directly inside a directory.

        Entries are visited in name order so that selection is deterministic.

        Args:
            directory: Directory to list.

        Returns:
            Video files in name order.

        Raises:
            CandidateSelectorError: If the directory cannot be listed.
        """
        if not directory.is_dir():
            raise CandidateSelectorError(f"Path is not a directory: {directory}")

        try:
            entries = sorted(directory.iterdir(), key=lambda p: p.name)
        except OSError as e:
            error_msg = f"Error listing directory {directory}: {e}"
            self.logger.error(error_msg)
            raise CandidateSelectorError(error_msg) from e

        video_files = []
        for entry in entries:
            if is_hidden_file(entry) or not self.is_video_file(entry):
                continue
            try:
                if not entry.is_file():
                    continue
                size = get_file_size(entry)
            except OSError as e:
                self.logger.warning(f"Cannot stat file {entry}: {e}")
                continue

            video_files.append(
                MovieCandidateFile(path=entry, size_bytes=size, is_sample=self.is_sample(entry.name))
            )

        return video_files

    async def select_candidate(self, directory: Path) -> Optional[MovieCandidateFile]:
        """Pick the largest non-sample video file of a directory.

        Args:
            directory: Directory to inspect.

        Returns:
            Selected file, or None if no non-sample video exists.

        Raises:
            CandidateSelectorError: If the directory cannot be listed.
        """
        video_files = await self.list_video_files(directory)
        if not video_files:
            self.logger.info(f"No video files found in: {directory}")
            return None

        self.logger.info(f"Video files in {directory}: {', '.join(f.name for f in video_files)}")

        selected: Optional[MovieCandidateFile] = None
        for video_file in video_files:
            if video_file.is_sample:
                self.logger.debug(f"Skipping sample file: {video_file.name}")
                continue
            # Strictly greater keeps the first file on ties
            if selected is None or video_file.size_bytes > selected.size_bytes:
                selected = video_file

        if selected is None:
            self.logger.warning(f"Only sample video files found in: {directory}")
            return None

        self.logger.info(f"Selected movie file: {selected.name} ({selected.size_mb:.2f} MB)")
        return selected
