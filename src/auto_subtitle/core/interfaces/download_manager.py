"""Download manager interface."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional

from ..models import DownloadedFile, SubtitleRecord


class IDownloadManager(ABC):
    """Interface for subtitle downloads."""

    @abstractmethod
    async def get_token(self) -> str:
        """Get a session token valid today, logging in if needed.

        Returns:
            Bearer token.

        Raises:
            SubtitleServiceError: If login fails.
        """
        pass

    @abstractmethod
    def subtitle_exists(self, directory: Path, movie_name: str) -> bool:
        """Check if a directory already holds a subtitle for a movie.

        Args:
            directory: Movie directory.
            movie_name: Movie file name without extension.

        Returns:
            True if a matching subtitle file is present.
        """
        pass

    @abstractmethod
    async def download(self, file_id: int, destination: Path) -> Path:
        """Download a subtitle file.

        Args:
            file_id: Subtitle file identifier.
            destination: Requested target path. Its directory is always used;
                its name is used only when the download link has none.

        Returns:
            Path the subtitle was written to.

        Raises:
            DownloadError: If download fails.
        """
        pass

    @abstractmethod
    async def download_for_movie(
        self, subtitle: SubtitleRecord, movie_file: Path
    ) -> Optional[Path]:
        """Download a subtitle next to a movie unless one is already there.

        Args:
            subtitle: Subtitle to download.
            movie_file: Movie file the subtitle belongs to.

        Returns:
            Path written, or None if the download was skipped.

        Raises:
            DownloadError: If download fails.
        """
        pass

    @abstractmethod
    async def download_to_library(
        self, file_id: int, file_name: str, directory: Optional[Path] = None
    ) -> Path:
        """Download a subtitle into the manual download directory.

        Args:
            file_id: Subtitle file identifier.
            file_name: Fallback file name.
            directory: Target directory. Uses the configured one if None.

        Returns:
            Path written.

        Raises:
            DownloadError: If download fails.
        """
        pass

    @abstractmethod
    def list_history(self, directory: Optional[Path] = None) -> List[DownloadedFile]:
        """List manually downloaded files, newest first.

        Args:
            directory: Download directory. Uses the configured one if None.

        Returns:
            Downloaded files.
        """
        pass
