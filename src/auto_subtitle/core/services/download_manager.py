"""Download manager service implementation."""

import asyncio
from datetime import date, datetime
from pathlib import Path
from typing import Callable, List, Optional

import aiofiles

from ...config.models import Config
from ...infrastructure.logging import LoggerMixin
from ...utils import (
    ConfigurationError,
    DownloadError,
    ensure_directory,
    filename_from_url,
    has_language_marker,
    names_overlap,
)
from ..interfaces import IDownloadManager, ISubtitleService
from ..models import DownloadedFile, SessionToken, SubtitleRecord


class DownloadManager(IDownloadManager, LoggerMixin):
    """Downloads subtitles, caching the provider session token per day."""

    def __init__(
        self,
        config: Config,
        subtitle_service: ISubtitleService,
        clock: Callable[[], date] = date.today,
    ):
        """Initialize download manager.

        Args:
            config: Application configuration.
            subtitle_service: Subtitle provider.
            clock: Returns the current calendar day.

        Raises:
            ConfigurationError: If account credentials are not configured.
        """
        os_config = config.opensubtitles
        if not os_config.username or not os_config.password:
            raise ConfigurationError("OpenSubtitles username and password are not configured")

        self._config = config
        self._subtitle_service = subtitle_service
        self._clock = clock
        self._token: Optional[SessionToken] = None
        self._token_lock: Optional[asyncio.Lock] = None
        self._subtitle_extensions = set(
            ext.lower() for ext in config.files.extensions.get("subtitle", [])
        )

    async def get_token(self) -> str:
        """Get a session token valid today, logging in if needed.

        Returns:
            Bearer token.

        Raises:
            SubtitleServiceError: If login fails.
        """
        # Concurrent downloads share one login
        if self._token_lock is None:
            self._token_lock = asyncio.Lock()

        async with self._token_lock:
            today = self._clock()
            if self._token is not None and self._token.is_valid_on(today):
                return self._token.value

            value = await self._subtitle_service.authenticate()
            self._token = SessionToken(value=value, issued_date=today)
            self.logger.info(f"Obtained new session token for {today.isoformat()}")
            return value

    def subtitle_exists(self, directory: Path, movie_name: str) -> bool:
        """Check if a directory already holds a subtitle for a movie.

        A subtitle matches when its name and the movie name contain one
        another, or when it carries a Chinese language marker.

        Args:
            directory: Movie directory.
            movie_name: Movie file name without extension.

        Returns:
            True if a matching subtitle file is present.
        """
        try:
            entries = list(directory.iterdir())
        except OSError as e:
            self.logger.warning(f"Cannot list directory {directory}: {e}")
            return False

        for entry in entries:
            if entry.suffix.lower() not in self._subtitle_extensions:
                continue
            if names_overlap(entry.stem, movie_name) or has_language_marker(entry.stem):
                self.logger.info(f"Existing subtitle found: {entry.name}")
                return True
        return False

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
        try:
            token = await self.get_token()
            link = await self._subtitle_service.request_link(file_id, token)
            file_name = filename_from_url(link) or destination.name
            content = await self._subtitle_service.fetch(link)

            target = destination.parent / file_name
            ensure_directory(target.parent)
            async with aiofiles.open(target, "wb") as f:
                await f.write(content)
        except Exception as e:
            error_msg = f"Failed to download subtitle {file_id}: {e}"
            self.logger.error(error_msg)
            raise DownloadError(error_msg) from e

        self.logger.info(f"Subtitle saved to: {target}")
        return target

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
        directory = movie_file.parent
        movie_name = movie_file.stem

        if self.subtitle_exists(directory, movie_name):
            self.logger.info(f"Subtitle already present for {movie_name}, skipping download")
            return None

        suffix = Path(subtitle.file_name).suffix or ".srt"
        destination = directory / f"{movie_name}{suffix}"
        if destination.exists():
            self.logger.info(f"Target file already exists: {destination}")
            return None

        return await self.download(subtitle.id, destination)

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
        directory = directory or Path(self._config.subtitles.download_dir)
        return await self.download(file_id, directory / file_name)

    def list_history(self, directory: Optional[Path] = None) -> List[DownloadedFile]:
        """List manually downloaded files, newest first.

        Args:
            directory: Download directory. Uses the configured one if None.

        Returns:
            Downloaded files.
        """
        directory = directory or Path(self._config.subtitles.download_dir)
        if not directory.is_dir():
            return []

        history = []
        for entry in directory.iterdir():
            if not entry.is_file():
                continue
            stat = entry.stat()
            history.append(
                DownloadedFile(
                    file_name=entry.name,
                    file_path=entry,
                    size_bytes=stat.st_size,
                    downloaded_at=datetime.fromtimestamp(stat.st_mtime),
                )
            )

        history.sort(key=lambda item: item.downloaded_at, reverse=True)
        return history
