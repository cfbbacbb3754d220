"""Subtitle provider interface."""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..models import SubtitleRecord


class ISubtitleService(ABC):
    """Interface for subtitle search and download providers."""

    @abstractmethod
    async def search_by_id(self, external_id: str, language: str) -> List[SubtitleRecord]:
        """Search subtitles by movie identifier.

        Args:
            external_id: Metadata service identifier of the movie.
            language: Language code.

        Returns:
            Subtitles found.

        Raises:
            SubtitleServiceError: If search fails.
        """
        pass

    @abstractmethod
    async def search_by_title(
        self, title: str, year: Optional[int], language: str
    ) -> List[SubtitleRecord]:
        """Search subtitles by title and year.

        Args:
            title: Movie title.
            year: Release year, if known.
            language: Language code.

        Returns:
            Subtitles found.

        Raises:
            SubtitleServiceError: If search fails.
        """
        pass

    @abstractmethod
    async def authenticate(self) -> str:
        """Exchange account credentials for a session token.

        Returns:
            Bearer token.

        Raises:
            SubtitleServiceError: If login fails.
        """
        pass

    @abstractmethod
    async def request_link(self, file_id: int, token: str) -> str:
        """Request a one-time download link for a subtitle file.

        Args:
            file_id: Subtitle file identifier.
            token: Bearer token.

        Returns:
            Download URL.

        Raises:
            SubtitleServiceError: If the request fails or returns no link.
        """
        pass

    @abstractmethod
    async def fetch(self, url: str) -> bytes:
        """Fetch raw bytes from a download link.

        Args:
            url: Download URL.

        Returns:
            File content.

        Raises:
            SubtitleServiceError: If the fetch fails.
        """
        pass
