"""Subtitle resolver interface."""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..models import MovieRecord, SubtitleRecord


class ISubtitleResolver(ABC):
    """Interface for finding subtitles of a movie."""

    @abstractmethod
    async def resolve(
        self, movie: MovieRecord, languages: Optional[List[str]] = None
    ) -> List[SubtitleRecord]:
        """Find subtitles following the preferred-language order.

        Args:
            movie: Movie to find subtitles for.
            languages: Language codes in order of preference. Uses the
                configured list if None.

        Returns:
            Subtitles of the first language that has any, else the title
            search results, else an empty list.
        """
        pass

    @abstractmethod
    async def search(
        self,
        external_id: Optional[str] = None,
        title: str = "",
        year: Optional[int] = None,
        language: str = "zh-CN",
    ) -> List[SubtitleRecord]:
        """Search subtitles by identifier, falling back to title.

        Args:
            external_id: Metadata service identifier, if known.
            title: Movie title used when the identifier finds nothing.
            year: Release year for the title search.
            language: Language code.

        Returns:
            Subtitles found.

        Raises:
            SubtitleServiceError: If search fails.
        """
        pass
