"""Subtitle resolver service implementation."""

from typing import List, Optional

from ...config.models import Config
from ...infrastructure.logging import LoggerMixin
from ...utils import SubtitleServiceError
from ..interfaces import ISubtitleResolver, ISubtitleService
from ..models import MovieRecord, SubtitleRecord


class SubtitleResolver(ISubtitleResolver, LoggerMixin):
    """Finds subtitles for a movie, walking the preferred-language list."""

    def __init__(self, config: Config, subtitle_service: ISubtitleService):
        """Initialize subtitle resolver.

        Args:
            config: Application configuration.
            subtitle_service: Subtitle provider.
        """
        self._config = config
        self._subtitle_service = subtitle_service

    async def resolve(
        self, movie: MovieRecord, languages: Optional[List[str]] = None
    ) -> List[SubtitleRecord]:
        """Find subtitles following the preferred-language order.

        Languages are queried one at a time by movie ID; the first language
        with results wins and later ones are never queried. A failing query is
        logged and the next language is tried. When no language has results,
        a single title search in the first language is made.

        Args:
            movie: Movie to find subtitles for.
            languages: Language codes in order of preference. Uses the
                configured list if None.

        Returns:
            Subtitles of the first language that has any, else the title
            search results, else an empty list.
        """
        languages = languages or self._config.subtitles.preferred_languages

        for language in languages:
            try:
                subtitles = await self._subtitle_service.search_by_id(movie.external_id, language)
            except Exception as e:
                self.logger.warning(f"Subtitle search failed for [{language}]: {e}")
                continue

            if subtitles:
                self.logger.info(f"Found {len(subtitles)} subtitles in [{language}]")
                return subtitles
            self.logger.info(f"No subtitles in [{language}]")

        self.logger.info(f"Falling back to title search: {movie.display_title}")
        try:
            return await self._subtitle_service.search_by_title(
                movie.title, movie.year, languages[0]
            )
        except SubtitleServiceError as e:
            self.logger.error(f"Title search failed for {movie.display_title}: {e}")
            return []

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
        if external_id:
            subtitles = await self._subtitle_service.search_by_id(external_id, language)
            if subtitles:
                return subtitles

        if not title:
            return []
        return await self._subtitle_service.search_by_title(title, year, language)
