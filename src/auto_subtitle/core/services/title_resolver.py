"""Title resolver service implementation."""

from pathlib import Path
from typing import Optional, Tuple

from ...config.models import Config
from ...infrastructure.logging import LoggerMixin
from ...utils import MetadataServiceError
from ..interfaces import ILLMService, IMetadataService, ITitleResolver
from ..models import MovieRecord


class TitleResolver(ITitleResolver, LoggerMixin):
    """Title resolver service implementation.

    Flow: raw file stem → metadata probe → AI simplification if the probe
    finds nothing → metadata search → full record of the first match.
    """

    def __init__(
        self, config: Config, llm_service: ILLMService, metadata_service: IMetadataService
    ):
        """Initialize title resolver.

        Args:
            config: Application configuration.
            llm_service: LLM service for title simplification.
            metadata_service: Movie metadata service.
        """
        self._config = config
        self._llm_service = llm_service
        self._metadata_service = metadata_service

    async def derive_working_title(self, movie_file: Path) -> str:
        """Derive the title used for metadata lookup.

        Args:
            movie_file: Movie file path.

        Returns:
            Raw file stem if it finds matches, otherwise its AI-simplified form.

        Raises:
            LLMServiceError: If simplification fails.
        """
        raw_name = movie_file.stem

        try:
            probe = await self._metadata_service.search(raw_name)
        except MetadataServiceError as e:
            self.logger.debug(f"Probe search failed for '{raw_name}': {e}")
            probe = []

        if probe:
            self.logger.info(f"Raw file name matches metadata: {raw_name}")
            return raw_name

        simplified = await self._llm_service.simplify_movie_name(raw_name)
        return simplified.strip()

    async def resolve(self, movie_file: Path) -> Tuple[str, Optional[MovieRecord]]:
        """Resolve a movie file to a metadata record.

        Args:
            movie_file: Movie file path.

        Returns:
            Tuple of (working_title, movie_record). The record is None when
            the working title has no metadata match.

        Raises:
            MetadataServiceError: If lookup fails.
            LLMServiceError: If simplification fails.
        """
        self.logger.info(f"Resolving movie from file: {movie_file.name}")

        working_title = await self.derive_working_title(movie_file)
        results = await self._metadata_service.search(working_title)
        if not results:
            self.logger.warning(f"No metadata found for: {working_title}")
            return working_title, None

        movie = await self._metadata_service.get_details(results[0].external_id)
        self.logger.info(f"Resolved '{working_title}' to {movie.display_title}")
        return working_title, movie
