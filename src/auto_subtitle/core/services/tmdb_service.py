"""TMDb service implementation."""

from datetime import datetime
from typing import Any, List, Optional

import aiohttp

from ...config.models import Config
from ...infrastructure.logging import LoggerMixin
from ...utils import MetadataServiceError
from ..interfaces import IMetadataService
from ..models import MovieRecord, MovieSearchResult

MAX_CAST = 10


class TMDbService(IMetadataService, LoggerMixin):
    """Movie metadata lookups against the TMDb v3 API."""

    def __init__(self, config: Config) -> None:
        """Initialize TMDb service.

        Args:
            config: Application configuration.
        """
        self._config = config
        self._tmdb_config = config.tmdb
        self._session: Optional[aiohttp.ClientSession] = None

    async def search(self, query: str) -> List[MovieSearchResult]:
        """Search movies by free text.

        Args:
            query: Search text.

        Returns:
            Matching movies in TMDb relevance order.

        Raises:
            MetadataServiceError: If search fails.
        """
        self.logger.info(f"Searching movies: {query}")

        url = f"{self._tmdb_config.base_url}/search/movie"
        params = {
            "api_key": self._tmdb_config.api_key,
            "query": query,
            "language": self._tmdb_config.language,
            "include_adult": "false",
        }

        try:
            async with self._get_session().get(url, params=params) as response:
                response.raise_for_status()
                data = await response.json()
        except Exception as e:
            error_msg = f"TMDb search failed for '{query}': {e}"
            self.logger.error(error_msg)
            raise MetadataServiceError(error_msg) from e

        results = data.get("results", [])
        if not isinstance(results, list):
            return []

        movies = [self._parse_search_result(result) for result in results]
        self.logger.info(f"Found {len(movies)} movies")
        return movies

    async def get_details(self, external_id: str) -> MovieRecord:
        """Get detailed movie information by TMDb ID.

        Args:
            external_id: TMDb movie ID.

        Returns:
            Movie record with credits.

        Raises:
            MetadataServiceError: If request fails or the movie does not exist.
        """
        self.logger.info(f"Fetching movie details: {external_id}")

        url = f"{self._tmdb_config.base_url}/movie/{external_id}"
        params = {
            "api_key": self._tmdb_config.api_key,
            "language": self._tmdb_config.language,
            "append_to_response": "credits",
        }

        try:
            async with self._get_session().get(url, params=params) as response:
                if response.status == 404:
                    raise MetadataServiceError(f"Movie not found on TMDb: {external_id}")
                response.raise_for_status()
                data = await response.json()
        except MetadataServiceError:
            raise
        except Exception as e:
            error_msg = f"Failed to get movie details for TMDb ID {external_id}: {e}"
            self.logger.error(error_msg)
            raise MetadataServiceError(error_msg) from e

        movie = self._parse_movie_record(data)
        self.logger.info(f"Got movie details: {movie.display_title}")
        return movie

    def _parse_search_result(self, data: dict) -> MovieSearchResult:
        """Parse a TMDb search row.

        Args:
            data: TMDb movie data.

        Returns:
            MovieSearchResult object.
        """
        return MovieSearchResult(
            external_id=str(data.get("id", "")),
            title=data.get("title") or data.get("original_title") or "",
            year=self._parse_year(data.get("release_date")),
            original_title=data.get("original_title"),
            overview=data.get("overview") or None,
            poster=data.get("poster_path"),
        )

    def _parse_movie_record(self, data: dict) -> MovieRecord:
        """Parse TMDb movie details into MovieRecord.

        Args:
            data: TMDb movie data with ``credits`` appended.

        Returns:
            MovieRecord object.
        """
        credits = data.get("credits") or {}
        directors = [
            member.get("name", "")
            for member in credits.get("crew", [])
            if member.get("job") == "Director"
        ]
        cast = [member.get("name", "") for member in credits.get("cast", [])[:MAX_CAST]]

        return MovieRecord(
            external_id=str(data.get("id", "")),
            title=data.get("title") or data.get("original_title") or "",
            original_title=data.get("original_title"),
            year=self._parse_year(data.get("release_date")),
            rating=data.get("vote_average"),
            director=", ".join(name for name in directors if name) or None,
            cast=[name for name in cast if name],
            genres=[g["name"] for g in data.get("genres", []) if g.get("name")],
            runtime=data.get("runtime"),
            plot=data.get("overview") or None,
            poster=data.get("poster_path"),
        )

    @staticmethod
    def _parse_year(release_date: Optional[str]) -> Optional[int]:
        """Extract the year of a ``YYYY-MM-DD`` release date."""
        if not release_date:
            return None
        try:
            return datetime.strptime(release_date, "%Y-%m-%d").year
        except ValueError:
            return None

    def _get_session(self) -> aiohttp.ClientSession:
        """Get or create HTTP session.

        Returns:
            HTTP session.
        """
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self._tmdb_config.timeout)
            self._session = aiohttp.ClientSession(timeout=timeout)
        return self._session

    async def close(self) -> None:
        """Close HTTP session."""
        if self._session:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> "TMDbService":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()
