"""Movie metadata service interface."""

from abc import ABC, abstractmethod
from typing import List

from ..models import MovieRecord, MovieSearchResult


class IMetadataService(ABC):
    """Interface for movie metadata services."""

    @abstractmethod
    async def search(self, query: str) -> List[MovieSearchResult]:
        """Search movies by free text.

        Args:
            query: Search text.

        Returns:
            Matching movies in service relevance order.

        Raises:
            MetadataServiceError: If search fails.
        """
        pass

    @abstractmethod
    async def get_details(self, external_id: str) -> MovieRecord:
        """Get the full metadata record of a movie.

        Args:
            external_id: Metadata service identifier.

        Returns:
            Movie record.

        Raises:
            MetadataServiceError: If request fails or the movie does not exist.
        """
        pass
