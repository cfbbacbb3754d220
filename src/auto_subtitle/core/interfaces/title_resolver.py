"""Title resolver interface."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Tuple

from ..models import MovieRecord


class ITitleResolver(ABC):
    """Interface for resolving a movie file to its metadata record."""

    @abstractmethod
    async def derive_working_title(self, movie_file: Path) -> str:
        """Derive the title used for metadata lookup.

        Args:
            movie_file: Movie file path.

        Returns:
            Raw file stem if it finds matches, otherwise its AI-simplified form.

        Raises:
            LLMServiceError: If simplification fails.
        """
        pass

    @abstractmethod
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
        pass
