"""Candidate selector interface."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional

from ..models import MovieCandidateFile


class ICandidateSelector(ABC):
    """Interface for picking the main movie file of a directory."""

    @abstractmethod
    def is_video_file(self, path: Path) -> bool:
        """Check if file is a video file.

        Args:
            path: File path to check.

        Returns:
            True if file is a video file.
        """
        pass

    @abstractmethod
    def is_sample(self, filename: str) -> bool:
        """Check if a file name looks like a sample clip.

        Args:
            filename: File name to check.

        Returns:
            True if the file is a sample.
        """
        pass

    @abstractmethod
    async def list_video_files(self, directory: Path) -> List[MovieCandidateFile]:
        """List video files directly inside a directory.

        Args:
            directory: Directory to list.

        Returns:
            Video files in listing order.

        Raises:
            CandidateSelectorError: If the directory cannot be listed.
        """
        pass

    @abstractmethod
    async def select_candidate(self, directory: Path) -> Optional[MovieCandidateFile]:
        """Pick the largest non-sample video file of a directory.

        Args:
            directory: Directory to inspect.

        Returns:
            Selected file, or None if no non-sample video exists.

        Raises:
            CandidateSelectorError: If the directory cannot be listed.
        """
        pass
