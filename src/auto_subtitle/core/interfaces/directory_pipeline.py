"""Directory pipeline interface."""

from abc import ABC, abstractmethod
from pathlib import Path

from ..models import PipelineResult


class IDirectoryPipeline(ABC):
    """Interface for the per-directory subtitle pipeline."""

    @abstractmethod
    def register_file(self, path: Path) -> bool:
        """Record a file as handed off for processing.

        Args:
            path: File path.

        Returns:
            True if the file was not registered before.
        """
        pass

    @abstractmethod
    def is_processing(self, directory: Path) -> bool:
        """Check whether a pipeline run holds the directory."""
        pass

    @property
    @abstractmethod
    def processed_files_count(self) -> int:
        """Number of files registered so far."""
        pass

    @abstractmethod
    async def process_directory(self, directory: Path) -> PipelineResult:
        """Run the pipeline for a directory.

        Args:
            directory: Directory to process.

        Returns:
            Pipeline result. Overlapping calls for the same directory return
            a ``busy`` result without doing any work.
        """
        pass

    @abstractmethod
    async def process_file(self, movie_file: Path) -> PipelineResult:
        """Run the pipeline for a given movie file, skipping candidate selection.

        Args:
            movie_file: Movie file to process.

        Returns:
            Pipeline result.
        """
        pass
