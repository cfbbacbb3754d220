"""File-related data models."""

from datetime import datetime
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class WatchEventKind(str, Enum):
    """Kind of filesystem entry a watch event refers to."""

    FILE = "file"
    DIRECTORY = "directory"


class WatchEvent(BaseModel):
    """Creation event emitted by the directory monitor."""

    path: Path = Field(..., description="Created path")
    kind: WatchEventKind = Field(..., description="Whether a file or directory was created")

    model_config = ConfigDict(arbitrary_types_allowed=True)


class MovieCandidateFile(BaseModel):
    """Video file considered as the main movie of a directory."""

    path: Path = Field(..., description="Full path to the file")
    size_bytes: int = Field(..., ge=0, description="File size in bytes")
    is_sample: bool = Field(default=False, description="Whether the file looks like a sample")

    @property
    def name(self) -> str:
        """Get file name."""
        return self.path.name

    @property
    def size_mb(self) -> float:
        """Get file size in MB."""
        return self.size_bytes / (1024 * 1024)

    model_config = ConfigDict(arbitrary_types_allowed=True)


class DownloadedFile(BaseModel):
    """Entry of the manual download history."""

    file_name: str = Field(..., description="File name")
    file_path: Path = Field(..., description="Full path to the file")
    size_bytes: int = Field(..., ge=0, description="File size in bytes")
    downloaded_at: datetime = Field(..., description="Last modification time")

    model_config = ConfigDict(arbitrary_types_allowed=True)
