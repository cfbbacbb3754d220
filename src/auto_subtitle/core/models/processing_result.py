"""Processing result data models."""

from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .movie import MovieRecord
from .subtitle import SubtitleRecord


class PipelineStatus(str, Enum):
    """Outcome of a directory pipeline run."""

    SUCCESS = "success"
    BUSY = "busy"
    NO_CANDIDATE = "no_candidate"
    NO_METADATA = "no_metadata"
    NO_SUBTITLE = "no_subtitle"
    SUBTITLE_EXISTS = "subtitle_exists"
    FAILED = "failed"


class PipelineResult(BaseModel):
    """Result of processing a single directory."""

    directory: Path = Field(..., description="Directory that was processed")
    status: PipelineStatus = Field(..., description="Pipeline outcome")
    movie_file: Optional[Path] = Field(None, description="Selected movie file")
    working_title: Optional[str] = Field(None, description="Title used for metadata lookup")
    movie: Optional[MovieRecord] = Field(None, description="Resolved movie metadata")
    subtitle: Optional[SubtitleRecord] = Field(None, description="Chosen subtitle")
    subtitle_path: Optional[Path] = Field(None, description="Where the subtitle was written")
    translated_path: Optional[Path] = Field(None, description="Where the translation was written")
    error_message: Optional[str] = Field(None, description="Error message if processing failed")
    processing_time_seconds: Optional[float] = Field(None, description="Time taken to process")

    @property
    def is_successful(self) -> bool:
        """Check if a subtitle was downloaded."""
        return self.status == PipelineStatus.SUCCESS

    @property
    def is_benign(self) -> bool:
        """Check if the run ended without an error."""
        return self.status != PipelineStatus.FAILED

    model_config = ConfigDict(arbitrary_types_allowed=True)


class MonitorStatus(BaseModel):
    """Snapshot of the directory monitor state."""

    is_watching: bool = Field(..., description="Observer is running")
    is_initialized: bool = Field(..., description="Initial scan completed")
    watch_dir: Optional[Path] = Field(None, description="Watched root directory")
    processed_files_count: int = Field(default=0, description="Files handed off so far")
    pending_tasks: int = Field(default=0, description="Deferred directory tasks not yet run")

    model_config = ConfigDict(arbitrary_types_allowed=True)
