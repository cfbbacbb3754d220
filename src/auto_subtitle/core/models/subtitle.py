"""Subtitle-related data models."""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field


class SubtitleRecord(BaseModel):
    """Subtitle search result."""

    id: int = Field(..., description="File identifier used for downloads")
    file_name: str = Field(default="", description="Subtitle file name")
    language: str = Field(default="", description="Language code")
    download_count: int = Field(default=0, ge=0, description="Number of downloads")
    rating: float = Field(default=0.0, ge=0.0, description="User rating")
    release: str = Field(default="", description="Release name the subtitle was made for")
    size: Optional[int] = Field(None, description="File size in bytes")
    upload_date: Optional[datetime] = Field(None, description="Upload timestamp")
    hd: bool = Field(default=False, description="Made for an HD release")
    fps: Optional[float] = Field(None, description="Frame rate")
    comments: str = Field(default="", description="Uploader comments")
    ai_translated: bool = Field(default=False, description="Translated by AI")
    machine_translated: bool = Field(default=False, description="Machine translated")
    format: Optional[str] = Field(None, description="Subtitle format")
    subtitle_id: Optional[str] = Field(None, description="Provider subtitle identifier")

    @property
    def quality_score(self) -> float:
        """Download count weighted by rating, rating floored at 1."""
        return self.download_count * max(self.rating, 1.0)


class SessionToken(BaseModel):
    """Subtitle provider session token, valid for the day it was issued."""

    value: str = Field(..., description="Bearer token")
    issued_date: date = Field(..., description="Calendar day the token was issued")

    def is_valid_on(self, day: date) -> bool:
        """Check whether the token may be used on the given day."""
        return self.issued_date == day
