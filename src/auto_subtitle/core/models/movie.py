"""Movie-related data models."""

from typing import List, Optional

from pydantic import BaseModel, Field


class MovieSearchResult(BaseModel):
    """Single row of a movie metadata search."""

    external_id: str = Field(..., description="Metadata service identifier")
    title: str = Field(..., description="Movie title")
    year: Optional[int] = Field(None, description="Release year")
    original_title: Optional[str] = Field(None, description="Original title")
    overview: Optional[str] = Field(None, description="Short description")
    poster: Optional[str] = Field(None, description="Poster image path")


class MovieRecord(BaseModel):
    """Full movie metadata record."""

    external_id: str = Field(..., description="Metadata service identifier")
    title: str = Field(..., description="Movie title")
    original_title: Optional[str] = Field(None, description="Original title")
    year: Optional[int] = Field(None, description="Release year")
    rating: Optional[float] = Field(None, description="Average rating")
    director: Optional[str] = Field(None, description="Director names, comma separated")
    cast: List[str] = Field(default_factory=list, description="Main cast")
    genres: List[str] = Field(default_factory=list, description="Movie genres")
    runtime: Optional[int] = Field(None, description="Runtime in minutes")
    plot: Optional[str] = Field(None, description="Movie overview/plot")
    poster: Optional[str] = Field(None, description="Poster image path")

    @property
    def display_title(self) -> str:
        """Get title with year for display."""
        return f"{self.title} ({self.year})" if self.year else self.title
