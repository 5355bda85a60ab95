"""Query state for the explorer views."""

from enum import Enum

from pydantic import BaseModel, Field, field_validator


class SortMode(str, Enum):
    """Sort orders offered by the explorer."""

    newest = "newest"
    popular = "popular"
    az = "az"


class ViewMode(str, Enum):
    """Layouts for post listings."""

    grid = "grid"
    list = "list"


class EmptyState(str, Enum):
    """Why an explorer view has nothing to show."""

    none = "none"
    no_matches = "no_matches"
    no_data = "no_data"


class QueryState(BaseModel):
    """Live search, sort and view selection."""

    query: str = Field(default="", description="Free-text search")
    sort: SortMode = Field(default=SortMode.newest, description="Sort order")
    view: ViewMode = Field(default=ViewMode.grid, description="Listing layout")
    draft: bool = Field(default=False, description="Include draft content")

    @field_validator("query", mode="before")
    @classmethod
    def convert_none_to_empty(cls, v):
        return v if isinstance(v, str) else ""

    @property
    def normalized_query(self) -> str:
        """Trimmed, lower-cased query."""
        return self.query.strip().lower()

    @property
    def is_active(self) -> bool:
        """Whether a search query is in effect."""
        return bool(self.normalized_query)
