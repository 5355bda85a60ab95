"""Post models as read from the content repository."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from blog_explorer.models.relationship import RelationshipRef, coerce_references, normalize_references
from blog_explorer.utils.text_utils import effective_timestamp, estimate_read_time, format_date


class PostMeta(BaseModel):
    """SEO metadata attached to a post."""

    model_config = ConfigDict(extra="ignore")

    title: str | None = None
    description: str | None = None

    @field_validator("title", "description", mode="before")
    @classmethod
    def drop_non_strings(cls, v):
        return v if isinstance(v, str) else None


class _PostFields(BaseModel):
    """Fields shared by full posts and the summaries built from them."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    title: str | None = None
    slug: str | None = None
    categories: list[RelationshipRef] = Field(default_factory=list)
    meta: PostMeta = Field(default_factory=PostMeta)
    published_at: str | datetime | None = Field(default=None, alias="publishedAt")
    created_at: str | datetime | None = Field(default=None, alias="createdAt")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        """Numeric ids from SQL-backed repositories become strings."""
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("title", "slug", mode="before")
    @classmethod
    def drop_non_strings(cls, v):
        return v if isinstance(v, str) else None

    @field_validator("categories", mode="before")
    @classmethod
    def coerce_categories(cls, v):
        return coerce_references(v)

    @field_validator("meta", mode="before")
    @classmethod
    def coerce_meta(cls, v):
        return v if isinstance(v, (dict, PostMeta)) else {}

    @field_validator("published_at", "created_at", mode="before")
    @classmethod
    def coerce_timestamp(cls, v):
        return v if isinstance(v, (str, datetime)) else None

    @property
    def category_ids(self) -> list[str]:
        """Identifiers of the categories this post references."""
        return normalize_references(self.categories)

    @property
    def effective_date(self) -> int:
        """Epoch milliseconds of publishedAt, else createdAt, else 0."""
        return effective_timestamp(self.published_at, self.created_at)

    @property
    def date_label(self) -> str | None:
        """Display date, e.g. ``Jan 5, 2024``."""
        return format_date(self.published_at) or format_date(self.created_at)

    @property
    def anchor_id(self) -> str:
        """In-page anchor, stable across sorting and filtering."""
        return f"post-{self.slug or self.id}"

    @property
    def search_fields(self) -> tuple[str, ...]:
        """Fields matched by free-text search."""
        return (self.title or "", self.slug or "", self.meta.description or "")


class Post(_PostFields):
    """A post record from the ``posts`` collection."""

    content: Any = None
    status: str | None = Field(default=None, alias="_status")

    @property
    def read_time(self) -> int | None:
        """Estimated minutes to read the post's rich-text content."""
        return estimate_read_time(self.content)

    def to_summary(self) -> "PostSummary":
        """Project the post into a summary carrying its read time."""
        return PostSummary(
            id=self.id,
            title=self.title,
            slug=self.slug,
            categories=list(self.categories),
            meta=self.meta.model_copy(),
            published_at=self.published_at,
            created_at=self.created_at,
            read_time=self.read_time,
        )

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
        json_schema_extra={
            "example": {
                "id": "65a1f0c2",
                "title": "HTB: Lame",
                "slug": "htb-lame",
                "categories": ["boot2root", {"id": "htb", "title": "Hack The Box"}],
                "meta": {"description": "Samba usermap_script to root."},
                "publishedAt": "2024-01-05T10:00:00.000Z",
                "createdAt": "2024-01-04T18:22:10.000Z",
            }
        },
    )


class PostSummary(_PostFields):
    """Post projection used in listings; content is replaced by its read time."""

    read_time: int | None = Field(default=None, alias="readTime")

    @field_validator("read_time", mode="before")
    @classmethod
    def coerce_read_time(cls, v):
        """Only positive integers are meaningful read times."""
        if isinstance(v, bool) or not isinstance(v, (int, float)) or v <= 0:
            return None
        return int(v)
