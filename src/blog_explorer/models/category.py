"""Category models for organizing blog content."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from blog_explorer.models.post import PostSummary
from blog_explorer.models.relationship import RelationshipRef, coerce_reference, normalize_reference
from blog_explorer.utils.text_utils import pluralize

DEFAULT_SORT_ORDER = 100


class CategoryIcon(str, Enum):
    """Icons a category may display."""

    folder = "folder"
    terminal = "terminal"
    shield = "shield"
    bug = "bug"
    network = "network"
    lock = "lock"
    binary = "binary"
    database = "database"


class Breadcrumb(BaseModel):
    """One entry of a nested category's ancestry."""

    model_config = ConfigDict(extra="ignore")

    label: str | None = None
    url: str | None = None

    @field_validator("label", "url", mode="before")
    @classmethod
    def drop_non_strings(cls, v):
        return v if isinstance(v, str) else None


class Category(BaseModel):
    """Represents a blog category."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    title: str | None = None
    slug: str = ""
    description: str | None = None
    icon: CategoryIcon = CategoryIcon.folder
    badge: str | None = None
    featured: bool = False
    sort_order: int = Field(default=DEFAULT_SORT_ORDER, alias="sortOrder")
    parent: RelationshipRef | None = None
    breadcrumbs: list[Breadcrumb] = Field(default_factory=list)

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("title", "description", "badge", mode="before")
    @classmethod
    def drop_non_strings(cls, v):
        return v if isinstance(v, str) else None

    @field_validator("slug", mode="before")
    @classmethod
    def default_slug(cls, v):
        return v if isinstance(v, str) else ""

    @field_validator("icon", mode="before")
    @classmethod
    def default_icon(cls, v):
        """Unknown or missing icons fall back to ``folder``."""
        if isinstance(v, CategoryIcon):
            return v
        try:
            return CategoryIcon(v)
        except ValueError:
            return CategoryIcon.folder

    @field_validator("featured", mode="before")
    @classmethod
    def coerce_featured(cls, v):
        return v is True

    @field_validator("sort_order", mode="before")
    @classmethod
    def default_sort_order(cls, v):
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            return DEFAULT_SORT_ORDER
        return int(v)

    @field_validator("parent", mode="before")
    @classmethod
    def coerce_parent(cls, v):
        return coerce_reference(v)

    @field_validator("breadcrumbs", mode="before")
    @classmethod
    def coerce_breadcrumbs(cls, v):
        if not isinstance(v, list):
            return []
        return [crumb for crumb in v if isinstance(crumb, (dict, Breadcrumb))]

    @property
    def display_title(self) -> str:
        """Title, falling back to the slug."""
        return self.title or self.slug or "Untitled category"

    @property
    def parent_id(self) -> str | None:
        return normalize_reference(self.parent)

    @property
    def anchor_id(self) -> str:
        """In-page anchor, stable across sorting and filtering."""
        return f"category-{self.slug}"

    @property
    def url(self) -> str:
        return f"/categories/{self.slug}"

    @property
    def search_fields(self) -> tuple[str, ...]:
        """Fields matched by free-text search."""
        return (self.display_title, self.slug, self.description or "", self.badge or "")


class DerivedCategory(Category):
    """A category with the post statistics computed by the aggregator."""

    count: int = 0
    latest_post_at: int = Field(default=0, alias="latestPostAt")
    posts: list[PostSummary] = Field(default_factory=list)

    @property
    def post_count_label(self) -> str:
        return pluralize(self.count, "post")


class CategoryIndexItem(BaseModel):
    """Compact entry for the categories index page."""

    id: str
    title: str
    slug: str
    count: int = 0
    latest_post_at: int = 0

    @property
    def anchor_id(self) -> str:
        return f"category-{self.slug}"

    @property
    def url(self) -> str:
        return f"/categories/{self.slug}"

    @property
    def post_count_label(self) -> str:
        return pluralize(self.count, "post")

    @property
    def search_fields(self) -> tuple[str, ...]:
        return (self.title, self.slug)
