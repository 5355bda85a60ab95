"""Pydantic data models."""

from blog_explorer.models.relationship import CategoryRef, normalize_reference, normalize_references
from blog_explorer.models.post import Post, PostMeta, PostSummary
from blog_explorer.models.category import (
    Breadcrumb,
    Category,
    CategoryIcon,
    CategoryIndexItem,
    DerivedCategory,
)
from blog_explorer.models.query import EmptyState, QueryState, SortMode, ViewMode

__all__ = [
    "Breadcrumb",
    "Category",
    "CategoryIcon",
    "CategoryIndexItem",
    "CategoryRef",
    "DerivedCategory",
    "EmptyState",
    "Post",
    "PostMeta",
    "PostSummary",
    "QueryState",
    "SortMode",
    "ViewMode",
    "normalize_reference",
    "normalize_references",
]
