"""Aggregation of posts into per-category statistics and listings."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, TypeVar

from pydantic import BaseModel, ValidationError

from blog_explorer.models.category import Breadcrumb, Category, CategoryIndexItem, DerivedCategory
from blog_explorer.models.post import Post, PostSummary
from blog_explorer.utils.logging import get_logger
from blog_explorer.utils.text_utils import collation_key

RELATED_CATEGORIES_LIMIT = 6

ModelT = TypeVar("ModelT", bound=BaseModel)

logger = get_logger("core.aggregator")


@dataclass(frozen=True)
class CategoryIndex:
    """Categories that have posts, ranked by post count."""

    items: list[CategoryIndexItem] = field(default_factory=list)
    total_tagged: int = 0


@dataclass(frozen=True)
class BreadcrumbItem:
    """Breadcrumb ready for display; ``href`` is None for the current page."""

    label: str
    href: str | None = None


def validate_records(
    model: type[ModelT],
    records: Iterable[ModelT | Mapping[str, Any]] | None,
) -> list[ModelT]:
    """Validate raw repository records, skipping those that cannot be read."""
    result: list[ModelT] = []
    for record in records or []:
        if isinstance(record, model):
            result.append(record)
            continue
        try:
            result.append(model.model_validate(record))
        except ValidationError as exc:
            logger.warning(f"Skipping unreadable {model.__name__} record: {exc.error_count()} error(s)")
    return result


def sort_posts_by_date(posts: Iterable[PostSummary]) -> list[PostSummary]:
    """Newest first; posts with equal dates keep their order."""
    return sorted(posts, key=lambda post: -post.effective_date)


def aggregate(
    posts: Iterable[Post | Mapping[str, Any]],
    categories: Iterable[Category | Mapping[str, Any]],
) -> list[DerivedCategory]:
    """
    Group posts under the categories they reference.

    Every returned category carries ``count``, ``latest_post_at`` and its
    ``posts`` sorted newest first. Categories without posts are left out and
    references to unknown categories are ignored. Inputs are not modified.

    Args:
        posts: Post models or raw post records
        categories: Category models or raw category records

    Returns:
        Derived categories with at least one post, in input order
    """
    accumulators: dict[str, DerivedCategory] = {}
    for category in validate_records(Category, categories):
        if category.id in accumulators:
            continue
        # Seed from the static fields only; derived stats always start empty
        seed = category.model_dump(include=set(Category.model_fields))
        accumulators[category.id] = DerivedCategory.model_validate(seed)

    unknown_refs = 0
    for post in validate_records(Post, posts):
        summary = post.to_summary()
        posted_at = summary.effective_date

        for category_id in post.category_ids:
            entry = accumulators.get(category_id)
            if entry is None:
                unknown_refs += 1
                continue
            entry.posts.append(summary)
            entry.count += 1
            if posted_at > entry.latest_post_at:
                entry.latest_post_at = posted_at

    if unknown_refs:
        logger.debug(f"Ignored {unknown_refs} reference(s) to unknown categories")

    result = []
    for entry in accumulators.values():
        if entry.count > 0:
            entry.posts = sort_posts_by_date(entry.posts)
            result.append(entry)
    return result


def build_category_index(
    posts: Iterable[Post | Mapping[str, Any]],
    categories: Iterable[Category | Mapping[str, Any]],
) -> CategoryIndex:
    """Categories with posts, most posts first and then by title."""
    items = [
        CategoryIndexItem(
            id=category.id,
            title=category.title or category.slug,
            slug=category.slug,
            count=category.count,
            latest_post_at=category.latest_post_at,
        )
        for category in aggregate(posts, categories)
    ]
    items.sort(key=lambda item: (-item.count, collation_key(item.title)))
    return CategoryIndex(items=items, total_tagged=sum(item.count for item in items))


def build_breadcrumbs(
    breadcrumbs: Iterable[Breadcrumb | Mapping[str, Any]] | None,
    current_label: str,
) -> list[BreadcrumbItem]:
    """
    Turn a category's ancestry into display breadcrumbs.

    Crumbs missing a label or url are dropped. The current page is the last
    crumb and is never a link.
    """
    items = [
        BreadcrumbItem(label=crumb.label, href=f"/categories{crumb.url}")
        for crumb in validate_records(Breadcrumb, breadcrumbs)
        if crumb.label and crumb.url
    ]

    current = current_label.lower()
    if any(item.label.lower() == current for item in items):
        items[-1] = BreadcrumbItem(label=items[-1].label)
    else:
        items.append(BreadcrumbItem(label=current_label))
    return items


def related_categories(
    category: Category,
    categories: Iterable[Category | Mapping[str, Any]],
    limit: int = RELATED_CATEGORIES_LIMIT,
) -> list[Category]:
    """Other categories sharing ``category``'s parent, in input order."""
    parent_id = category.parent_id
    if not parent_id:
        return []
    siblings = [
        candidate
        for candidate in validate_records(Category, categories)
        if candidate.id != category.id and candidate.parent_id == parent_id
    ]
    return siblings[:limit]
