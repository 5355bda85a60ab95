"""Search, sort and truncation over post and category listings."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence, TypeVar

from blog_explorer.models.category import Category, CategoryIndexItem, DerivedCategory
from blog_explorer.models.post import Post, PostSummary
from blog_explorer.models.query import EmptyState, QueryState, SortMode
from blog_explorer.utils.text_utils import collation_key

# Per-surface truncation limits
JUMP_TO_LIMIT = 5
FEATURED_PANEL_LIMIT = 3
FEATURED_CATEGORIES_LIMIT = 6

ItemT = TypeVar("ItemT", Post, PostSummary, Category, DerivedCategory, CategoryIndexItem)


@dataclass(frozen=True)
class ExplorerView:
    """A filtered, sorted listing plus its bounded "top" subset."""

    items: list[Any] = field(default_factory=list)
    top: list[Any] = field(default_factory=list)
    total: int = 0
    query_active: bool = False
    empty_state: EmptyState = EmptyState.none
    empty_message: str | None = None

    @property
    def is_empty(self) -> bool:
        return self.empty_state is not EmptyState.none


def _is_post(item: Any) -> bool:
    return isinstance(item, (Post, PostSummary))


def _title(item: Any) -> str:
    if isinstance(item, Category):
        return item.display_title
    return item.title or ""


def matches(item: Any, query: str) -> bool:
    """Case-insensitive substring match of an already-normalized query."""
    return any(query in value.lower() for value in item.search_fields)


def filter_items(items: Sequence[ItemT], query: str | None) -> Sequence[ItemT]:
    """
    Keep items whose searchable fields contain the query.

    A blank query returns ``items`` itself, not a copy; callers must not
    mutate the result.
    """
    normalized = (query or "").strip().lower()
    if not normalized:
        return items
    return [item for item in items if matches(item, normalized)]


def sort_key(item: Any, sort: SortMode) -> tuple:
    """Ascending sort key implementing ``sort`` for a post or category."""
    if _is_post(item):
        newest = (-item.effective_date,)
        if sort is SortMode.newest:
            return newest
        if sort is SortMode.popular:
            return (-(item.read_time or 0), *newest)
        return (collation_key(item.title),)

    newest = (-getattr(item, "latest_post_at", 0), collation_key(_title(item)))
    if sort is SortMode.newest:
        return newest
    if sort is SortMode.popular:
        return (-getattr(item, "count", 0), *newest)
    return (collation_key(_title(item)),)


def sort_items(items: Sequence[ItemT], sort: SortMode | str) -> list[ItemT]:
    """Return a new list sorted by ``sort``; ties keep their input order."""
    mode = SortMode(sort)
    return sorted(items, key=lambda item: sort_key(item, mode))


def explore(
    items: Sequence[ItemT],
    query: str | None,
    sort: SortMode | str = SortMode.newest,
    limit: int | None = None,
) -> list[ItemT]:
    """
    Filter, sort and optionally truncate a listing.

    Truncation is applied last, so the result is the first ``limit`` items
    of the full sorted result.
    """
    result = sort_items(filter_items(items, query), sort)
    if limit is not None:
        result = result[:max(0, limit)]
    return result


def featured_categories(
    categories: Sequence[DerivedCategory],
    limit: int = FEATURED_CATEGORIES_LIMIT,
) -> list[DerivedCategory]:
    """Categories flagged as featured, by manual sort order then post count."""
    featured = [category for category in categories if category.featured]
    featured.sort(key=lambda category: (category.sort_order, -category.count))
    return featured[:limit]


def anchor_id(item: Any) -> str:
    """Deep-link anchor for a post (``post-…``) or category (``category-…``)."""
    return item.anchor_id


def build_view(
    items: Sequence[ItemT],
    state: QueryState,
    *,
    top_limit: int | None = None,
    noun: str = "posts",
    empty_noun: str | None = None,
    keep_order: bool = False,
) -> ExplorerView:
    """
    Run the explorer for a query state and describe any empty result.

    "No matches" is reported when a query is active, "no data" otherwise.
    With ``keep_order`` the items are only filtered, so an already ranked
    listing keeps its ranking and ``state.sort`` is ignored.
    """
    if keep_order:
        results = list(filter_items(items, state.query))
    else:
        results = explore(items, state.query, state.sort)
    top = results[:top_limit] if top_limit else []

    if results:
        empty_state, message = EmptyState.none, None
    elif state.is_active:
        empty_state, message = EmptyState.no_matches, f"No {noun} match your search."
    else:
        empty_state, message = EmptyState.no_data, f"No {empty_noun or noun} found."

    return ExplorerView(
        items=results,
        top=top,
        total=len(items),
        query_active=state.is_active,
        empty_state=empty_state,
        empty_message=message,
    )
