"""Page builders for the posts archive, categories index and category pages."""

from __future__ import annotations

from dataclasses import dataclass, field
from urllib.parse import unquote

from blog_explorer.config import Settings, get_settings
from blog_explorer.core.aggregator import (
    BreadcrumbItem,
    CategoryIndex,
    RELATED_CATEGORIES_LIMIT,
    aggregate,
    build_breadcrumbs,
    build_category_index,
    related_categories,
    sort_posts_by_date,
    validate_records,
)
from blog_explorer.core.explorer import (
    FEATURED_CATEGORIES_LIMIT,
    FEATURED_PANEL_LIMIT,
    JUMP_TO_LIMIT,
    ExplorerView,
    build_view,
    featured_categories,
)
from blog_explorer.models.category import Category, CategoryIndexItem, DerivedCategory
from blog_explorer.models.post import Post, PostSummary
from blog_explorer.models.query import QueryState
from blog_explorer.services.repository import CATEGORIES, POSTS
from blog_explorer.services.request_scope import RequestScope
from blog_explorer.utils.logging import LogContext, get_logger

logger = get_logger("services.pages")

POST_FIELDS = ["id", "title", "slug", "categories", "meta", "content", "publishedAt", "createdAt"]
CATEGORY_FIELDS = [
    "id",
    "title",
    "slug",
    "description",
    "icon",
    "badge",
    "featured",
    "sortOrder",
    "parent",
    "breadcrumbs",
]


class CategoryNotFoundError(LookupError):
    """Raised when no category has the requested slug."""

    def __init__(self, slug: str) -> None:
        super().__init__(f"Category '{slug}' not found")
        self.slug = slug


@dataclass(frozen=True)
class PostsPage:
    """The posts archive: every category with its posts."""

    state: QueryState
    categories: list[DerivedCategory] = field(default_factory=list)
    featured: list[DerivedCategory] = field(default_factory=list)
    view: ExplorerView = field(default_factory=ExplorerView)
    total_posts: int = 0


@dataclass(frozen=True)
class CategoriesIndexPage:
    """The categories index ranked by post count."""

    state: QueryState
    index: CategoryIndex = field(default_factory=CategoryIndex)
    featured: list[CategoryIndexItem] = field(default_factory=list)
    view: ExplorerView = field(default_factory=ExplorerView)


@dataclass(frozen=True)
class CategoryPage:
    """A single category with its posts, ancestry and siblings."""

    state: QueryState
    category: Category
    posts: list[PostSummary] = field(default_factory=list)
    breadcrumbs: list[BreadcrumbItem] = field(default_factory=list)
    related: list[Category] = field(default_factory=list)
    view: ExplorerView = field(default_factory=ExplorerView)

    @property
    def title(self) -> str:
        return self.category.display_title

    @property
    def total_posts(self) -> int:
        return len(self.posts)

    @property
    def page_title(self) -> str:
        return f"{self.title} | Categories"


async def query_all_categories(scope: RequestScope, settings: Settings) -> list[Category]:
    docs = await scope.find(
        CATEGORIES,
        sort="title",
        select=CATEGORY_FIELDS,
        limit=settings.categories_limit,
    )
    return validate_records(Category, docs)


async def query_all_posts(scope: RequestScope, settings: Settings, draft: bool = False) -> list[Post]:
    docs = await scope.find(
        POSTS,
        sort="-publishedAt",
        select=POST_FIELDS,
        limit=settings.posts_limit,
        depth=1,
        draft=draft,
    )
    return validate_records(Post, docs)


async def query_category_by_slug(scope: RequestScope, slug: str) -> Category | None:
    docs = await scope.find(
        CATEGORIES,
        where={"slug": {"equals": slug}},
        select=CATEGORY_FIELDS,
        limit=1,
    )
    categories = validate_records(Category, docs)
    return categories[0] if categories else None


async def query_posts_by_category_id(
    scope: RequestScope,
    category_id: str,
    *,
    draft: bool,
    limit: int,
) -> list[Post]:
    docs = await scope.find(
        POSTS,
        where={"categories": {"equals": category_id}},
        sort="-publishedAt",
        select=POST_FIELDS,
        limit=limit,
        depth=1,
        draft=draft,
    )
    return validate_records(Post, docs)


async def query_related_categories(scope: RequestScope, category: Category) -> list[Category]:
    """Siblings under the same parent, excluding ``category``."""
    parent_id = category.parent_id
    if not parent_id:
        return []
    docs = await scope.find(
        CATEGORIES,
        where={"and": [{"parent": {"equals": parent_id}}, {"id": {"not_equals": category.id}}]},
        select=["id", "title", "slug", "icon", "badge", "parent"],
        limit=RELATED_CATEGORIES_LIMIT,
    )
    return related_categories(category, docs)


async def build_posts_page(
    scope: RequestScope,
    state: QueryState | None = None,
    *,
    settings: Settings | None = None,
) -> PostsPage:
    """Build the posts archive grouped by category."""
    state = state or QueryState()
    settings = settings or get_settings()

    with LogContext(logger, "posts page"):
        categories = await query_all_categories(scope, settings)
        posts = await query_all_posts(scope, settings, draft=state.draft)
        derived = aggregate(posts, categories)

    return PostsPage(
        state=state,
        categories=derived,
        featured=featured_categories(derived, FEATURED_CATEGORIES_LIMIT),
        view=build_view(derived, state, noun="categories", empty_noun="posts"),
        total_posts=len(posts),
    )


async def build_categories_index_page(
    scope: RequestScope,
    state: QueryState | None = None,
    *,
    settings: Settings | None = None,
) -> CategoriesIndexPage:
    """
    Build the categories index.

    The listing keeps the index ranking (most posts first) and is only
    filtered by the query; the featured panel hides while searching.
    """
    state = state or QueryState()
    settings = settings or get_settings()

    with LogContext(logger, "categories index"):
        categories = await query_all_categories(scope, settings)
        posts = await query_all_posts(scope, settings, draft=state.draft)
        index = build_category_index(posts, categories)

    featured = [] if state.is_active else index.items[:FEATURED_PANEL_LIMIT]
    return CategoriesIndexPage(
        state=state,
        index=index,
        featured=featured,
        view=build_view(index.items, state, noun="categories", keep_order=True),
    )


async def build_category_page(
    scope: RequestScope,
    slug: str,
    state: QueryState | None = None,
    *,
    settings: Settings | None = None,
) -> CategoryPage:
    """
    Build a single category page.

    Raises:
        CategoryNotFoundError: If no category has the given slug
    """
    state = state or QueryState()
    settings = settings or get_settings()
    decoded_slug = unquote(slug)

    with LogContext(logger, f"category page '{decoded_slug}'"):
        category = await query_category_by_slug(scope, decoded_slug)
        if category is None:
            raise CategoryNotFoundError(decoded_slug)

        posts = await query_posts_by_category_id(
            scope,
            category.id,
            draft=state.draft,
            limit=settings.category_posts_limit,
        )
        related = await query_related_categories(scope, category)

    summaries = sort_posts_by_date(post.to_summary() for post in posts)
    return CategoryPage(
        state=state,
        category=category,
        posts=summaries,
        breadcrumbs=build_breadcrumbs(category.breadcrumbs, category.title or decoded_slug),
        related=related,
        view=build_view(summaries, state, top_limit=JUMP_TO_LIMIT, noun="posts"),
    )
