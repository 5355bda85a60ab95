"""Request-scoped query cache over a content repository."""

from __future__ import annotations

import json
from typing import Any

from blog_explorer.services.repository import ContentRepository, ContentRepositoryError
from blog_explorer.utils.logging import get_logger

logger = get_logger("services.request_scope")


def query_key(collection: str, **params: Any) -> str:
    """Stable cache key for a repository query."""
    return json.dumps(
        {"collection": collection, **params},
        sort_keys=True,
        default=str,
        separators=(",", ":"),
    )


class RequestScope:
    """
    Memoizes repository queries for the lifetime of one page build.

    Create one per build and pass it explicitly; identical queries issued
    while building the page hit the repository once. Repository failures
    are logged and surface as empty collections.
    """

    def __init__(self, repository: ContentRepository):
        self.repository = repository
        self._results: dict[str, list[dict[str, Any]]] = {}
        self.misses = 0

    async def find(
        self,
        collection: str,
        *,
        where: dict[str, Any] | None = None,
        sort: str | None = None,
        select: list[str] | None = None,
        limit: int | None = None,
        depth: int = 0,
        draft: bool = False,
    ) -> list[dict[str, Any]]:
        """Return the (possibly cached) result of a repository query."""
        params = {
            "where": where,
            "sort": sort,
            "select": sorted(select) if select else None,
            "limit": limit,
            "depth": depth,
            "draft": draft,
        }
        key = query_key(collection, **params)
        if key in self._results:
            return self._results[key]

        self.misses += 1
        try:
            docs = await self.repository.find(
                collection,
                where=where,
                sort=sort,
                select=select,
                limit=limit,
                depth=depth,
                draft=draft,
            )
        except ContentRepositoryError as exc:
            logger.warning(f"Could not load {collection}: {exc}")
            docs = []

        self._results[key] = docs
        return docs

    def clear(self) -> None:
        """Drop all cached results."""
        self._results.clear()
