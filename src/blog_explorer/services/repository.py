"""Content repository interface and factory."""

from __future__ import annotations

from typing import Any, Protocol

from blog_explorer.config import ContentSource, Settings

POSTS = "posts"
CATEGORIES = "categories"


class ContentRepositoryError(RuntimeError):
    """Raised when a content collection cannot be read."""

    def __init__(
        self,
        message: str,
        *,
        collection: str,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.collection = collection
        self.status_code = status_code


class ContentRepository(Protocol):
    """Query capability over CMS collections."""

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
        """Return records of ``collection`` matching ``where``."""
        ...


def create_repository(settings: Settings) -> ContentRepository:
    """Factory function to create the configured content repository."""
    if settings.content_source == ContentSource.api:
        from blog_explorer.clients.payload_client import create_payload_client

        return create_payload_client(
            base_url=settings.content_api_url,
            api_key=settings.content_api_key,
            timeout=settings.request_timeout,
            max_retries=settings.max_retries,
        )

    from blog_explorer.services.json_repository import JsonContentRepository

    return JsonContentRepository(settings.content_file)
