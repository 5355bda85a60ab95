"""REST client for the CMS collections API."""

from typing import Any

import httpx

from blog_explorer.clients.base import BaseAsyncClient
from blog_explorer.services.repository import ContentRepositoryError
from blog_explorer.utils.logging import get_logger

logger = get_logger("clients.payload")


def encode_bracketed(value: Any, prefix: str) -> list[tuple[str, str]]:
    """
    Flatten nested query data into bracket-notation parameters.

    ``{"slug": {"equals": "web"}}`` under prefix ``where`` becomes
    ``[("where[slug][equals]", "web")]``.
    """
    if isinstance(value, dict):
        params: list[tuple[str, str]] = []
        for key, nested in value.items():
            params.extend(encode_bracketed(nested, f"{prefix}[{key}]"))
        return params
    if isinstance(value, (list, tuple)):
        params = []
        for index, nested in enumerate(value):
            params.extend(encode_bracketed(nested, f"{prefix}[{index}]"))
        return params
    if isinstance(value, bool):
        return [(prefix, "true" if value else "false")]
    if value is None:
        return [(prefix, "null")]
    return [(prefix, str(value))]


def build_query_params(
    *,
    where: dict[str, Any] | None = None,
    sort: str | None = None,
    select: list[str] | None = None,
    limit: int | None = None,
    depth: int = 0,
    draft: bool = False,
) -> list[tuple[str, str]]:
    """Build query parameters for a collection ``find`` request."""
    params: list[tuple[str, str]] = [
        ("depth", str(depth)),
        ("draft", "true" if draft else "false"),
        ("pagination", "false"),
    ]
    if limit is not None:
        params.append(("limit", str(limit)))
    if sort:
        params.append(("sort", sort))
    if select:
        params.extend(encode_bracketed({field: True for field in select}, "select"))
    if where:
        params.extend(encode_bracketed(where, "where"))
    return params


class PayloadClient(BaseAsyncClient):
    """Client for the CMS REST API (``GET /api/<collection>``)."""

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        timeout: float = 30.0,
        max_retries: int = 3,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(base_url, timeout=timeout, max_retries=max_retries, transport=transport)
        self.api_key = api_key

    def _get_headers(self) -> dict[str, str]:
        headers = super()._get_headers()
        if self.api_key:
            headers["Authorization"] = f"users API-Key {self.api_key}"
        return headers

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
        """Fetch the documents of ``collection`` matching the query."""
        params = build_query_params(
            where=where, sort=sort, select=select, limit=limit, depth=depth, draft=draft
        )
        if self._client is not None:
            return await self._find(collection, params)
        async with self:
            return await self._find(collection, params)

    async def _find(self, collection: str, params: list[tuple[str, str]]) -> list[dict[str, Any]]:
        try:
            data = await self.get_json(f"/{collection}", params=params)
        except httpx.HTTPStatusError as exc:
            raise ContentRepositoryError(
                f"{collection} request failed with HTTP {exc.response.status_code}",
                collection=collection,
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            raise ContentRepositoryError(
                f"{collection} request failed: {exc}",
                collection=collection,
            ) from exc
        except ValueError as exc:
            raise ContentRepositoryError(
                f"{collection} response was not valid JSON",
                collection=collection,
            ) from exc

        docs = data.get("docs", []) if isinstance(data, dict) else []
        if not isinstance(docs, list):
            return []
        logger.debug(f"Fetched {len(docs)} {collection} document(s)")
        return [doc for doc in docs if isinstance(doc, dict)]


def create_payload_client(
    base_url: str,
    api_key: str = "",
    timeout: float = 30.0,
    max_retries: int = 3,
) -> PayloadClient:
    """Factory function to create a PayloadClient."""
    return PayloadClient(
        base_url=base_url,
        api_key=api_key,
        timeout=timeout,
        max_retries=max_retries,
    )
