"""Tests for the request-scoped query cache."""

import pytest

from blog_explorer.services.repository import ContentRepositoryError
from blog_explorer.services.request_scope import RequestScope, query_key


class RecordingRepository:
    """Fake repository that records every query it receives."""

    def __init__(self, docs=None, error=None):
        self.docs = docs or []
        self.error = error
        self.calls: list[dict] = []

    async def find(self, collection, **kwargs):
        self.calls.append({"collection": collection, **kwargs})
        if self.error:
            raise self.error
        return list(self.docs)


def test_query_key_is_order_independent():
    a = query_key("posts", where={"a": 1, "b": 2}, sort="title")
    b = query_key("posts", sort="title", where={"b": 2, "a": 1})
    assert a == b
    assert a != query_key("categories", where={"a": 1, "b": 2}, sort="title")


@pytest.mark.asyncio
async def test_identical_queries_hit_repository_once():
    repo = RecordingRepository(docs=[{"id": "c"}])
    scope = RequestScope(repo)

    first = await scope.find("categories", where={"slug": {"equals": "web"}}, limit=1)
    second = await scope.find("categories", where={"slug": {"equals": "web"}}, limit=1)

    assert first == second == [{"id": "c"}]
    assert len(repo.calls) == 1
    assert scope.misses == 1


@pytest.mark.asyncio
async def test_different_parameters_are_separate_entries():
    repo = RecordingRepository()
    scope = RequestScope(repo)

    await scope.find("posts", draft=False)
    await scope.find("posts", draft=True)
    await scope.find("posts", select=["title", "id"])
    await scope.find("posts", select=["id", "title"])

    assert len(repo.calls) == 3


@pytest.mark.asyncio
async def test_scopes_do_not_share_results():
    repo = RecordingRepository()
    await RequestScope(repo).find("posts")
    await RequestScope(repo).find("posts")
    assert len(repo.calls) == 2


@pytest.mark.asyncio
async def test_repository_error_becomes_empty_collection():
    repo = RecordingRepository(error=ContentRepositoryError("down", collection="posts"))
    scope = RequestScope(repo)
    assert await scope.find("posts") == []


@pytest.mark.asyncio
async def test_clear():
    repo = RecordingRepository()
    scope = RequestScope(repo)
    await scope.find("posts")
    scope.clear()
    await scope.find("posts")
    assert len(repo.calls) == 2
