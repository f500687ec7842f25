"""Tests for fetcher registry and class-based fetchers."""

from __future__ import annotations

from typing import Any, ClassVar
from unittest.mock import AsyncMock

import pytest

from jsonapi_resolvers import (
    AbstractFetcher,
    FetcherRegistry,
    FetchOptions,
    ResolverTypeError,
)
from jsonapi_resolvers.config import ResolverSettings

# ============================================================================
# Mock Fetchers for Testing
# ============================================================================


class MockUserFetcher(AbstractFetcher):
    """In-memory users fetcher."""

    TYPE: ClassVar[str] = "users"

    def __init__(self, users: dict[str, dict[str, Any]]) -> None:
        super().__init__()
        self._users = users

    async def fetch(self, ids: list[str], opts: FetchOptions) -> list[dict[str, Any]]:
        return [
            {"type": "users", "id": id_, "attributes": self._users[id_]}
            for id_ in ids
            if id_ in self._users
        ]


class MockPostFetcher(AbstractFetcher):
    """In-memory posts fetcher; every post is written by user U1."""

    TYPE: ClassVar[str] = "posts"

    async def fetch(self, ids: list[str], opts: FetchOptions) -> list[dict[str, Any]]:
        return [
            {
                "type": "posts",
                "id": id_,
                "relationships": {"author": {"data": {"type": "users", "id": "U1"}}},
                "links": {"self": f"/posts/{id_}"},
            }
            for id_ in ids
        ]


@pytest.fixture
def user_fetcher() -> MockUserFetcher:
    return MockUserFetcher({"U1": {"name": "James"}})


@pytest.fixture
def post_fetcher() -> MockPostFetcher:
    return MockPostFetcher()


# ============================================================================
# AbstractFetcher Tests
# ============================================================================


class TestAbstractFetcher:
    """Tests for the AbstractFetcher base class."""

    async def test_call_delegates_to_fetch(self, user_fetcher: MockUserFetcher):
        result = await user_fetcher(["U1", "U2"], FetchOptions(include=[]))
        assert result == [{"type": "users", "id": "U1", "attributes": {"name": "James"}}]

    async def test_call_counters(self, user_fetcher: MockUserFetcher):
        assert user_fetcher.call_count == 0
        assert user_fetcher.average_latency_ms == 0.0

        await user_fetcher(["U1"], FetchOptions(include=[]))
        await user_fetcher(["U1"], FetchOptions(include=[]))

        assert user_fetcher.call_count == 2
        assert user_fetcher.average_latency_ms >= 0.0

    async def test_counters_updated_on_failure(self):
        class FailingFetcher(AbstractFetcher):
            TYPE: ClassVar[str] = "broken"

            async def fetch(self, ids: list[str], opts: FetchOptions) -> list:
                raise RuntimeError("boom")

        fetcher = FailingFetcher()
        with pytest.raises(RuntimeError, match="boom"):
            await fetcher(["1"], FetchOptions(include=[]))
        assert fetcher.call_count == 1

    def test_type_property(self, user_fetcher: MockUserFetcher):
        assert user_fetcher.type == "users"

    async def test_async_context_manager(self, user_fetcher: MockUserFetcher):
        user_fetcher.close = AsyncMock()
        async with user_fetcher as fetcher:
            assert fetcher is user_fetcher
        user_fetcher.close.assert_called_once()


# ============================================================================
# FetcherRegistry Tests
# ============================================================================


class TestFetcherRegistry:
    """Tests for FetcherRegistry."""

    def test_register_function(self):
        registry = FetcherRegistry()
        fetch = lambda ids, opts: []  # noqa: E731
        registry.register("things", fetch)
        assert registry.get("things") is fetch
        assert registry.types == frozenset({"things"})

    def test_register_duplicate_rejected(self, user_fetcher: MockUserFetcher):
        registry = FetcherRegistry()
        registry.register_fetcher(user_fetcher)

        with pytest.raises(ResolverTypeError) as exc_info:
            registry.register("users", lambda ids, opts: [])

        assert exc_info.value.schema_type == "users"

    def test_register_non_callable_rejected(self):
        with pytest.raises(ResolverTypeError):
            FetcherRegistry().register("things", "not callable")

    async def test_create_resolver(
        self, user_fetcher: MockUserFetcher, post_fetcher: MockPostFetcher
    ):
        registry = FetcherRegistry.from_fetchers([user_fetcher, post_fetcher])
        resolve = registry.create_resolver()

        result = await resolve("posts", "P1", {"include": ["author"]})

        assert result.to_dict() == {
            "data": {
                "type": "posts",
                "id": "P1",
                "relationships": {"author": {"data": {"type": "users", "id": "U1"}}},
                "links": {"self": "/posts/P1"},
            },
            "included": [{"type": "users", "id": "U1", "attributes": {"name": "James"}}],
        }
        assert user_fetcher.call_count == 1

    async def test_resolver_is_a_snapshot(self, user_fetcher: MockUserFetcher):
        registry = FetcherRegistry.from_fetchers([user_fetcher])
        resolve = registry.create_resolver()
        registry.register("comments", lambda ids, opts: [])
        assert resolve.types == frozenset({"users"})

    async def test_mixed_function_and_class_fetchers(self, user_fetcher: MockUserFetcher):
        registry = FetcherRegistry()
        registry.register_fetcher(user_fetcher)
        registry.register(
            "comments",
            lambda ids, opts: [
                {
                    "type": "comments",
                    "id": id_,
                    "relationships": {"author": {"data": {"type": "users", "id": "U1"}}},
                }
                for id_ in ids
            ],
        )

        result = await registry.create_resolver()("comments", ["C1", "C2"], {"include": ["author"]})

        assert [c["id"] for c in result.data] == ["C1", "C2"]
        assert [u["id"] for u in result.included] == ["U1"]

    async def test_create_resolver_from_settings(self, post_fetcher: MockPostFetcher):
        registry = FetcherRegistry.from_fetchers([post_fetcher])
        resolve = registry.create_resolver_from_settings(
            ResolverSettings(base_url="https://api.example.com")
        )

        result = await resolve("posts", "P1")

        assert result.data["links"] == {"self": "https://api.example.com/posts/P1"}

    async def test_close_all(self, user_fetcher: MockUserFetcher, post_fetcher: MockPostFetcher):
        user_fetcher.close = AsyncMock()
        post_fetcher.close = AsyncMock()

        registry = FetcherRegistry.from_fetchers([user_fetcher, post_fetcher])
        registry.register("plain", lambda ids, opts: [])
        await registry.close_all()

        user_fetcher.close.assert_called_once()
        post_fetcher.close.assert_called_once()

    async def test_async_context_manager(self, user_fetcher: MockUserFetcher):
        user_fetcher.close = AsyncMock()

        async with FetcherRegistry.from_fetchers([user_fetcher]) as registry:
            assert registry.types == frozenset({"users"})

        user_fetcher.close.assert_called_once()
