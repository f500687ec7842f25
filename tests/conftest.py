"""Shared test fixtures for all tests."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any

import pytest

from jsonapi_resolvers import FetchOptions, Resolver, create_resolver

# ============================================================================
# Test Data Constants
# ============================================================================


BLOG_ID = "01HBLOG0000000000000000001"
USER_ID = "01HUSER0000000000000000001"
POST_IDS = [
    "01HPOST0000000000000000001",
    "01HPOST0000000000000000002",
    "01HPOST0000000000000000003",
]
BASE_URL = "https://api.example.com/v1"


# ============================================================================
# Sample Data Fixtures
# ============================================================================


@pytest.fixture
def blog_data() -> dict[str, list[dict[str, Any]]]:
    """A blog with one author and three posts."""
    return {
        "blogs": [
            {"id": BLOG_ID, "name": "Just Another Blog"},
        ],
        "users": [
            {"id": USER_ID, "name": "James", "email": "james@users.example.com"},
        ],
        "posts": [
            {
                "id": POST_IDS[0],
                "blog_id": BLOG_ID,
                "author_id": USER_ID,
                "title": "Separate ways",
                "excerpt": "Here we stand, worlds apart, hearts broken in two",
            },
            {
                "id": POST_IDS[1],
                "blog_id": BLOG_ID,
                "author_id": USER_ID,
                "title": "Master of puppets",
                "excerpt": "End of passion play, crumbling away",
            },
            {
                "id": POST_IDS[2],
                "blog_id": BLOG_ID,
                "author_id": USER_ID,
                "title": "Common people",
                "excerpt": "She came from Greece she had a thirst for knowledge",
            },
        ],
    }


def post_resource(post: dict[str, Any]) -> dict[str, Any]:
    """Render a post row the way the posts fetcher does."""
    return {
        "type": "posts",
        "id": post["id"],
        "attributes": {"title": post["title"], "excerpt": post["excerpt"]},
        "relationships": {
            "blog": {"data": {"type": "blogs", "id": post["blog_id"]}},
            "author": {"data": {"type": "users", "id": post["author_id"]}},
        },
        "links": {
            "self": f"/posts/{post['id']}",
            "blog": f"/posts/{post['id']}/relationships/blog",
            "author": f"/posts/{post['id']}/relationships/author",
            "comments": {
                "href": f"/posts/{post['id']}/comments",
                "title": "Comments",
                "meta": {"count": 100},
            },
        },
    }


def user_resource(user: dict[str, Any]) -> dict[str, Any]:
    """Render a user row the way the users fetcher does."""
    return {
        "type": "users",
        "id": user["id"],
        "attributes": {"name": user["name"], "email": user["email"]},
        "links": {
            "self": f"/users/{user['id']}",
            "blogs": f"/users/{user['id']}/relationships/blogs",
            "posts": f"/users/{user['id']}/relationships/posts",
        },
    }


def blog_resource(blog: dict[str, Any]) -> dict[str, Any]:
    """Render a blog row the way the blogs fetcher does."""
    return {
        "type": "blogs",
        "id": blog["id"],
        "attributes": {"name": blog["name"]},
        "links": {
            "self": f"/blogs/{blog['id']}",
            "posts": f"/blogs/{blog['id']}/relationships/posts",
        },
    }


# ============================================================================
# Fetcher & Resolver Fixtures
# ============================================================================


@pytest.fixture
def fetchers(blog_data: dict[str, list[dict[str, Any]]]) -> dict[str, Any]:
    """Fetchers over blog_data: posts is async, blogs and users are sync."""

    def blogs(ids: list[str], opts: FetchOptions) -> list[dict[str, Any]]:
        return [blog_resource(b) for b in blog_data["blogs"] if b["id"] in ids]

    async def posts(ids: list[str], opts: FetchOptions) -> list[dict[str, Any]]:
        return [post_resource(p) for p in blog_data["posts"] if p["id"] in ids]

    def users(ids: list[str], opts: FetchOptions) -> list[dict[str, Any]]:
        return [user_resource(u) for u in blog_data["users"] if u["id"] in ids]

    return {"blogs": blogs, "posts": posts, "users": users}


@pytest.fixture
def resolver(fetchers: dict[str, Any]) -> Resolver:
    """Resolver over the blog fetchers with no base URL."""
    return create_resolver(fetchers)


@pytest.fixture
def empty_fetcher():
    """A fetcher that never finds anything."""

    def fetch(ids: list[str], opts: FetchOptions) -> list[dict[str, Any]]:
        return []

    return fetch


@pytest.fixture
def render() -> SimpleNamespace:
    """Expose the resource renderers to tests building expected documents."""
    return SimpleNamespace(post=post_resource, user=user_resource, blog=blog_resource)


@pytest.fixture
def base_url() -> str:
    return BASE_URL
