"""Benchmark harness timing resolves against an in-memory posts/users dataset."""

from __future__ import annotations

import asyncio
import logging
import random
import secrets
import time
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

import click

from jsonapi_resolvers.config import get_settings
from jsonapi_resolvers.resolution.base import FetchOptions
from jsonapi_resolvers.resolution.resolver import Resolver, create_resolver

logger = logging.getLogger(__name__)

# (posts, users) pairs run by default
DEFAULT_SCENARIOS: tuple[tuple[int, int], ...] = (
    (10, 2),
    (10, 10),
    (100, 10),
    (1000, 10),
    (1000, 100),
)


class Profiler:
    """
    Records named start/end timestamps.

    Child profilers share the parent's timings under a longer key prefix, so
    a single report shows nested steps indented under their parent.
    """

    def __init__(
        self,
        prefix: str = "",
        started: dict[str, float] | None = None,
        ended: dict[str, float] | None = None,
    ) -> None:
        self.prefix = prefix
        self.started = started if started is not None else {}
        self.ended = ended if ended is not None else {}

    def start(self, key: str) -> None:
        self.started[f"{self.prefix}{key}"] = time.perf_counter()

    def end(self, key: str) -> None:
        self.ended[f"{self.prefix}{key}"] = time.perf_counter()

    def child(self, prefix: str) -> Profiler:
        return Profiler(
            prefix=f"{self.prefix}{prefix}",
            started=self.started,
            ended=self.ended,
        )

    @contextmanager
    def measure(self, key: str) -> Iterator[Profiler]:
        """Time the enclosed block; yields a child profiler for nested steps."""
        self.start(key)
        try:
            yield self.child(f"  {key}:")
        finally:
            self.end(key)

    def report(self) -> str:
        """Format finished timings in start order and forget them."""
        lines = []
        for key, started_at in list(self.started.items()):
            if key in self.ended:
                ended_at = self.ended.pop(key)
                del self.started[key]
                lines.append(f"{key} {(ended_at - started_at) * 1000:.2f}ms")

        if self.started:
            lines.append(f"Unfinished keys: {sorted(self.started)}")
        if self.ended:
            lines.append(f"Unmatched end keys: {sorted(self.ended)}")

        return "\n".join(lines)


@dataclass
class Dataset:
    """Randomly generated users and posts; every post has one author."""

    users: list[dict[str, Any]] = field(default_factory=list)
    posts: list[dict[str, Any]] = field(default_factory=list)

    @classmethod
    def generate(cls, posts_count: int, users_count: int) -> Dataset:
        users = [
            {
                "id": uuid.uuid4().hex,
                "name": secrets.token_hex(8),
                "email": secrets.token_hex(16),
            }
            for _ in range(users_count)
        ]
        posts = [
            {
                "id": uuid.uuid4().hex,
                "author_id": random.choice(users)["id"],
                "title": secrets.token_hex(16),
                "excerpt": secrets.token_hex(32),
            }
            for _ in range(posts_count)
        ]
        return cls(users=users, posts=posts)


def build_resolver(dataset: Dataset) -> Resolver:
    """Bind synchronous fetchers over ``dataset``."""

    def fetch_posts(ids: list[str], opts: FetchOptions) -> list[dict[str, Any]]:
        wanted = set(ids)
        return [
            {
                "type": "posts",
                "id": post["id"],
                "attributes": {"title": post["title"], "excerpt": post["excerpt"]},
                "relationships": {
                    "author": {"data": {"type": "users", "id": post["author_id"]}},
                },
                "links": {
                    "self": f"/posts/{post['id']}",
                    "author": f"/posts/{post['id']}/relationships/author",
                    "comments": {
                        "href": f"/posts/{post['id']}/comments",
                        "title": "Comments",
                        "meta": {"count": 100},
                    },
                },
            }
            for post in dataset.posts
            if post["id"] in wanted
        ]

    def fetch_users(ids: list[str], opts: FetchOptions) -> list[dict[str, Any]]:
        wanted = set(ids)
        return [
            {
                "type": "users",
                "id": user["id"],
                "attributes": {"name": user["name"], "email": user["email"]},
                "links": {
                    "self": f"/users/{user['id']}",
                    "posts": f"/users/{user['id']}/relationships/posts",
                },
            }
            for user in dataset.users
            if user["id"] in wanted
        ]

    return create_resolver({"posts": fetch_posts, "users": fetch_users})


async def run_simple(profiler: Profiler, posts_count: int, users_count: int) -> None:
    """Time single, double and full-list resolves, with and without the author include."""
    with profiler.measure("setup"):
        dataset = Dataset.generate(posts_count, users_count)
        resolve = build_resolver(dataset)

    first, second = dataset.posts[0]["id"], dataset.posts[min(1, posts_count - 1)]["id"]
    all_ids = [post["id"] for post in dataset.posts]

    for suffix, opts in (("", None), (":included", {"include": ["author"]})):
        with profiler.measure(f"single{suffix}"):
            await resolve("posts", first, opts)
        with profiler.measure(f"double{suffix}"):
            await resolve("posts", [first, second], opts)
        with profiler.measure(f"all{suffix}"):
            await resolve("posts", all_ids, opts)


async def run_scenarios(
    profiler: Profiler,
    scenarios: tuple[tuple[int, int], ...] = DEFAULT_SCENARIOS,
) -> None:
    for posts_count, users_count in scenarios:
        logger.info(f"Running scenario posts={posts_count} users={users_count}")
        with profiler.measure(f"simple-{posts_count}-{users_count}") as child:
            await run_simple(child, posts_count, users_count)


@click.command()
@click.option(
    "--scenario",
    "scenarios",
    type=(click.IntRange(min=1), click.IntRange(min=1)),
    multiple=True,
    help="POSTS USERS pair to run (repeatable; default: standard matrix)",
)
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Log level (default: from JSONAPI_RESOLVERS_LOG_LEVEL)",
)
def main(scenarios: tuple[tuple[int, int], ...], log_level: str | None) -> None:
    """Performance testing for jsonapi-resolvers."""
    level = (log_level or get_settings().log_level).upper()
    logging.basicConfig(level=level)

    click.echo("Performance testing for jsonapi-resolvers\n")
    profiler = Profiler()
    try:
        asyncio.run(run_scenarios(profiler, scenarios or DEFAULT_SCENARIOS))
    finally:
        click.echo(profiler.report())


if __name__ == "__main__":
    main()
