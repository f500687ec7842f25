"""Fetcher contract and abstract base class."""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from typing import ClassVar

from jsonapi_resolvers.core.types import Resource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchOptions:
    """Hints passed verbatim to a fetcher.

    ``include`` lists the relationships the caller is about to expand, so a
    fetcher may choose to populate them. ``fields`` is the sparse fieldset for
    the fetcher's own type, or None when no fieldset was requested. Field
    selection is entirely the fetcher's job.
    """

    include: list[str]
    fields: list[str] | None = None


class AbstractFetcher(ABC):
    """
    Abstract base class for class-based fetchers.

    Subclasses set ``TYPE`` and implement ``fetch``. Instances are callable
    with the same signature as a plain fetch function, so they can be bound
    into a resolver directly or through a FetcherRegistry.

    Provides:
    - Call and latency counters
    - Async context manager support for fetchers owning connections
    """

    TYPE: ClassVar[str]

    def __init__(self) -> None:
        self._call_count: int = 0
        self._total_latency_ms: float = 0.0

    @property
    def type(self) -> str:
        """The resource type this fetcher resolves."""
        return self.TYPE

    @property
    def call_count(self) -> int:
        return self._call_count

    @property
    def average_latency_ms(self) -> float:
        if self._call_count == 0:
            return 0.0
        return self._total_latency_ms / self._call_count

    async def __call__(self, ids: list[str], opts: FetchOptions) -> Sequence[Resource]:
        start = time.monotonic()
        try:
            return await self.fetch(ids, opts)
        finally:
            self._call_count += 1
            self._total_latency_ms += (time.monotonic() - start) * 1000

    @abstractmethod
    async def fetch(self, ids: list[str], opts: FetchOptions) -> Sequence[Resource]:
        """
        Fetch resources of this fetcher's type.

        Args:
            ids: Non-empty list of ids to look up
            opts: Include and fieldset hints

        Returns:
            The resources found; missing ids are simply omitted
        """
        ...

    async def close(self) -> None:
        """Release any resources held by the fetcher. Override if needed."""
        logger.debug(f"Closing fetcher for type {self.type!r}")

    async def __aenter__(self) -> AbstractFetcher:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
