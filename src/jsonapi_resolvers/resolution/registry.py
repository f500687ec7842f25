"""Fetcher registry for assembling resolvers."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from jsonapi_resolvers.core.exceptions import ResolverTypeError
from jsonapi_resolvers.core.types import FetchFunction
from jsonapi_resolvers.resolution.base import AbstractFetcher
from jsonapi_resolvers.resolution.resolver import Resolver

if TYPE_CHECKING:
    from jsonapi_resolvers.config import ResolverSettings
    from jsonapi_resolvers.resolution.options import ResolverOptions

logger = logging.getLogger(__name__)


class FetcherRegistry:
    """
    Collects fetchers by resource type and builds resolvers from them.

    Plain functions and AbstractFetcher instances can be mixed. Class-based
    fetchers are closed by ``close_all``.
    """

    def __init__(self) -> None:
        self._fetchers: dict[str, FetchFunction] = {}

    def register(self, type_: str, fetcher: FetchFunction) -> None:
        """Register a fetch function for a resource type."""
        if not callable(fetcher):
            raise ResolverTypeError(
                "Expected each fetcher to be a function that resolves a type",
                schema_type=type_,
            )
        if type_ in self._fetchers:
            raise ResolverTypeError(
                "A fetcher is already registered for this type",
                schema_type=type_,
            )
        self._fetchers[type_] = fetcher
        logger.debug(f"Registered fetcher for type {type_!r}")

    def register_fetcher(self, fetcher: AbstractFetcher) -> None:
        """Register a class-based fetcher under its own TYPE."""
        self.register(fetcher.type, fetcher)

    def get(self, type_: str) -> FetchFunction | None:
        return self._fetchers.get(type_)

    @property
    def types(self) -> frozenset[str]:
        return frozenset(self._fetchers)

    def create_resolver(
        self,
        opts: ResolverOptions | Mapping[str, Any] | None = None,
    ) -> Resolver:
        """Build a resolver bound to a snapshot of the registered fetchers."""
        return Resolver(self._fetchers, opts)

    def create_resolver_from_settings(
        self,
        settings: ResolverSettings | None = None,
    ) -> Resolver:
        """Build a resolver whose default base URL comes from settings."""
        return Resolver.from_settings(self._fetchers, settings)

    @classmethod
    def from_fetchers(cls, fetchers: Iterable[AbstractFetcher]) -> FetcherRegistry:
        """Create a registry with the given class-based fetchers registered."""
        registry = cls()
        for fetcher in fetchers:
            registry.register_fetcher(fetcher)
        return registry

    async def close_all(self) -> None:
        """Close all registered class-based fetchers."""
        for fetcher in self._fetchers.values():
            if isinstance(fetcher, AbstractFetcher):
                await fetcher.close()

    async def __aenter__(self) -> FetcherRegistry:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close_all()
