"""Resolution layer: fetch fan-out, include expansion and link rewriting."""

from jsonapi_resolvers.resolution.base import AbstractFetcher, FetchOptions
from jsonapi_resolvers.resolution.links import rewrite_link, rewrite_links
from jsonapi_resolvers.resolution.options import (
    LinkOptions,
    ResolveOptions,
    ResolverOptions,
)
from jsonapi_resolvers.resolution.registry import FetcherRegistry
from jsonapi_resolvers.resolution.resolver import (
    ResolveResult,
    Resolver,
    create_resolver,
)

__all__ = [
    # Base
    "AbstractFetcher",
    "FetchOptions",
    # Options
    "LinkOptions",
    "ResolveOptions",
    "ResolverOptions",
    # Links
    "rewrite_link",
    "rewrite_links",
    # Resolver
    "ResolveResult",
    "Resolver",
    "create_resolver",
    # Registry
    "FetcherRegistry",
]
