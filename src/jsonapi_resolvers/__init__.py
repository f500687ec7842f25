"""jsonapi_resolvers - Assemble compound JSON:API documents from per-type fetchers."""

from jsonapi_resolvers.core.exceptions import (
    IncludeResolutionError,
    ResolversError,
    ResolverTypeError,
)
from jsonapi_resolvers.core.models import Document, error_document
from jsonapi_resolvers.core.types import ErrorCode
from jsonapi_resolvers.resolution import (
    AbstractFetcher,
    FetcherRegistry,
    FetchOptions,
    LinkOptions,
    ResolveOptions,
    ResolveResult,
    Resolver,
    ResolverOptions,
    create_resolver,
)

__version__ = "0.1.0"
__all__ = [
    # Resolver
    "create_resolver",
    "Resolver",
    "ResolveResult",
    "FetcherRegistry",
    "AbstractFetcher",
    # Options
    "FetchOptions",
    "LinkOptions",
    "ResolveOptions",
    "ResolverOptions",
    # Documents
    "Document",
    "error_document",
    # Errors
    "ErrorCode",
    "IncludeResolutionError",
    "ResolversError",
    "ResolverTypeError",
    # Version
    "__version__",
]
