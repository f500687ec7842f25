"""Custom exception hierarchy for jsonapi_resolvers."""

from typing import Any

from .types import ErrorCode


class ResolversError(Exception):
    """Base exception for all jsonapi_resolvers errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ResolverTypeError(ResolversError, TypeError):
    """A type name, id argument or options mapping had the wrong shape.

    Raised before any fetcher is called.
    """

    code = ErrorCode.RESOLVE_INVALID_ARGUMENT

    def __init__(
        self,
        message: str,
        *,
        resolve_type: str | None = None,
        schema_type: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = dict(details or {})
        if resolve_type is not None:
            details["resolve_type"] = resolve_type
        if schema_type is not None:
            details["schema_type"] = schema_type
        super().__init__(message, details)
        self.resolve_type = resolve_type
        self.schema_type = schema_type


class IncludeResolutionError(ResolversError):
    """Two or more related types failed to resolve in the same include batch."""

    code = ErrorCode.RESOLVE_INCLUDE_FAILED

    def __init__(
        self,
        errors: list[BaseException],
        message: str = "Some errors occurred when fetching nested data",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.errors = list(errors)
