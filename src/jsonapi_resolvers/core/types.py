"""Core enums and type definitions."""

from __future__ import annotations

from collections.abc import Awaitable, Sequence
from enum import StrEnum
from typing import TYPE_CHECKING, Any, Protocol, TypeAlias

if TYPE_CHECKING:
    from jsonapi_resolvers.resolution.base import FetchOptions


# Resources are passed through as plain mappings; only "relationships" and
# "links" are ever inspected.
Resource: TypeAlias = dict[str, Any]

# A link value is a bare URL string, a link object (mapping with "href") or null
LinkValue: TypeAlias = str | dict[str, Any] | None


class ErrorCode(StrEnum):
    """Machine-readable codes attached to resolver errors."""

    RESOLVE_INCLUDE_FAILED = "RESOLVE_INCLUDE_FAILED"
    RESOLVE_INVALID_ARGUMENT = "RESOLVE_INVALID_ARGUMENT"
    RESOLVE_FETCH_FAILED = "RESOLVE_FETCH_FAILED"


class FetchFunction(Protocol):
    """Looks up resources of a single type by id.

    Ids with no matching resource are omitted from the result. May be a plain
    function or a coroutine function.
    """

    def __call__(
        self,
        ids: list[str],
        opts: FetchOptions,
    ) -> Sequence[Resource] | Awaitable[Sequence[Resource]]: ...
