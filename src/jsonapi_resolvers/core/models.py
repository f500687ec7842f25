"""JSON:API document models.

These mirror the members described at https://jsonapi.org/format/ closely
enough for structural checks. Unknown members are kept so that extension
data passes through untouched.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .exceptions import IncludeResolutionError, ResolversError, ResolverTypeError
from .types import ErrorCode


class JsonApiModel(BaseModel):
    """Base for all document members."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    def to_dict(self) -> dict[str, Any]:
        """Dump only the members that were actually present."""
        return self.model_dump(mode="json", exclude_unset=True, by_alias=True)


class LinkObject(JsonApiModel):
    """A web link with an href and optional descriptive members."""

    href: str = Field(..., description="URI-reference of the link target")
    rel: str | None = Field(default=None, description="Link relation type")
    describedby: str | LinkObject | None = Field(
        default=None, description="Link to a description document"
    )
    title: str | None = Field(default=None, description="Human-readable label")
    type: str | None = Field(default=None, description="Media type of the target")
    hreflang: str | list[str] | None = Field(
        default=None, description="Language(s) of the target"
    )
    meta: dict[str, Any] | None = None


Links = dict[str, str | LinkObject | None]


class ResourceIdentifier(JsonApiModel):
    """Uniquely identifies one resource across the whole graph."""

    model_config = ConfigDict(extra="allow", populate_by_name=True, frozen=True)

    type: str
    id: str
    meta: dict[str, Any] | None = None


class Relationship(JsonApiModel):
    """A named relationship of a resource."""

    data: ResourceIdentifier | list[ResourceIdentifier] | None = None
    links: Links | None = None
    meta: dict[str, Any] | None = None


class ResourceObject(JsonApiModel):
    """A resource as returned by a fetcher."""

    type: str
    id: str
    attributes: dict[str, Any] | None = None
    relationships: dict[str, Relationship] | None = None
    links: Links | None = None
    meta: dict[str, Any] | None = None

    @property
    def identifier(self) -> ResourceIdentifier:
        return ResourceIdentifier(type=self.type, id=self.id)


class ErrorSource(JsonApiModel):
    """References to the primary source of an error."""

    pointer: str | None = None
    parameter: str | None = None
    header: str | None = None


class ErrorObject(JsonApiModel):
    """Describes one problem encountered while performing an operation."""

    id: str | None = None
    links: Links | None = None
    status: str | None = None
    code: str | None = None
    title: str | None = None
    detail: str | None = None
    source: ErrorSource | None = None
    meta: dict[str, Any] | None = None


class JsonApiObject(JsonApiModel):
    """Describes the server implementation."""

    version: str | None = None
    ext: list[str] | None = None
    profile: list[str] | None = None
    meta: dict[str, Any] | None = None


class Document(JsonApiModel):
    """A top-level JSON:API document."""

    data: ResourceObject | list[ResourceObject] | None = None
    errors: list[ErrorObject] | None = None
    included: list[ResourceObject] | None = None
    meta: dict[str, Any] | None = None
    jsonapi: JsonApiObject | None = None
    links: Links | None = None

    @model_validator(mode="after")
    def _check_top_level_members(self) -> Document:
        has_data = "data" in self.model_fields_set
        if has_data and self.errors is not None:
            raise ValueError("The members data and errors must not coexist")
        if self.included is not None and not has_data:
            raise ValueError("A document without data must not contain included")
        return self


def _error_object(exc: BaseException, meta: dict[str, Any] | None = None) -> ErrorObject:
    if isinstance(exc, ResolverTypeError):
        members: dict[str, Any] = {
            "status": "400",
            "code": exc.code.value,
            "title": "Invalid resolve argument",
            "detail": exc.message,
        }
        meta = {**exc.details, **(meta or {})}
    elif isinstance(exc, ResolversError):
        members = {
            "status": "500",
            "code": str(getattr(exc, "code", ErrorCode.RESOLVE_FETCH_FAILED)),
            "title": "Resolve failed",
            "detail": exc.message,
        }
        meta = {**exc.details, **(meta or {})}
    else:
        members = {
            "status": "500",
            "code": ErrorCode.RESOLVE_FETCH_FAILED.value,
            "title": "Fetch failed",
            "detail": str(exc) or type(exc).__name__,
        }

    if meta:
        members["meta"] = meta
    return ErrorObject(**members)


def error_document(exc: BaseException) -> Document:
    """Convert a resolve failure into an errors-only document.

    An include batch failure is unpacked into one error object per
    underlying failure, each tagged with the batch code in ``meta``.
    """
    if isinstance(exc, IncludeResolutionError):
        batch_meta = {"code": exc.code.value}
        errors = [_error_object(err, batch_meta) for err in exc.errors]
    else:
        errors = [_error_object(exc)]
    return Document(errors=errors)
