"""Core types, models, and exceptions."""

from .exceptions import IncludeResolutionError, ResolversError, ResolverTypeError
from .models import (
    Document,
    ErrorObject,
    ErrorSource,
    JsonApiObject,
    LinkObject,
    Relationship,
    ResourceIdentifier,
    ResourceObject,
    error_document,
)
from .types import ErrorCode, FetchFunction, LinkValue, Resource

__all__ = [
    # Types
    "ErrorCode",
    "FetchFunction",
    "LinkValue",
    "Resource",
    # Models
    "Document",
    "ErrorObject",
    "ErrorSource",
    "JsonApiObject",
    "LinkObject",
    "Relationship",
    "ResourceIdentifier",
    "ResourceObject",
    "error_document",
    # Exceptions
    "IncludeResolutionError",
    "ResolversError",
    "ResolverTypeError",
]
