"""Option models for resolver construction and resolve calls."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from jsonapi_resolvers.core.exceptions import ResolverTypeError

ModelT = TypeVar("ModelT", bound=BaseModel)


def to_camel_case(string: str) -> str:
    """Convert snake_case to camelCase."""
    components = string.split("_")
    return components[0] + "".join(word.capitalize() for word in components[1:])


class OptionsModel(BaseModel):
    """
    Base for option models.

    Accepts both snake_case names and the camelCase keys used in JSON:API
    tooling, so ``{"baseUrl": ...}`` and ``{"base_url": ...}`` are equivalent.
    """

    model_config = ConfigDict(
        alias_generator=to_camel_case,
        populate_by_name=True,
    )


class LinkOptions(OptionsModel):
    """How links on fetched resources are rewritten."""

    base_url: str | None = Field(
        default=None,
        description="Prefix for every link starting with '/'; None disables rewriting",
    )


class ResolverOptions(OptionsModel):
    """Defaults bound into a resolver at construction time."""

    links: LinkOptions = Field(default_factory=LinkOptions)


class ResolveOptions(OptionsModel):
    """Per-call options for resolve and included."""

    include: list[str] = Field(
        default_factory=list,
        description="Relationship names to expand one level",
    )
    fields: dict[str, Any] = Field(
        default_factory=dict,
        description="Sparse fieldsets keyed by resource type",
    )
    links: LinkOptions = Field(default_factory=LinkOptions)


def validate_model(model: type[ModelT], data: Any, message: str) -> ModelT:
    """Validate ``data`` into ``model``, reporting failures as ResolverTypeError."""
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise ResolverTypeError(
            message,
            details={"errors": e.errors(include_url=False)},
        ) from e


def merge_link_options(
    defaults: LinkOptions,
    override: LinkOptions | Mapping[str, Any] | None,
) -> LinkOptions:
    """Apply call-time link options over construction-time defaults, field by field."""
    if override is None:
        return defaults
    if isinstance(override, Mapping):
        override = validate_model(
            LinkOptions, override, "Expected resolve opts.links to be a mapping of link options"
        )
    elif not isinstance(override, LinkOptions):
        raise ResolverTypeError("Expected resolve opts.links to be a mapping of link options")
    return defaults.model_copy(update=override.model_dump(exclude_unset=True))


def build_resolver_options(
    opts: ResolverOptions | Mapping[str, Any] | None,
) -> ResolverOptions:
    """Normalize the options given to create_resolver."""
    if opts is None:
        return ResolverOptions()
    if isinstance(opts, ResolverOptions):
        return opts
    if not isinstance(opts, Mapping):
        raise ResolverTypeError("Expected create_resolver opts to be a mapping")
    return validate_model(ResolverOptions, opts, "Expected create_resolver opts to be a mapping")


def build_resolve_options(
    opts: ResolveOptions | Mapping[str, Any] | None,
    default_links: LinkOptions,
) -> ResolveOptions:
    """
    Normalize per-call options.

    Missing ``include`` becomes an empty list and missing ``fields`` an empty
    mapping. Link options inherit from ``default_links`` unless overridden.

    Raises:
        ResolverTypeError: If opts, include or fields have the wrong shape
    """
    if opts is None:
        return ResolveOptions(links=default_links)

    if isinstance(opts, ResolveOptions):
        override = opts.links if "links" in opts.model_fields_set else None
        return opts.model_copy(
            update={"links": merge_link_options(default_links, override)}
        )

    if not isinstance(opts, Mapping):
        raise ResolverTypeError("Expected resolve opts to be a mapping")

    include = opts.get("include")
    if include is None:
        include = []
    if (
        isinstance(include, (str, bytes))
        or not isinstance(include, Sequence)
        or not all(isinstance(relation, str) for relation in include)
    ):
        raise ResolverTypeError("Expected resolve opts.include to be a list")

    fields = opts.get("fields")
    if fields is None:
        fields = {}
    if not isinstance(fields, Mapping):
        raise ResolverTypeError("Expected resolve opts.fields to be a mapping")

    return ResolveOptions(
        include=list(include),
        fields=dict(fields),
        links=merge_link_options(default_links, opts.get("links")),
    )
