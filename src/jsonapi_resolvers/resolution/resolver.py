"""Resolution engine for compound JSON:API documents."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from jsonapi_resolvers.core.exceptions import IncludeResolutionError, ResolverTypeError
from jsonapi_resolvers.core.models import Document
from jsonapi_resolvers.core.types import FetchFunction, Resource
from jsonapi_resolvers.resolution.base import FetchOptions
from jsonapi_resolvers.resolution.links import rewrite_links, rewrite_resource_links
from jsonapi_resolvers.resolution.options import (
    LinkOptions,
    ResolveOptions,
    ResolverOptions,
    build_resolve_options,
    build_resolver_options,
    validate_model,
)

if TYPE_CHECKING:
    from jsonapi_resolvers.config import ResolverSettings

logger = logging.getLogger(__name__)


@dataclass
class ResolveResult:
    """
    Primary data plus, when includes were requested, the related resources.

    ``included`` is None when no include was requested and a (possibly
    empty) list otherwise.
    """

    data: Resource | list[Resource] | None = None
    included: list[Resource] | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"data": self.data}
        if self.included is not None:
            result["included"] = self.included
        return result

    def to_document(self) -> Document:
        """Validate the result as a top-level document."""
        return Document.model_validate(self.to_dict())


def _is_many(ids: Any) -> bool:
    """Whether ``ids`` is a list request (True) or a single id (False)."""
    if isinstance(ids, str):
        if ids:
            return False
    elif (
        isinstance(ids, (list, tuple))
        and ids
        and all(isinstance(id_, str) for id_ in ids)
    ):
        return True
    raise ResolverTypeError("Expected ids to be a string or a list of strings")


class Resolver:
    """
    Resolves resources of known types through a fixed set of fetchers.

    The resolver is the resolve entry point itself (``await resolver(type, ids)``)
    and also exposes ``included`` and ``links`` for callers that already hold
    resources.

    Usage:
        resolver = create_resolver({"posts": fetch_posts, "users": fetch_users})
        result = await resolver("posts", "P1", {"include": ["author"]})
        result.to_dict()  # {"data": {...}, "included": [{...}]}
    """

    def __init__(
        self,
        fetchers: Mapping[str, FetchFunction],
        opts: ResolverOptions | Mapping[str, Any] | None = None,
    ) -> None:
        if not isinstance(fetchers, Mapping):
            raise ResolverTypeError("Expected create_resolver fetchers to be a mapping of functions")
        self._options = build_resolver_options(opts)

        for schema_type, fetcher in fetchers.items():
            if not callable(fetcher):
                raise ResolverTypeError(
                    "Expected each fetcher to be a function that resolves a type",
                    schema_type=schema_type,
                )

        self._fetchers: Mapping[str, FetchFunction] = MappingProxyType(dict(fetchers))
        self._types = frozenset(self._fetchers)

    @classmethod
    def from_settings(
        cls,
        fetchers: Mapping[str, FetchFunction],
        settings: ResolverSettings | None = None,
    ) -> Resolver:
        """Create a resolver whose default base URL comes from settings."""
        if settings is None:
            from jsonapi_resolvers.config import get_settings

            settings = get_settings()
        return cls(fetchers, ResolverOptions(links=LinkOptions(base_url=settings.base_url)))

    @property
    def types(self) -> frozenset[str]:
        """The resource types this resolver can fetch."""
        return self._types

    @property
    def options(self) -> ResolverOptions:
        return self._options

    async def __call__(
        self,
        type_: str,
        ids: str | Sequence[str],
        opts: ResolveOptions | Mapping[str, Any] | None = None,
    ) -> ResolveResult:
        return await self.resolve(type_, ids, opts)

    async def resolve(
        self,
        type_: str,
        ids: str | Sequence[str],
        opts: ResolveOptions | Mapping[str, Any] | None = None,
    ) -> ResolveResult:
        """
        Resolve one or more resources of a given type.

        Args:
            type_: A type bound into this resolver
            ids: A single id, or a non-empty list of ids
            opts: Include, fieldset and link options for this call

        Returns:
            A single resource (or None) for a single id, a list for a list of
            ids, plus ``included`` when includes were requested

        Raises:
            ResolverTypeError: If the type, ids or options are invalid
            IncludeResolutionError: If two or more related types failed
        """
        if not isinstance(type_, str) or type_ not in self._types:
            raise ResolverTypeError(
                "Expected type to be a valid schema type",
                resolve_type=type_ if isinstance(type_, str) else repr(type_),
            )
        many = _is_many(ids)
        resolve_opts = build_resolve_options(opts, self._options.links)

        entries = await self._fetch(type_, list(ids) if many else [ids], resolve_opts)

        base_url = resolve_opts.links.base_url
        if base_url:
            entries = [rewrite_resource_links(entry, base_url) for entry in entries]

        included: list[Resource] | None = None
        if resolve_opts.include:
            included = (await self.included(entries, resolve_opts) if entries else None) or []

        if many:
            return ResolveResult(data=entries, included=included)
        return ResolveResult(data=entries[0] if entries else None, included=included)

    async def _fetch(
        self,
        type_: str,
        ids: list[str],
        opts: ResolveOptions,
    ) -> list[Resource]:
        """Call the fetcher bound to ``type_``, awaiting it if needed."""
        fields = opts.fields.get(type_)
        fetch_opts = FetchOptions(
            include=list(opts.include),
            fields=list(fields) if isinstance(fields, (list, tuple)) else None,
        )

        logger.debug(f"Fetching {len(ids)} {type_!r} resource(s)")
        entries = self._fetchers[type_](ids, fetch_opts)
        if inspect.isawaitable(entries):
            entries = await entries
        return list(entries or [])

    async def included(
        self,
        entries: Resource | Sequence[Resource],
        opts: ResolveOptions | Mapping[str, Any],
    ) -> list[Resource] | None:
        """
        Fetch the resources related to ``entries`` through ``opts.include``.

        Only one level is expanded: related resources are fetched with an
        empty include list. Each related type is fetched once, concurrently
        with the others, with duplicate ids removed.

        Returns:
            The related resources, or None if no related identifiers of a
            known type were found

        Raises:
            ResolverTypeError: If entries or options are invalid
            IncludeResolutionError: If two or more related types failed; a
                single failure is re-raised as is
        """
        if isinstance(entries, Mapping):
            if not (entries.get("type") and entries.get("id")):
                raise ResolverTypeError(
                    "Expected included entries to be a list or a single resource"
                )
            entries = [entries]
        elif not isinstance(entries, (list, tuple)):
            raise ResolverTypeError("Expected included entries to be a list or a single resource")

        resolve_opts = build_resolve_options(opts, self._options.links)
        if not resolve_opts.include:
            raise ResolverTypeError("Expected included opts.include to be a non-empty list")

        lookups = self._collect_identifiers(entries, resolve_opts.include)
        if not lookups:
            return None

        nested_opts = resolve_opts.model_copy(update={"include": []})
        logger.debug(
            f"Resolving included {', '.join(f'{t}[{len(ids)}]' for t, ids in lookups.items())}"
        )

        # Settle every type before deciding; no fail-fast
        outcomes = await asyncio.gather(
            *(self.resolve(nested_type, list(ids), nested_opts) for nested_type, ids in lookups.items()),
            return_exceptions=True,
        )

        results: list[Resource] = []
        errors: list[BaseException] = []
        for outcome in outcomes:
            if isinstance(outcome, BaseException):
                errors.append(outcome)
                continue
            results.extend(outcome.data)
            results.extend(outcome.included or [])

        if len(errors) == 1:
            logger.warning(f"Included resolution failed: {errors[0]!r}")
            raise errors[0]
        if errors:
            logger.warning(f"Included resolution failed for {len(errors)} types")
            raise IncludeResolutionError(errors)

        return results

    def _collect_identifiers(
        self,
        entries: Sequence[Resource],
        include: list[str],
    ) -> dict[str, dict[str, None]]:
        """Group related ids by type, keeping first-seen order and dropping unknown types."""
        relations = list(dict.fromkeys(include))
        lookups: dict[str, dict[str, None]] = {}

        for entry in entries:
            relationships = entry.get("relationships") if isinstance(entry, Mapping) else None
            if not isinstance(relationships, Mapping):
                continue

            for relation in relations:
                relationship = relationships.get(relation)
                if not isinstance(relationship, Mapping):
                    continue

                data = relationship.get("data")
                linkage = data if isinstance(data, (list, tuple)) else [data]
                for identifier in linkage:
                    if not isinstance(identifier, Mapping):
                        continue
                    related_type = identifier.get("type")
                    related_id = identifier.get("id")
                    if (
                        isinstance(related_type, str)
                        and related_type in self._types
                        and isinstance(related_id, str)
                        and related_id
                    ):
                        lookups.setdefault(related_type, {})[related_id] = None

        return lookups

    def links(
        self,
        links: Mapping[str, Any],
        opts: LinkOptions | Mapping[str, Any],
    ) -> dict[str, Any]:
        """
        Prefix every relative link in ``links`` with ``opts.base_url``.

        Returns a new mapping; the input and its link objects are not mutated.
        """
        if not isinstance(links, Mapping):
            raise ResolverTypeError("Expected links to be a mapping")
        if isinstance(opts, Mapping):
            opts = validate_model(LinkOptions, opts, "Expected links opts.base_url to be a string")
        if not isinstance(opts, LinkOptions) or not isinstance(opts.base_url, str):
            raise ResolverTypeError("Expected links opts.base_url to be a string")
        return rewrite_links(links, opts.base_url)


def create_resolver(
    fetchers: Mapping[str, FetchFunction],
    opts: ResolverOptions | Mapping[str, Any] | None = None,
) -> Resolver:
    """
    Create a resolver from a mapping of fetchers keyed by type.

    Args:
        fetchers: Fetch function (sync or async) for each resource type
        opts: Defaults such as ``{"links": {"baseUrl": "https://api.example.com"}}``

    Raises:
        ResolverTypeError: If fetchers is not a mapping of callables or opts is
            not a mapping
    """
    return Resolver(fetchers, opts)
