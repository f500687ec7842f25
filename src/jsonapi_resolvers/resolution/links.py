"""Link rewriting for relative JSON:API links."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from jsonapi_resolvers.core.types import LinkValue, Resource


def rewrite_link(value: LinkValue, base_url: str) -> LinkValue:
    """
    Prefix a single relative link with ``base_url``.

    A string starting with "/" is prefixed. A link object whose ``href`` is
    such a string is copied with the href prefixed. Anything else, including
    absolute URLs and None, is returned unchanged.
    """
    if isinstance(value, Mapping):
        href = value.get("href")
        if isinstance(href, str) and href.startswith("/"):
            return {**value, "href": f"{base_url}{href}"}
        return value
    if isinstance(value, str) and value.startswith("/"):
        return f"{base_url}{value}"
    return value


def rewrite_links(links: Mapping[str, Any], base_url: str) -> dict[str, Any]:
    """Rewrite the top-level values of a links object. Nested members are not visited."""
    return {key: rewrite_link(value, base_url) for key, value in links.items()}


def rewrite_resource_links(entry: Resource | None, base_url: str) -> Resource | None:
    """Return a copy of ``entry`` with its links rewritten, or ``entry`` itself if it has none."""
    if not entry or not isinstance(entry.get("links"), Mapping):
        return entry
    return {**entry, "links": rewrite_links(entry["links"], base_url)}
