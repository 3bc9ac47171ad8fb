"""Apply path remapping to path-bearing language-server results.

Results are LSP-shaped dicts: a Location carries "uri", a LocationLink
carries "targetUri", a DocumentLink carries an optional "target". Only
file:// URIs are rewritten.
"""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Any, Protocol
from urllib.parse import unquote, urlsplit


class Resolver(Protocol):
    def resolve(self, absolute_path: str) -> str: ...


def uri_to_path(uri: str) -> str | None:
    """Path component of a file:// URI, or None for any other scheme."""
    parts = urlsplit(uri)
    if parts.scheme != "file":
        return None
    return unquote(parts.path)


def path_to_uri(path: str) -> str:
    """file:// URI for an absolute POSIX path."""
    return PurePosixPath(path).as_uri()


def remap_uri(uri: str, resolver: Resolver) -> str:
    """Return uri pointing at the remapped path, or uri itself if nothing changed."""
    path = uri_to_path(uri)
    if path is None:
        return uri
    resolved = resolver.resolve(path)
    if resolved == path:
        return uri
    return path_to_uri(resolved)


def _rewrite_location(item: dict[str, Any], resolver: Resolver) -> dict[str, Any]:
    for key in ("uri", "targetUri"):
        if isinstance(item.get(key), str):
            item[key] = remap_uri(item[key], resolver)
    return item


def rewrite_definition(result: Any, resolver: Resolver) -> Any:
    """Rewrite a textDocument/definition result in place.

    Accepts None, a single Location/LocationLink, or a list of them.
    """
    if isinstance(result, dict):
        return _rewrite_location(result, resolver)
    if isinstance(result, list):
        for item in result:
            if isinstance(item, dict):
                _rewrite_location(item, resolver)
    return result


def rewrite_document_links(links: list[dict[str, Any]] | None, resolver: Resolver) -> list[dict[str, Any]] | None:
    """Rewrite the target of each DocumentLink in place."""
    if not links:
        return links
    for link in links:
        target = link.get("target")
        if isinstance(target, str):
            link["target"] = remap_uri(target, resolver)
    return links
