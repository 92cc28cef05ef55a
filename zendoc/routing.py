"""Route and HTTP-method inference from file-based routing conventions."""

from __future__ import annotations

import re
from typing import List, Optional

from .models import Category, FileRecord, RouteInfo
from .path_matcher import is_route_group, normalize_path

STAGING_PREFIX = "temp-zendoc-"
HTTP_METHODS: tuple[str, ...] = ("get", "post", "put", "delete", "patch")
DEFAULT_METHOD = "get"

ROUTE_HANDLER_FILES = frozenset({"route.ts", "route.js"})

_STAGING_SEGMENTS = frozenset({"content", "docs"})
_ROUTING_ROOTS = frozenset({"app", "pages"})
_ENTRY_SEGMENTS = frozenset({"route", "page", "index"})
_EXTENSION = re.compile(r"\.[^/.]+$")
_EXPORTED_HANDLER = re.compile(
    r"export\s+(?:async\s+)?function\s+(GET|POST|PUT|DELETE|PATCH)\b",
    re.IGNORECASE,
)


def _keep_segment(segment: str) -> bool:
    if not segment:
        return False
    if segment.startswith(STAGING_PREFIX):
        return False
    if segment in _STAGING_SEGMENTS:
        return False
    return not is_route_group(segment)


def _convert_segment(segment: str) -> str:
    # Catch-all first: "[...slug]" would otherwise pass the plain bracket test.
    if segment.startswith("[...") and segment.endswith("]"):
        return f"*{segment[4:-1]}"
    if segment.startswith("[") and segment.endswith("]"):
        return f":{segment[1:-1]}"
    return segment


def to_route(relative_path: str) -> str:
    """Translate a relative file path into a URL-style route.

    >>> to_route("app/api/users/[id]/route.ts")
    '/app/api/users/:id/route'
    >>> to_route("app/(marketing)/blog/[...slug]/page.tsx")
    '/app/blog/*slug/page'
    """
    parts = [part for part in normalize_path(relative_path).split("/") if _keep_segment(part)]
    if parts:
        parts[-1] = _EXTENSION.sub("", parts[-1])
    converted = [_convert_segment(part) for part in parts if part]
    return "/" + "/".join(converted)


def route_segments(route: str) -> List[str]:
    return [part for part in route.strip("/").split("/") if part]


def public_route(route: str) -> str:
    """Strip the organizational roots a router never exposes.

    A leading ``src``, then a leading ``app`` or ``pages`` directory, and a
    trailing ``route``/``page``/``index`` entry segment are removed.
    """
    parts = route_segments(route)
    if parts and parts[0] == "src":
        parts = parts[1:]
    if parts and parts[0] in _ROUTING_ROOTS:
        parts = parts[1:]
    if parts and parts[-1] in _ENTRY_SEGMENTS:
        parts = parts[:-1]
    return "/" + "/".join(parts)


def _method_from_content(content: str) -> Optional[str]:
    match = _EXPORTED_HANDLER.search(content)
    return match.group(1).lower() if match else None


def _method_from_file_name(file_name: str) -> Optional[str]:
    # "users.get.ts" and "post.js" carry a verb; "budget.ts" does not.
    tokens = file_name.split(".")[:-1]
    for method in HTTP_METHODS:
        if method in tokens:
            return method
    return None


def to_method(record: FileRecord) -> str:
    """Infer the HTTP verb served by an API file, defaulting to ``get``."""
    file_name = record.file_name.lower()
    if file_name in ROUTE_HANDLER_FILES:
        return _method_from_content(record.content) or DEFAULT_METHOD
    return (
        _method_from_file_name(file_name)
        or _method_from_content(record.content)
        or DEFAULT_METHOD
    )


class RouteResolver:
    """Annotates page and API records with their route (and API method)."""

    def resolve(self, record: FileRecord) -> Optional[RouteInfo]:
        if record.category is Category.API:
            route = to_route(record.relative_path)
            return RouteInfo(
                route_path=route,
                public_path=public_route(route),
                http_method=to_method(record),
            )
        if record.category is Category.PAGES:
            route = to_route(record.relative_path)
            return RouteInfo(route_path=route, public_path=public_route(route))
        return None


__all__ = [
    "DEFAULT_METHOD",
    "HTTP_METHODS",
    "RouteResolver",
    "STAGING_PREFIX",
    "public_route",
    "route_segments",
    "to_method",
    "to_route",
]
