"""Deterministic, collision-free output names for documentation files."""

from __future__ import annotations

import re
from typing import Dict, List, Optional, Set

from .models import Category, FileRecord, RouteInfo
from .routing import route_segments

_UNSAFE_RUN = re.compile(r"[^A-Za-z0-9_-]+")
_NON_ALNUM_RUN = re.compile(r"[^A-Za-z0-9]+")
_DASH_RUN = re.compile(r"-{2,}")

_CATEGORY_SUFFIXES: Dict[Category, Optional[str]] = {
    Category.COMPONENTS: "component",
    Category.PAGES: "page",
    Category.API: "api",
    Category.LIB: "utility",
    Category.CONFIG: None,
    Category.OTHER: None,
}


def base_name(file_name: str) -> str:
    """File name without extension, with ``.action`` rewritten to ``-action``."""
    stem = file_name.rsplit(".", 1)[0] if "." in file_name.lstrip(".") else file_name
    return stem.replace(".action", "-action")


def sanitize(value: str) -> str:
    """Collapse characters that are unsafe in file names into single dashes."""
    cleaned = _UNSAFE_RUN.sub("-", value)
    return _DASH_RUN.sub("-", cleaned).strip("-")


def _is_id_segment(segment: str) -> bool:
    return segment.startswith(":") or (segment.startswith("[") and segment.endswith("]"))


def action_from_route(route: str, method: str) -> str:
    """Describe what a REST-shaped route does, e.g. ``/api/users`` + get -> ``all-users``."""
    parts = route_segments(route)

    if len(parts) >= 2 and parts[0] == "api":
        resource = parts[1]
        if len(parts) == 2:
            if method == "get":
                return f"all-{resource}"
            if method == "post":
                return f"create-{resource}"
        if len(parts) == 3 and _is_id_segment(parts[2]):
            if method == "get":
                return f"{resource}-by-id"
            if method == "put":
                return f"update-{resource}"
            if method == "delete":
                return f"delete-{resource}"
        if len(parts) >= 3:
            return f"{parts[2]}-{resource}"

    if "auth" in parts or "login" in parts:
        return "auth"
    if "register" in parts:
        return "register"

    if parts and not _is_id_segment(parts[-1]):
        return _NON_ALNUM_RUN.sub("-", parts[-1])

    meaningful = [part for part in parts if part != "api" and not _is_id_segment(part)]
    return meaningful[-1] if meaningful else "route"


def derive_slug(record: FileRecord, route: Optional[RouteInfo]) -> str:
    """Category-specific output name for a record, before collision handling."""
    base = base_name(record.file_name)
    category = record.category

    if category is Category.API:
        if route is not None and route.http_method and route.public_path != "/":
            action = action_from_route(route.public_path, route.http_method)
            slug = f"{route.http_method}-{action}"
        else:
            slug = f"{base}-api"
    elif category is Category.PAGES:
        if route is not None:
            cleaned = _NON_ALNUM_RUN.sub("-", route.public_path).strip("-")
            slug = f"{cleaned or 'index'}-page"
        else:
            slug = f"{base}-page"
    else:
        suffix = _CATEGORY_SUFFIXES[category]
        slug = f"{base}-{suffix}" if suffix else base

    return sanitize(slug) or sanitize(base) or category.value


class SlugAllocator:
    """Hands out slugs that stay unique within each category.

    A slug already emitted in the same category gets ``-2``, ``-3``, ...
    appended in the order records are allocated.
    """

    def __init__(self) -> None:
        self._emitted: Dict[Category, Set[str]] = {}

    def allocate(self, record: FileRecord, route: Optional[RouteInfo]) -> str:
        taken = self._emitted.setdefault(record.category, set())
        candidate = derive_slug(record, route)
        slug = candidate
        counter = 2
        while slug in taken:
            slug = f"{candidate}-{counter}"
            counter += 1
        taken.add(slug)
        return slug

    def emitted(self, category: Category) -> List[str]:
        return sorted(self._emitted.get(category, ()))

    def reset(self) -> None:
        self._emitted.clear()


__all__ = [
    "SlugAllocator",
    "action_from_route",
    "base_name",
    "derive_slug",
    "sanitize",
]
