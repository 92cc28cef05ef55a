"""Path normalization and ignore-pattern matching."""

from __future__ import annotations

import re
from fnmatch import fnmatchcase
from typing import FrozenSet, Iterable

DEFAULT_IGNORES: tuple[str, ...] = (
    "node_modules",
    "dist",
    ".next",
    ".git",
    ".astro",
)

_LEADING_SEPARATORS = re.compile(r"^[/\\]+")
_GLOB_CHARS = frozenset("*?[")


def normalize_path(path: str) -> str:
    """Return ``path`` with forward slashes and no leading separator."""
    return _LEADING_SEPARATORS.sub("", path).replace("\\", "/")


def is_route_group(segment: str) -> bool:
    """True for organizational ``(name)`` directories used by file-based routers."""
    return len(segment) >= 2 and segment.startswith("(") and segment.endswith(")")


def has_route_group(path: str) -> bool:
    return any(is_route_group(part) for part in path.split("/"))


class PathMatcher:
    """Decides whether a relative path is excluded from a scan."""

    def __init__(self, patterns: Iterable[str]) -> None:
        normalized = (normalize_path(pattern.strip()) for pattern in patterns)
        self.patterns: FrozenSet[str] = frozenset(p for p in normalized if p and p != "/")

    def should_ignore(self, path: str) -> bool:
        relative = normalize_path(path)
        if not relative:
            return False
        # Route groups such as app/(marketing) are never excluded.
        if has_route_group(relative):
            return False
        return any(self._matches(relative, pattern) for pattern in self.patterns)

    @staticmethod
    def _matches(relative: str, pattern: str) -> bool:
        if pattern.endswith("/"):
            directory = pattern[:-1]
            return relative == directory or relative.startswith(directory + "/")
        if _GLOB_CHARS.intersection(pattern):
            name = relative.rsplit("/", 1)[-1]
            return fnmatchcase(relative, pattern) or fnmatchcase(name, pattern)
        return relative == pattern or relative.endswith("/" + pattern)


__all__ = [
    "DEFAULT_IGNORES",
    "PathMatcher",
    "has_route_group",
    "is_route_group",
    "normalize_path",
]
