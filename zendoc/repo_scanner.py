"""Repository traversal honoring .gitignore and the default ignore list."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, List, Sequence

from .logging import get_logger
from .path_matcher import DEFAULT_IGNORES, PathMatcher, normalize_path

_IGNORE_FILENAME = ".gitignore"

logger = get_logger("scanner")


def load_ignore_patterns(root: Path) -> List[str]:
    """Read ``.gitignore`` at ``root``; a missing or unreadable file yields nothing."""
    path = root / _IGNORE_FILENAME
    if not path.is_file():
        return []
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.debug("Ignoring unreadable %s: %s", path, exc)
        return []

    patterns: List[str] = []
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        pattern = line.strip("/")
        if pattern:
            patterns.append(pattern)
    return patterns


class TreeWalker:
    """Enumerates the non-ignored files below a root directory."""

    def __init__(
        self,
        ignore_patterns: Sequence[str] = DEFAULT_IGNORES,
        *,
        extra_patterns: Iterable[str] = (),
    ) -> None:
        self.ignore_patterns = tuple(ignore_patterns)
        self.extra_patterns = tuple(extra_patterns)

    def matcher_for(self, root: Path) -> PathMatcher:
        merged = set(load_ignore_patterns(root))
        merged.update(self.ignore_patterns)
        merged.update(self.extra_patterns)
        return PathMatcher(merged)

    def walk(self, root: str | Path | None = None) -> List[str]:
        """Return absolute file paths in traversal order.

        Ignored directories are pruned without being read. Directories that
        cannot be listed are skipped and the walk carries on.
        """
        root_path = Path(root if root is not None else Path.cwd()).expanduser().resolve()
        if not root_path.exists():
            raise FileNotFoundError(f"Scan root not found: {root_path}")
        if not root_path.is_dir():
            raise NotADirectoryError(f"Scan root is not a directory: {root_path}")

        matcher = self.matcher_for(root_path)
        files: List[str] = []
        self._traverse(root_path, root_path, matcher, files)
        logger.debug("Walked %s: %d files", root_path, len(files))
        return files

    def _traverse(
        self, directory: Path, root: Path, matcher: PathMatcher, files: List[str]
    ) -> None:
        try:
            with os.scandir(directory) as iterator:
                entries = list(iterator)
        except OSError as exc:
            logger.debug("Skipping unreadable directory %s: %s", directory, exc)
            return

        for entry in entries:
            relative = normalize_path(os.path.relpath(entry.path, root))
            if matcher.should_ignore(relative):
                continue
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
            except OSError:
                continue
            if is_dir:
                self._traverse(Path(entry.path), root, matcher, files)
            elif entry.is_file():
                files.append(os.path.abspath(entry.path))


__all__ = ["TreeWalker", "load_ignore_patterns"]
