"""File categorization into the closed set of documentation buckets."""

from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterable, List, Optional

from .logging import get_logger
from .models import Category, FileRecord
from .path_matcher import normalize_path

PAGE_ENTRY_FILES = frozenset({"page.tsx", "page.js", "page.ts", "page.jsx"})
CONFIG_EXTENSIONS = frozenset({"json", "yaml", "yml", "toml"})
CONFIG_NAME_MARKERS = ("config", "package", "tsconfig")

# Directory-segment rules, checked in order after the page-entry rule.
_DIRECTORY_RULES: tuple[tuple[frozenset[str], Category], ...] = (
    (frozenset({"components", "component"}), Category.COMPONENTS),
    (frozenset({"api", "routes"}), Category.API),
    (frozenset({"lib", "utils", "helpers"}), Category.LIB),
    (frozenset({"pages", "app"}), Category.PAGES),
)

logger = get_logger("classifier")


def file_extension(file_name: str) -> str:
    """Lowercase extension without the dot, or an empty string."""
    suffix = Path(file_name).suffix
    return suffix[1:].lower() if suffix else ""


def classify_path(relative_path: str) -> Category:
    """Assign exactly one category to a path; the first matching rule wins."""
    path = normalize_path(relative_path).lower()
    parts = path.split("/")
    file_name = parts[-1]
    directories = set(parts[:-1])

    if file_name in PAGE_ENTRY_FILES:
        return Category.PAGES

    for names, category in _DIRECTORY_RULES:
        if directories & names:
            return category

    if file_extension(file_name) in CONFIG_EXTENSIONS:
        return Category.CONFIG
    if any(marker in file_name for marker in CONFIG_NAME_MARKERS):
        return Category.CONFIG
    return Category.OTHER


class Classifier:
    """Materializes FileRecords for scanned paths.

    ``max_workers`` enables a bounded thread pool for the content reads; the
    output keeps the order of the input paths either way.
    """

    def __init__(self, *, max_workers: Optional[int] = None) -> None:
        self.max_workers = max_workers

    def load(self, path: str | Path, root: str | Path) -> Optional[FileRecord]:
        """Read and classify one file, or return None when it cannot be read."""
        absolute = os.path.abspath(path)
        relative = normalize_path(os.path.relpath(absolute, root))
        try:
            content = Path(absolute).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.debug("Dropping unreadable file %s: %s", relative, exc)
            return None

        file_name = relative.rsplit("/", 1)[-1]
        return FileRecord(
            absolute_path=absolute,
            relative_path=relative,
            file_name=file_name,
            extension=file_extension(file_name),
            content=content,
            category=classify_path(relative),
        )

    def classify_files(
        self, paths: Iterable[str | Path], root: str | Path | None = None
    ) -> List[FileRecord]:
        root_path = os.path.abspath(root if root is not None else os.getcwd())
        path_list = list(paths)

        if self.max_workers and self.max_workers > 1 and len(path_list) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                loaded = list(pool.map(lambda item: self.load(item, root_path), path_list))
        else:
            loaded = [self.load(item, root_path) for item in path_list]

        records = [record for record in loaded if record is not None]
        dropped = len(path_list) - len(records)
        if dropped:
            logger.debug("Dropped %d unreadable files during classification", dropped)
        return records


__all__ = [
    "CONFIG_EXTENSIONS",
    "Classifier",
    "PAGE_ENTRY_FILES",
    "classify_path",
    "file_extension",
]
