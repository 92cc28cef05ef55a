"""Turns a scanned tree into an ordered documentation plan."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, List, Sequence

from .classifier import Classifier
from .logging import get_logger
from .models import RELEVANT_CATEGORIES, Category, DocPlan, DocTarget, FileRecord
from .path_matcher import normalize_path
from .repo_scanner import TreeWalker
from .routing import RouteResolver
from .sidebar import SidebarBuilder
from .slugs import SlugAllocator


def group_by_category(records: Iterable[FileRecord]) -> Dict[Category, List[FileRecord]]:
    """Relevant records by category in canonical order; empty categories omitted."""
    grouped: Dict[Category, List[FileRecord]] = {category: [] for category in RELEVANT_CATEGORIES}
    for record in records:
        if record.category in grouped:
            grouped[record.category].append(record)
    return {category: members for category, members in grouped.items() if members}


def _within(relative_path: str, prefixes: Sequence[str]) -> bool:
    for prefix in prefixes:
        if relative_path == prefix or relative_path.startswith(prefix + "/"):
            return True
    return False


class DocPlanner:
    """Runs walker, classifier, route resolver, slug allocator and sidebar builder."""

    def __init__(
        self,
        walker: TreeWalker | None = None,
        classifier: Classifier | None = None,
        resolver: RouteResolver | None = None,
        sidebar_builder: SidebarBuilder | None = None,
    ) -> None:
        self.walker = walker or TreeWalker()
        self.classifier = classifier or Classifier()
        self.resolver = resolver or RouteResolver()
        self.sidebar_builder = sidebar_builder or SidebarBuilder()
        self.logger = get_logger("planner")

    def plan(self, root: str | Path | None = None, *, include: Sequence[str] = ()) -> DocPlan:
        root_path = Path(root if root is not None else Path.cwd()).expanduser().resolve()
        paths = self.walker.walk(root_path)
        self.logger.info("Found %d files under %s", len(paths), root_path)

        records = self.classifier.classify_files(paths, root_path)
        prefixes = [normalize_path(prefix).strip("/") for prefix in include if prefix.strip("/")]
        if prefixes:
            records = [record for record in records if _within(record.relative_path, prefixes)]
        return self.plan_records(records, root=str(root_path))

    def plan_records(self, records: Iterable[FileRecord], *, root: str = "") -> DocPlan:
        # Collision suffixes depend on order, so pin it independent of the filesystem.
        ordered = sorted(records, key=lambda record: record.relative_path)
        allocator = SlugAllocator()
        targets: List[DocTarget] = []
        for members in group_by_category(ordered).values():
            for record in members:
                route = self.resolver.resolve(record)
                targets.append(DocTarget(record=record, route=route, slug=allocator.allocate(record, route)))

        sidebar = self.sidebar_builder.build(targets)
        plan = DocPlan(root=root, records=ordered, targets=targets, sidebar=sidebar)
        self.logger.debug("Planned %d documentation targets", len(targets))
        return plan


__all__ = ["DocPlanner", "group_by_category"]
