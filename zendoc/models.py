"""Core data models shared across zendoc components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class Category(str, Enum):
    """Closed set of buckets a scanned file can fall into."""

    COMPONENTS = "components"
    PAGES = "pages"
    API = "api"
    LIB = "lib"
    CONFIG = "config"
    OTHER = "other"

    def __str__(self) -> str:
        return self.value

    @property
    def is_relevant(self) -> bool:
        return self in RELEVANT_CATEGORIES


# Canonical order used for grouping, sidebar groups and generation.
RELEVANT_CATEGORIES: tuple[Category, ...] = (
    Category.COMPONENTS,
    Category.PAGES,
    Category.API,
    Category.LIB,
)

CATEGORY_TITLES: Dict[Category, str] = {
    Category.COMPONENTS: "Components",
    Category.PAGES: "Pages",
    Category.API: "API Routes",
    Category.LIB: "Libraries & Utilities",
    Category.CONFIG: "Configuration",
    Category.OTHER: "Other",
}

CATEGORY_DESCRIPTIONS: Dict[Category, str] = {
    Category.COMPONENTS: "Reusable UI components used throughout the application.",
    Category.PAGES: "Page components and routing logic.",
    Category.API: "API endpoints and server-side logic.",
    Category.LIB: "Utility functions, helpers, and shared libraries.",
    Category.CONFIG: "Project configuration files.",
    Category.OTHER: "Files that do not fit another category.",
}


@dataclass(frozen=True)
class FileRecord:
    """A discovered source file together with its content and category."""

    absolute_path: str
    relative_path: str
    file_name: str
    extension: str
    content: str
    category: Category

    @property
    def stem(self) -> str:
        """File name without its final extension."""
        if "." in self.file_name.lstrip("."):
            return self.file_name.rsplit(".", 1)[0]
        return self.file_name


@dataclass(frozen=True)
class RouteInfo:
    """Route derived from a page or API file's location."""

    route_path: str
    public_path: str
    http_method: Optional[str] = None


@dataclass(frozen=True)
class DocTarget:
    """A relevant record paired with its route and allocated output slug."""

    record: FileRecord
    route: Optional[RouteInfo]
    slug: str

    @property
    def category(self) -> Category:
        return self.record.category

    @property
    def sidebar_slug(self) -> str:
        return f"{self.record.category.value}/{self.slug}"

    @property
    def doc_path(self) -> str:
        return f"{self.sidebar_slug}.md"


@dataclass(frozen=True)
class SidebarItem:
    label: str
    slug: str

    def to_dict(self) -> Dict[str, str]:
        return {"label": self.label, "slug": self.slug}


@dataclass
class SidebarGroup:
    label: str
    category: Category
    items: List[SidebarItem] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"label": self.label, "items": [item.to_dict() for item in self.items]}


@dataclass
class DocPlan:
    """Everything the collaborators need from one scan of a repository."""

    root: str
    records: List[FileRecord]
    targets: List[DocTarget]
    sidebar: List[SidebarGroup]

    def grouped(self) -> Dict[Category, List[DocTarget]]:
        """Return targets by relevant category, skipping empty categories."""
        grouped: Dict[Category, List[DocTarget]] = {}
        for category in RELEVANT_CATEGORIES:
            members = [target for target in self.targets if target.category is category]
            if members:
                grouped[category] = members
        return grouped

    def category_counts(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for record in self.records:
            counts[record.category.value] = counts.get(record.category.value, 0) + 1
        return counts
