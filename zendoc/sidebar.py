"""Navigation tree construction for the documentation site."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List

from .models import (
    CATEGORY_TITLES,
    RELEVANT_CATEGORIES,
    Category,
    DocTarget,
    SidebarGroup,
    SidebarItem,
)


def item_label(target: DocTarget) -> str:
    route = target.route
    if target.category is Category.API and route is not None and route.http_method:
        return f"{route.http_method.upper()} {route.public_path}"
    return target.record.stem


class SidebarBuilder:
    """Groups documentation targets by category in canonical order."""

    def build(self, targets: Iterable[DocTarget]) -> List[SidebarGroup]:
        groups: Dict[Category, SidebarGroup] = {
            category: SidebarGroup(label=CATEGORY_TITLES[category], category=category)
            for category in RELEVANT_CATEGORIES
        }
        for target in targets:
            group = groups.get(target.category)
            if group is None:
                continue
            group.items.append(SidebarItem(label=item_label(target), slug=target.sidebar_slug))
        return [groups[category] for category in RELEVANT_CATEGORIES if groups[category].items]

    @staticmethod
    def to_config(groups: Iterable[SidebarGroup]) -> List[Dict[str, Any]]:
        return [group.to_dict() for group in groups]


__all__ = ["SidebarBuilder", "item_label"]
