"""Post-processing of generated Markdown and deterministic fallback docs."""

from __future__ import annotations

import re
from typing import Dict, Optional

import yaml

from .models import Category, DocTarget, FileRecord, RouteInfo
from .prompting.builder import language_for
from .routing import route_segments

_CODE_FENCE_WRAPPER = re.compile(r"^```(?:markdown|md)?\n(.*?)\n?```\s*$", re.DOTALL)
_FIRST_LINE_COMMENT = re.compile(r"//\s*([^\n]+)")
_JSDOC_BLOCK = re.compile(r"/\*\*(.*?)\*/", re.DOTALL)

_DOC_SECTIONS: Dict[Category, tuple[tuple[str, str], ...]] = {
    Category.COMPONENTS: (
        ("Props", "Props documentation will be generated here"),
        ("Examples", "Usage examples will be generated here"),
        ("Accessibility", "Accessibility features will be documented here"),
        ("Dependencies", "Dependencies will be listed here"),
    ),
    Category.PAGES: (
        ("Route Information", "Route details will be documented here"),
        ("Data Flow", "Data fetching and state management will be documented here"),
        ("User Interactions", "User interactions will be documented here"),
        ("SEO", "SEO considerations will be documented here"),
    ),
    Category.API: (
        ("Endpoint Information", "Endpoint details will be documented here"),
        ("Request Format", "Request parameters and body will be documented here"),
        ("Response Format", "Response structure will be documented here"),
        ("Examples", "Request/response examples will be generated here"),
        ("Error Handling", "Error scenarios will be documented here"),
    ),
    Category.LIB: (
        ("Function Signature", "Function signature will be documented here"),
        ("Parameters", "Parameters will be documented here"),
        ("Return Value", "Return value will be documented here"),
        ("Examples", "Usage examples will be generated here"),
        ("Edge Cases", "Edge cases and error handling will be documented here"),
    ),
    Category.CONFIG: (),
    Category.OTHER: (),
}


def clean_generated(content: str) -> str:
    """Strip a wrapping code fence and the noise models sometimes emit."""
    text = content.strip()
    match = _CODE_FENCE_WRAPPER.match(text)
    if match:
        text = match.group(1)

    text = re.sub(r"={50,}", "", text)
    text = re.sub(r"[ \t]{20,}", " ", text)
    text = re.sub(r"^[=\-*_]{10,}$", "", text, flags=re.MULTILINE)
    text = re.sub(r"-{10,}", "---", text)
    text = re.sub(r"\n\s*\n\s*\n+", "\n\n", text)
    return text.strip()


def add_frontmatter(content: str, target: DocTarget) -> str:
    """Prefix Starlight frontmatter (title, description) to cleaned content."""
    title = target.record.stem
    description = describe_file(target.record, target.route)
    body = clean_generated(content)
    frontmatter = yaml.safe_dump(
        {"title": title, "description": description},
        sort_keys=False,
        allow_unicode=True,
        width=float("inf"),
    )
    return f"---\n{frontmatter}---\n\n{body}\n"


def _leading_comment(content: str) -> Optional[str]:
    match = _FIRST_LINE_COMMENT.search(content)
    if not match:
        return None
    comment = match.group(1).strip()
    return comment[:100] + "..." if len(comment) > 100 else comment


def _api_description(record: FileRecord, route: Optional[RouteInfo]) -> str:
    if route is None or not route.http_method or route.public_path == "/":
        return f"{record.stem} API endpoint - Server-side API route"

    method = route.http_method.upper()
    path = route.public_path
    comment = _leading_comment(record.content)
    if comment:
        return f"{method} {path} - {comment}"

    parts = route_segments(path)
    if len(parts) >= 2 and parts[0] == "api":
        resource = parts[1]
        has_id = len(parts) == 3 and parts[2].startswith(":")
        if len(parts) == 2 and method == "GET":
            return f"{method} {path} - Retrieve all {resource}"
        if len(parts) == 2 and method == "POST":
            return f"{method} {path} - Create new {resource}"
        if has_id and method == "GET":
            return f"{method} {path} - Retrieve {resource} by ID"
        if has_id and method == "PUT":
            return f"{method} {path} - Update {resource} by ID"
        if has_id and method == "DELETE":
            return f"{method} {path} - Delete {resource} by ID"
        if len(parts) >= 3:
            return f"{method} {path} - {parts[2]} {resource}"
    return f"{method} {path} - API endpoint"


def _page_description(record: FileRecord, route: Optional[RouteInfo]) -> str:
    if route is None:
        return f"{record.stem} page - Application page component"

    path = route.public_path
    comment = _leading_comment(record.content)
    if comment:
        return f"{path} - {comment}"

    parts = route_segments(path)
    if not parts:
        return "/ - Home page"
    last = parts[-1]
    parent = "/" + "/".join(parts[:-1])
    if last.startswith(":"):
        return f"{parent.rstrip('/')}/[{last[1:]}] - Dynamic page for {last[1:]}"
    if last.startswith("*"):
        return f"{parent.rstrip('/')}/[...{last[1:]}] - Catch-all page for {last[1:]}"
    return f"{path} - Page component"


def describe_file(record: FileRecord, route: Optional[RouteInfo] = None) -> str:
    """One-line description used in frontmatter and category indexes."""
    category = record.category
    if category is Category.COMPONENTS:
        return f"{record.stem} component - A reusable UI component"
    if category is Category.PAGES:
        return _page_description(record, route)
    if category is Category.API:
        return _api_description(record, route)
    if category is Category.LIB:
        return f"{record.stem} utility - Helper functions and utilities"
    return f"Documentation for {record.stem}"


def _summary(content: str) -> str:
    jsdoc = _JSDOC_BLOCK.search(content)
    if jsdoc:
        lines = [line.strip().lstrip("*").strip() for line in jsdoc.group(1).splitlines()]
        text = "\n".join(line for line in lines if line)
        if text:
            return text
    comment = _FIRST_LINE_COMMENT.search(content)
    if comment:
        return comment.group(1).strip()
    return "*Documentation will be generated here*"


def build_fallback_doc(target: DocTarget) -> str:
    """Structured document used when the model cannot be reached."""
    record = target.record
    language = language_for(record.extension)
    lines = [
        f"# {record.stem}",
        "",
        f"**File:** `{record.relative_path}`",
        f"**Category:** {record.category.value}",
        f"**Language:** {language}",
    ]
    route = target.route
    if route is not None:
        route_line = route.public_path
        if route.http_method:
            route_line = f"{route.http_method.upper()} {route_line}"
        lines.append(f"**Route:** `{route_line}`")
    lines.extend(["", "## Description", "", _summary(record.content), ""])
    lines.extend(["## Source Code", "", f"```{language}", record.content.rstrip("\n"), "```", ""])
    for title, placeholder in _DOC_SECTIONS[record.category]:
        lines.extend([f"## {title}", "", f"*{placeholder}*", ""])
    return "\n".join(lines).rstrip() + "\n"


__all__ = [
    "add_frontmatter",
    "build_fallback_doc",
    "clean_generated",
    "describe_file",
]
