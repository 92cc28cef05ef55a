"""Builds per-file documentation prompts from Jinja2 templates."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateNotFound

from ..models import Category, FileRecord, RouteInfo

LANGUAGE_BY_EXTENSION: Dict[str, str] = {
    "ts": "typescript",
    "tsx": "typescript",
    "js": "javascript",
    "jsx": "javascript",
    "mjs": "javascript",
    "cjs": "javascript",
    "json": "json",
    "yaml": "yaml",
    "yml": "yaml",
    "md": "markdown",
    "mdx": "markdown",
    "css": "css",
    "py": "python",
    "txt": "text",
}

_TEMPLATE_BY_CATEGORY: Dict[Category, str] = {
    Category.COMPONENTS: "components.j2",
    Category.PAGES: "pages.j2",
    Category.API: "api.j2",
    Category.LIB: "lib.j2",
    Category.CONFIG: "default.j2",
    Category.OTHER: "default.j2",
}


def language_for(extension: str) -> str:
    return LANGUAGE_BY_EXTENSION.get(extension.lower(), "text")


@dataclass(frozen=True)
class Prompt:
    """Rendered prompt plus the system message sent with it."""

    system: str
    text: str


class PromptBuilder:
    """Renders the category prompt for a FileRecord."""

    SYSTEM_PROMPT = (
        "You are a senior developer documentation writer. Stay grounded in the "
        "provided source file and never invent APIs, props or commands."
    )

    def __init__(
        self,
        templates_dir: Path | None = None,
        *,
        project_name: str = "",
        author: str = "",
    ) -> None:
        self.templates_dir = templates_dir or Path(__file__).with_name("templates")
        self.project_name = project_name
        self.author = author
        self._env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )

    def build(self, record: FileRecord, route: Optional[RouteInfo] = None) -> Prompt:
        template_name = _TEMPLATE_BY_CATEGORY[record.category]
        try:
            template = self._env.get_template(template_name)
        except TemplateNotFound:
            template = self._env.get_template("default.j2")
        text = template.render(
            project_name=self.project_name or "this",
            author=self.author,
            category=record.category.value,
            record=record,
            route=route,
            language=language_for(record.extension),
        )
        return Prompt(system=self.SYSTEM_PROMPT, text=text.strip() + "\n")


__all__ = ["LANGUAGE_BY_EXTENSION", "Prompt", "PromptBuilder", "language_for"]
