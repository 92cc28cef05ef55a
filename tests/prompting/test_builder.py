"""Tests for the prompt builder."""

from __future__ import annotations

from pathlib import Path

from zendoc.models import Category, FileRecord, RouteInfo
from zendoc.prompting.builder import PromptBuilder, language_for


def _record(relative_path: str, category: Category, content: str = "export {}\n") -> FileRecord:
    file_name = relative_path.rsplit("/", 1)[-1]
    return FileRecord(
        absolute_path=f"/repo/{relative_path}",
        relative_path=relative_path,
        file_name=file_name,
        extension=file_name.rsplit(".", 1)[-1],
        content=content,
        category=category,
    )


def test_component_prompt_includes_file_and_requirements() -> None:
    builder = PromptBuilder(project_name="Acme", author="Jo")
    record = _record("components/Button.tsx", Category.COMPONENTS, "export const Button = 1\n")

    prompt = builder.build(record)

    assert "PROJECT: Acme" in prompt.text
    assert "AUTHOR: Jo" in prompt.text
    assert "FILE: components/Button.tsx" in prompt.text
    assert "```typescript\nexport const Button = 1\n" in prompt.text
    assert "Props Interface" in prompt.text
    assert "ROUTE:" not in prompt.text
    assert prompt.system == PromptBuilder.SYSTEM_PROMPT


def test_api_prompt_mentions_route_and_method() -> None:
    record = _record("app/api/users/route.ts", Category.API)
    route = RouteInfo("/app/api/users/route", "/api/users", "post")

    prompt = PromptBuilder().build(record, route)

    assert "ROUTE: POST /api/users" in prompt.text
    assert "Endpoint Overview" in prompt.text
    assert "PROJECT: this" in prompt.text


def test_every_category_renders() -> None:
    builder = PromptBuilder()
    for category in Category:
        prompt = builder.build(_record("x/file.ts", category))
        assert "FILE: x/file.ts" in prompt.text


def test_custom_templates_dir_falls_back_to_default(tmp_path: Path) -> None:
    (tmp_path / "default.j2").write_text("custom {{ record.file_name }}", encoding="utf-8")
    prompt = PromptBuilder(tmp_path).build(_record("lib/db.ts", Category.LIB))
    assert prompt.text == "custom db.ts\n"


def test_language_for() -> None:
    assert language_for("TSX") == "typescript"
    assert language_for("mjs") == "javascript"
    assert language_for("rs") == "text"
