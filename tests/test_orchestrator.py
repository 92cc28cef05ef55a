"""Tests for zendoc.orchestrator."""

from __future__ import annotations

from pathlib import Path

import pytest

from zendoc.config import ConfigError
from zendoc.llm.runner import LLMRunner
from zendoc.orchestrator import Orchestrator


class RecordingLLMRunner(LLMRunner):
    """Runner that captures prompts instead of calling a model."""

    def __init__(self, response: str = "# Drafted docs") -> None:
        super().__init__("test-model", base_url="http://llm.invalid", runner=self._respond)
        self.prompts: list[str] = []
        self.response = response

    def _respond(self, request) -> str:
        self.prompts.append(request.prompt)
        return self.response


class RecordingCommands:
    def __init__(self) -> None:
        self.calls: list[list[str]] = []

    def __call__(self, args) -> None:
        self.calls.append(list(args))


def _site_docs(root: Path) -> Path:
    return root / "docs" / "src" / "content" / "docs"


@pytest.fixture
def configured_app(next_app):
    next_app.write({".zendoc.yml": "project_name: Demo\nauthor: Jo\n"})
    return next_app


def test_run_generate_publishes_site(configured_app) -> None:
    runner = RecordingLLMRunner()
    commands = RecordingCommands()
    orchestrator = Orchestrator(llm_runner=runner, command_runner=commands, environ={})

    outcome = orchestrator.run_generate(configured_app.path())

    root = configured_app.path().resolve()
    docs = _site_docs(root)
    assert outcome.output_dir == root / "docs"
    assert runner.prompts[0] == LLMRunner.PROBE_PROMPT
    assert len(runner.prompts) == 1 + 7
    assert commands.calls and commands.calls[0][1] == "create"
    assert outcome.failed == []
    assert outcome.fallbacks == []
    assert outcome.translated is False
    assert sorted(path.relative_to(docs).as_posix() for path in outcome.written) == [
        "api/delete-delete-users.md",
        "api/get-all-users.md",
        "components/Button-component.md",
        "lib/format-utility.md",
        "pages/about-page.md",
        "pages/blog-slug-page.md",
        "pages/index-page.md",
    ]
    assert all(path.exists() for path in outcome.written)
    assert (docs / "index.mdx").exists()
    assert (docs / "getting-started" / "index.md").exists()
    assert (docs / "components" / "index.md").exists()
    assert '"label": "API Routes"' in (root / "docs" / "astro.config.mjs").read_text(encoding="utf-8")
    assert not list(root.glob("temp-zendoc-*"))


def test_second_run_ignores_generated_site(configured_app) -> None:
    orchestrator = Orchestrator(
        llm_runner=RecordingLLMRunner(), command_runner=RecordingCommands(), environ={}
    )
    first = orchestrator.run_generate(configured_app.path())
    second = orchestrator.run_generate(configured_app.path())

    assert [p.name for p in first.written] == [p.name for p in second.written]
    plan = orchestrator.plan(configured_app.path())
    assert not any(r.relative_path.startswith("docs/") for r in plan.records)


def test_offline_run_writes_fallback_docs_without_credentials(configured_app) -> None:
    orchestrator = Orchestrator(command_runner=RecordingCommands(), environ={})

    outcome = orchestrator.run_generate(configured_app.path(), offline=True)

    assert len(outcome.fallbacks) == 7
    text = (_site_docs(configured_app.path().resolve()) / "lib" / "format-utility.md").read_text(
        encoding="utf-8"
    )
    assert "## Function Signature" in text


def test_missing_api_key_aborts_before_writing(configured_app) -> None:
    commands = RecordingCommands()
    orchestrator = Orchestrator(command_runner=commands, environ={})

    with pytest.raises(RuntimeError, match="API key"):
        orchestrator.run_generate(configured_app.path())

    assert commands.calls == []
    assert not (configured_app.path() / "docs").exists()


def test_failed_probe_aborts(configured_app) -> None:
    def broken(request):
        raise RuntimeError("403 forbidden")

    runner = LLMRunner("m", base_url="http://llm.invalid", runner=broken)
    orchestrator = Orchestrator(llm_runner=runner, command_runner=RecordingCommands(), environ={})
    with pytest.raises(RuntimeError, match="connection check failed"):
        orchestrator.run_generate(configured_app.path())


def test_generate_requires_config(next_app) -> None:
    with pytest.raises(ConfigError, match="zendoc init"):
        Orchestrator(environ={}).run_generate(next_app.path())


def test_generate_requires_documentable_files(repo_builder) -> None:
    repo_builder.write({".zendoc.yml": "project_name: Empty\n", "README.md": "# hi\n"})
    with pytest.raises(ConfigError, match="No components"):
        Orchestrator(environ={}).run_generate(repo_builder.path(), offline=True)


def test_generate_translates_when_enabled(configured_app) -> None:
    configured_app.write(
        {".zendoc.yml": "project_name: Demo\ntranslation:\n  enabled: true\n  languages: [es]\n"}
    )
    seen = []

    def localize(text: str, source: str, target: str) -> str:
        seen.append(target)
        return text

    orchestrator = Orchestrator(
        llm_runner=RecordingLLMRunner(),
        command_runner=RecordingCommands(),
        localize=localize,
        environ={},
    )
    outcome = orchestrator.run_generate(configured_app.path())

    docs = _site_docs(configured_app.path().resolve())
    assert outcome.translated is True
    assert set(seen) == {"es"}
    translated = (docs / "es" / "components" / "Button-component.md").read_text(encoding="utf-8")
    assert translated.startswith("---\nlang: es\n")
    assert "locales" in (configured_app.path() / "docs" / "astro.config.mjs").read_text(encoding="utf-8")


def test_translation_without_key_is_skipped(configured_app) -> None:
    configured_app.write(
        {".zendoc.yml": "translation:\n  enabled: true\n  languages: [fr]\n"}
    )
    orchestrator = Orchestrator(
        llm_runner=RecordingLLMRunner(), command_runner=RecordingCommands(), environ={}
    )
    outcome = orchestrator.run_generate(configured_app.path())
    assert outcome.translated is False
    assert not (_site_docs(configured_app.path().resolve()) / "fr").exists()


def test_plan_applies_config_filters(configured_app) -> None:
    configured_app.write(
        {".zendoc.yml": "include: [app]\nexclude_paths: ['app/blog/']\nclassify_workers: 2\n"}
    )
    plan = Orchestrator(environ={}).plan(configured_app.path())

    assert sorted(t.record.relative_path for t in plan.targets) == [
        "app/(marketing)/about/page.tsx",
        "app/api/users/[id]/route.ts",
        "app/api/users/route.ts",
        "app/page.tsx",
    ]


def test_plan_rejects_missing_path(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        Orchestrator(environ={}).plan(tmp_path / "missing")


@pytest.mark.parametrize("output_dir", ["./site", "site/", "{root}/site"])
def test_plan_skips_output_dir_however_it_is_spelled(repo_builder, output_dir: str) -> None:
    root = repo_builder.path()
    repo_builder.write(
        {
            ".zendoc.yml": f"output_dir: '{output_dir.format(root=root.as_posix())}'\n",
            "site/src/components/Hero.tsx": "export const Hero = () => null;\n",
            "lib/a.ts": "export const a = 1;\n",
        }
    )

    plan = Orchestrator(environ={}).plan(root)

    assert [t.record.relative_path for t in plan.targets] == ["lib/a.ts"]
