"""Pipeline orchestration for the plan and generate flows."""

from __future__ import annotations

import shutil
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping

from .classifier import Classifier
from .config import ConfigError, ZenDocConfig, load_config
from .generator import DocGenerator
from .llm.runner import LLMRunner
from .logging import get_logger
from .models import DocPlan
from .path_matcher import DEFAULT_IGNORES, normalize_path
from .planner import DocPlanner
from .prompting.builder import PromptBuilder
from .repo_scanner import TreeWalker
from .routing import STAGING_PREFIX
from .site.astro import CONTENT_SUBDIR, CommandRunner, SiteAssembler
from .translation import DocumentationTranslator, LocalizeFn


@dataclass
class GenerateOutcome:
    """Result of a documentation generation run."""

    output_dir: Path
    written: List[Path] = field(default_factory=list)
    fallbacks: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    translated: bool = False


class Orchestrator:
    """Coordinates scanning, drafting, site assembly and translation."""

    def __init__(
        self,
        *,
        llm_runner: LLMRunner | None = None,
        command_runner: CommandRunner | None = None,
        localize: LocalizeFn | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._llm_runner = llm_runner
        self._command_runner = command_runner
        self._localize = localize
        self._environ = environ
        self.logger = get_logger("orchestrator")

    def load_config(self, path: str | Path, *, required: bool = False) -> ZenDocConfig:
        repo_path = Path(path).expanduser().resolve()
        if not repo_path.exists():
            raise FileNotFoundError(f"Project path does not exist: {repo_path}")
        if not repo_path.is_dir():
            raise NotADirectoryError(f"Project path is not a directory: {repo_path}")
        return load_config(repo_path, environ=self._environ, required=required)

    def planner_for(self, config: ZenDocConfig) -> DocPlanner:
        # Keep the tool's own output and staging trees out of the scan.
        extra = [f"{STAGING_PREFIX}*"]
        output_pattern = _output_pattern(config)
        if output_pattern:
            extra.append(output_pattern)
        extra.extend(config.exclude_paths)
        walker = TreeWalker(DEFAULT_IGNORES, extra_patterns=extra)
        return DocPlanner(walker=walker, classifier=Classifier(max_workers=config.classify_workers))

    def plan(self, path: str | Path, config: ZenDocConfig | None = None) -> DocPlan:
        """Scan and classify ``path`` without contacting any service."""
        config = config or self.load_config(path)
        return self.planner_for(config).plan(config.root, include=config.include)

    def run_generate(self, path: str | Path = ".", *, offline: bool = False) -> GenerateOutcome:
        """Generate the documentation site for the repository at ``path``."""
        config = self.load_config(path, required=True)
        repo_path = config.root
        self.logger.info("Starting generate run for %s", repo_path)

        plan = self.plan(repo_path, config)
        counts = plan.category_counts()
        for category, count in sorted(counts.items()):
            self.logger.info("  %s: %d files", category, count)
        if not plan.targets:
            raise ConfigError(
                "No components, pages, API routes or libraries were found to document."
            )

        runner = None if offline else self._resolve_runner(config)
        assembler = SiteAssembler(config, command_runner=self._command_runner)
        output_dir = config.output_path
        assembler.ensure_project(output_dir)

        staging_dir = repo_path / f"{STAGING_PREFIX}{time.time_ns()}"
        docs_dir = staging_dir / CONTENT_SUBDIR
        outcome = GenerateOutcome(output_dir=output_dir)
        try:
            generator = DocGenerator(
                runner,
                PromptBuilder(project_name=config.display_name, author=config.author),
            )
            written, failed = generator.write_all(plan.targets, docs_dir)
            outcome.written = [doc.path for doc in written]
            outcome.fallbacks = [doc.target.record.relative_path for doc in written if doc.fallback]
            outcome.failed = failed

            assembler.write_category_indexes(plan, docs_dir)
            assembler.write_landing_pages(plan, docs_dir)

            outcome.translated = self._translate(config, docs_dir)
            assembler.write_astro_config(plan, staging_dir, with_locales=outcome.translated)

            published = assembler.publish(staging_dir, output_dir)
        finally:
            if staging_dir.exists():
                shutil.rmtree(staging_dir, ignore_errors=True)

        outcome.written = [published / path.relative_to(docs_dir) for path in outcome.written]
        self.logger.info(
            "Documentation generated: %d files (%d fallback, %d failed) in %s",
            len(outcome.written),
            len(outcome.fallbacks),
            len(outcome.failed),
            output_dir,
        )
        return outcome

    def _resolve_runner(self, config: ZenDocConfig) -> LLMRunner:
        runner = self._llm_runner or LLMRunner.from_config(config.llm)
        runner.check()
        self.logger.info("Model connection successful (%s)", runner.model)
        return runner

    def _translate(self, config: ZenDocConfig, docs_dir: Path) -> bool:
        translation = config.translation
        if not translation.enabled:
            return False
        if not translation.languages or not (translation.api_key or self._localize):
            self.logger.warning(
                "Translation skipped: configure translation.languages and LINGO_API_KEY"
            )
            return False

        try:
            translator = DocumentationTranslator.from_config(translation, self._localize)
            report = translator.translate_tree(docs_dir)
        except RuntimeError as exc:
            self.logger.error("Translation failed: %s", exc)
            return False
        self.logger.info(
            "Translated %d documents into %s", report.completed, ", ".join(translator.languages)
        )
        return report.completed > 0


def _output_pattern(config: ZenDocConfig) -> str | None:
    try:
        relative = config.output_path.relative_to(config.root.resolve())
    except ValueError:
        return None
    pattern = normalize_path(relative.as_posix())
    if not pattern or pattern == ".":
        return None
    return pattern + "/"


__all__ = ["GenerateOutcome", "Orchestrator"]
