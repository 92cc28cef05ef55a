"""Per-file documentation drafting with a structured fallback."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .content import add_frontmatter, build_fallback_doc
from .llm.runner import LLMRunner
from .logging import get_logger
from .models import DocTarget
from .prompting.builder import PromptBuilder


@dataclass
class GeneratedDoc:
    target: DocTarget
    path: Path
    fallback: bool


class DocGenerator:
    """Drafts Markdown for documentation targets and writes it to disk."""

    def __init__(
        self,
        runner: Optional[LLMRunner],
        prompt_builder: PromptBuilder,
    ) -> None:
        self.runner = runner
        self.prompt_builder = prompt_builder
        self.logger = get_logger("generator")

    def generate(self, target: DocTarget) -> tuple[str, bool]:
        """Return ``(markdown, used_fallback)`` for one target."""
        if self.runner is None:
            return add_frontmatter(build_fallback_doc(target), target), True

        prompt = self.prompt_builder.build(target.record, target.route)
        try:
            drafted = self.runner.run(prompt.text, system=prompt.system)
        except RuntimeError as exc:
            self.logger.warning(
                "Model call failed for %s, using fallback structure: %s",
                target.record.relative_path,
                exc,
            )
            return add_frontmatter(build_fallback_doc(target), target), True
        return add_frontmatter(drafted, target), False

    def write_all(self, targets: List[DocTarget], docs_dir: Path) -> tuple[List[GeneratedDoc], List[str]]:
        """Write every target under ``docs_dir``; returns written docs and failed paths."""
        written: List[GeneratedDoc] = []
        failed: List[str] = []
        for target in targets:
            destination = docs_dir / target.doc_path
            try:
                markdown, fallback = self.generate(target)
                destination.parent.mkdir(parents=True, exist_ok=True)
                destination.write_text(markdown, encoding="utf-8")
            except OSError as exc:
                self.logger.error("Failed to process %s: %s", target.record.file_name, exc)
                failed.append(target.record.relative_path)
                continue
            doc = GeneratedDoc(target=target, path=destination, fallback=fallback)
            written.append(doc)
            self.logger.info("Generated %s", target.doc_path)
        return written, failed


__all__ = ["DocGenerator", "GeneratedDoc"]
