"""Localization of generated documentation through a translation engine."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from .config import TranslationConfig
from .logging import get_logger

LocalizeFn = Callable[[str, str, str], str]
"""``localize(text, source_locale, target_locale) -> translated text``."""

MAX_CHUNK_CHARS = 2000
TRANSLATABLE_SUFFIXES = (".md", ".mdx")

_FRONTMATTER = re.compile(r"^---\n(.*?)\n---\n(.*)$", re.DOTALL)
_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")
_SENTENCE_BREAK = re.compile(r"(?<=[.!?])\s+")
_LANG_LINE = re.compile(r"^lang:\s*\S+$", re.MULTILINE)


class LingoClient:
    """Minimal HTTP client for the Lingo.dev localization engine."""

    def __init__(self, api_key: str, *, base_url: str = "https://engine.lingo.dev", timeout: float = 60.0) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def __call__(self, text: str, source_locale: str, target_locale: str) -> str:
        payload = {
            "params": {"fast": False},
            "locale": {"source": source_locale, "target": target_locale},
            "data": {"text": text},
        }
        request = Request(
            f"{self.base_url}/i18n",
            data=json.dumps(payload).encode("utf-8"),
            headers={
                "Content-Type": "application/json; charset=utf-8",
                "Authorization": f"Bearer {self.api_key}",
            },
            method="POST",
        )
        try:
            with urlopen(request, timeout=self.timeout) as response:
                raw = response.read()
        except HTTPError as exc:
            raise RuntimeError(f"Translation request failed with status {exc.code}: {exc.reason}") from exc
        except URLError as exc:
            raise RuntimeError(f"Translation request failed: {exc.reason}") from exc

        try:
            body = json.loads(raw.decode("utf-8"))
        except json.JSONDecodeError as exc:
            raise RuntimeError("Translation engine returned invalid JSON") from exc
        data = body.get("data") if isinstance(body, dict) else None
        translated = data.get("text") if isinstance(data, dict) else None
        if not isinstance(translated, str):
            raise RuntimeError("Translation engine response is missing data.text")
        return translated


def split_frontmatter(content: str) -> Tuple[str, str]:
    match = _FRONTMATTER.match(content)
    if match:
        return match.group(1), match.group(2)
    return "", content


def set_lang(frontmatter: str, language: str) -> str:
    line = f"lang: {language}"
    if _LANG_LINE.search(frontmatter):
        return _LANG_LINE.sub(line, frontmatter)
    return f"{line}\n{frontmatter}" if frontmatter else line


def join_frontmatter(frontmatter: str, markdown: str) -> str:
    if frontmatter:
        return f"---\n{frontmatter}\n---\n\n{markdown}"
    return markdown


def split_chunks(content: str, limit: int = MAX_CHUNK_CHARS) -> List[str]:
    """Group paragraphs into chunks of at most ``limit`` characters.

    A single paragraph longer than ``limit`` is split on sentence boundaries.
    """
    chunks: List[str] = []
    current = ""
    for paragraph in _PARAGRAPH_BREAK.split(content):
        if len(current) + len(paragraph) > limit:
            if current:
                chunks.append(current.strip())
                current = ""
            if len(paragraph) > limit:
                chunks.extend(s for s in _SENTENCE_BREAK.split(paragraph) if s.strip())
                continue
        current = f"{current}\n\n{paragraph}" if current else paragraph
    if current.strip():
        chunks.append(current.strip())
    return chunks


@dataclass
class TranslationReport:
    completed: int = 0
    failed: List[str] = field(default_factory=list)


class DocumentationTranslator:
    """Writes ``<docs>/<lang>/<same path>`` copies of every Markdown page."""

    def __init__(
        self,
        languages: Sequence[str],
        localize: LocalizeFn,
        *,
        source_locale: str = "en",
    ) -> None:
        self.languages = [lang for lang in languages if lang and lang != source_locale]
        self.localize = localize
        self.source_locale = source_locale
        self.logger = get_logger("translation")

    @classmethod
    def from_config(cls, config: TranslationConfig, localize: Optional[LocalizeFn] = None) -> "DocumentationTranslator":
        if localize is None:
            if not config.api_key:
                raise RuntimeError("Translation is enabled but no LINGO_API_KEY is configured.")
            localize = LingoClient(config.api_key, base_url=config.base_url)
        return cls(config.languages, localize, source_locale=config.source_locale)

    def collect_files(self, docs_dir: Path) -> List[Path]:
        """Markdown files below ``docs_dir``, skipping hidden and language folders."""
        skipped = set(self.languages) | {self.source_locale}
        files: List[Path] = []
        try:
            entries = sorted(docs_dir.iterdir())
        except OSError as exc:
            self.logger.warning("Could not read directory %s: %s", docs_dir, exc)
            return files
        for entry in entries:
            if entry.name.startswith("."):
                continue
            if entry.is_dir():
                if entry.name not in skipped:
                    files.extend(self._collect_nested(entry))
            elif entry.suffix in TRANSLATABLE_SUFFIXES:
                files.append(entry)
        return files

    def _collect_nested(self, directory: Path) -> List[Path]:
        return sorted(
            path
            for path in directory.rglob("*")
            if path.is_file() and path.suffix in TRANSLATABLE_SUFFIXES
            and not any(part.startswith(".") for part in path.relative_to(directory).parts)
        )

    def translate_markdown(self, markdown: str, language: str) -> str:
        translated: List[str] = []
        for chunk in split_chunks(markdown):
            try:
                translated.append(self.localize(chunk, self.source_locale, language))
            except RuntimeError as exc:
                self.logger.warning("Chunk translation to %s failed, keeping original: %s", language, exc)
                translated.append(chunk)
        return "\n\n".join(translated)

    def translate_content(self, content: str, language: str) -> str:
        frontmatter, markdown = split_frontmatter(content)
        return join_frontmatter(set_lang(frontmatter, language), self.translate_markdown(markdown, language))

    def translate_tree(self, docs_dir: Path) -> TranslationReport:
        report = TranslationReport()
        files = self.collect_files(docs_dir)
        if not files:
            self.logger.warning("No documentation files found to translate in %s", docs_dir)
            return report

        self.logger.info(
            "Translating %d files to %d languages", len(files), len(self.languages)
        )
        for path in files:
            relative = path.relative_to(docs_dir)
            for language in self.languages:
                destination = docs_dir / language / relative
                try:
                    translated = self.translate_content(path.read_text(encoding="utf-8"), language)
                    destination.parent.mkdir(parents=True, exist_ok=True)
                    destination.write_text(translated, encoding="utf-8")
                except (OSError, UnicodeDecodeError) as exc:
                    self.logger.error("Failed to translate %s to %s: %s", relative, language, exc)
                    report.failed.append(f"{language}/{relative.as_posix()}")
                    continue
                report.completed += 1
        if report.failed:
            self.logger.warning("%d translations failed", len(report.failed))
        return report


__all__ = [
    "DocumentationTranslator",
    "LingoClient",
    "TranslationReport",
    "split_chunks",
    "split_frontmatter",
]
