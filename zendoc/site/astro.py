"""Astro Starlight site scaffolding and publishing."""

from __future__ import annotations

import json
import shutil
import subprocess
import sys
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from ..config import ZenDocConfig
from ..content import describe_file
from ..logging import get_logger
from ..models import CATEGORY_DESCRIPTIONS, CATEGORY_TITLES, DocPlan
from ..sidebar import SidebarBuilder

CONTENT_SUBDIR = Path("content") / "docs"
SITE_CONTENT_SUBDIR = Path("src") / "content" / "docs"
CONFIG_FILENAME = "astro.config.mjs"

LANGUAGE_LABELS: Dict[str, str] = {
    "es": "Español",
    "fr": "Français",
    "de": "Deutsch",
    "it": "Italiano",
    "pt": "Português",
    "ru": "Русский",
    "ja": "日本語",
    "ko": "한국어",
    "zh": "中文",
    "ar": "العربية",
    "hi": "हिन्दी",
    "nl": "Nederlands",
    "sv": "Svenska",
    "da": "Dansk",
    "no": "Norsk",
    "fi": "Suomi",
    "pl": "Polski",
    "tr": "Türkçe",
    "cs": "Čeština",
    "uk": "Українська",
}

CommandRunner = Callable[[Sequence[str]], None]


class SiteError(RuntimeError):
    """Raised when the documentation site cannot be scaffolded or published."""


def language_label(code: str) -> str:
    return LANGUAGE_LABELS.get(code, code.upper())


def _run_command(args: Sequence[str]) -> None:
    try:
        subprocess.run(list(args), check=True)
    except FileNotFoundError as exc:
        raise SiteError(f"Unable to locate '{args[0]}'. Install Node.js and npm.") from exc
    except subprocess.CalledProcessError as exc:
        raise SiteError(f"'{' '.join(args)}' failed with exit code {exc.returncode}") from exc


class SiteAssembler:
    """Writes generated docs into an Astro Starlight project."""

    def __init__(
        self,
        config: ZenDocConfig,
        *,
        command_runner: CommandRunner | None = None,
        templates_dir: Path | None = None,
    ) -> None:
        self.config = config
        self._run = command_runner or _run_command
        self.templates_dir = templates_dir or Path(__file__).with_name("templates")
        self._env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )
        self.logger = get_logger("site")

    @staticmethod
    def is_astro_project(output_dir: Path) -> bool:
        return (output_dir / "package.json").exists() and (output_dir / CONFIG_FILENAME).exists()

    def ensure_project(self, output_dir: Path) -> bool:
        """Create the Starlight project unless one exists; True when created."""
        if self.is_astro_project(output_dir):
            self.logger.info("Astro project already exists at %s", output_dir)
            return False
        if output_dir.exists() and not (output_dir / "package.json").exists():
            self.logger.warning("Directory %s exists but is not an Astro project", output_dir)

        npm = "npm.cmd" if sys.platform == "win32" else "npm"
        self.logger.info("Creating Astro Starlight project in %s", output_dir)
        self._run(
            [
                npm,
                "create",
                "astro@latest",
                str(output_dir),
                "--",
                "--template",
                "starlight",
                "--yes",
                "--no-git",
            ]
        )
        return True

    def _groups(self, plan: DocPlan) -> List[Dict[str, object]]:
        return [
            {
                "category": category.value,
                "label": CATEGORY_TITLES[category],
                "description": CATEGORY_DESCRIPTIONS[category],
                "count": len(targets),
            }
            for category, targets in plan.grouped().items()
        ]

    def write_category_indexes(self, plan: DocPlan, docs_dir: Path) -> List[Path]:
        template = self._env.get_template("category_index.md.j2")
        written: List[Path] = []
        for category, targets in plan.grouped().items():
            entries = [
                {
                    "label": target.record.stem,
                    "slug": target.slug,
                    "description": describe_file(target.record, target.route),
                }
                for target in targets
            ]
            path = docs_dir / category.value / "index.md"
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(
                template.render(
                    title=CATEGORY_TITLES[category],
                    description=CATEGORY_DESCRIPTIONS[category],
                    category=category.value,
                    entries=entries,
                ),
                encoding="utf-8",
            )
            written.append(path)
        return written

    def write_landing_pages(self, plan: DocPlan, docs_dir: Path) -> List[Path]:
        groups = self._groups(plan)
        title = self.config.display_name
        description = self.config.description or "Project documentation"

        index_path = docs_dir / "index.mdx"
        index_path.parent.mkdir(parents=True, exist_ok=True)
        index_path.write_text(
            self._env.get_template("index.mdx.j2").render(
                title=title, description=description, groups=groups
            ),
            encoding="utf-8",
        )

        getting_started = docs_dir / "getting-started" / "index.md"
        getting_started.parent.mkdir(parents=True, exist_ok=True)
        getting_started.write_text(
            self._env.get_template("getting_started.md.j2").render(
                title=title, author=self.config.author, groups=groups
            ),
            encoding="utf-8",
        )
        return [index_path, getting_started]

    def render_astro_config(self, plan: DocPlan, *, with_locales: Optional[bool] = None) -> str:
        """Render the Starlight config; locales default to whether translation is active."""
        translation = self.config.translation
        if with_locales is None:
            with_locales = translation.active
        locales = []
        if with_locales and translation.languages:
            locales = [
                {"code": code, "label": language_label(code)}
                for code in translation.languages
                if code != translation.source_locale
            ]
        sidebar = SidebarBuilder.to_config(plan.sidebar)
        return self._env.get_template("astro.config.mjs.j2").render(
            title=self.config.display_name,
            description=self.config.description or "Project documentation",
            sidebar_json=json.dumps(sidebar, indent=2, ensure_ascii=False),
            locales=locales,
            source_locale=translation.source_locale,
        )

    def write_astro_config(
        self, plan: DocPlan, staging_dir: Path, *, with_locales: Optional[bool] = None
    ) -> Path:
        path = staging_dir / CONFIG_FILENAME
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.render_astro_config(plan, with_locales=with_locales), encoding="utf-8")
        return path

    def publish(self, staging_dir: Path, output_dir: Path) -> Path:
        """Replace the site's content with the staging docs and drop the staging dir."""
        source_docs = staging_dir / CONTENT_SUBDIR
        if not source_docs.is_dir():
            raise SiteError(f"Staging content directory does not exist: {source_docs}")

        target_docs = output_dir / SITE_CONTENT_SUBDIR
        try:
            if target_docs.exists():
                shutil.rmtree(target_docs)
            target_docs.parent.mkdir(parents=True, exist_ok=True)
            shutil.copytree(source_docs, target_docs)
            staged_config = staging_dir / CONFIG_FILENAME
            if staged_config.exists():
                shutil.copyfile(staged_config, output_dir / CONFIG_FILENAME)
        except OSError as exc:
            raise SiteError(f"Failed to publish documentation to {output_dir}: {exc}") from exc

        shutil.rmtree(staging_dir, ignore_errors=True)
        self.logger.info("Published documentation to %s", target_docs)
        return target_docs


__all__ = ["SiteAssembler", "SiteError", "language_label"]
