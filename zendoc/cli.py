"""CLI entrypoints for zendoc commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Callable, List

from .config import (
    CONFIG_FILENAME,
    ConfigError,
    LLMConfig,
    TranslationConfig,
    ZenDocConfig,
    write_config,
)
from .logging import configure_logging
from .models import DocPlan
from .orchestrator import Orchestrator

AskFn = Callable[[str], str]


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS if suppress_default else False,
        help="Increase log verbosity for troubleshooting.",
    )


def _add_path_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the project root (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="zendoc",
        description="Generate an Astro Starlight documentation site from a codebase.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    init_parser = subparsers.add_parser(
        "init",
        help=f"Create a {CONFIG_FILENAME} configuration interactively.",
    )
    _add_verbose_option(init_parser, suppress_default=True)
    _add_path_argument(init_parser)
    init_parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite an existing configuration file.",
    )

    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate documentation and publish it into the Astro site.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    _add_path_argument(generate_parser)
    generate_parser.add_argument(
        "--offline",
        action="store_true",
        help="Skip the model and write structured placeholder docs only.",
    )

    plan_parser = subparsers.add_parser(
        "plan",
        help="Show the categorized files and their doc slugs without generating anything.",
    )
    _add_verbose_option(plan_parser, suppress_default=True)
    _add_path_argument(plan_parser)

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP service.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")

    return parser


def _split_list(raw: str) -> List[str]:
    return [part.strip() for part in raw.split(",") if part.strip()]


def prompt_config(root: Path, ask: AskFn = input) -> ZenDocConfig:
    """Ask the questions needed to build a configuration for ``root``."""

    def _ask(question: str, default: str = "") -> str:
        suffix = f" [{default}]" if default else ""
        answer = ask(f"{question}{suffix}: ").strip()
        return answer or default

    llm_key = _ask("Google Gemini API key (leave blank to use the environment)")
    project_name = _ask("Project name", root.name)
    author = _ask("Author name")
    description = _ask("Short project description")
    include = _split_list(_ask("Folders to include (comma separated, blank for all)"))
    output_dir = _ask("Output directory for docs", "docs")

    translation = TranslationConfig()
    if _ask("Enable automatic translation with Lingo.dev? (y/N)", "n").lower() in {"y", "yes"}:
        translation.enabled = True
        translation.api_key = _ask("Lingo.dev API key (leave blank to use the environment)") or None
        translation.languages = _split_list(
            _ask("Languages to support (comma separated, e.g. es,fr,de)")
        )

    return ZenDocConfig(
        root=root,
        project_name=project_name,
        author=author,
        description=description,
        include=include,
        output_dir=output_dir,
        llm=LLMConfig(api_key=llm_key or None),
        translation=translation,
    )


def _print_plan(plan: DocPlan) -> None:
    if not plan.targets:
        print("No documentable files found.")
        return
    for group, targets in zip(plan.sidebar, plan.grouped().values()):
        print(f"{group.label} ({len(targets)})")
        for target in targets:
            print(f"  {target.sidebar_slug:<40} {target.record.relative_path}")


def main(argv: list[str] | None = None, *, ask: AskFn = input) -> None:
    """CLI entrypoint for zendoc commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose))

    if args.command == "init":
        root = Path(args.path).expanduser().resolve()
        if (root / CONFIG_FILENAME).exists() and not args.force:
            parser.exit(1, f"{CONFIG_FILENAME} already exists in {root}. Use --force to overwrite.\n")
        try:
            config_path = write_config(prompt_config(root, ask), overwrite=args.force)
        except (EOFError, KeyboardInterrupt):
            parser.exit(1, "\nzendoc init cancelled\n")
        except OSError as exc:
            parser.exit(1, f"zendoc init failed: {exc}\n")
        print(f"Configuration written to {_relativize(config_path)}")
    elif args.command == "generate":
        orchestrator = Orchestrator()
        try:
            outcome = orchestrator.run_generate(args.path, offline=bool(args.offline))
        except ConfigError as exc:
            parser.exit(1, f"{exc}\n")
        except (RuntimeError, OSError) as exc:
            parser.exit(1, f"zendoc generate failed: {exc}\nRun with --verbose for more details.\n")
        print(f"Documentation written to {_relativize(outcome.output_dir)}")
        print(f"  {len(outcome.written)} pages, {len(outcome.fallbacks)} placeholders, {len(outcome.failed)} failed")
        if outcome.translated:
            print("  translations included")
        print(f"Preview with: cd {_relativize(outcome.output_dir)} && npm run dev")
    elif args.command == "plan":
        orchestrator = Orchestrator()
        try:
            plan = orchestrator.plan(args.path)
        except (ConfigError, FileNotFoundError, NotADirectoryError) as exc:
            parser.exit(1, f"{exc}\n")
        _print_plan(plan)
    elif args.command == "serve":
        from .service import run_service

        run_service(host=args.host, port=args.port)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
