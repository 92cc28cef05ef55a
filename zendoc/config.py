"""Configuration loading for zendoc (.zendoc.yml plus credentials)."""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import yaml
from dotenv import dotenv_values

CONFIG_FILENAME = ".zendoc.yml"
ENV_FILENAME = ".env"

LLM_API_KEY_ENV = "GOOGLE_GENERATIVE_AI_API_KEY"
TRANSLATION_API_KEY_ENV = "LINGO_API_KEY"
CREDENTIAL_KEYS = (LLM_API_KEY_ENV, TRANSLATION_API_KEY_ENV)


class ConfigError(RuntimeError):
    """Raised when the configuration file is missing or cannot be parsed."""


@dataclass
class LLMConfig:
    """Documentation-drafting model settings."""

    model: str = "gemini-2.0-flash"
    base_url: str = "https://generativelanguage.googleapis.com/v1beta/openai"
    api_key: Optional[str] = None
    temperature: Optional[float] = 0.3
    max_tokens: Optional[int] = 4000
    request_timeout: Optional[float] = 120.0


@dataclass
class TranslationConfig:
    """Localization settings for the generated docs."""

    enabled: bool = False
    api_key: Optional[str] = None
    base_url: str = "https://engine.lingo.dev"
    languages: List[str] = field(default_factory=list)
    source_locale: str = "en"

    @property
    def active(self) -> bool:
        return bool(self.enabled and self.api_key and self.languages)


@dataclass
class ZenDocConfig:
    """Settings for one repository, resolved once and passed down explicitly."""

    root: Path
    project_name: str = ""
    author: str = ""
    description: str = ""
    include: List[str] = field(default_factory=list)
    output_dir: str = "docs"
    exclude_paths: List[str] = field(default_factory=list)
    classify_workers: Optional[int] = None
    llm: LLMConfig = field(default_factory=LLMConfig)
    translation: TranslationConfig = field(default_factory=TranslationConfig)

    @property
    def output_path(self) -> Path:
        return (self.root / self.output_dir).resolve()

    @property
    def display_name(self) -> str:
        return self.project_name or self.root.name or "Project"


def load_config(
    config_path: Path,
    *,
    environ: Mapping[str, str] | None = None,
    required: bool = False,
) -> ZenDocConfig:
    """Load ``.zendoc.yml`` and resolve credentials.

    Credentials come from the file first, then ``environ`` (defaults to
    ``os.environ``), then ``.env`` at the root. The environment is only read.
    """
    config_file = _resolve_config_path(config_path)
    root = config_file.parent
    credentials = resolve_credentials(root, environ)

    if not config_file.exists():
        if required:
            raise ConfigError(
                f"{CONFIG_FILENAME} not found in {root}. Run 'zendoc init' to create one."
            )
        config = ZenDocConfig(root=root)
        config.llm.api_key = credentials.get(LLM_API_KEY_ENV)
        config.translation.api_key = credentials.get(TRANSLATION_API_KEY_ENV)
        return config

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    llm_data = _as_dict(data.get("llm"))
    defaults = LLMConfig()
    llm = LLMConfig(
        model=_as_str(llm_data.get("model")) or defaults.model,
        base_url=_as_str(llm_data.get("base_url")) or defaults.base_url,
        api_key=_as_str(llm_data.get("api_key")) or credentials.get(LLM_API_KEY_ENV),
        temperature=_first_present(_as_float(llm_data.get("temperature")), defaults.temperature),
        max_tokens=_first_present(_as_int(llm_data.get("max_tokens")), defaults.max_tokens),
        request_timeout=_first_present(
            _as_float(llm_data.get("request_timeout")), defaults.request_timeout
        ),
    )

    translation_data = _as_dict(data.get("translation"))
    translation = TranslationConfig(
        enabled=_as_bool(translation_data.get("enabled")) or False,
        api_key=_as_str(translation_data.get("api_key"))
        or credentials.get(TRANSLATION_API_KEY_ENV),
        base_url=_as_str(translation_data.get("base_url")) or TranslationConfig().base_url,
        languages=[lang.strip() for lang in _as_str_list(translation_data.get("languages")) if lang.strip()],
        source_locale=_as_str(translation_data.get("source_locale")) or "en",
    )

    workers = _as_int(data.get("classify_workers"))
    if workers is not None and workers < 1:
        raise ConfigError("classify_workers must be a positive integer")

    return ZenDocConfig(
        root=root,
        project_name=_as_str(data.get("project_name")) or "",
        author=_as_str(data.get("author")) or "",
        description=_as_str(data.get("description")) or "",
        include=_as_str_list(data.get("include")),
        output_dir=_as_str(data.get("output_dir")) or "docs",
        exclude_paths=_as_str_list(data.get("exclude_paths")),
        classify_workers=workers,
        llm=llm,
        translation=translation,
    )


def write_config(config: ZenDocConfig, *, overwrite: bool = False) -> Path:
    """Serialize ``config`` to ``<root>/.zendoc.yml`` and return the path."""
    target = config.root / CONFIG_FILENAME
    if target.exists() and not overwrite:
        raise FileExistsError(f"{CONFIG_FILENAME} already exists at {target}")

    payload: Dict[str, Any] = {
        "project_name": config.project_name,
        "author": config.author,
        "description": config.description,
        "include": list(config.include),
        "output_dir": config.output_dir,
        "exclude_paths": list(config.exclude_paths),
        "llm": asdict(config.llm),
        "translation": asdict(config.translation),
    }
    if config.classify_workers:
        payload["classify_workers"] = config.classify_workers
    target.write_text(yaml.safe_dump(payload, sort_keys=False), encoding="utf-8")
    return target


def read_env_file(path: Path) -> Dict[str, str]:
    """Values from a dotenv file; the process environment is left untouched."""
    if not path.is_file():
        return {}
    try:
        values = dotenv_values(path, encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return {}
    return {key: value for key, value in values.items() if value is not None}


def resolve_credentials(
    root: Path, environ: Mapping[str, str] | None = None
) -> Dict[str, str]:
    env = os.environ if environ is None else environ
    file_values = read_env_file(root / ENV_FILENAME)
    resolved: Dict[str, str] = {}
    for key in CREDENTIAL_KEYS:
        value = env.get(key) or file_values.get(key)
        if value:
            resolved[key] = value
    return resolved


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read {path.name}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _first_present(value: Any, default: Any) -> Any:
    return default if value is None else value


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (str, int, float)):
        return str(value)
    return None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []
