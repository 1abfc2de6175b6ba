"""Application configuration: YAML files, env overrides, pydantic validation.

There is no process-wide config object. ``load_config()`` returns an
``AppConfig`` that callers pass down to whatever they construct.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Literal, Mapping, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field

from .errors import ConfigurationError
from .validation import SchemaViolation, validate

CONFIG_NAME = "config"
DEFAULT_CONFIG_PATH = "config/config.yaml"
LOCAL_CONFIG_PATH = "config/config.local.yaml"
ENV_PREFIX = "RESUME_OPTIMIZER_"


class _Section(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class AppSettings(_Section):
    name: str = "Resume Optimizer"
    version: str = "1.0.0"
    environment: Literal["development", "production", "test"] = "development"
    debug: bool = False


class PipelineSettings(_Section):
    timeout_ms: int = Field(default=60000, gt=0)
    require_approval: bool = False


class ExtractorSettings(_Section):
    timeout_ms: int = Field(default=30000, gt=0)
    max_text_length: int = Field(default=10000, gt=0)


class StageSettings(_Section):
    timeout_ms: int = Field(default=45000, gt=0)


class InterviewCoachSettings(StageSettings):
    question_count: int = Field(default=5, ge=1, le=20)


class ApprovalSettings(_Section):
    timeout_ms: int = Field(default=600000, gt=0)


class AgentsSettings(_Section):
    extractor: ExtractorSettings = ExtractorSettings()
    critic: StageSettings = StageSettings()
    content_strength: StageSettings = StageSettings()
    job_alignment: StageSettings = StageSettings()
    interview_coach: InterviewCoachSettings = InterviewCoachSettings()
    approval: ApprovalSettings = ApprovalSettings()


class LoggingConfig(_Section):
    level: Literal["debug", "info", "warning", "error"] = "info"
    format: Literal["text", "json"] = "text"
    enable_console: bool = True
    file_path: Optional[str] = None
    max_file_size: int = Field(default=10 * 1024 * 1024, gt=0)
    max_files: int = Field(default=5, ge=0)


class RetrySettings(_Section):
    max_attempts: int = Field(default=3, ge=1)
    base_delay: float = Field(default=1.0, ge=0)
    max_delay: float = Field(default=30.0, ge=0)


class LLMSettings(_Section):
    provider: str = "gemini"
    model: str = Field(default="gemini-2.5-flash", min_length=1)
    api_key: str = ""
    api_base: str = ""
    max_tokens: int = Field(default=4096, gt=0)
    temperature: float = Field(default=0.3, ge=0, le=2)
    retry: RetrySettings = RetrySettings()


class AppConfig(_Section):
    app: AppSettings = AppSettings()
    pipeline: PipelineSettings = PipelineSettings()
    agents: AgentsSettings = AgentsSettings()
    logging: LoggingConfig = LoggingConfig()
    llm: LLMSettings = LLMSettings()


def _deep_merge(base: Dict[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        base_value = merged.get(key)
        if isinstance(base_value, dict) and isinstance(value, Mapping):
            merged[key] = _deep_merge(base_value, value)
        else:
            merged[key] = value
    return merged


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file must be a mapping: {path}", CONFIG_NAME)
    return data


def load_raw_config(config_path: Optional[str] = None, base_dir: Optional[Path] = None) -> Dict[str, Any]:
    """Load the raw configuration mapping.

    Without an explicit path, ``config/config.yaml`` is loaded and
    ``config/config.local.yaml`` is overlaid on it; missing files yield an
    empty mapping. An explicit path is loaded as-is and must exist.
    """
    root = base_dir or Path.cwd()

    if config_path is None:
        base = _load_yaml(root / DEFAULT_CONFIG_PATH)
        local = _load_yaml(root / LOCAL_CONFIG_PATH)
        return _deep_merge(base, local)

    path = Path(config_path)
    if not path.is_absolute():
        path = root / path
    if not path.exists():
        raise ConfigurationError(f"Config file not found: {config_path}", CONFIG_NAME)
    return _load_yaml(path)


def _env_int(value: str) -> Optional[int]:
    try:
        return int(value)
    except ValueError:
        return None


def apply_env_overrides(raw: Mapping[str, Any], environ: Mapping[str, str]) -> Dict[str, Any]:
    """Overlay ``RESUME_OPTIMIZER_*`` variables onto a raw config mapping."""
    overrides: Dict[str, Dict[str, Any]] = {}

    def put(section: str, key: str, value: Any) -> None:
        overrides.setdefault(section, {})[key] = value

    def env(name: str) -> Optional[str]:
        value = environ.get(ENV_PREFIX + name)
        return value if value else None

    if env("ENV"):
        put("app", "environment", env("ENV"))
    if env("DEBUG"):
        put("app", "debug", env("DEBUG").lower() in ("1", "true", "yes"))
    if env("PIPELINE_TIMEOUT_MS"):
        timeout = _env_int(env("PIPELINE_TIMEOUT_MS"))
        if timeout is not None:
            put("pipeline", "timeout_ms", timeout)
    if env("LOG_LEVEL"):
        put("logging", "level", env("LOG_LEVEL").lower())
    if env("LOG_FORMAT"):
        put("logging", "format", env("LOG_FORMAT").lower())
    if env("LOG_FILE"):
        put("logging", "file_path", env("LOG_FILE"))
    if env("LLM_PROVIDER"):
        put("llm", "provider", env("LLM_PROVIDER"))
    if env("LLM_MODEL"):
        put("llm", "model", env("LLM_MODEL"))
    if env("API_KEY"):
        put("llm", "api_key", env("API_KEY"))

    return _deep_merge(dict(raw), overrides)


def parse_config(raw: Mapping[str, Any]) -> AppConfig:
    """Validate a raw mapping into an ``AppConfig``.

    Raises:
        ConfigurationError: listing every invalid field path
    """
    try:
        return validate(AppConfig, dict(raw))
    except SchemaViolation as exc:
        raise ConfigurationError("Invalid configuration", CONFIG_NAME, exc.issues) from exc


def load_config(
    config_path: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    base_dir: Optional[Path] = None,
) -> AppConfig:
    """Load YAML config, apply env overrides and validate."""
    raw = load_raw_config(config_path, base_dir=base_dir)
    raw = apply_env_overrides(raw, os.environ if environ is None else environ)
    return parse_config(raw)
