from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import ConfigError


class DatabaseConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str
    user: str | None = None
    password: str | None = None


class LLMConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str
    timeout_s: float = 30.0
    samples: int = Field(default=3, ge=1)
    abort_on_any_invalid_sample: bool = True


class TablesConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    generic: tuple[str, ...] = ("x_posts", "instagram_posts", "youtube_comments")
    title_body: str | None = "reddit_posts"


class ScheduleConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    interval_minutes: int = Field(default=0, ge=0)  # 0 = run once and exit


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    db: DatabaseConfig
    llm: LLMConfig
    prompt: str = Field(min_length=1)
    tables: TablesConfig = Field(default_factory=TablesConfig)
    schedule: ScheduleConfig = Field(default_factory=ScheduleConfig)


_ENV_OVERRIDES = {
    "SENTIMENT_DB_URL": ("db", "url"),
    "SENTIMENT_DB_USER": ("db", "user"),
    "SENTIMENT_DB_PASSWORD": ("db", "password"),
    "SENTIMENT_LLM_URL": ("llm", "url"),
    "SCORE_INTERVAL_MINUTES": ("schedule", "interval_minutes"),
}


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    for env_name, (section, key) in _ENV_OVERRIDES.items():
        value = os.getenv(env_name)
        if value:
            if raw.get(section) is None:  # `db:` with nothing under it
                raw[section] = {}
            elif not isinstance(raw[section], dict):
                raise ConfigError(f"Settings section '{section}' must be a mapping")
            raw[section][key] = value
    return raw


def default_config_path() -> Path:
    return Path(os.getenv("SENTIMENT_CONFIG", str(Path("configs/sentiment_config.yaml").resolve())))


def load_settings(config_path: str | Path | None = None) -> Settings:
    """Load the YAML settings file once at process start.

    Raises ConfigError when the file is missing, unreadable or invalid.
    """
    path = Path(config_path) if config_path else default_config_path()
    if not path.exists():
        raise ConfigError(f"Settings file not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Error loading settings from {path}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError(f"Settings file {path} must contain a mapping")
    try:
        return Settings(**_apply_env_overrides(raw))
    except ValidationError as e:
        raise ConfigError(f"Invalid settings in {path}: {e}") from e
