from __future__ import annotations

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()


def _get_env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def _get_env_int(name: str, default: int) -> int:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_env_float(name: str, default: float) -> float:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    log_level: str
    semantic_provider: str
    semantic_model: str
    semantic_base_url: str | None
    semantic_timeout_s: float
    semantic_max_retries: int
    scoring_config_path: str | None
    taxonomy_synonyms_path: str | None
    semantic_api_key: str | None = field(default=None, repr=False)


settings = Settings(
    log_level=_get_env("LOG_LEVEL", "INFO") or "INFO",
    semantic_provider=(_get_env("SEMANTIC_PROVIDER", "openai") or "openai").strip().lower(),
    semantic_model=(_get_env("SEMANTIC_MODEL", "gpt-4o-mini") or "gpt-4o-mini").strip(),
    semantic_base_url=_get_env("SEMANTIC_BASE_URL"),
    semantic_timeout_s=_get_env_float("SEMANTIC_TIMEOUT_S", 30.0),
    semantic_max_retries=_get_env_int("SEMANTIC_MAX_RETRIES", 2),
    scoring_config_path=_get_env("SCORING_CONFIG_PATH"),
    taxonomy_synonyms_path=_get_env("TAXONOMY_SYNONYMS_PATH"),
    semantic_api_key=_get_env("SEMANTIC_API_KEY"),
)

if settings.semantic_timeout_s <= 0:
    raise RuntimeError("SEMANTIC_TIMEOUT_S must be greater than 0.")
