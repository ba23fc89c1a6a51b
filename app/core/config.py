from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

def _get_env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def _get_env_bool(name: str, default: bool) -> bool:
    raw = _get_env(name, None)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_env_list(name: str, default: list[str]) -> tuple[str, ...]:
    raw = _get_env(name, None)
    if raw is None:
        return tuple(default)
    values = [item.strip() for item in raw.split(",")]
    clean = [item for item in values if item]
    return tuple(clean) if clean else tuple(default)


@dataclass(frozen=True)
class Settings:
    ai_provider: str
    openai_api_key: str | None
    openai_model: str
    openrouter_api_key: str | None
    openrouter_model: str
    openrouter_base_url: str
    gemini_api_key: str | None
    gemini_model: str
    openai_timeout_s: float
    app_title: str
    frontend_url: str
    cors_allowed_origins: tuple[str, ...]
    log_level: str
    sentry_dsn: str | None
    submissions_enabled: bool
    submissions_db_path: str
    record_match_submissions: bool
    submissions_admin_enabled: bool
    trust_x_forwarded_for: bool


_frontend_url = _get_env("FRONTEND_URL", "http://localhost:5173") or "http://localhost:5173"

settings = Settings(
    ai_provider=(_get_env("AI_PROVIDER", "openai") or "openai").strip().lower(),
    openai_api_key=_get_env("OPENAI_API_KEY"),
    openai_model=_get_env("OPENAI_MODEL", "gpt-4o") or "gpt-4o",
    openrouter_api_key=_get_env("OPENROUTER_API_KEY"),
    openrouter_model=_get_env("OPENROUTER_MODEL", "google/gemini-1.5-flash") or "google/gemini-1.5-flash",
    openrouter_base_url=_get_env("OPENROUTER_BASE_URL", "https://openrouter.ai/api/v1") or "https://openrouter.ai/api/v1",
    gemini_api_key=_get_env("GEMINI_API_KEY"),
    gemini_model=_get_env("GEMINI_MODEL", "gemini-2.5-flash") or "gemini-2.5-flash",
    openai_timeout_s=float(_get_env("OPENAI_TIMEOUT_S", "60") or "60"),
    app_title=_get_env("APP_TITLE", "ATS Resume Optimizer") or "ATS Resume Optimizer",
    frontend_url=_frontend_url,
    cors_allowed_origins=_get_env_list("CORS_ALLOWED_ORIGINS", [_frontend_url]),
    log_level=_get_env("LOG_LEVEL", "INFO") or "INFO",
    sentry_dsn=_get_env("SENTRY_DSN"),
    submissions_enabled=_get_env_bool("SUBMISSIONS_ENABLED", True),
    submissions_db_path=_get_env("SUBMISSIONS_DB_PATH", "data/submissions.db") or "data/submissions.db",
    record_match_submissions=_get_env_bool("RECORD_MATCH_SUBMISSIONS", False),
    submissions_admin_enabled=_get_env_bool("SUBMISSIONS_ADMIN_ENABLED", False),
    trust_x_forwarded_for=_get_env_bool("TRUST_X_FORWARDED_FOR", False),
)
