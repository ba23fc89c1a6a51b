from __future__ import annotations

from dataclasses import dataclass, field

from app.core.config import Settings

OPENAI_COMPATIBLE_PROVIDERS = frozenset({"openai", "openrouter"})
SUPPORTED_PROVIDERS = OPENAI_COMPATIBLE_PROVIDERS | {"gemini"}


class ProviderConfigError(RuntimeError):
    """Raised at startup when the selected provider cannot be configured."""


@dataclass(frozen=True)
class AIConfig:
    provider: str
    model: str
    api_key: str = field(repr=False)
    base_url: str | None = None
    default_headers: dict[str, str] = field(default_factory=dict)
    timeout_s: float = 60.0


def _require_key(value: str | None, env_name: str) -> str:
    key = (value or "").strip()
    if not key:
        raise ProviderConfigError(f"{env_name} not found in environment")
    return key


def load_ai_config(settings: Settings) -> AIConfig:
    provider = settings.ai_provider

    if provider == "openai":
        return AIConfig(
            provider=provider,
            model=settings.openai_model,
            api_key=_require_key(settings.openai_api_key, "OPENAI_API_KEY"),
            timeout_s=settings.openai_timeout_s,
        )

    if provider == "openrouter":
        return AIConfig(
            provider=provider,
            model=settings.openrouter_model,
            api_key=_require_key(settings.openrouter_api_key, "OPENROUTER_API_KEY"),
            base_url=settings.openrouter_base_url,
            timeout_s=settings.openai_timeout_s,
            default_headers={
                "HTTP-Referer": settings.frontend_url,
                "X-Title": settings.app_title,
            },
        )

    if provider == "gemini":
        return AIConfig(
            provider=provider,
            model=settings.gemini_model,
            api_key=_require_key(settings.gemini_api_key, "GEMINI_API_KEY"),
        )

    raise ProviderConfigError(
        f"Unsupported AI_PROVIDER='{provider}' (expected one of: {', '.join(sorted(SUPPORTED_PROVIDERS))})"
    )
