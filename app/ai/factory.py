from app.ai.config import OPENAI_COMPATIBLE_PROVIDERS, AIConfig, ProviderConfigError
from app.ai.types import AIClient

from app.ai.providers.openai_provider import OpenAIProvider
from app.ai.providers.gemini_provider import GeminiProvider


def build_ai_client(cfg: AIConfig) -> AIClient:
    if cfg.provider in OPENAI_COMPATIBLE_PROVIDERS:
        return OpenAIProvider(
            provider=cfg.provider,
            model=cfg.model,
            api_key=cfg.api_key,
            base_url=cfg.base_url,
            default_headers=cfg.default_headers or None,
            timeout_s=cfg.timeout_s,
        )

    if cfg.provider == "gemini":
        return GeminiProvider(model=cfg.model, api_key=cfg.api_key)

    raise ProviderConfigError(f"Unsupported AI_PROVIDER='{cfg.provider}'")
