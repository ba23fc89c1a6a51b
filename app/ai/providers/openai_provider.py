from __future__ import annotations

import logging
from typing import Optional, Sequence

from openai import AsyncOpenAI

from app.ai.errors import classify_provider_error
from app.ai.types import ChatMessage

logger = logging.getLogger(__name__)


class OpenAIProvider:
    """Chat-completions client for OpenAI and OpenAI-compatible gateways."""

    def __init__(
        self,
        model: str,
        api_key: str,
        provider: str = "openai",
        base_url: Optional[str] = None,
        default_headers: Optional[dict[str, str]] = None,
        timeout_s: float = 60.0,
        temperature: float = 0.7,
        max_tokens: int = 2000,
    ):
        self.provider = provider
        self.model = model
        self._temperature = temperature
        self._max_tokens = max_tokens
        key = (api_key or "").strip()
        if not key:
            raise RuntimeError(f"API key for provider '{provider}' is missing")

        # Provider calls are never retried.
        self._client = AsyncOpenAI(
            api_key=key,
            base_url=base_url or None,
            default_headers=default_headers or None,
            timeout=timeout_s,
            max_retries=0,
        )

    async def chat(self, messages: Sequence[ChatMessage]) -> str:
        payload = [{"role": m.role, "content": m.content} for m in messages]
        logger.info("Calling %s via %s", self.model, self.provider)
        try:
            response = await self._client.chat.completions.create(
                model=self.model,
                messages=payload,
                temperature=self._temperature,
                max_tokens=self._max_tokens,
            )
        except Exception as exc:
            logger.error("AI API error provider=%s: %s", self.provider, exc)
            raise classify_provider_error(exc) from exc

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

    async def complete(self, system_instruction: str, user_prompt: str) -> str:
        return await self.chat(
            [
                ChatMessage(role="system", content=system_instruction),
                ChatMessage(role="user", content=user_prompt),
            ]
        )
