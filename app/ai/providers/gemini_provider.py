import logging

import google.generativeai as genai

from app.ai.errors import classify_provider_error

logger = logging.getLogger(__name__)


class GeminiProvider:
    """Gemini client.

    ``genai.configure`` sets the key for the whole process, so the most
    recently constructed instance's key is the one every instance uses.
    The app builds a single client at startup.
    """

    provider = "gemini"

    def __init__(self, model: str, api_key: str):
        if not api_key:
            raise RuntimeError("GEMINI_API_KEY is missing")
        self.model = model
        genai.configure(api_key=api_key)
        self._model = genai.GenerativeModel(model)

    async def complete(self, system_instruction: str, user_prompt: str) -> str:
        # Gemini gets a single prompt; there is no separate system channel here.
        full_prompt = f"{system_instruction}\n\n{user_prompt}"
        logger.info("Calling Google Gemini model=%s", self.model)
        try:
            response = await self._model.generate_content_async(full_prompt)
            return response.text
        except Exception as exc:
            logger.error("AI API error provider=gemini: %s", exc)
            raise classify_provider_error(exc) from exc
