"""
Generation client.

Uses the OpenAI-compatible SDK so any compatible hosted model can be
configured via ``LLM_BASE_URL`` / ``LLM_MODEL``. Output is returned as raw
text; callers never trust it structurally (see ``tools_hub.normalizer``).
"""

from __future__ import annotations

import logging

from openai import AsyncOpenAI, OpenAIError

from tools_hub.errors import GenerationFailedError
from tools_hub.settings import Settings

logger = logging.getLogger("tools_hub.llm_client")


class LLMClient:
    """Async wrapper around a chat completions endpoint."""

    def __init__(self, settings: Settings, client: AsyncOpenAI | None = None) -> None:
        self._client = client or AsyncOpenAI(
            base_url=settings.llm_base_url,
            api_key=settings.llm_api_key,
            max_retries=0,
        )
        self._model = settings.llm_model
        self._max_tokens = settings.llm_max_tokens
        self._temperature = settings.llm_temperature

    async def generate_content(self, prompt: str) -> str:
        """Send a single prompt and return the raw response text."""
        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=self._max_tokens,
                temperature=self._temperature,
            )
        except OpenAIError as exc:
            logger.error("Generation request failed: %s", exc)
            raise GenerationFailedError(
                "The AI service is unavailable. Please try again."
            ) from exc

        if not response.choices:
            logger.error("Generation returned no choices")
            raise GenerationFailedError(
                "The AI service is unavailable. Please try again."
            )
        content = response.choices[0].message.content or ""
        logger.debug("LLM raw response (first 500 chars): %s", content[:500])
        return content

    async def aclose(self) -> None:
        await self._client.close()
