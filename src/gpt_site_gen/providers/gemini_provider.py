from __future__ import annotations

import logging
from typing import Any

import httpx

from gpt_site_gen.config import Settings
from gpt_site_gen.errors import UpstreamError
from gpt_site_gen.providers.base import parse_content_text
from gpt_site_gen.schemas import ContentTree, PageVariant

logger = logging.getLogger(__name__)


class GeminiContentProvider:
    name = "gemini"

    def __init__(self, settings: Settings, client: Any | None = None) -> None:
        # Imported lazily so the service can run on OpenAI alone.
        from google import genai  # type: ignore
        from google.genai import errors, types  # type: ignore

        self._types = types
        self._api_error = errors.APIError
        if client is None:
            if not settings.gemini_api_key:
                raise UpstreamError("GEMINI_API_KEY is not set")
            client = genai.Client(api_key=settings.gemini_api_key)
        self.client = client
        self.model = settings.gemini_text_model
        self.temperature = settings.openai_temperature

    async def fetch_content(self, prompt: str, variant: PageVariant) -> ContentTree:
        config = self._types.GenerateContentConfig(
            response_mime_type="application/json",
            temperature=self.temperature,
        )
        try:
            resp = await self.client.aio.models.generate_content(
                model=self.model,
                contents=prompt,
                config=config,
            )
        except (self._api_error, httpx.HTTPError) as exc:
            raise UpstreamError(f"Gemini generate_content failed: {exc}") from exc

        raw_text: str | None = getattr(resp, "text", None)
        logger.info("Gemini response received (%s chars), parsing content", len(raw_text or ""))
        return parse_content_text(raw_text, variant)
