from __future__ import annotations

import base64
import logging

import httpx
from openai import APIError, AsyncOpenAI

from gpt_site_gen.config import Settings
from gpt_site_gen.errors import MalformedContentError, UpstreamError
from gpt_site_gen.providers.base import GeneratedImage, parse_content_text
from gpt_site_gen.schemas import ContentTree, PageVariant

logger = logging.getLogger(__name__)


def _make_client(settings: Settings) -> AsyncOpenAI:
    if not settings.openai_api_key:
        raise UpstreamError("OPENAI_API_KEY is not set")
    return AsyncOpenAI(api_key=settings.openai_api_key, timeout=settings.http_timeout)


class OpenAIContentProvider:
    name = "openai"

    def __init__(self, settings: Settings, client: AsyncOpenAI | None = None) -> None:
        self.client = client or _make_client(settings)
        self.model = settings.openai_text_model
        self.temperature = settings.openai_temperature

    async def fetch_content(self, prompt: str, variant: PageVariant) -> ContentTree:
        """
        One chat completion, one user message. The first choice's text is the
        payload; there is no retry.
        """
        try:
            resp = await self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=self.temperature,
            )
        except APIError as exc:
            raise UpstreamError(f"OpenAI chat completion failed: {exc}") from exc

        try:
            text = resp.choices[0].message.content
        except (AttributeError, IndexError) as exc:
            raise MalformedContentError("chat completion returned no choices") from exc

        logger.info("OpenAI response received (%s chars), parsing content", len(text or ""))
        return parse_content_text(text, variant)


class OpenAIImageProvider:
    name = "openai"

    def __init__(
        self,
        settings: Settings,
        client: AsyncOpenAI | None = None,
        http: httpx.AsyncClient | None = None,
    ) -> None:
        self.client = client or _make_client(settings)
        self.model = settings.openai_image_model
        self.size = settings.openai_image_size
        self.timeout = settings.http_timeout
        self._http = http

    async def generate(self, prompt: str) -> GeneratedImage:
        try:
            resp = await self.client.images.generate(
                model=self.model,
                prompt=prompt,
                n=1,
                size=self.size,
            )
        except APIError as exc:
            raise UpstreamError(f"OpenAI image generation failed: {exc}") from exc

        data = resp.data[0] if resp.data else None
        if data is None:
            raise UpstreamError("OpenAI image generation returned no images")

        b64 = getattr(data, "b64_json", None)
        if b64:
            return GeneratedImage(
                content=base64.b64decode(b64),
                prompt_used=prompt,
                provider=self.name,
                model=self.model,
                source_url=None,
            )

        url = getattr(data, "url", None)
        if not url:
            raise UpstreamError("OpenAI image generation returned neither b64_json nor url")
        return GeneratedImage(
            content=await self._download(url),
            prompt_used=prompt,
            provider=self.name,
            model=self.model,
            source_url=url,
        )

    async def _download(self, url: str) -> bytes:
        try:
            if self._http is not None:
                r = await self._http.get(url)
                r.raise_for_status()
                return r.content
            async with httpx.AsyncClient(timeout=self.timeout) as h:
                r = await h.get(url)
                r.raise_for_status()
                return r.content
        except httpx.HTTPError as exc:
            raise UpstreamError(f"failed to download generated image: {exc}") from exc
