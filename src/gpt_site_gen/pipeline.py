from __future__ import annotations

import logging
import uuid
from pathlib import Path

from starlette.concurrency import run_in_threadpool

from gpt_site_gen.assembly.render import render_site
from gpt_site_gen.config import Settings
from gpt_site_gen.errors import UpstreamError
from gpt_site_gen.prompts import build_content_prompt
from gpt_site_gen.providers.base import ContentProvider
from gpt_site_gen.schemas import ContentTree, GenerateRequest
from gpt_site_gen.storage import PackagedArchive, SitePackager

logger = logging.getLogger(__name__)


def build_content_provider(settings: Settings) -> ContentProvider:
    choice = settings.content_provider.strip().lower()
    if choice == "openai":
        from gpt_site_gen.providers.openai_provider import OpenAIContentProvider

        return OpenAIContentProvider(settings)
    if choice == "gemini":
        from gpt_site_gen.providers.gemini_provider import GeminiContentProvider

        return GeminiContentProvider(settings)
    raise UpstreamError(f"unknown CONTENT_PROVIDER '{settings.content_provider}'")


class SiteGenerator:
    """request -> content tree -> rendered pages -> zip archive on disk."""

    def __init__(
        self,
        settings: Settings,
        packager: SitePackager | None = None,
        provider: ContentProvider | None = None,
    ) -> None:
        self.settings = settings
        self.uploads_dir = Path(settings.uploads_dir).resolve()
        self.packager = packager or SitePackager(settings)
        self.provider = provider

    def _get_provider(self) -> ContentProvider:
        if self.provider is None:
            self.provider = build_content_provider(self.settings)
        return self.provider

    async def fetch_content(self, req: GenerateRequest) -> ContentTree:
        provider = self._get_provider()
        logger.info("Generating %s-page website for %s in %s via %s", req.pages.value, req.biz, req.niche, provider.name)
        return await provider.fetch_content(build_content_prompt(req), req.pages)

    async def build(self, req: GenerateRequest, content: ContentTree | None = None) -> PackagedArchive:
        if content is None:
            content = await self.fetch_content(req)
        site = render_site(content, req.pages, req, self.uploads_dir)
        request_id = uuid.uuid4().hex[:12]
        return await run_in_threadpool(self.packager.package, site, req.biz, request_id)
