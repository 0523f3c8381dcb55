from __future__ import annotations

import copy
from io import BytesIO
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from gpt_site_gen.api.app import create_app
from gpt_site_gen.config import Settings
from gpt_site_gen.images import ImageProcessor
from gpt_site_gen.pipeline import SiteGenerator
from gpt_site_gen.providers.base import GeneratedImage, HostedImage
from gpt_site_gen.schemas import PageVariant, validate_content

MULTI_PAGE_PAYLOAD = {
    "branding": {"tagline": "Fresh every morning", "description": "Neighbourhood bakery with sourdough and pastries."},
    "colors": {"primary": "#112233", "secondary": "#445566", "accent": "#FF8800"},
    "landing": {
        "hero": {"headline": "Bread worth waking up for", "subheading": "Baked before sunrise.", "ctaText": "Visit us"},
        "services": [
            {"title": "Sourdough", "description": "Slow fermented loaves.", "icon": "fas fa-bread-slice"},
            {"title": "Pastries", "description": "Butter croissants.", "icon": "fas fa-cookie"},
            {"title": "Catering", "description": "Trays for events.", "icon": "fas fa-truck"},
        ],
        "stats": [{"number": "12", "label": "Years baking"}],
        "testimonial": {"quote": "Best croissant in town.", "author": "Ana", "company": "Cafe Uno"},
    },
    "about": {
        "headline": "Our story",
        "story": "Started in a garage oven.",
        "mission": "Honest bread.",
        "values": [{"title": "Craft", "description": "By hand."}],
        "team": [{"name": "Sam", "position": "Head baker", "bio": "Flour everywhere."}],
    },
    "contact": {
        "headline": "Say hello",
        "subtitle": "We answer fast.",
        "address": "1 Main St",
        "phone": "555-0100",
        "email": "hi@sunrise.test",
        "hours": "Mon-Sat 6-14",
    },
}

SINGLE_PAGE_PAYLOAD = {
    "hero": {"headline": "Bread worth waking up for", "subheading": "Baked before sunrise.", "ctaText": "Visit us"},
    "about": {"headline": "About us", "story": "Started in a garage oven.", "mission": "Honest bread."},
    "services": {
        "headline": "What we bake",
        "introduction": "Everything by hand.",
        "items": [{"title": "Sourdough", "description": "Slow fermented loaves.", "icon": "fas fa-bread-slice"}],
    },
    "contact": {
        "headline": "Say hello",
        "address": "1 Main St",
        "phone": "555-0100",
        "email": "hi@sunrise.test",
        "hours": "Mon-Sat 6-14",
    },
}

PAYLOADS = {PageVariant.MULTI: MULTI_PAGE_PAYLOAD, PageVariant.SINGLE: SINGLE_PAGE_PAYLOAD}


class FakeContentProvider:
    name = "fake"

    def __init__(self, payloads=None, exc: Exception | None = None) -> None:
        self.payloads = payloads or PAYLOADS
        self.exc = exc
        self.prompts: list[str] = []

    async def fetch_content(self, prompt, variant):
        self.prompts.append(prompt)
        if self.exc is not None:
            raise self.exc
        return validate_content(copy.deepcopy(self.payloads[variant]), variant)


class FakeHost:
    name = "fake-host"

    def __init__(self, exc: Exception | None = None) -> None:
        self.exc = exc
        self.calls: list[tuple[Path, bool, str]] = []

    def upload(self, path, folder):
        self.calls.append((path, path.exists(), folder))
        if self.exc is not None:
            raise self.exc
        return HostedImage(url=f"https://img.example/{folder}/{path.stem}.webp", width=4, height=4, format="webp")


class FakeImageGenerator:
    name = "fake-images"

    def __init__(self, content: bytes, exc: Exception | None = None) -> None:
        self.content = content
        self.exc = exc

    async def generate(self, prompt):
        if self.exc is not None:
            raise self.exc
        return GeneratedImage(content=self.content, prompt_used=prompt, provider=self.name, model="fake", source_url=None)


def make_png(size=(4, 4), color=(200, 30, 30), fmt="PNG") -> bytes:
    buf = BytesIO()
    Image.new("RGB", size, color).save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture
def png_bytes() -> bytes:
    return make_png()


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        environment="development",
        uploads_dir=str(tmp_path / "uploads"),
        generated_dir=str(tmp_path / "generated"),
        openai_api_key=None,
        gemini_api_key=None,
    )


@pytest.fixture
def provider() -> FakeContentProvider:
    return FakeContentProvider()


@pytest.fixture
def host() -> FakeHost:
    return FakeHost()


@pytest.fixture
def image_generator(png_bytes) -> FakeImageGenerator:
    return FakeImageGenerator(png_bytes)


@pytest.fixture
def make_client(provider, host, image_generator):
    def _make(cfg: Settings, content_provider=None, image_host=None, generator=None) -> TestClient:
        app = create_app(cfg)
        app.state.generator = SiteGenerator(cfg, provider=content_provider or provider)
        app.state.images = ImageProcessor(
            cfg,
            app.state.uploads,
            host=image_host or host,
            generator=generator or image_generator,
        )
        return TestClient(app)

    return _make


@pytest.fixture
def client(make_client, settings) -> TestClient:
    return make_client(settings)
