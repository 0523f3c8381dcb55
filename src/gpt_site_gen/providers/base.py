from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

from gpt_site_gen.errors import MalformedContentError
from gpt_site_gen.schemas import ContentTree, PageVariant, validate_content


@dataclass(frozen=True)
class GeneratedImage:
    content: bytes
    prompt_used: str
    provider: str
    model: str
    source_url: str | None


@dataclass(frozen=True)
class HostedImage:
    url: str
    width: int | None
    height: int | None
    format: str | None


class ContentProvider(Protocol):
    name: str

    async def fetch_content(self, prompt: str, variant: PageVariant) -> ContentTree: ...


class ImageGenerator(Protocol):
    name: str

    async def generate(self, prompt: str) -> GeneratedImage: ...


class ImageHost(Protocol):
    name: str

    def upload(self, path: Path, folder: str) -> HostedImage: ...


def strip_code_fences(text: str) -> str:
    s = text.strip()
    if s.startswith("```"):
        # Remove leading fence line
        first_nl = s.find("\n")
        if first_nl != -1:
            s = s[first_nl + 1 :]
        # Remove trailing fence
        if s.rstrip().endswith("```"):
            s = s.rstrip()[:-3]
    return s.strip()


def parse_content_text(raw_text: str | None, variant: PageVariant) -> ContentTree:
    """
    Decode the text of a single completion as JSON and read it as the content
    tree for `variant`. Anything else is a MalformedContentError.
    """
    if not raw_text or not raw_text.strip():
        raise MalformedContentError("generation API returned an empty payload")
    try:
        data: Any = json.loads(strip_code_fences(raw_text))
    except json.JSONDecodeError as exc:
        raise MalformedContentError(f"payload is not valid JSON: {exc.msg} (line {exc.lineno})") from exc
    return validate_content(data, variant)
