from __future__ import annotations

import unicodedata
from enum import Enum
from typing import Any, Union

from markupsafe import Markup
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from gpt_site_gen.errors import MalformedContentError


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"


class Style(str, Enum):
    MODERN = "modern"
    CLASSIC = "classic"
    MINIMALIST = "minimalist"


class PageVariant(str, Enum):
    SINGLE = "single"
    MULTI = "multi"


class GenerateRequest(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, str_strip_whitespace=True)

    biz: str = Field(..., min_length=1, max_length=100, description="Business name")
    niche: str = Field(..., min_length=1, max_length=100, description="Industry or niche")
    theme: Theme = Theme.LIGHT
    style: Style = Style.MODERN
    website_type: str = Field(default="business", alias="websiteType", max_length=50)
    pages: PageVariant = PageVariant.MULTI
    images: list[str] = Field(default_factory=list, max_length=5)

    @field_validator("biz", "niche")
    @classmethod
    def _strip_markup(cls, value: str) -> str:
        cleaned = Markup(value).striptags()
        if not cleaned:
            raise ValueError("must contain text, not only markup")
        if any(unicodedata.category(ch) == "Cc" for ch in cleaned):
            raise ValueError("must not contain control characters")
        return cleaned

    @field_validator("website_type")
    @classmethod
    def _normalize_type(cls, value: str) -> str:
        return value.lower() or "business"


class ImagePromptRequest(BaseModel):
    prompt: str | None = None


# ---------------------------------------------------------------------------
# Content trees returned by the generation API.
# Both are read strictly: a missing required field is a malformed payload.
# ---------------------------------------------------------------------------


class _ContentModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)


class Palette(_ContentModel):
    primary: str
    secondary: str
    accent: str


class HeroCopy(_ContentModel):
    headline: str
    subheading: str
    cta_text: str = Field(alias="ctaText")


class ServiceItem(_ContentModel):
    title: str
    description: str
    icon: str = "fas fa-star"


class StatItem(_ContentModel):
    number: str
    label: str


class Testimonial(_ContentModel):
    quote: str
    author: str
    company: str = ""


class AboutSection(_ContentModel):
    headline: str
    story: str
    mission: str = ""


class ServicesSection(_ContentModel):
    headline: str
    introduction: str = ""
    items: list[ServiceItem] = Field(min_length=1)


class ContactPage(_ContentModel):
    headline: str
    subtitle: str = ""
    address: str
    phone: str
    email: str
    hours: str


class SinglePageContent(_ContentModel):
    hero: HeroCopy
    about: AboutSection
    services: ServicesSection
    contact: ContactPage
    colors: Palette | None = None


class Branding(_ContentModel):
    tagline: str
    description: str


class LandingPage(_ContentModel):
    hero: HeroCopy
    services: list[ServiceItem] = Field(min_length=1)
    stats: list[StatItem] = Field(default_factory=list)
    testimonial: Testimonial | None = None


class ValueItem(_ContentModel):
    title: str
    description: str


class TeamMember(_ContentModel):
    name: str
    position: str
    bio: str = ""


class AboutPage(AboutSection):
    values: list[ValueItem] = Field(default_factory=list)
    team: list[TeamMember] = Field(default_factory=list)


class MultiPageContent(_ContentModel):
    branding: Branding
    colors: Palette
    landing: LandingPage
    about: AboutPage
    contact: ContactPage


ContentTree = Union[SinglePageContent, MultiPageContent]

CONTENT_MODELS: dict[PageVariant, type[BaseModel]] = {
    PageVariant.SINGLE: SinglePageContent,
    PageVariant.MULTI: MultiPageContent,
}


def validate_content(data: Any, variant: PageVariant) -> ContentTree:
    if not isinstance(data, dict):
        raise MalformedContentError(f"expected a JSON object, got {type(data).__name__}")
    model = CONTENT_MODELS[variant]
    try:
        return model.model_validate(data)  # type: ignore[return-value]
    except PydanticValidationError as exc:
        first = exc.errors()[0]
        where = ".".join(str(p) for p in first.get("loc", ()))
        raise MalformedContentError(f"{variant.value}-page content invalid at '{where}': {first.get('msg')}") from exc
