from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from jinja2 import Environment, FileSystemLoader, StrictUndefined, UndefinedError

from gpt_site_gen.errors import MalformedContentError
from gpt_site_gen.schemas import (
    ContentTree,
    GenerateRequest,
    MultiPageContent,
    PageVariant,
    Palette,
    SinglePageContent,
    Style,
    Theme,
)

TEMPLATE_DIR = Path(__file__).resolve().parent / "site_templates"

# Fixed so that identical inputs always render identical bytes.
COPYRIGHT_YEAR = 2025

HERO_IMAGE_BASE = "https://source.unsplash.com/1600x900/"

_env = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=True,
    undefined=StrictUndefined,
    keep_trailing_newline=True,
    trim_blocks=True,
    lstrip_blocks=True,
)

STYLE_PALETTES: dict[Style, Palette] = {
    Style.MODERN: Palette(primary="#6C5CE7", secondary="#0984E3", accent="#FD79A8"),
    Style.CLASSIC: Palette(primary="#2C3E50", secondary="#8E6E53", accent="#C0392B"),
    Style.MINIMALIST: Palette(primary="#222222", secondary="#555555", accent="#999999"),
}

_THEME_COLORS: dict[Theme, dict[str, str]] = {
    Theme.LIGHT: {
        "text_primary": "#2c3e50",
        "text_secondary": "#7f8c8d",
        "background": "#ffffff",
        "surface": "#f8f9fa",
        "card": "#ffffff",
    },
    Theme.DARK: {
        "text_primary": "#ecf0f1",
        "text_secondary": "#bdc3c7",
        "background": "#121212",
        "surface": "#1e1e1e",
        "card": "#242424",
    },
}

PAGE_TEMPLATES: dict[PageVariant, tuple[tuple[str, str], ...]] = {
    PageVariant.SINGLE: (("index.html", "single.html"),),
    PageVariant.MULTI: (
        ("index.html", "multi_index.html"),
        ("about.html", "multi_about.html"),
        ("contact.html", "multi_contact.html"),
    ),
}


@dataclass(frozen=True)
class StyleVars:
    primary: str
    secondary: str
    accent: str
    text_primary: str
    text_secondary: str
    background: str
    surface: str
    card: str
    theme_class: str


@dataclass(frozen=True)
class RenderedPage:
    filename: str
    html: str


@dataclass(frozen=True)
class ImageCopy:
    source: Path
    dest_name: str


@dataclass(frozen=True)
class RenderedSite:
    pages: tuple[RenderedPage, ...]
    images: tuple[ImageCopy, ...]

    @property
    def filenames(self) -> list[str]:
        return [p.filename for p in self.pages]


def build_style(colors: Palette | None, style: Style, theme: Theme) -> StyleVars:
    palette = colors or STYLE_PALETTES[style]
    return StyleVars(
        primary=palette.primary,
        secondary=palette.secondary,
        accent=palette.accent,
        theme_class=f"{theme.value}-theme",
        **_THEME_COLORS[theme],
    )


def plan_image_copies(images: list[str], uploads_dir: Path) -> tuple[ImageCopy, ...]:
    """
    Map upload references ("/uploads/123-logo.png", "123-logo.png", ...) to a
    copy from the uploads area into images/. Only the basename is trusted.
    """
    out: list[ImageCopy] = []
    seen: set[str] = set()
    for ref in images:
        name = PurePosixPath((ref or "").replace("\\", "/")).name
        if not name or name in (".", "..") or name in seen:
            continue
        seen.add(name)
        out.append(ImageCopy(source=uploads_dir / name, dest_name=name))
    return tuple(out)


def render_site(
    content: ContentTree,
    variant: PageVariant,
    req: GenerateRequest,
    uploads_dir: Path,
) -> RenderedSite:
    expected = SinglePageContent if variant == PageVariant.SINGLE else MultiPageContent
    if not isinstance(content, expected):
        raise MalformedContentError(f"content tree does not match the {variant.value}-page template")

    images = plan_image_copies(req.images, uploads_dir)
    context = {
        "biz": req.biz,
        "niche": req.niche,
        "content": content,
        "style": build_style(content.colors, req.style, req.theme),
        "hero_image": HERO_IMAGE_BASE,
        "gallery": [f"images/{img.dest_name}" for img in images],
        "year": COPYRIGHT_YEAR,
    }

    pages: list[RenderedPage] = []
    for filename, template_name in PAGE_TEMPLATES[variant]:
        try:
            html = _env.get_template(template_name).render(context, current_page=filename)
        except UndefinedError as exc:
            raise MalformedContentError(f"{template_name}: {exc.message}") from exc
        pages.append(RenderedPage(filename=filename, html=html))
    return RenderedSite(pages=tuple(pages), images=images)
