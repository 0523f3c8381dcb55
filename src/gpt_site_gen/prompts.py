from __future__ import annotations

from gpt_site_gen.schemas import GenerateRequest, PageVariant

_SINGLE_PAGE_SHAPE = """{
  "hero": {
    "headline": "Compelling main headline",
    "subheading": "Supporting text (1-2 sentences)",
    "ctaText": "Call-to-action button text"
  },
  "about": {
    "headline": "About section heading",
    "story": "Company story and background (1-2 paragraphs)",
    "mission": "Mission statement"
  },
  "services": {
    "headline": "Services section heading",
    "introduction": "One sentence overview of the services",
    "items": [
      {"title": "Service 1", "description": "Service description", "icon": "Font Awesome icon class (e.g., fas fa-star)"},
      {"title": "Service 2", "description": "Service description", "icon": "Font Awesome icon class"},
      {"title": "Service 3", "description": "Service description", "icon": "Font Awesome icon class"}
    ]
  },
  "contact": {
    "headline": "Contact section heading",
    "subtitle": "Welcoming message encouraging contact",
    "address": "Full business address",
    "phone": "Phone number",
    "email": "Professional email address",
    "hours": "Business hours"
  },
  "colors": {
    "primary": "Primary brand color hex code",
    "secondary": "Secondary color hex",
    "accent": "Accent color hex"
  }
}"""

_MULTI_PAGE_SHAPE = """{
  "branding": {
    "tagline": "Catchy tagline for the business",
    "description": "Brief 1-sentence description of what they do"
  },
  "colors": {
    "primary": "Primary brand color hex code",
    "secondary": "Secondary color hex",
    "accent": "Accent color hex"
  },
  "landing": {
    "hero": {
      "headline": "Compelling main headline",
      "subheading": "Supporting text (2-3 sentences)",
      "ctaText": "Call-to-action button text"
    },
    "services": [
      {"title": "Service 1", "description": "Detailed service description", "icon": "Font Awesome icon class (e.g., fas fa-star)"},
      {"title": "Service 2", "description": "Detailed service description", "icon": "Font Awesome icon class"},
      {"title": "Service 3", "description": "Detailed service description", "icon": "Font Awesome icon class"}
    ],
    "stats": [
      {"number": "Statistic", "label": "Description"},
      {"number": "Statistic", "label": "Description"},
      {"number": "Statistic", "label": "Description"}
    ],
    "testimonial": {"quote": "Customer testimonial", "author": "Client name", "company": "Client company"}
  },
  "about": {
    "headline": "About page main heading",
    "story": "Company story and background (3-4 paragraphs)",
    "mission": "Mission statement",
    "values": [
      {"title": "Value 1", "description": "Value description"},
      {"title": "Value 2", "description": "Value description"},
      {"title": "Value 3", "description": "Value description"}
    ],
    "team": [
      {"name": "Team member name", "position": "Job title", "bio": "Brief bio"}
    ]
  },
  "contact": {
    "headline": "Contact page heading",
    "subtitle": "Welcoming message encouraging contact",
    "address": "Full business address",
    "phone": "Phone number",
    "email": "Professional email address",
    "hours": "Business hours"
  }
}"""


def build_content_prompt(req: GenerateRequest) -> str:
    if req.pages == PageVariant.SINGLE:
        intro = (
            f'Create content for a professional single-page website for "{req.biz}" '
            f'in the "{req.niche}" industry (type: {req.website_type}).\n'
        )
        shape = _SINGLE_PAGE_SHAPE
    else:
        intro = (
            f'Create comprehensive content for a professional 3-page website for "{req.biz}" '
            f'in the "{req.niche}" industry (type: {req.website_type}).\n'
        )
        shape = _MULTI_PAGE_SHAPE

    return (
        f"{intro}\n"
        "Return a JSON object with this exact structure, and nothing else:\n"
        f"{shape}\n\n"
        "No markdown, no commentary, no extra keys.\n"
        f"Make all content professional, engaging, and specific to the {req.niche} industry "
        f"and a {req.style.value} visual style."
    )
