"""
Canned single-page content per website type, used by /test-generate to build
a site without calling the generation API.
"""

from __future__ import annotations

from typing import Any

from gpt_site_gen.schemas import PageVariant, SinglePageContent, validate_content

_SERVICES: dict[str, list[dict[str, str]]] = {
    "restaurant": [
        {"title": "Fine Dining", "icon": "fas fa-utensils", "description": "Exquisite culinary experiences with locally sourced ingredients"},
        {"title": "Private Events", "icon": "fas fa-calendar-alt", "description": "Perfect venue for special occasions and celebrations"},
        {"title": "Catering", "icon": "fas fa-truck", "description": "Bring our exceptional cuisine to your location"},
    ],
    "business": [
        {"title": "Consulting", "icon": "fas fa-lightbulb", "description": "Expert guidance to grow your business"},
        {"title": "Strategy", "icon": "fas fa-chart-line", "description": "Data-driven strategies for success"},
        {"title": "Support", "icon": "fas fa-headset", "description": "24/7 customer support and assistance"},
    ],
    "retail": [
        {"title": "Online Store", "icon": "fas fa-shopping-cart", "description": "Shop our complete collection online"},
        {"title": "Fast Delivery", "icon": "fas fa-shipping-fast", "description": "Quick and reliable shipping worldwide"},
        {"title": "Customer Care", "icon": "fas fa-heart", "description": "Dedicated support for all your needs"},
    ],
}

_COLORS: dict[str, dict[str, str]] = {
    "restaurant": {"primary": "#D4653F", "secondary": "#8B4513", "accent": "#FFD700"},
    "business": {"primary": "#3498DB", "secondary": "#2980B9", "accent": "#E74C3C"},
    "retail": {"primary": "#E91E63", "secondary": "#C2185B", "accent": "#FF9800"},
}


def preset_content(biz: str, niche: str, website_type: str) -> SinglePageContent:
    kind = website_type if website_type in _SERVICES else "business"
    domain = "".join(biz.lower().split())
    data: dict[str, Any] = {
        "hero": {
            "headline": f"Welcome to {biz}",
            "subheading": f"Your premier destination for {niche}. Experience excellence like never before.",
            "ctaText": "Get Started Today",
        },
        "about": {
            "headline": "About Our Company",
            "story": (
                f"At {biz}, we are passionate about delivering exceptional {niche.lower()} services. "
                "With years of experience and a commitment to excellence, we have built a reputation "
                "for quality, reliability, and customer satisfaction."
            ),
            "mission": f"{biz} is your trusted partner for {niche.lower()}.",
        },
        "services": {
            "headline": "Our Services",
            "introduction": "",
            "items": _SERVICES[kind],
        },
        "contact": {
            "headline": "Contact Us",
            "subtitle": "We would love to hear from you.",
            "address": "123 Business Avenue, Suite 100, Your City, State 12345",
            "phone": "(555) 123-4567",
            "email": f"info@{domain}.com",
            "hours": "Mon-Fri: 9AM-6PM, Sat: 10AM-4PM",
        },
        "colors": _COLORS[kind],
    }
    return validate_content(data, PageVariant.SINGLE)  # type: ignore[return-value]
