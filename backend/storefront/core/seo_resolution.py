"""SEO Resolution - route and template metadata from injected SEO settings.

Invariants:
    - Resolution is PURE and deterministic given (settings, route)
    - Priority: exact page match > pattern match > global defaults
    - Merge is field-by-field: an empty override value falls back to global,
      noindex from the override wins whenever it is set (True or False)
    - Pattern precedence: most literal characters first, ties by pattern text,
      so the answer never depends on storage iteration order
    - apply_template_variables never leaves a '{...}' placeholder behind
    - validate_seo_config is advisory only (findings, never exceptions)

Design Decisions:
    - SEOSettings is passed in by the caller (loaded once per request) instead
      of being fetched here
    - '*' in a pattern matches one or more characters; everything else literal
"""

import copy
import re
from dataclasses import dataclass, field, asdict
from collections.abc import Mapping

from storefront.core.domain_types import (
    SEOTemplateType, TwitterCard, ValidationSeverity,
)


# ─── Types ───────────────────────────────────────────────────────

@dataclass
class SEOPageConfig:
    title: str | None = None
    description: str | None = None
    keywords: list[str] | None = None
    og_image: str | None = None
    noindex: bool | None = None

    @classmethod
    def from_dict(cls, data: Mapping | None) -> "SEOPageConfig":
        data = data or {}
        return cls(
            title=data.get("title"),
            description=data.get("description"),
            keywords=list(data["keywords"]) if data.get("keywords") is not None else None,
            og_image=data.get("og_image"),
            noindex=data.get("noindex"),
        )

    def to_dict(self) -> dict:
        return {k: v for k, v in asdict(self).items() if v is not None}


@dataclass
class SEOTemplateConfig:
    title_template: str
    description_template: str | None = None
    keywords: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping) -> "SEOTemplateConfig":
        return cls(
            title_template=data.get("title_template", ""),
            description_template=data.get("description_template"),
            keywords=list(data.get("keywords") or []),
        )


@dataclass
class SEOGlobalConfig:
    keywords: list[str] = field(default_factory=list)
    description: str = ""
    og_image: str | None = None
    twitter_card: TwitterCard = TwitterCard.SUMMARY_LARGE_IMAGE

    @classmethod
    def from_dict(cls, data: Mapping | None) -> "SEOGlobalConfig":
        data = data or {}
        return cls(
            keywords=list(data.get("keywords") or []),
            description=data.get("description", ""),
            og_image=data.get("og_image"),
            twitter_card=TwitterCard(
                data.get("twitter_card", TwitterCard.SUMMARY_LARGE_IMAGE.value),
            ),
        )


@dataclass
class SEOSettings:
    global_config: SEOGlobalConfig = field(default_factory=SEOGlobalConfig)
    pages: dict[str, SEOPageConfig] = field(default_factory=dict)
    patterns: dict[str, SEOPageConfig] = field(default_factory=dict)
    templates: dict[str, SEOTemplateConfig] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping) -> "SEOSettings":
        return cls(
            global_config=SEOGlobalConfig.from_dict(data.get("global")),
            pages={
                route: SEOPageConfig.from_dict(cfg)
                for route, cfg in (data.get("pages") or {}).items()
            },
            patterns={
                pattern: SEOPageConfig.from_dict(cfg)
                for pattern, cfg in (data.get("patterns") or {}).items()
            },
            templates={
                name: SEOTemplateConfig.from_dict(cfg)
                for name, cfg in (data.get("templates") or {}).items()
            },
        )


@dataclass
class SEOFinding:
    field: str
    message: str
    severity: ValidationSeverity


# ─── Defaults ────────────────────────────────────────────────────

DEFAULT_SEO_SETTINGS: dict = {
    "global": {
        "keywords": [
            "local products", "fresh food", "farmers market",
            "organic", "local delivery", "farm to table",
        ],
        "description": (
            "Shop fresh, local products from trusted vendors in your community."
        ),
        "twitter_card": TwitterCard.SUMMARY_LARGE_IMAGE.value,
    },
    "pages": {
        "/shop": {
            "title": "Shop All Products | {business_name}",
            "description": (
                "Browse our complete selection of fresh, local products. "
                "Filter by category, vendor, and tags to find exactly what you need."
            ),
            "keywords": ["shop", "products", "buy online", "local shopping", "browse"],
        },
        "/about": {
            "title": "About Us | {business_name}",
            "description": (
                "Learn about our mission to connect local producers with "
                "customers in the community."
            ),
            "keywords": ["about", "our story", "mission", "local business", "community"],
        },
        "/contact": {
            "title": "Contact Us | {business_name}",
            "description": (
                "Get in touch with our team. We're here to help with orders, "
                "questions, and support."
            ),
            "keywords": ["contact", "customer service", "support", "help", "get in touch"],
        },
        "/vendors": {
            "title": "Our Vendors | {business_name}",
            "description": (
                "Meet the local farmers and producers we work with. "
                "Supporting local businesses in our community."
            ),
            "keywords": ["vendors", "farmers", "producers", "local businesses", "partners"],
        },
        "/terms": {
            "title": "Terms of Service | {business_name}",
            "description": (
                "Terms and conditions for using our services. Read our policies "
                "on orders, payments, and delivery."
            ),
            "keywords": ["terms", "terms of service", "policies", "legal"],
        },
        "/privacy": {
            "title": "Privacy Policy | {business_name}",
            "description": (
                "Learn how we collect, use, and protect your personal information. "
                "Your privacy is important to us."
            ),
            "keywords": ["privacy", "privacy policy", "data protection", "security"],
        },
    },
    "patterns": {
        "/account/*": {"noindex": True},
        "/cart": {"noindex": True},
        "/checkout": {"noindex": True},
        "/wishlist": {"noindex": True},
        "/bookmarks": {"noindex": True},
    },
    "templates": {
        SEOTemplateType.PRODUCT.value: {
            "title_template": "{name} - {category_name} | {business_name}",
            "description_template": "{description}",
            "keywords": ["product", "buy", "shop", "local", "fresh"],
        },
        SEOTemplateType.CATEGORY.value: {
            "title_template": "{name} | {business_name}",
            "description_template": "Shop {name} products from local vendors. {description}",
            "keywords": ["category", "browse", "shop by category", "products"],
        },
        SEOTemplateType.VENDOR.value: {
            "title_template": "{name} - Local Vendor | {business_name}",
            "description_template": "Shop products from {name}. {description}",
            "keywords": ["vendor", "local farmer", "producer", "supplier"],
        },
        SEOTemplateType.CONTENT_POST.value: {
            "title_template": "{title} | {business_name}",
            "description_template": "{excerpt}",
            "keywords": ["blog", "article", "guide", "tips", "recipes"],
        },
    },
}

# title/description/keyword bands for validate_seo_config
SEO_VALIDATION_RULES: dict = {
    "keywords": {"min": 3, "max": 15, "max_length": 30},
    "description": {"min": 50, "max": 160, "warning_threshold": 150},
    "title": {"min": 20, "max": 60, "warning_threshold": 55},
}


def default_settings_document() -> dict:
    """Fresh deep copy of the defaults (callers may mutate it)."""
    return copy.deepcopy(DEFAULT_SEO_SETTINGS)


def merge_settings_document(existing: Mapping | None, updates: Mapping) -> dict:
    """Top-level merge of a partial update over the stored (or default) document."""
    base = dict(existing) if existing else default_settings_document()
    base.update({k: v for k, v in updates.items() if v is not None})
    return base


# ─── Merging ─────────────────────────────────────────────────────

def global_page_config(settings: SEOSettings) -> SEOPageConfig:
    """Global defaults expressed as a page config (no title, no noindex)."""
    g = settings.global_config
    return SEOPageConfig(
        description=g.description,
        keywords=list(g.keywords),
        og_image=g.og_image,
    )


def merge_page_configs(
    base: SEOPageConfig, override: SEOPageConfig | None,
) -> SEOPageConfig:
    if override is None:
        return base
    return SEOPageConfig(
        title=override.title or base.title,
        description=override.description or base.description,
        keywords=override.keywords or base.keywords,
        og_image=override.og_image or base.og_image,
        noindex=override.noindex if override.noindex is not None else base.noindex,
    )


# ─── Route matching ──────────────────────────────────────────────

def pattern_to_regex(pattern: str) -> re.Pattern:
    """'/products/*' -> ^/products/.+$ with every other character literal."""
    return re.compile(
        "^" + ".+".join(re.escape(part) for part in pattern.split("*")) + "$",
    )


def pattern_specificity(pattern: str) -> int:
    return len(pattern.replace("*", ""))


def ordered_patterns(patterns: Mapping[str, SEOPageConfig]) -> list[str]:
    """Patterns in match order: most literal characters first, then by text."""
    return sorted(patterns, key=lambda p: (-pattern_specificity(p), p))


def match_route_pattern(
    route: str, patterns: Mapping[str, SEOPageConfig],
) -> SEOPageConfig | None:
    for pattern in ordered_patterns(patterns):
        if pattern_to_regex(pattern).match(route):
            return patterns[pattern]
    return None


def resolve_route_seo(settings: SEOSettings, route: str) -> SEOPageConfig:
    """Exact page > pattern > global."""
    base = global_page_config(settings)
    exact = settings.pages.get(route)
    if exact is not None:
        return merge_page_configs(base, exact)
    pattern_match = match_route_pattern(route, settings.patterns)
    if pattern_match is not None:
        return merge_page_configs(base, pattern_match)
    return base


# ─── Templates ───────────────────────────────────────────────────

_LEFTOVER_PLACEHOLDER = re.compile(r"\{[^}]+\}")
_WHITESPACE = re.compile(r"\s+")


def apply_template_variables(template: str, variables: Mapping[str, object]) -> str:
    """Substitute {key} tokens, drop unknown tokens, collapse whitespace."""
    result = template
    for key, value in variables.items():
        result = result.replace("{" + key + "}", "" if value is None else str(value))
    result = _LEFTOVER_PLACEHOLDER.sub("", result)
    return _WHITESPACE.sub(" ", result).strip()


def resolve_template_seo(
    settings: SEOSettings,
    template_type: SEOTemplateType | str,
    variables: Mapping[str, object],
) -> SEOPageConfig:
    key = template_type.value if isinstance(template_type, SEOTemplateType) else template_type
    template = settings.templates.get(key)
    if template is None:
        return global_page_config(settings)

    description = None
    if template.description_template:
        description = apply_template_variables(template.description_template, variables)
    return SEOPageConfig(
        title=apply_template_variables(template.title_template, variables),
        description=description,
        keywords=list(template.keywords),
    )


# ─── Validation & text helpers ───────────────────────────────────

def _length_findings(
    field_name: str, label: str, value: str, rules: Mapping[str, int],
) -> list[SEOFinding]:
    findings = []
    length = len(value)
    if length < rules["min"]:
        findings.append(SEOFinding(
            field_name,
            f"{label} should be at least {rules['min']} characters",
            ValidationSeverity.WARNING,
        ))
    if length > rules["max"]:
        findings.append(SEOFinding(
            field_name,
            f"{label} exceeds {rules['max']} characters (will be truncated)",
            ValidationSeverity.ERROR,
        ))
    elif length > rules["warning_threshold"]:
        findings.append(SEOFinding(
            field_name,
            f"{label} is getting long ({length}/{rules['max']} characters)",
            ValidationSeverity.WARNING,
        ))
    return findings


def validate_seo_config(config: SEOPageConfig) -> list[SEOFinding]:
    findings: list[SEOFinding] = []
    kw_rules = SEO_VALIDATION_RULES["keywords"]

    if config.keywords is not None:
        if len(config.keywords) < kw_rules["min"]:
            findings.append(SEOFinding(
                "keywords",
                f"At least {kw_rules['min']} keywords recommended",
                ValidationSeverity.WARNING,
            ))
        if len(config.keywords) > kw_rules["max"]:
            findings.append(SEOFinding(
                "keywords",
                f"Maximum {kw_rules['max']} keywords recommended",
                ValidationSeverity.WARNING,
            ))
        for keyword in config.keywords:
            if len(keyword) > kw_rules["max_length"]:
                findings.append(SEOFinding(
                    "keywords",
                    f'Keyword "{keyword}" exceeds {kw_rules["max_length"]} characters',
                    ValidationSeverity.WARNING,
                ))

    if config.description:
        findings.extend(_length_findings(
            "description", "Description", config.description,
            SEO_VALIDATION_RULES["description"],
        ))
    if config.title:
        findings.extend(_length_findings(
            "title", "Title", config.title, SEO_VALIDATION_RULES["title"],
        ))
    return findings


def truncate_for_seo(text: str, max_length: int) -> str:
    """Cut at the last space before max_length and append '...'."""
    if len(text) <= max_length:
        return text
    truncated = text[:max_length]
    last_space = truncated.rfind(" ")
    if last_space > 0:
        return truncated[:last_space] + "..."
    return truncated + "..."


_HTML_TAG = re.compile(r"<[^>]*>")


def generate_meta_description(content: str, max_length: int = 160) -> str:
    cleaned = _WHITESPACE.sub(" ", _HTML_TAG.sub("", content)).strip()
    return truncate_for_seo(cleaned, max_length)
