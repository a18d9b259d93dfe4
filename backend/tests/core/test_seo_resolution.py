"""SEO Resolution - tests for route and template metadata.

Tests cover:
    - Exact page > pattern > global priority
    - Field-by-field fallback to global values
    - Pattern ordering independent of storage order
    - Template substitution and leftover placeholders
    - Advisory validation findings and text helpers
"""

from storefront.core.domain_types import SEOTemplateType, ValidationSeverity
from storefront.core.seo_resolution import (
    SEOPageConfig, SEOSettings, apply_template_variables, default_settings_document,
    generate_meta_description, merge_settings_document, ordered_patterns,
    resolve_route_seo, resolve_template_seo, truncate_for_seo, validate_seo_config,
)


def _settings(**overrides) -> SEOSettings:
    document = default_settings_document()
    document.update(overrides)
    return SEOSettings.from_dict(document)


def test_exact_page_wins():
    config = resolve_route_seo(_settings(), "/about")
    assert config.title == "About Us | {business_name}"
    assert "our story" in config.keywords


def test_pattern_match_inherits_global_description():
    config = resolve_route_seo(_settings(), "/account/orders")
    assert config.noindex is True
    assert config.description.startswith("Shop fresh, local products")


def test_unknown_route_falls_back_to_global():
    config = resolve_route_seo(_settings(), "/nowhere")
    assert config.title is None
    assert config.noindex is None
    assert "organic" in config.keywords


def test_empty_override_fields_fall_back_to_global():
    settings = _settings(pages={"/faq": {"title": "FAQ", "description": "", "keywords": []}})
    config = resolve_route_seo(settings, "/faq")
    assert config.title == "FAQ"
    assert config.description.startswith("Shop fresh")
    assert "organic" in config.keywords


def test_explicit_noindex_false_is_kept():
    settings = _settings(pages={"/sale": {"noindex": False}})
    assert resolve_route_seo(settings, "/sale").noindex is False


def test_star_needs_at_least_one_character():
    assert resolve_route_seo(_settings(), "/account/").noindex is None


def test_more_specific_pattern_wins_regardless_of_order():
    patterns = {
        "/products/*": {"title": "Any product"},
        "/products/featured/*": {"title": "Featured"},
    }
    forward = _settings(patterns=patterns)
    backward = _settings(patterns=dict(reversed(list(patterns.items()))))
    for settings in (forward, backward):
        assert resolve_route_seo(settings, "/products/featured/x").title == "Featured"
        assert resolve_route_seo(settings, "/products/y").title == "Any product"


def test_equal_specificity_patterns_sorted_by_text():
    patterns = {"/b/*": SEOPageConfig(), "/a/*": SEOPageConfig()}
    assert ordered_patterns(patterns) == ["/a/*", "/b/*"]


def test_template_variables_are_substituted():
    config = resolve_template_seo(_settings(), SEOTemplateType.PRODUCT, {
        "name": "Honey", "category_name": "Pantry", "business_name": "Market",
        "description": "Raw honey",
    })
    assert config.title == "Honey - Pantry | Market"
    assert config.description == "Raw honey"


def test_missing_variables_leave_no_placeholder():
    assert apply_template_variables("{name} | {business_name}", {"name": "Eggs"}) == "Eggs |"


def test_unknown_template_type_uses_global():
    settings = _settings(templates={})
    config = resolve_template_seo(settings, "vendor", {"name": "Farm"})
    assert config.title is None
    assert config.description.startswith("Shop fresh")


def test_merge_keeps_unsent_sections():
    merged = merge_settings_document(None, {"pages": {"/x": {"title": "X"}}})
    assert merged["pages"] == {"/x": {"title": "X"}}
    assert "/account/*" in merged["patterns"]


def test_validation_is_advisory():
    findings = validate_seo_config(SEOPageConfig(
        title="Short", description="x" * 170, keywords=["one"],
    ))
    by_field = {(f.field, f.severity) for f in findings}
    assert ("title", ValidationSeverity.WARNING) in by_field
    assert ("description", ValidationSeverity.ERROR) in by_field
    assert ("keywords", ValidationSeverity.WARNING) in by_field


def test_valid_config_has_no_findings():
    config = SEOPageConfig(
        title="Fresh Local Produce Delivered Weekly",
        description="Seasonal fruit and vegetables from farms near you, delivered to your door every week.",
        keywords=["produce", "local", "delivery"],
    )
    assert validate_seo_config(config) == []


def test_truncate_breaks_on_word_boundary():
    assert truncate_for_seo("fresh local honey jars", 12) == "fresh local..."
    assert truncate_for_seo("short", 12) == "short"


def test_meta_description_strips_html():
    assert generate_meta_description("<p>Raw   <b>honey</b></p>") == "Raw honey"
