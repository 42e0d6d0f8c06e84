"""
Unit tests for the rule-tier theme classifier.

Covers each tier in isolation, tier precedence, ambiguous-subcategory gating
and totality over null inputs.
"""

import re

import pytest

from theme_mapping.catalog import CONTENT_THEMES, THEME_IDS, get_content_theme
from theme_mapping.classifier import ThemeClassifier, map_product_to_themes
from theme_mapping.models import Product
from theme_mapping.rules import (
    AMBIGUOUS_SUBCATEGORIES,
    CATEGORY_FALLBACK_THEMES,
    KEYWORD_PATTERNS,
    SUBCATEGORY_DIRECT_THEMES,
    SUBCATEGORY_FALLBACK_THEMES,
    ThemeRules,
)


@pytest.fixture
def classifier():
    return ThemeClassifier()


# ---------------------------------------------------------------------------
# Tier 1: direct subcategory mapping
# ---------------------------------------------------------------------------


class TestDirectSubcategoryTier:
    """Tier 1 lookups are authoritative."""

    def test_single_theme_subcategory(self, classifier):
        assert classifier.classify("Matte Lipstick", "Personal Care", "Makeup") == ["makeup_beauty"]

    def test_saree_maps_to_two_themes(self, classifier):
        themes = classifier.classify("Banarasi Silk Saree", "Apparel", "Saree")
        assert themes == ["festive_ethnic", "party_glam"]

    def test_saree_ignores_name_keywords(self, classifier):
        """Saree is not ambiguous, so name cues never add tier-2 themes."""
        themes = classifier.classify("Office blazer hoodie pyjama", "Apparel", "Saree")
        assert themes == ["festive_ethnic", "party_glam"]

    def test_fragrance_uses_later_declaration(self, classifier):
        assert classifier.classify("Rose Diffuser", "Home", "Fragrance") == ["home_living", "fragrance"]

    def test_direct_match_skips_category_fallback(self, classifier):
        """A tier-1 hit means tier 4 is never consulted."""
        themes = classifier.classify("Leather Belt", "Apparel", "Belts")
        assert themes == ["accessory_haul"]


# ---------------------------------------------------------------------------
# Tier 2: keyword refinement
# ---------------------------------------------------------------------------


class TestKeywordTier:
    """Tier 2 only applies to ambiguous subcategories."""

    def test_kurta_in_topwear_is_festive(self, classifier):
        themes = classifier.classify("Straight Kurta", "Apparel", "Topwear")
        assert "festive_ethnic" in themes

    def test_matching_is_case_insensitive(self, classifier):
        assert "festive_ethnic" in classifier.classify("ANARKALI SET", "Apparel", "Apparel Set")

    def test_multiple_themes_accumulate(self, classifier):
        themes = classifier.classify("Sequin Maxi Dress", "Apparel", "Dress")
        assert themes == ["party_glam", "summer_vibes"]

    def test_theme_added_once_per_name(self, classifier):
        themes = classifier.classify("Embroidered Silk Kurta", "Apparel", "Topwear")
        assert themes.count("festive_ethnic") == 1

    def test_themes_follow_declared_theme_order(self, classifier):
        themes = classifier.classify("Embroidered Cotton Kurta", "Apparel", "Topwear")
        assert themes == ["festive_ethnic", "summer_vibes"]

    def test_t_shirt_matches_keywords(self, classifier):
        """The name hits both the workwear "shirt" and the everyday "t-shirt" cues."""
        themes = classifier.classify("blue t-shirt", "Apparel", "Topwear")
        assert themes == ["workwear", "casual_everyday"]

    def test_keywords_ignored_outside_ambiguous_subcategories(self, classifier):
        themes = classifier.classify("Silk Kurta", "Accessories", "Bags")
        assert themes == ["accessory_haul"]

    def test_keywords_ignored_without_subcategory(self, classifier):
        themes = classifier.classify("Silk Kurta", "Apparel", None)
        assert themes == ["casual_everyday"]

    def test_runs_even_when_tier_one_matched(self):
        """Tier 2 is a refinement pass, not a fallback."""
        rules = ThemeRules(direct_subcategory={"Topwear": ("workwear",)})
        themes = ThemeClassifier(rules).classify("Kurta", "Apparel", "Topwear")
        assert themes == ["workwear", "festive_ethnic"]

    def test_first_pattern_match_stops_theme(self):
        calls = []

        class RecordingPattern:
            def __init__(self, text):
                self._re = re.compile(text, re.IGNORECASE)
                self.text = text

            def search(self, name):
                calls.append(self.text)
                return self._re.search(name)

        rules = ThemeRules(
            direct_subcategory={},
            keyword_patterns=(
                ("festive_ethnic", (RecordingPattern("kurta"), RecordingPattern("silk"))),
                ("party_glam", (RecordingPattern("sequin"), RecordingPattern("kurta"))),
            ),
        )
        themes = ThemeClassifier(rules).classify("Silk Kurta", None, "Topwear")

        assert themes == ["festive_ethnic", "party_glam"]
        assert calls == ["kurta", "sequin", "kurta"]


# ---------------------------------------------------------------------------
# Tiers 3-5: fallbacks
# ---------------------------------------------------------------------------


class TestFallbackTiers:

    def test_topwear_without_keywords_uses_subcategory_fallback(self, classifier):
        assert classifier.classify("Blue Plain Top", "Apparel", "Topwear") == ["casual_everyday"]

    def test_dress_fallback(self, classifier):
        assert classifier.classify("Midi", "Apparel", "Dress") == ["party_glam", "casual_everyday"]

    def test_apparel_set_fallback(self, classifier):
        themes = classifier.classify("Co-ord Set", "Apparel", "Apparel Set")
        assert themes == ["festive_ethnic", "casual_everyday"]

    def test_empty_name_in_ambiguous_subcategory(self, classifier):
        assert classifier.classify("", "Apparel", "Bottomwear") == ["casual_everyday"]

    def test_unknown_subcategory_uses_category(self, classifier):
        assert classifier.classify("Gadget", "Apparel", "Gizmos") == ["casual_everyday"]
        assert classifier.classify("Runner", "Footwear", "Gizmos") == ["shoe_closet"]

    def test_subcategory_fallback_beats_category(self, classifier):
        themes = classifier.classify("Midi", "Home", "Dress")
        assert "home_living" not in themes

    def test_everything_unknown_uses_default(self, classifier):
        assert classifier.classify("Mystery Box", "Gizmos", "Widgets") == ["casual_everyday"]

    def test_all_null_uses_default(self, classifier):
        assert classifier.classify(None, None, None) == ["casual_everyday"]

    def test_custom_default_theme(self):
        rules = ThemeRules(default_theme="home_living")
        assert ThemeClassifier(rules).classify(None, None, None) == ["home_living"]


# ---------------------------------------------------------------------------
# Totality and determinism
# ---------------------------------------------------------------------------


class TestTotality:

    @pytest.mark.parametrize("subcategory", sorted(
        set(SUBCATEGORY_DIRECT_THEMES) | AMBIGUOUS_SUBCATEGORIES | {"Unknown", ""}
    ))
    @pytest.mark.parametrize("name", ["", "Silk party blazer hoodie", "plain"])
    def test_result_is_non_empty_and_known(self, classifier, name, subcategory):
        themes = classifier.classify(name, None, subcategory or None)
        assert themes
        assert set(themes) <= THEME_IDS
        assert len(themes) == len(set(themes))

    @pytest.mark.parametrize("category", sorted(CATEGORY_FALLBACK_THEMES) + [None])
    def test_every_category_is_total(self, classifier, category):
        themes = classifier.classify(None, category, None)
        assert themes and set(themes) <= THEME_IDS

    def test_rule_tables_only_reference_catalog_themes(self):
        referenced = set()
        for table in (SUBCATEGORY_DIRECT_THEMES, SUBCATEGORY_FALLBACK_THEMES, CATEGORY_FALLBACK_THEMES):
            for themes in table.values():
                referenced.update(themes)
        referenced.update(theme_id for theme_id, _ in KEYWORD_PATTERNS)
        assert referenced <= THEME_IDS

    def test_keyword_patterns_are_case_insensitive(self):
        for _, patterns in KEYWORD_PATTERNS:
            for pattern in patterns:
                assert pattern.flags & re.IGNORECASE

    def test_deterministic(self, classifier):
        first = classifier.classify("Velvet Party Blazer", "Apparel", "Topwear")
        for _ in range(5):
            assert classifier.classify("Velvet Party Blazer", "Apparel", "Topwear") == first

    def test_classify_product_wrapper(self, classifier):
        product = Product(id=1, name="Sequin Maxi Dress", category="Apparel", subcategory="Dress")
        assert classifier.classify_product(product) == ["party_glam", "summer_vibes"]

    def test_module_level_helper(self):
        assert map_product_to_themes("Hair Serum", "Personal Care", "Hair") == ["haircare"]
        assert map_product_to_themes("Hair Serum") == ["casual_everyday"]


class TestCatalog:

    def test_fourteen_unique_themes(self):
        assert len(CONTENT_THEMES) == 14
        assert len(THEME_IDS) == 14

    def test_lookup(self):
        assert get_content_theme("fragrance").label == "Fragrance"
        assert get_content_theme("nope") is None
