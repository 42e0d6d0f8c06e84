"""
Deterministic product-to-content-theme classifier.

Maps a product's name, category and subcategory to one or more content
themes by walking the rule tiers in rules.py. The result is never empty:
products that no rule recognizes land in the default theme.
"""

from typing import Dict, List, Optional

from theme_mapping.models import Product
from theme_mapping.rules import DEFAULT_RULES, ThemeRules


class ThemeClassifier:
    """
    Rule-tier theme classifier.

    Pure and stateless apart from the rule tables it is built with, so a
    single instance can be shared across threads and batches.
    """

    def __init__(self, rules: ThemeRules = DEFAULT_RULES):
        self.rules = rules

    def classify(
        self,
        name: Optional[str],
        category: Optional[str],
        subcategory: Optional[str],
    ) -> List[str]:
        """
        Classify a product into content themes.

        Args:
            name: Product title. None is treated as an empty title.
            category: Coarse category label (e.g. "Apparel"), optional.
            subcategory: Fine-grained label (e.g. "Topwear"), optional.

        Returns:
            Ordered, duplicate-free, non-empty list of theme ids.
        """
        rules = self.rules
        # dict keeps insertion order and collapses duplicates
        themes: Dict[str, None] = {}

        # Tier 1: direct subcategory mapping
        if subcategory and subcategory in rules.direct_subcategory:
            themes.update(dict.fromkeys(rules.direct_subcategory[subcategory]))

        # Tier 2: keyword refinement, runs even if tier 1 matched
        if name and subcategory in rules.ambiguous_subcategories:
            for theme_id, patterns in rules.keyword_patterns:
                if any(pattern.search(name) for pattern in patterns):
                    themes[theme_id] = None

        # Tier 3: subcategory fallback
        if not themes and subcategory and subcategory in rules.subcategory_fallback:
            themes.update(dict.fromkeys(rules.subcategory_fallback[subcategory]))

        # Tier 4: category fallback
        if not themes and category and category in rules.category_fallback:
            themes.update(dict.fromkeys(rules.category_fallback[category]))

        if not themes:
            themes[rules.default_theme] = None

        return list(themes)

    def classify_product(self, product: Product) -> List[str]:
        """Classify a Product row."""
        return self.classify(product.name, product.category, product.subcategory)


_default_classifier = ThemeClassifier()


def map_product_to_themes(
    name: Optional[str],
    category: Optional[str] = None,
    subcategory: Optional[str] = None,
) -> List[str]:
    """Classify with the default rule tables."""
    return _default_classifier.classify(name, category, subcategory)
