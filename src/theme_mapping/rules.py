"""
Static rule tables for product theme classification.

Tiers are consumed by ThemeClassifier in this order:

1. SUBCATEGORY_DIRECT_THEMES   - authoritative subcategory lookup
2. KEYWORD_PATTERNS            - name regexes, only for AMBIGUOUS_SUBCATEGORIES
3. SUBCATEGORY_FALLBACK_THEMES - only when tiers 1-2 found nothing
4. CATEGORY_FALLBACK_THEMES    - only when tier 3 found nothing
5. DEFAULT_THEME               - only when everything above found nothing

Tables are built once at import and exposed read-only.
"""

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import FrozenSet, Mapping, Pattern, Tuple

from theme_mapping.catalog import (
    ACCESSORY_HAUL,
    CASUAL_EVERYDAY,
    DEFAULT_THEME,
    FESTIVE_ETHNIC,
    FRAGRANCE,
    HAIRCARE,
    HOME_LIVING,
    LOUNGEWEAR,
    MAKEUP_BEAUTY,
    PARTY_GLAM,
    SHOE_CLOSET,
    SKINCARE_ROUTINE,
    SUMMER_VIBES,
    WINTER_LAYERS,
    WORKWEAR,
)


# =============================================================================
# Tier 1: Direct subcategory mapping
# =============================================================================

SUBCATEGORY_DIRECT_THEMES: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    # Personal care
    "Makeup": (MAKEUP_BEAUTY,),
    "Skin Care": (SKINCARE_ROUTINE,),
    "Bath and Body": (SKINCARE_ROUTINE,),
    "Hair": (HAIRCARE,),
    "Beauty Accessories": (MAKEUP_BEAUTY,),
    "Appliances": (SKINCARE_ROUTINE,),
    "Wellness": (SKINCARE_ROUTINE,),
    "Health And Wellbeing": (SKINCARE_ROUTINE,),
    "Mom and Baby": (SKINCARE_ROUTINE,),

    # Apparel
    "Loungewear and Nightwear": (LOUNGEWEAR,),
    "Saree": (FESTIVE_ETHNIC, PARTY_GLAM),
    "Innerwear": (CASUAL_EVERYDAY,),

    # Accessories
    "Jewellery": (ACCESSORY_HAUL, PARTY_GLAM),
    "Bags": (ACCESSORY_HAUL,),
    "Eyewear": (ACCESSORY_HAUL, SUMMER_VIBES),
    "Belts": (ACCESSORY_HAUL,),
    "Scarves": (ACCESSORY_HAUL, WINTER_LAYERS),
    "Headwear": (ACCESSORY_HAUL,),
    "Watches": (ACCESSORY_HAUL,),
    "Socks": (ACCESSORY_HAUL, CASUAL_EVERYDAY),
    "Gloves": (ACCESSORY_HAUL, WINTER_LAYERS),
    "Wallets": (ACCESSORY_HAUL,),
    "Ties": (ACCESSORY_HAUL, WORKWEAR),
    "Baby Utilities": (ACCESSORY_HAUL,),
    "Accessories": (ACCESSORY_HAUL,),

    # Footwear
    "Shoes": (SHOE_CLOSET,),
    "Sandal": (SHOE_CLOSET, SUMMER_VIBES),
    "Flip Flops": (SHOE_CLOSET, SUMMER_VIBES),

    # Home
    "Home Decor": (HOME_LIVING,),
    "Kitchen and Dining": (HOME_LIVING,),
    "Home Organisers": (HOME_LIVING,),
    "Furniture": (HOME_LIVING,),
    "Bedding": (HOME_LIVING, LOUNGEWEAR),
    "Home Furnishing": (HOME_LIVING,),
    "Bath": (HOME_LIVING,),
    "Kitchen Linen": (HOME_LIVING,),
    "Floor Covering": (HOME_LIVING,),
    # Home fragrances and personal perfumes share this subcategory
    "Fragrance": (HOME_LIVING, FRAGRANCE),

    # Others
    "Toys and Games": (HOME_LIVING,),
    "Pet Accessories": (HOME_LIVING,),
    "Sports Nutrition": (CASUAL_EVERYDAY,),
    "Free Gifts": (CASUAL_EVERYDAY,),
})


# =============================================================================
# Tier 2: Keyword refinement for ambiguous apparel subcategories
# =============================================================================

AMBIGUOUS_SUBCATEGORIES: FrozenSet[str] = frozenset({
    "Topwear",
    "Bottomwear",
    "Dress",
    "Apparel Set",
})


def _compile(*patterns: str) -> Tuple[Pattern[str], ...]:
    return tuple(re.compile(p, re.IGNORECASE) for p in patterns)


# Ordered: themes are tested in this order, patterns within a theme too
KEYWORD_PATTERNS: Tuple[Tuple[str, Tuple[Pattern[str], ...]], ...] = (
    (FESTIVE_ETHNIC, _compile(
        r"kurta", r"kurti", r"anarkali", r"lehenga", r"dupatta", r"embroidered",
        r"ethnic", r"silk", r"chanderi", r"zari", r"brocade", r"bandhani",
        r"block.?print", r"phulkari", r"salwar", r"palazzo.*kurta", r"sharara",
        r"gharara", r"nehru", r"sherwani", r"traditional", r"festive",
    )),
    (PARTY_GLAM, _compile(
        r"sequin", r"glitter", r"bodycon", r"off.?shoulder", r"backless",
        r"halter", r"tube", r"corset", r"shimmer", r"metallic", r"satin",
        r"velvet", r"lace", r"cocktail", r"evening", r"gown", r"party",
        r"clubwear", r"glamour", r"statement",
    )),
    (WORKWEAR, _compile(
        r"formal", r"blazer", r"shirt", r"collar", r"trouser", r"tailored",
        r"office", r"business", r"professional", r"button.?up", r"pencil.?skirt",
        r"slim.?fit", r"straight.?fit", r"corporate", r"workwear",
    )),
    (SUMMER_VIBES, _compile(
        r"cotton", r"linen", r"floral", r"tiered", r"maxi", r"sundress",
        r"sleeveless", r"tank", r"cami", r"shorts", r"beach", r"resort",
        r"tropical", r"light.?weight", r"breathable", r"airy",
    )),
    (WINTER_LAYERS, _compile(
        r"sweater", r"cardigan", r"fleece", r"jacket", r"hoodie", r"thermal",
        r"knit", r"wool", r"coat", r"puffer", r"quilted", r"warm",
        r"layering", r"pullover", r"sweatshirt",
    )),
    (LOUNGEWEAR, _compile(
        r"pyjama", r"pajama", r"sleep", r"lounge", r"nightwear", r"comfort",
        r"relaxed", r"home.?wear", r"cozy", r"soft",
    )),
    (CASUAL_EVERYDAY, _compile(
        r"t.?shirt", r"tee", r"basic", r"casual", r"jeans", r"denim",
        r"everyday", r"daily", r"simple", r"regular", r"classic",
    )),
)


# =============================================================================
# Tiers 3-4: Fallbacks
# =============================================================================

SUBCATEGORY_FALLBACK_THEMES: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "Topwear": (CASUAL_EVERYDAY,),
    "Bottomwear": (CASUAL_EVERYDAY,),
    "Dress": (PARTY_GLAM, CASUAL_EVERYDAY),
    "Apparel Set": (FESTIVE_ETHNIC, CASUAL_EVERYDAY),
})

CATEGORY_FALLBACK_THEMES: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "Apparel": (CASUAL_EVERYDAY,),
    "Personal Care": (SKINCARE_ROUTINE,),
    "Accessories": (ACCESSORY_HAUL,),
    "Footwear": (SHOE_CLOSET,),
    "Home": (HOME_LIVING,),
    "Sporting Goods": (CASUAL_EVERYDAY,),
    "Toys and Games": (HOME_LIVING,),
    "Pet Supplies": (HOME_LIVING,),
    "Gourmet": (HOME_LIVING,),
    "Free Items": (CASUAL_EVERYDAY,),
})


@dataclass(frozen=True)
class ThemeRules:
    """Bundle of rule tables evaluated by ThemeClassifier."""
    direct_subcategory: Mapping[str, Tuple[str, ...]] = field(
        default_factory=lambda: SUBCATEGORY_DIRECT_THEMES
    )
    ambiguous_subcategories: FrozenSet[str] = AMBIGUOUS_SUBCATEGORIES
    keyword_patterns: Tuple[Tuple[str, Tuple[Pattern[str], ...]], ...] = KEYWORD_PATTERNS
    subcategory_fallback: Mapping[str, Tuple[str, ...]] = field(
        default_factory=lambda: SUBCATEGORY_FALLBACK_THEMES
    )
    category_fallback: Mapping[str, Tuple[str, ...]] = field(
        default_factory=lambda: CATEGORY_FALLBACK_THEMES
    )
    default_theme: str = DEFAULT_THEME


DEFAULT_RULES = ThemeRules()
