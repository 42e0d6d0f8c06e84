"""
Content theme catalog.

The closed set of themes a product can be tagged with. Ids are what gets
stored on products; labels and icons are what the creator app shows.
"""

from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional, Tuple


@dataclass(frozen=True)
class ContentTheme:
    """A content-style tag shown to creators."""
    id: str
    label: str
    icon: str

    def to_dict(self) -> Dict[str, str]:
        return {"id": self.id, "label": self.label, "icon": self.icon}


FESTIVE_ETHNIC = "festive_ethnic"
PARTY_GLAM = "party_glam"
CASUAL_EVERYDAY = "casual_everyday"
WORKWEAR = "workwear"
LOUNGEWEAR = "loungewear"
SUMMER_VIBES = "summer_vibes"
WINTER_LAYERS = "winter_layers"
MAKEUP_BEAUTY = "makeup_beauty"
SKINCARE_ROUTINE = "skincare_routine"
HAIRCARE = "haircare"
ACCESSORY_HAUL = "accessory_haul"
SHOE_CLOSET = "shoe_closet"
HOME_LIVING = "home_living"
FRAGRANCE = "fragrance"

# Display order used by the creator app
CONTENT_THEMES: Tuple[ContentTheme, ...] = (
    ContentTheme(FESTIVE_ETHNIC, "Festive & Ethnic", "✨"),
    ContentTheme(PARTY_GLAM, "Party & Glam", "🎉"),
    ContentTheme(CASUAL_EVERYDAY, "Everyday", "👕"),
    ContentTheme(WORKWEAR, "Office Ready", "💼"),
    ContentTheme(LOUNGEWEAR, "Cozy Lounge", "🛋️"),
    ContentTheme(SUMMER_VIBES, "Summer", "☀️"),
    ContentTheme(WINTER_LAYERS, "Winter", "❄️"),
    ContentTheme(MAKEUP_BEAUTY, "Makeup", "💄"),
    ContentTheme(SKINCARE_ROUTINE, "Skincare", "🧴"),
    ContentTheme(HAIRCARE, "Hair Goals", "💇"),
    ContentTheme(ACCESSORY_HAUL, "Accessories", "👜"),
    ContentTheme(SHOE_CLOSET, "Shoes", "👠"),
    ContentTheme(HOME_LIVING, "Home & Living", "🏠"),
    ContentTheme(FRAGRANCE, "Fragrance", "🌸"),
)

THEME_IDS: FrozenSet[str] = frozenset(theme.id for theme in CONTENT_THEMES)

DEFAULT_THEME = CASUAL_EVERYDAY

_THEMES_BY_ID: Dict[str, ContentTheme] = {theme.id: theme for theme in CONTENT_THEMES}


def get_content_theme(theme_id: str) -> Optional[ContentTheme]:
    """Look up a theme by id. Returns None for unknown ids."""
    return _THEMES_BY_ID.get(theme_id)
