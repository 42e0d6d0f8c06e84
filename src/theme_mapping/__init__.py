"""
Content theme mapping for creator product recommendations.

- catalog: the closed set of content themes
- rules / classifier: deterministic multi-tier classification
- store / batch_runner: cursor-paginated write-back to the product table
"""

from theme_mapping.batch_runner import ThemeBatchRunner, run_until_complete
from theme_mapping.catalog import CONTENT_THEMES, DEFAULT_THEME, THEME_IDS, ContentTheme
from theme_mapping.classifier import ThemeClassifier, map_product_to_themes
from theme_mapping.models import BatchProgress, BatchStatus, MappingMode, Product
from theme_mapping.store import (
    InMemoryProductStore,
    ProductStoreError,
    SupabaseProductStore,
)

__all__ = [
    "ThemeBatchRunner",
    "run_until_complete",
    "CONTENT_THEMES",
    "DEFAULT_THEME",
    "THEME_IDS",
    "ContentTheme",
    "ThemeClassifier",
    "map_product_to_themes",
    "BatchProgress",
    "BatchStatus",
    "MappingMode",
    "Product",
    "InMemoryProductStore",
    "ProductStoreError",
    "SupabaseProductStore",
]
