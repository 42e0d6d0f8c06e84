"""
Product store backends for theme mapping.

Supports two backends:
1. InMemory: For development/testing
2. Supabase: For production (PostgREST table + one RPC for bulk writes)

Both expose the same three operations the batch runner needs:
count_products, fetch_page (cursor-based, ascending id) and bulk_update.
"""

from threading import Lock
from typing import Any, Dict, Iterable, List, Optional, Protocol, Sequence

from supabase import Client

from core.logging import get_logger
from theme_mapping.models import MappingMode, Product, ThemeAssignment


logger = get_logger(__name__)

BULK_ASSIGN_RPC = "bulk_assign_content_themes"


class ProductStoreError(Exception):
    """Raised when a store round trip fails."""

    def __init__(self, operation: str, message: str):
        self.operation = operation
        self.message = message
        super().__init__(f"Failed to {operation}: {message}")


class ProductStore(Protocol):
    """Operations the batch runner needs from a product store."""

    def count_products(self, mode: MappingMode) -> int:
        ...

    def fetch_page(
        self, mode: MappingMode, after_id: Optional[int], limit: int
    ) -> List[Product]:
        ...

    def bulk_update(self, assignments: Sequence[ThemeAssignment]) -> int:
        ...


# =============================================================================
# In-Memory Backend
# =============================================================================

class InMemoryProductStore:
    """
    Dict-backed product store.

    Note: contents are lost on restart. Use SupabaseProductStore in production.
    """

    def __init__(self, products: Optional[Iterable[Product]] = None):
        self._products: Dict[int, Product] = {}
        self._lock = Lock()
        self.bulk_update_calls = 0
        for product in products or []:
            self._products[product.id] = product

    def add(self, product: Product) -> None:
        with self._lock:
            self._products[product.id] = product

    def get(self, product_id: int) -> Optional[Product]:
        with self._lock:
            return self._products.get(product_id)

    def _matching(self, mode: MappingMode) -> List[Product]:
        rows = sorted(self._products.values(), key=lambda p: p.id)
        if mode == MappingMode.UNMAPPED_ONLY:
            rows = [p for p in rows if p.assigned_themes is None]
        return rows

    def count_products(self, mode: MappingMode) -> int:
        with self._lock:
            return len(self._matching(mode))

    def fetch_page(
        self, mode: MappingMode, after_id: Optional[int], limit: int
    ) -> List[Product]:
        with self._lock:
            rows = self._matching(mode)
            if after_id is not None:
                rows = [p for p in rows if p.id > after_id]
            # Copies, so callers can't mutate stored rows behind the lock
            return [
                Product(p.id, p.name, p.category, p.subcategory,
                        list(p.assigned_themes) if p.assigned_themes is not None else None)
                for p in rows[:limit]
            ]

    def bulk_update(self, assignments: Sequence[ThemeAssignment]) -> int:
        updated = 0
        with self._lock:
            self.bulk_update_calls += 1
            for assignment in assignments:
                product = self._products.get(assignment.id)
                if product is None:
                    continue
                product.assigned_themes = list(assignment.themes)
                updated += 1
        return updated

    def get_stats(self) -> Dict[str, Any]:
        with self._lock:
            mapped = sum(1 for p in self._products.values() if p.assigned_themes is not None)
            return {
                "backend": "in_memory",
                "products": len(self._products),
                "mapped": mapped,
            }


# =============================================================================
# Supabase Backend
# =============================================================================

class SupabaseProductStore:
    """
    Product store over a Supabase table.

    Reads go through PostgREST filters; the write-back is a single call to
    the bulk_assign_content_themes RPC (see build_rpc_sql), which only
    touches the themes column.
    """

    def __init__(
        self,
        client: Client,
        table: str = "creator_x_product_recommendations",
        themes_column: str = "content_themes",
        category_column: str = "cat",
        subcategory_column: str = "sscat",
    ):
        self.client = client
        self.table = table
        self.themes_column = themes_column
        self.category_column = category_column
        self.subcategory_column = subcategory_column

    def _apply_mode(self, query, mode: MappingMode):
        if mode == MappingMode.UNMAPPED_ONLY:
            return query.is_(self.themes_column, "null")
        return query

    def count_products(self, mode: MappingMode) -> int:
        try:
            query = self.client.table(self.table).select("id", count="exact")
            result = self._apply_mode(query, mode).limit(1).execute()
        except Exception as e:
            raise ProductStoreError("count products", str(e)) from e
        return result.count or 0

    def fetch_page(
        self, mode: MappingMode, after_id: Optional[int], limit: int
    ) -> List[Product]:
        columns = f"id, name, {self.category_column}, {self.subcategory_column}, {self.themes_column}"
        try:
            query = self._apply_mode(self.client.table(self.table).select(columns), mode)
            if after_id is not None:
                query = query.gt("id", after_id)
            result = query.order("id").limit(limit).execute()
        except Exception as e:
            raise ProductStoreError("fetch products", str(e)) from e

        return [self._row_to_product(row) for row in (result.data or [])]

    def _row_to_product(self, row: Dict[str, Any]) -> Product:
        return Product(
            id=int(row["id"]),
            name=row.get("name"),
            category=row.get(self.category_column),
            subcategory=row.get(self.subcategory_column),
            assigned_themes=row.get(self.themes_column),
        )

    def bulk_update(self, assignments: Sequence[ThemeAssignment]) -> int:
        if not assignments:
            return 0
        payload = [assignment.to_dict() for assignment in assignments]
        try:
            result = self.client.rpc(BULK_ASSIGN_RPC, {"p_updates": payload}).execute()
        except Exception as e:
            raise ProductStoreError("update product themes", str(e)) from e

        updated = result.data if isinstance(result.data, int) else len(payload)
        if updated != len(payload):
            logger.warning(
                "Bulk theme update touched fewer rows than staged",
                staged=len(payload),
                updated=updated,
            )
        return updated


def build_rpc_sql(
    table: str = "creator_x_product_recommendations",
    themes_column: str = "content_themes",
) -> str:
    """
    SQL for the bulk update RPC used by SupabaseProductStore.

    Run once via the Supabase SQL editor or psql.
    """
    return f"""
    -- Assign content themes to many products in one round trip.
    -- p_updates: [{{"id": 123, "themes": ["casual_everyday"]}}, ...]
    CREATE OR REPLACE FUNCTION {BULK_ASSIGN_RPC}(p_updates jsonb)
    RETURNS int
    LANGUAGE plpgsql AS $$
    DECLARE
        updated_count int;
    BEGIN
        UPDATE {table} AS p
        SET {themes_column} = ARRAY(
            SELECT jsonb_array_elements_text(u.value -> 'themes')
        )
        FROM jsonb_array_elements(p_updates) AS u
        WHERE p.id = (u.value ->> 'id')::bigint;

        GET DIAGNOSTICS updated_count = ROW_COUNT;
        RETURN updated_count;
    END;
    $$;

    CREATE INDEX IF NOT EXISTS idx_{table}_unmapped
        ON {table} (id) WHERE {themes_column} IS NULL;

    GRANT EXECUTE ON FUNCTION {BULK_ASSIGN_RPC} TO service_role;
    """
