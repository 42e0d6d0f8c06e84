"""
Theme mapping API routes.

- GET  /api/themes           - content theme catalog
- POST /api/themes/classify  - preview the themes for one product
- POST /api/themes/map       - classify and write back one batch of products

The map endpoint is stateless: the admin client keeps calling it with the
returned lastProcessedId until status is no longer "processing".

NOTE: Routes use `def` (not `async def`) because the Supabase client is
synchronous; FastAPI runs sync handlers in its thread pool.
"""

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from config.database import SupabaseClientError, get_supabase_client
from config.settings import Settings, get_settings
from core.logging import bind_context, get_logger
from theme_mapping.batch_runner import ThemeBatchRunner
from theme_mapping.catalog import CONTENT_THEMES
from theme_mapping.classifier import map_product_to_themes
from theme_mapping.models import (
    BatchProgress,
    BatchStatus,
    ClassifyRequest,
    ClassifyResponse,
    MapThemesRequest,
    ThemeCatalogResponse,
)
from theme_mapping.store import ProductStore, SupabaseProductStore

logger = get_logger(__name__)

router = APIRouter(prefix="/api/themes", tags=["Themes"])


def get_product_store(settings: Settings = Depends(get_settings)) -> ProductStore:
    """FastAPI dependency for the product store backing the map endpoint."""
    try:
        client = get_supabase_client()
    except SupabaseClientError as e:
        logger.error("Product store unavailable", error=str(e))
        raise HTTPException(status_code=503, detail="Product store unavailable")
    return SupabaseProductStore(
        client,
        table=settings.products_table,
        themes_column=settings.themes_column,
    )


@router.get("", response_model=ThemeCatalogResponse, summary="List content themes")
def list_themes() -> ThemeCatalogResponse:
    return ThemeCatalogResponse(themes=[theme.to_dict() for theme in CONTENT_THEMES])


@router.post("/classify", response_model=ClassifyResponse, summary="Preview product themes")
def classify_product(request: ClassifyRequest) -> ClassifyResponse:
    """Run the classifier on a single product without touching the store."""
    themes = map_product_to_themes(request.name, request.category, request.subcategory)
    return ClassifyResponse(themes=themes)


@router.post(
    "/map",
    response_model=BatchProgress,
    response_model_by_alias=True,
    summary="Map one batch of products to content themes",
    responses={500: {"description": "Store failure; body has status=error"}},
)
def map_product_themes(
    request: MapThemesRequest,
    store: ProductStore = Depends(get_product_store),
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    """
    Classify the next batch of products after last_processed_id.

    - **unmapped_only**: only products whose themes are still null
    - **all**: recompute and overwrite every product's themes

    Returns 500 with the same body shape when the store fails; the
    returned lastProcessedId is unchanged so the call can simply be retried.
    """
    batch_size = request.batch_size or settings.default_batch_size
    if batch_size > settings.max_batch_size:
        raise HTTPException(
            status_code=422,
            detail=f"batch_size must be <= {settings.max_batch_size}",
        )

    bind_context(mode=request.mode.value, batch_size=batch_size)
    logger.info(
        "Theme mapping batch requested",
        last_processed_id=request.last_processed_id,
        dry_run=request.dry_run,
    )

    runner = ThemeBatchRunner(store)
    progress = runner.run_batch(
        mode=request.mode,
        batch_size=batch_size,
        last_processed_id=request.last_processed_id,
        completed_batches=request.completed_batches,
        dry_run=request.dry_run,
    )

    status_code = 500 if progress.status == BatchStatus.ERROR else 200
    return JSONResponse(content=progress.to_response(), status_code=status_code)
