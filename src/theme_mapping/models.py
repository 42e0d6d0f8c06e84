"""
Data models for theme mapping.

Dataclasses describe rows moving between the store and the runner;
pydantic models describe the HTTP request/response bodies.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ============================================================================
# Enums
# ============================================================================

class MappingMode(str, Enum):
    """Which products a batch run considers."""
    UNMAPPED_ONLY = "unmapped_only"  # assigned_themes IS NULL
    ALL = "all"                      # every product, overwriting existing themes


class BatchStatus(str, Enum):
    PROCESSING = "processing"
    COMPLETE = "complete"
    ERROR = "error"


class BatchPhase(str, Enum):
    DETERMINISTIC = "deterministic"
    NONE = "none"


# ============================================================================
# Store rows
# ============================================================================

@dataclass
class Product:
    """A product row as seen by the classifier."""
    id: int
    name: Optional[str] = None
    category: Optional[str] = None
    subcategory: Optional[str] = None
    assigned_themes: Optional[List[str]] = None


@dataclass
class ThemeAssignment:
    """Staged write: the themes computed for one product id."""
    id: int
    themes: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "themes": list(self.themes)}


# ============================================================================
# Request Models
# ============================================================================

class MapThemesRequest(BaseModel):
    """Request body for one batch of theme mapping."""
    mode: MappingMode = Field(MappingMode.UNMAPPED_ONLY, description="unmapped_only or all")
    batch_size: Optional[int] = Field(
        None, ge=1, description="Products per batch (defaults to DEFAULT_BATCH_SIZE)"
    )
    last_processed_id: Optional[int] = Field(
        None, ge=0, description="Cursor returned by the previous batch"
    )
    completed_batches: int = Field(
        0, ge=0, description="currentBatch of the previous response, for progress numbering"
    )
    dry_run: bool = Field(False, description="Classify without writing back")

    @field_validator("mode", mode="before")
    @classmethod
    def accept_remap_all(cls, v):
        # Older admin clients send "remap_all"
        if v == "remap_all":
            return MappingMode.ALL
        return v


class ClassifyRequest(BaseModel):
    """Preview classification for a single product."""
    name: Optional[str] = Field(None, max_length=1000)
    category: Optional[str] = Field(None, max_length=200)
    subcategory: Optional[str] = Field(None, max_length=200)


# ============================================================================
# Response Models
# ============================================================================

class BatchProgress(BaseModel):
    """Outcome of a single batch. Field names are camelCase on the wire."""
    model_config = ConfigDict(populate_by_name=True)

    status: BatchStatus
    phase: BatchPhase = BatchPhase.NONE
    processed_count: int = Field(0, alias="processedCount")
    total_count: int = Field(0, alias="totalCount")
    remaining_count: int = Field(0, alias="remainingCount")
    current_batch: int = Field(0, alias="currentBatch")
    total_batches: int = Field(0, alias="totalBatches")
    estimated_time_remaining: Optional[str] = Field(None, alias="estimatedTimeRemaining")
    last_processed_id: Optional[int] = Field(None, alias="lastProcessedId")
    has_more: bool = Field(False, alias="hasMore")
    message: str = ""
    error: Optional[str] = None

    def to_response(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ContentThemeResponse(BaseModel):
    id: str
    label: str
    icon: str


class ThemeCatalogResponse(BaseModel):
    themes: List[ContentThemeResponse]


class ClassifyResponse(BaseModel):
    themes: List[str]
