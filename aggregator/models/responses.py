"""API response models."""

from datetime import datetime

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from aggregator.models.items import CanonicalItem, RankedItem


class _ApiResponse(BaseModel):
    class Config:
        """Pydantic config."""

        alias_generator = to_camel
        populate_by_name = True


class PipelineResponse(_ApiResponse):
    """Result of a full pipeline run."""

    success: bool = Field(default=True)
    items: list[RankedItem | CanonicalItem] = Field(default_factory=list)
    total_received: int = Field(..., ge=0, description="Raw records received")
    total_normalized: int = Field(..., ge=0, description="Canonical items produced")
    duplicates_removed: int = Field(default=0, ge=0)
    total_returned: int = Field(..., ge=0, description="Items returned after ranking")
    strategy: str | None = Field(default=None, description="Ranking strategy applied")
    now: datetime = Field(..., description="Pipeline time shared by all stages")
    processing_time_ms: float = Field(..., ge=0)


class NormalizeResponse(_ApiResponse):
    """Normalized items."""

    items: list[CanonicalItem] = Field(default_factory=list)
    total: int = Field(..., ge=0)
    now: datetime


class DeduplicateResponse(_ApiResponse):
    """Deduplicated items."""

    items: list[CanonicalItem] = Field(default_factory=list)
    duplicates_removed: int = Field(default=0, ge=0)


class RankResponse(_ApiResponse):
    """Ranked items."""

    items: list[RankedItem] = Field(default_factory=list)
    strategy: str


class HealthResponse(_ApiResponse):
    """Service health."""

    status: str = Field(default="healthy")
    version: str
