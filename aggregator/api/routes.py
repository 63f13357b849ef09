"""API route definitions."""

import logging as std_logging

import structlog
from fastapi import APIRouter

from aggregator import __version__
from aggregator.api.dependencies import PipelineDep
from aggregator.models.requests import (
    DeduplicateRequest,
    NormalizeRequest,
    PipelineRequest,
    RankRequest,
)
from aggregator.models.responses import (
    DeduplicateResponse,
    HealthResponse,
    NormalizeResponse,
    PipelineResponse,
    RankResponse,
)

router = APIRouter()


@router.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check() -> HealthResponse:
    """Report service status."""
    return HealthResponse(status="healthy", version=__version__)


@router.post("/pipeline", response_model=PipelineResponse, tags=["Pipeline"])
async def run_pipeline(request: PipelineRequest, pipeline: PipelineDep) -> PipelineResponse:
    """Normalize, deduplicate and rank one batch of already-fetched records.

    Omitted stage configuration falls back to service defaults; an explicit
    ``null`` for ``deduplication`` or ``ranking`` skips that stage.
    """
    ctx = structlog.contextvars.get_contextvars()
    request_id = ctx.get("request_id", "unknown")
    std_logging.info(f"pipeline_request - {len(request.records)} records [request_id: {request_id}]")
    return pipeline.execute(request)


@router.post("/normalize", response_model=NormalizeResponse, tags=["Stages"])
async def normalize(request: NormalizeRequest, pipeline: PipelineDep) -> NormalizeResponse:
    """Map raw records onto the canonical item schema."""
    return pipeline.normalize(request)


@router.post("/deduplicate", response_model=DeduplicateResponse, tags=["Stages"])
async def deduplicate(request: DeduplicateRequest, pipeline: PipelineDep) -> DeduplicateResponse:
    """Collapse canonical items that share an equivalence key."""
    return pipeline.deduplicate(request)


@router.post("/rank", response_model=RankResponse, tags=["Stages"])
async def rank(request: RankRequest, pipeline: PipelineDep) -> RankResponse:
    """Score and sort canonical items with one ranking strategy."""
    return pipeline.rank(request)
