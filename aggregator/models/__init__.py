"""Pydantic models for items, stage configuration, requests and responses."""

from aggregator.models.config import (
    BayesianConfig,
    DedupConfig,
    DedupPolicy,
    DedupStrategy,
    EngagementThresholds,
    KeywordTiers,
    MultiFactorConfig,
    NormalizerConfig,
    RankingConfig,
    RankingWeights,
    RecencyThresholds,
    SourceProfile,
    TimeDecayConfig,
)
from aggregator.models.items import CanonicalItem, RankedItem
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

__all__ = [
    "CanonicalItem",
    "RankedItem",
    "NormalizerConfig",
    "SourceProfile",
    "DedupConfig",
    "DedupPolicy",
    "DedupStrategy",
    "KeywordTiers",
    "RankingWeights",
    "RecencyThresholds",
    "EngagementThresholds",
    "MultiFactorConfig",
    "TimeDecayConfig",
    "BayesianConfig",
    "RankingConfig",
    "PipelineRequest",
    "NormalizeRequest",
    "DeduplicateRequest",
    "RankRequest",
    "PipelineResponse",
    "NormalizeResponse",
    "DeduplicateResponse",
    "RankResponse",
    "HealthResponse",
]
