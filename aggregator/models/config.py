"""Stage configuration models for normalization, deduplication and ranking.

Every field has a default so a caller may send a partial block; unknown keys
are ignored. Keyword tiers and weights default to the stock tables when the
whole block is omitted, while a block that is present but missing an entry
leaves that entry empty (it then contributes nothing to the score).
"""

from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class _StageConfig(BaseModel):
    class Config:
        """Pydantic config."""

        alias_generator = to_camel
        populate_by_name = True


class SourceProfile(str, Enum):
    """Preset field tables for well-known source schemas."""

    GENERIC = "generic"
    HACKERNEWS = "hackernews"
    NEWSAPI = "newsapi"
    RSS = "rss"


class NormalizerConfig(_StageConfig):
    """Normalizer settings."""

    profile: SourceProfile = Field(default=SourceProfile.GENERIC)
    field_candidates: dict[str, list[str]] = Field(
        default_factory=dict,
        description="Per-field override of the ordered candidate source-field names",
    )
    title_max_length: int = Field(default=200, ge=1)
    summary_max_length: int = Field(default=500, ge=0)


class DedupStrategy(str, Enum):
    """How the equivalence key is derived from an item."""

    NORMALIZED_URL = "normalized-url"
    NORMALIZED_TITLE = "normalized-title"
    RAW_ID = "raw-id"
    COMPOSITE = "composite"


class DedupPolicy(str, Enum):
    """Which item survives among those sharing a key."""

    FIRST_WINS = "first-wins"
    HIGHEST_SCORE_WINS = "highest-score-wins"


class DedupConfig(_StageConfig):
    """Deduplicator settings."""

    strategy: DedupStrategy = Field(default=DedupStrategy.NORMALIZED_URL)
    policy: DedupPolicy = Field(default=DedupPolicy.FIRST_WINS)
    fields: list[str] = Field(
        default_factory=list, description="Item fields forming the composite key"
    )
    with_duplicate_count: bool = Field(default=False)


DEFAULT_HIGH_KEYWORDS = ["ai", "automation", "machine learning", "n8n", "workflow"]
DEFAULT_MEDIUM_KEYWORDS = ["technology", "innovation", "digital", "api", "integration"]
DEFAULT_LOW_KEYWORDS = ["software", "development", "programming", "data"]


class KeywordTiers(_StageConfig):
    """Keyword lists worth 3, 2 and 1 relevance points per hit."""

    high: list[str] = Field(default_factory=list)
    medium: list[str] = Field(default_factory=list)
    low: list[str] = Field(default_factory=list)


class RankingWeights(_StageConfig):
    """Factor weights; conventionally summing to 1.0 but not enforced."""

    relevance: float = Field(default=0.0)
    recency: float = Field(default=0.0)
    engagement: float = Field(default=0.0)


class RecencyThresholds(_StageConfig):
    """Age limits in hours for 3, 2 and 1 recency points; ``None`` disables a tier."""

    very_recent: float | None = Field(default=6)
    recent: float | None = Field(default=24)
    moderate: float | None = Field(default=48)


class EngagementThresholds(_StageConfig):
    """Raw score floors for 3, 2 and 1 engagement points; ``None`` disables a tier."""

    high: float | None = Field(default=100)
    medium: float | None = Field(default=50)
    low: float | None = Field(default=20)


class MultiFactorConfig(_StageConfig):
    """Weighted relevance + recency + engagement ranking."""

    strategy: Literal["multi-factor"] = "multi-factor"
    keywords: KeywordTiers = Field(
        default_factory=lambda: KeywordTiers(
            high=DEFAULT_HIGH_KEYWORDS,
            medium=DEFAULT_MEDIUM_KEYWORDS,
            low=DEFAULT_LOW_KEYWORDS,
        )
    )
    weights: RankingWeights = Field(
        default_factory=lambda: RankingWeights(relevance=0.5, recency=0.3, engagement=0.2)
    )
    recency_thresholds: RecencyThresholds = Field(default_factory=RecencyThresholds)
    engagement_thresholds: EngagementThresholds = Field(default_factory=EngagementThresholds)
    top_n: int | None = Field(default=10, ge=1)


class TimeDecayConfig(_StageConfig):
    """Exponential decay of the raw score by age."""

    strategy: Literal["time-decay"] = "time-decay"
    half_life: float = Field(default=24.0, gt=0.0, description="Hours for the score to halve")


class BayesianConfig(_StageConfig):
    """Wilson lower-bound ranking over up/down votes."""

    strategy: Literal["bayesian"] = "bayesian"
    z: float = Field(default=1.96, gt=0.0, description="Normal quantile (1.96 = 95% confidence)")


RankingConfig = Annotated[
    MultiFactorConfig | TimeDecayConfig | BayesianConfig,
    Field(discriminator="strategy"),
]
