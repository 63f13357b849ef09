"""API request models."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from aggregator.models.config import DedupConfig, NormalizerConfig, RankingConfig
from aggregator.models.items import CanonicalItem


class _ApiRequest(BaseModel):
    class Config:
        """Pydantic config."""

        alias_generator = to_camel
        populate_by_name = True


class PipelineRequest(_ApiRequest):
    """Run normalization, deduplication and ranking over one batch.

    Omitting ``deduplication`` or ``ranking`` applies the service defaults;
    sending ``null`` skips that stage.
    """

    records: list[dict[str, Any]] = Field(
        default_factory=list, description="Raw records as fetched from their sources"
    )
    normalization: NormalizerConfig | None = Field(default=None)
    deduplication: DedupConfig | None = Field(default=None)
    ranking: RankingConfig | None = Field(default=None)
    now: datetime | None = Field(
        default=None, description="Pipeline time override; defaults to the server clock"
    )

    class Config:
        """Pydantic config."""

        json_schema_extra = {
            "example": {
                "records": [
                    {
                        "title": "Show HN: My Project",
                        "url": "https://example.com",
                        "score": 150,
                        "descendants": 42,
                        "time": 1704067200,
                    },
                    {
                        "headline": "AI automation tool launched",
                        "link": "https://www.example.org/ai-tool/",
                        "pubDate": "Mon, 01 Jan 2024 00:00:00 GMT",
                    },
                ],
                "deduplication": {"strategy": "normalized-url", "policy": "highest-score-wins"},
                "ranking": {"strategy": "multi-factor", "topN": 5},
            }
        }


class NormalizeRequest(_ApiRequest):
    """Normalize raw records only."""

    records: list[dict[str, Any]] = Field(default_factory=list)
    normalization: NormalizerConfig | None = Field(default=None)
    now: datetime | None = Field(default=None)


class DeduplicateRequest(_ApiRequest):
    """Deduplicate already-normalized items."""

    items: list[CanonicalItem] = Field(default_factory=list)
    deduplication: DedupConfig = Field(default_factory=DedupConfig)


class RankRequest(_ApiRequest):
    """Rank already-normalized items."""

    items: list[CanonicalItem] = Field(default_factory=list)
    ranking: RankingConfig | None = Field(default=None)
    now: datetime | None = Field(default=None)
