"""Aggregation pipeline: normalize, deduplicate, rank."""

import time
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from aggregator.config.settings import Settings
from aggregator.models.config import (
    BayesianConfig,
    DedupConfig,
    MultiFactorConfig,
    NormalizerConfig,
    RankingWeights,
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
    NormalizeResponse,
    PipelineResponse,
    RankResponse,
)
from aggregator.normalization.normalizer import Normalizer
from aggregator.ranking.deduplication import deduplicate_with_config
from aggregator.ranking.scorer import rank_items
from aggregator.utils.clock import Clock, as_utc, utc_now
from aggregator.utils.exceptions import ValidationError
from aggregator.utils.logging import get_logger

logger = get_logger(__name__)

RankingConfigT = MultiFactorConfig | TimeDecayConfig | BayesianConfig


@dataclass
class PipelineResult:
    """Output of one pipeline run."""

    items: list[CanonicalItem] | list[RankedItem]
    normalized_count: int
    duplicates_removed: int = 0


def run_pipeline(
    records: Sequence[Any],
    *,
    now: datetime,
    normalization: NormalizerConfig | None = None,
    deduplication: DedupConfig | None = None,
    ranking: RankingConfigT | None = None,
) -> PipelineResult:
    """Run Normalizer -> Deduplicator -> Ranker over one batch.

    ``now`` is shared by every stage. A ``None`` deduplication or ranking
    config skips that stage.

    Args:
        records: Raw records in input order
        now: Pipeline time
        normalization: Normalizer settings
        deduplication: Deduplicator settings, or None to skip
        ranking: Ranking strategy settings, or None to skip

    Returns:
        PipelineResult with the final items
    """
    items: list[Any] = Normalizer(normalization).normalize(records, now)
    normalized_count = len(items)

    duplicates_removed = 0
    if deduplication is not None:
        items, duplicates_removed = deduplicate_with_config(items, deduplication)

    if ranking is not None:
        items = rank_items(items, ranking, now=now)

    return PipelineResult(
        items=items,
        normalized_count=normalized_count,
        duplicates_removed=duplicates_removed,
    )


class AggregationPipeline:
    """Service-level orchestration of the aggregation stages.

    Fills omitted stage configuration from settings, enforces the batch size
    limit and captures the clock once per request.
    """

    def __init__(self, settings: Settings, clock: Clock = utc_now):
        """Initialize the pipeline.

        Args:
            settings: Service settings supplying stage defaults
            clock: Source of the current time
        """
        self.settings = settings
        self.clock = clock

    def default_normalization(self) -> NormalizerConfig:
        return NormalizerConfig(
            title_max_length=self.settings.title_max_length,
            summary_max_length=self.settings.summary_max_length,
        )

    def default_ranking(self) -> MultiFactorConfig:
        return MultiFactorConfig(
            weights=RankingWeights(
                relevance=self.settings.weight_relevance,
                recency=self.settings.weight_recency,
                engagement=self.settings.weight_engagement,
            ),
            top_n=self.settings.default_top_n,
        )

    def _with_defaults(self, ranking: RankingConfigT | None) -> RankingConfigT | None:
        # Half-life left unset by the caller comes from settings
        if isinstance(ranking, TimeDecayConfig) and "half_life" not in ranking.model_fields_set:
            return ranking.model_copy(update={"half_life": self.settings.default_half_life_hours})
        return ranking

    def _capture_now(self, override: datetime | None) -> datetime:
        return as_utc(override) if override is not None else as_utc(self.clock())

    def _check_batch(self, size: int, field: str) -> None:
        limit = self.settings.max_batch_records
        if size > limit:
            raise ValidationError(
                f"Batch of {size} exceeds the limit of {limit}",
                field=field,
                details={"size": size, "limit": limit},
            )

    def execute(self, request: PipelineRequest) -> PipelineResponse:
        """Run the full pipeline for a request.

        Args:
            request: Records plus optional stage configuration

        Returns:
            Pipeline response with ranked items and counters
        """
        start_time = time.perf_counter()
        self._check_batch(len(request.records), "records")
        now = self._capture_now(request.now)

        provided = request.model_fields_set
        deduplication = request.deduplication if "deduplication" in provided else DedupConfig()
        ranking = request.ranking if "ranking" in provided else self.default_ranking()
        ranking = self._with_defaults(ranking)

        result = run_pipeline(
            request.records,
            now=now,
            normalization=request.normalization or self.default_normalization(),
            deduplication=deduplication,
            ranking=ranking,
        )

        processing_time_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            "pipeline_complete",
            received=len(request.records),
            duplicates_removed=result.duplicates_removed,
            returned=len(result.items),
            duration_ms=round(processing_time_ms, 2),
        )

        return PipelineResponse(
            items=result.items,
            total_received=len(request.records),
            total_normalized=result.normalized_count,
            duplicates_removed=result.duplicates_removed,
            total_returned=len(result.items),
            strategy=ranking.strategy if ranking is not None else None,
            now=now,
            processing_time_ms=processing_time_ms,
        )

    def normalize(self, request: NormalizeRequest) -> NormalizeResponse:
        """Normalize records without deduplicating or ranking."""
        self._check_batch(len(request.records), "records")
        now = self._capture_now(request.now)
        normalizer = Normalizer(request.normalization or self.default_normalization())
        items = normalizer.normalize(request.records, now)
        return NormalizeResponse(items=items, total=len(items), now=now)

    def deduplicate(self, request: DeduplicateRequest) -> DeduplicateResponse:
        """Deduplicate already-normalized items."""
        self._check_batch(len(request.items), "items")
        items, removed = deduplicate_with_config(request.items, request.deduplication)
        return DeduplicateResponse(items=items, duplicates_removed=removed)

    def rank(self, request: RankRequest) -> RankResponse:
        """Rank already-normalized items.

        Ages are recomputed against ``now`` only when the request supplies
        one; otherwise the stored ``ageHours`` values are used.
        """
        self._check_batch(len(request.items), "items")
        ranking = self._with_defaults(request.ranking or self.default_ranking())
        now = as_utc(request.now) if request.now is not None else None
        items = rank_items(request.items, ranking, now=now)
        return RankResponse(items=items, strategy=ranking.strategy)
