"""Ranking strategies for canonical items.

Three mutually exclusive strategies are available: weighted multi-factor
scoring, exponential time decay, and the Wilson lower bound over votes.
Each returns new ``RankedItem`` objects sorted by descending score with a
stable sort, so equal scores keep their input order.
"""

import math
from collections.abc import Sequence
from datetime import datetime

from aggregator.models.config import (
    BayesianConfig,
    EngagementThresholds,
    KeywordTiers,
    MultiFactorConfig,
    RankingWeights,
    RecencyThresholds,
    TimeDecayConfig,
)
from aggregator.models.items import CanonicalItem, RankedItem
from aggregator.normalization.cleaning import age_in_hours, parse_timestamp, round_half_up
from aggregator.utils.clock import as_utc
from aggregator.utils.exceptions import ConfigurationError
from aggregator.utils.logging import get_logger

logger = get_logger(__name__)

# Points per keyword hit, by tier
TIER_POINTS = {"high": 3, "medium": 2, "low": 1}

WILSON_Z_95 = 1.96

# 0.5 ** x stays inside the float range for |x| <= 1000
MAX_DECAY_EXPONENT = 1000.0

# Largest integer a JSON consumer can hold exactly
MAX_DECAYED_SCORE = float(2**53)


def _extend(item: CanonicalItem, **scores: float | int | None) -> RankedItem:
    """Copy ``item`` into a ``RankedItem`` carrying the given score fields."""
    return RankedItem(**{**dict(item), **scores})


def _age_hours(item: CanonicalItem, now: datetime | None) -> int:
    if now is None:
        return item.age_hours
    published = parse_timestamp(item.timestamp)
    if published is None:
        return item.age_hours
    return age_in_hours(published, now)


def relevance_points(text: str, keywords: KeywordTiers) -> int:
    """Sum tier points for every keyword found in ``text`` (case-insensitive)."""
    haystack = text.lower()
    points = 0
    for tier, value in TIER_POINTS.items():
        for keyword in getattr(keywords, tier):
            needle = keyword.lower()
            if needle and needle in haystack:
                points += value
    return points


def recency_points(age_hours: float, thresholds: RecencyThresholds) -> int:
    """3/2/1/0 points for ages under the very-recent/recent/moderate limits."""
    tiers = ((thresholds.very_recent, 3), (thresholds.recent, 2), (thresholds.moderate, 1))
    for limit, value in tiers:
        if limit is not None and age_hours < limit:
            return value
    return 0


def engagement_points(score: float, thresholds: EngagementThresholds) -> int:
    """3/2/1/0 points for raw scores above the high/medium/low floors."""
    tiers = ((thresholds.high, 3), (thresholds.medium, 2), (thresholds.low, 1))
    for floor, value in tiers:
        if floor is not None and score > floor:
            return value
    return 0


def _check_weights(weights: RankingWeights) -> None:
    total = weights.relevance + weights.recency + weights.engagement
    if not math.isclose(total, 1.0, abs_tol=1e-9):
        logger.warning("ranking_weights_unnormalized", total=round(total, 6))


def rank_multi_factor(
    items: Sequence[CanonicalItem],
    config: MultiFactorConfig | None = None,
    *,
    now: datetime | None = None,
) -> list[RankedItem]:
    """Rank by weighted keyword relevance, recency and engagement.

    Args:
        items: Items to rank
        config: Keyword tiers, weights, thresholds and top-N limit
        now: Pipeline time; when given, ages are recomputed from timestamps

    Returns:
        Ranked items, best first, truncated to ``config.top_n``
    """
    config = config or MultiFactorConfig()
    now = as_utc(now) if now is not None else None
    weights = config.weights
    _check_weights(weights)

    scored = []
    for item in items:
        age = _age_hours(item, now)
        relevance = relevance_points(f"{item.title} {item.summary}", config.keywords)
        recency = recency_points(age, config.recency_thresholds)
        engagement = engagement_points(item.score, config.engagement_thresholds)
        final = (
            relevance * weights.relevance
            + recency * weights.recency
            + engagement * weights.engagement
        )
        scored.append(
            _extend(
                item,
                age_hours=age,
                relevance_score=relevance,
                recency_score=recency,
                engagement_score=engagement,
                final_score=final,
            )
        )

    ranked = sorted(scored, key=lambda x: x.final_score, reverse=True)
    if config.top_n is not None:
        ranked = ranked[: config.top_n]

    logger.info("items_ranked", strategy=config.strategy, received=len(items), returned=len(ranked))
    return ranked


def decayed_score(score: float, age_hours: float, half_life: float) -> int:
    """``score * 0.5 ** (age / half_life)``, rounded half up.

    Far-future timestamps give large negative ages; the result saturates at
    ``±MAX_DECAYED_SCORE`` instead of overflowing.
    """
    exponent = min(max(age_hours / half_life, -MAX_DECAY_EXPONENT), MAX_DECAY_EXPONENT)
    value = score * 0.5**exponent
    return round_half_up(min(max(value, -MAX_DECAYED_SCORE), MAX_DECAYED_SCORE))


def rank_time_decay(
    items: Sequence[CanonicalItem],
    config: TimeDecayConfig | None = None,
    *,
    now: datetime | None = None,
) -> list[RankedItem]:
    """Rank by raw score decayed exponentially with age."""
    config = config or TimeDecayConfig()
    now = as_utc(now) if now is not None else None

    scored = []
    for item in items:
        age = _age_hours(item, now)
        scored.append(
            _extend(
                item,
                age_hours=age,
                original_score=item.score,
                decayed_score=decayed_score(item.score, age, config.half_life),
            )
        )

    ranked = sorted(scored, key=lambda x: x.decayed_score, reverse=True)
    logger.info("items_ranked", strategy=config.strategy, received=len(items), returned=len(ranked))
    return ranked


def wilson_lower_bound(upvotes: int, downvotes: int, z: float = WILSON_Z_95) -> float:
    """Lower bound of the Wilson score interval for the up-vote proportion.

    Returns exactly 0 when there are no votes. Negative counts are treated
    as zero.
    """
    upvotes = max(upvotes, 0)
    downvotes = max(downvotes, 0)
    total = upvotes + downvotes
    if total == 0:
        return 0.0

    phat = upvotes / total
    z2 = z * z
    spread = z * math.sqrt((phat * (1 - phat) + z2 / (4 * total)) / total)
    return (phat + z2 / (2 * total) - spread) / (1 + z2 / total)


def rank_bayesian(
    items: Sequence[CanonicalItem],
    config: BayesianConfig | None = None,
    *,
    now: datetime | None = None,
) -> list[RankedItem]:
    """Rank by Wilson lower bound over up/down votes."""
    config = config or BayesianConfig()

    scored = [
        _extend(item, bayesian_score=wilson_lower_bound(item.upvotes, item.downvotes, config.z))
        for item in items
    ]

    ranked = sorted(scored, key=lambda x: x.bayesian_score, reverse=True)
    logger.info("items_ranked", strategy=config.strategy, received=len(items), returned=len(ranked))
    return ranked


def rank_items(
    items: Sequence[CanonicalItem],
    config: MultiFactorConfig | TimeDecayConfig | BayesianConfig,
    *,
    now: datetime | None = None,
) -> list[RankedItem]:
    """Rank with the strategy selected by ``config``.

    Raises:
        ConfigurationError: If ``config`` is not a known ranking configuration
    """
    if isinstance(config, MultiFactorConfig):
        return rank_multi_factor(items, config, now=now)
    if isinstance(config, TimeDecayConfig):
        return rank_time_decay(items, config, now=now)
    if isinstance(config, BayesianConfig):
        return rank_bayesian(items, config, now=now)
    raise ConfigurationError(f"Unknown ranking configuration: {type(config).__name__}")
