"""Ranking and deduplication module."""

from aggregator.ranking.deduplication import deduplicate_items, deduplicate_with_config
from aggregator.ranking.scorer import (
    rank_bayesian,
    rank_items,
    rank_multi_factor,
    rank_time_decay,
    wilson_lower_bound,
)

__all__ = [
    "deduplicate_items",
    "deduplicate_with_config",
    "rank_items",
    "rank_multi_factor",
    "rank_time_decay",
    "rank_bayesian",
    "wilson_lower_bound",
]
