"""Deduplication of canonical items by equivalence key."""

from collections.abc import Callable, Sequence

from aggregator.models.config import DedupConfig, DedupPolicy, DedupStrategy
from aggregator.models.items import CanonicalItem
from aggregator.normalization.cleaning import clean_text, normalize_url
from aggregator.utils.exceptions import ConfigurationError
from aggregator.utils.logging import get_logger

logger = get_logger(__name__)

# A None key marks an item that has nothing to compare on; it is always kept
KeyFunc = Callable[[CanonicalItem], str | None]

# Composite-key fields compared as URLs rather than text
URL_FIELDS = frozenset({"url"})

_UNBOUNDED = 1_000_000


def _text_key(value: object) -> str:
    if value is None:
        return ""
    return clean_text(value, _UNBOUNDED).lower()


def url_key(item: CanonicalItem) -> str:
    """Key on the normalized URL."""
    return normalize_url(item.url)


def title_key(item: CanonicalItem) -> str:
    """Key on the lower-cased, whitespace-collapsed title."""
    return _text_key(item.title)


def id_key(item: CanonicalItem) -> str | None:
    """Key on the source identifier; items without one never match."""
    return item.id or None


def composite_key(fields: Sequence[str]) -> KeyFunc:
    """Build a key joining several item fields with ``|``.

    Args:
        fields: CanonicalItem field names, in key order

    Returns:
        Key function

    Raises:
        ConfigurationError: If no fields are given or a name is not an item field
    """
    if not fields:
        raise ConfigurationError("Composite dedup key requires at least one field")
    unknown = [name for name in fields if name not in CanonicalItem.model_fields]
    if unknown:
        raise ConfigurationError(
            f"Unknown composite dedup fields: {', '.join(unknown)}",
            details={"fields": unknown},
        )

    def _key(item: CanonicalItem) -> str:
        parts = []
        for name in fields:
            value = getattr(item, name)
            parts.append(normalize_url(value) if name in URL_FIELDS else _text_key(value))
        return "|".join(parts)

    return _key


def key_function(strategy: DedupStrategy, fields: Sequence[str] | None = None) -> KeyFunc:
    """Resolve the key function for a strategy."""
    try:
        strategy = DedupStrategy(strategy)
    except ValueError as e:
        raise ConfigurationError(f"Unknown dedup strategy: {strategy}") from e

    if strategy == DedupStrategy.NORMALIZED_URL:
        return url_key
    if strategy == DedupStrategy.NORMALIZED_TITLE:
        return title_key
    if strategy == DedupStrategy.RAW_ID:
        return id_key
    return composite_key(fields or [])


def deduplicate_items(
    items: Sequence[CanonicalItem],
    *,
    strategy: DedupStrategy = DedupStrategy.NORMALIZED_URL,
    policy: DedupPolicy = DedupPolicy.FIRST_WINS,
    fields: Sequence[str] | None = None,
    with_duplicate_count: bool = False,
) -> tuple[list[CanonicalItem], int]:
    """Collapse items sharing an equivalence key.

    A single pass keeps, per key, the output slot of its first occurrence,
    the current winner and a running count. Output order is first-occurrence
    order under both policies; under highest-score-wins a later item only
    replaces the winner when its score is strictly greater.

    Args:
        items: Canonical items
        strategy: How the key is derived
        policy: Which item survives within a key group
        fields: Field names for the composite strategy
        with_duplicate_count: Annotate survivors with their group size

    Returns:
        Tuple of (deduplicated items, count of duplicates removed)
    """
    if not items:
        return [], 0

    key_of = key_function(strategy, fields)
    strategy = DedupStrategy(strategy)
    try:
        policy = DedupPolicy(policy)
    except ValueError as e:
        raise ConfigurationError(f"Unknown dedup policy: {policy}") from e
    replace_on_higher = policy == DedupPolicy.HIGHEST_SCORE_WINS

    winners: list[CanonicalItem] = []
    counts: list[int] = []
    slots: dict[str, int] = {}

    for item in items:
        key = key_of(item)
        slot = slots.get(key) if key is not None else None
        if slot is None:
            if key is not None:
                slots[key] = len(winners)
            winners.append(item)
            counts.append(1)
            continue

        counts[slot] += 1
        if replace_on_higher and item.score > winners[slot].score:
            winners[slot] = item

    if with_duplicate_count:
        winners = [
            item.model_copy(update={"duplicate_count": count})
            for item, count in zip(winners, counts)
        ]

    duplicates = len(items) - len(winners)
    if duplicates > 0:
        logger.info(
            "duplicates_removed",
            removed=duplicates,
            kept=len(winners),
            strategy=strategy.value,
            policy=policy.value,
        )

    return winners, duplicates


def deduplicate_with_config(
    items: Sequence[CanonicalItem],
    config: DedupConfig,
) -> tuple[list[CanonicalItem], int]:
    """Deduplicate using a ``DedupConfig`` block."""
    return deduplicate_items(
        items,
        strategy=config.strategy,
        policy=config.policy,
        fields=config.fields,
        with_duplicate_count=config.with_duplicate_count,
    )
