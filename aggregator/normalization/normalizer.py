"""Normalization of raw source records into canonical items."""

import math
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from aggregator.models.config import NormalizerConfig, SourceProfile
from aggregator.models.items import CanonicalItem
from aggregator.normalization.cleaning import (
    age_in_hours,
    clean_text,
    extract_domain,
    format_timestamp,
    normalize_url,
    parse_timestamp,
)
from aggregator.utils.clock import as_utc
from aggregator.utils.logging import get_logger

logger = get_logger(__name__)

RawRecord = Mapping[str, Any]

# Ordered candidate source-field names per canonical field.
# Dotted names address nested objects (NewsAPI's {"source": {"name": ...}}).
DEFAULT_FIELD_CANDIDATES: dict[str, tuple[str, ...]] = {
    "title": ("title", "headline"),
    "url": ("url", "link"),
    "source": ("source.name", "source", "sourceName", "creator"),
    "timestamp": ("timestamp", "pubDate", "publishedAt", "created_at", "time"),
    "summary": ("summary", "description", "excerpt", "contentSnippet"),
    "score": ("score", "points", "upvotes"),
    "comments": ("comments", "numComments", "num_comments", "descendants"),
    "id": ("id", "objectID", "guid"),
    "upvotes": ("upvotes", "ups"),
    "downvotes": ("downvotes", "downs"),
    "likes": ("likes", "reactions", "favorites"),
    "shares": ("shares", "retweets"),
}

DEFAULT_TITLE = "Untitled"
DEFAULT_SOURCE = "Unknown"


@dataclass(frozen=True)
class ProfileRules:
    """Fallbacks applied on top of the candidate table for one source schema."""

    candidates: dict[str, tuple[str, ...]] = field(default_factory=dict)
    source_default: str = DEFAULT_SOURCE
    summary_from_title: bool = False
    url_template: str | None = None


PROFILE_RULES: dict[SourceProfile, ProfileRules] = {
    SourceProfile.GENERIC: ProfileRules(),
    SourceProfile.HACKERNEWS: ProfileRules(
        source_default="Hacker News",
        summary_from_title=True,
        url_template="https://news.ycombinator.com/item?id={id}",
    ),
    SourceProfile.NEWSAPI: ProfileRules(summary_from_title=True),
    SourceProfile.RSS: ProfileRules(
        candidates={"source": ("creator", "dc:creator", "source")},
        source_default="RSS Feed",
        summary_from_title=True,
    ),
}


def _lookup(record: RawRecord, name: str) -> Any:
    if name in record:
        return record[name]
    node: Any = record
    for part in name.split("."):
        if not isinstance(node, Mapping) or part not in node:
            return None
        node = node[part]
    return node


def _is_present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (Mapping, list, tuple, set)):
        return len(value) > 0
    return True


def _is_text(value: Any) -> bool:
    return isinstance(value, (str, int, float)) and not isinstance(value, bool)


def to_number(value: Any) -> float | None:
    """Finite float from a number or numeric string, else ``None``."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def resolve_field(
    record: RawRecord,
    candidates: Sequence[str],
    accept: Callable[[Any], bool] | None = None,
) -> Any:
    """Return the first present candidate value, or ``None`` when nothing matches.

    Args:
        record: Raw source record
        candidates: Source-field names in priority order
        accept: Optional extra check a present value must pass to be taken

    Returns:
        The winning raw value
    """
    for name in candidates:
        value = _lookup(record, name)
        if not _is_present(value):
            continue
        if accept is not None and not accept(value):
            continue
        return value
    return None


class Normalizer:
    """Maps schema-less source records onto ``CanonicalItem``.

    Every input record yields exactly one item, in input order. Malformed
    values degrade to defaults instead of raising.
    """

    def __init__(self, config: NormalizerConfig | None = None):
        """Initialize normalizer.

        Args:
            config: Profile, candidate overrides and length limits
        """
        self.config = config or NormalizerConfig()
        self.rules = PROFILE_RULES[self.config.profile]
        self.candidates = self._build_candidates()

    def _build_candidates(self) -> dict[str, tuple[str, ...]]:
        table = dict(DEFAULT_FIELD_CANDIDATES)
        table.update(self.rules.candidates)
        for name, candidates in self.config.field_candidates.items():
            if name not in table:
                logger.debug("unknown_candidate_field_ignored", field=name)
                continue
            table[name] = tuple(candidates)
        return table

    def normalize(self, records: Sequence[Any], now: datetime) -> list[CanonicalItem]:
        """Normalize a batch against one captured ``now``.

        Args:
            records: Raw records in input order
            now: Pipeline time used for missing timestamps and ages

        Returns:
            One canonical item per record, same order
        """
        now = as_utc(now)
        items = []
        fallbacks = 0
        for index, record in enumerate(records):
            try:
                items.append(self.normalize_record(record, now))
            except (TypeError, ValueError, AttributeError, OverflowError) as e:
                logger.warning("record_normalization_failed", index=index, error=str(e))
                items.append(self._fallback_item(record, now))
                fallbacks += 1

        logger.info("records_normalized", count=len(items), fallbacks=fallbacks)
        return items

    def normalize_record(self, record: Any, now: datetime) -> CanonicalItem:
        """Normalize one raw record."""
        if not isinstance(record, Mapping):
            record = {}
        cfg = self.config
        rules = self.rules

        title = clean_text(resolve_field(record, self.candidates["title"], _is_text), cfg.title_max_length)
        title = title or DEFAULT_TITLE

        raw_id = resolve_field(record, self.candidates["id"], _is_text)
        item_id = str(raw_id).strip() if raw_id is not None else None

        raw_url = resolve_field(record, self.candidates["url"], _is_text)
        if raw_url is None and rules.url_template and item_id:
            raw_url = rules.url_template.format(id=item_id)
        url = normalize_url(raw_url)

        source = clean_text(resolve_field(record, self.candidates["source"], _is_text), cfg.title_max_length)

        summary = clean_text(
            resolve_field(record, self.candidates["summary"], _is_text), cfg.summary_max_length
        )
        if not summary and rules.summary_from_title and title != DEFAULT_TITLE:
            summary = title[: cfg.summary_max_length]

        raw_timestamp = resolve_field(
            record, self.candidates["timestamp"], lambda v: parse_timestamp(v) is not None
        )
        published = parse_timestamp(raw_timestamp) or now

        return CanonicalItem(
            title=title,
            url=url,
            source=source or rules.source_default,
            timestamp=format_timestamp(published),
            summary=summary,
            score=self._number(record, "score"),
            comments=self._count(record, "comments"),
            domain=extract_domain(url),
            age_hours=age_in_hours(published, now),
            id=item_id or None,
            upvotes=self._count(record, "upvotes"),
            downvotes=self._count(record, "downvotes"),
            likes=self._count(record, "likes"),
            shares=self._count(record, "shares"),
            original=dict(record),
        )

    def _number(self, record: RawRecord, name: str) -> float:
        value = resolve_field(record, self.candidates[name], lambda v: to_number(v) is not None)
        return to_number(value) or 0.0

    def _count(self, record: RawRecord, name: str) -> int:
        return int(self._number(record, name))

    def _fallback_item(self, record: Any, now: datetime) -> CanonicalItem:
        return CanonicalItem(
            title=DEFAULT_TITLE,
            source=self.rules.source_default,
            timestamp=format_timestamp(now),
            original=dict(record) if isinstance(record, Mapping) else None,
        )


def normalize_records(
    records: Sequence[Any],
    *,
    now: datetime,
    config: NormalizerConfig | None = None,
) -> list[CanonicalItem]:
    """Normalize a batch of raw records (functional form of ``Normalizer``)."""
    return Normalizer(config).normalize(records, now)
