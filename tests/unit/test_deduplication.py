"""Tests for deduplication."""

import pytest

from aggregator.models.config import DedupConfig, DedupPolicy, DedupStrategy
from aggregator.models.items import CanonicalItem
from aggregator.ranking.deduplication import (
    composite_key,
    deduplicate_items,
    deduplicate_with_config,
    key_function,
    url_key,
)
from aggregator.utils.exceptions import ConfigurationError


def create_item(title="Story", url="", score=0.0, source="Feed", item_id=None):
    """Helper to create canonical item."""
    return CanonicalItem(
        title=title,
        url=url,
        source=source,
        timestamp="2024-01-01T00:00:00.000Z",
        score=score,
        id=item_id,
    )


class TestKeys:
    """Tests for key derivation."""

    def test_url_variants_share_key(self):
        """Test scheme, www and trailing slash variants map to one key."""
        keys = {
            url_key(create_item(url=url))
            for url in ["https://www.example.com/a", "http://example.com/a/", "https://example.com/a"]
        }
        assert keys == {"example.com/a"}

    def test_composite_key(self):
        """Test composite keys join normalized parts."""
        key_of = composite_key(["title", "url"])
        item = create_item(title="  Big   NEWS ", url="https://www.site.com/x/")
        assert key_of(item) == "big news|site.com/x"

    def test_composite_requires_fields(self):
        """Test composite strategy without fields is rejected."""
        with pytest.raises(ConfigurationError):
            key_function(DedupStrategy.COMPOSITE, [])

    def test_composite_rejects_unknown_field(self):
        """Test composite strategy with an unknown field is rejected."""
        with pytest.raises(ConfigurationError) as exc_info:
            composite_key(["title", "nope"])
        assert exc_info.value.details == {"fields": ["nope"]}

    def test_unknown_strategy(self):
        """Test unknown strategy names are rejected."""
        with pytest.raises(ConfigurationError):
            key_function("fuzzy")


class TestDeduplicateItems:
    """Tests for deduplicate_items."""

    def test_empty(self):
        """Test deduplicating nothing."""
        assert deduplicate_items([]) == ([], 0)

    def test_no_duplicates(self):
        """Test distinct items pass through unchanged."""
        items = [create_item(url="a.com/1"), create_item(url="a.com/2")]

        result, removed = deduplicate_items(items)

        assert result == items
        assert removed == 0

    def test_first_wins(self):
        """Test the first occurrence survives and order is kept."""
        items = [
            create_item(title="first", url="https://www.example.com/a"),
            create_item(title="other", url="https://other.com"),
            create_item(title="second", url="http://example.com/a/"),
            create_item(title="third", url="https://example.com/a"),
        ]

        result, removed = deduplicate_items(items)

        assert [item.title for item in result] == ["first", "other"]
        assert removed == 2

    def test_highest_score_wins_keeps_first_slot(self):
        """Test the best-scored item takes the slot of the group's first item."""
        items = [
            create_item(title="low", url="example.com/a", score=50),
            create_item(title="other", url="other.com", score=1),
            create_item(title="high", url="example.com/a", score=100),
            create_item(title="mid", url="example.com/a", score=75),
        ]

        result, removed = deduplicate_items(items, policy=DedupPolicy.HIGHEST_SCORE_WINS)

        assert [item.title for item in result] == ["high", "other"]
        assert removed == 2

    def test_highest_score_tie_keeps_earlier(self):
        """Test ties keep the earlier item."""
        items = [
            create_item(title="a", url="example.com", score=10),
            create_item(title="b", url="example.com", score=10),
        ]

        result, _ = deduplicate_items(items, policy="highest-score-wins")

        assert result[0].title == "a"

    def test_duplicate_count(self):
        """Test survivors carry their group size when requested."""
        items = [
            create_item(url="https://www.example.com/a"),
            create_item(url="http://example.com/a/"),
            create_item(url="https://example.com/a"),
            create_item(url="https://solo.org"),
        ]

        result, _ = deduplicate_items(items, with_duplicate_count=True)

        assert [item.duplicate_count for item in result] == [3, 1]

    def test_duplicate_count_off_by_default(self):
        """Test duplicate counts are not set unless requested."""
        result, _ = deduplicate_items([create_item(url="x.com"), create_item(url="x.com")])
        assert result[0].duplicate_count is None

    def test_inputs_not_mutated(self):
        """Test input items are left untouched."""
        items = [create_item(url="x.com"), create_item(url="x.com")]

        deduplicate_items(items, with_duplicate_count=True)

        assert all(item.duplicate_count is None for item in items)

    def test_missing_urls_collapse(self):
        """Test items without a URL share the empty key."""
        result, removed = deduplicate_items([create_item(title="a"), create_item(title="b")])

        assert len(result) == 1
        assert removed == 1

    def test_title_strategy(self):
        """Test title keys ignore case and whitespace."""
        items = [
            create_item(title="Big  News", url="a.com"),
            create_item(title="big news", url="b.com"),
        ]

        result, removed = deduplicate_items(items, strategy=DedupStrategy.NORMALIZED_TITLE)

        assert len(result) == 1
        assert removed == 1

    def test_raw_id_strategy(self):
        """Test id keys compare identifiers exactly."""
        items = [
            create_item(url="a.com", item_id="1"),
            create_item(url="b.com", item_id="1"),
            create_item(url="c.com", item_id="2"),
        ]

        result, removed = deduplicate_items(items, strategy=DedupStrategy.RAW_ID)

        assert [item.url for item in result] == ["a.com", "c.com"]
        assert removed == 1

    def test_raw_id_strategy_keeps_items_without_id(self):
        """Test items without an id are never treated as duplicates."""
        items = [
            create_item(url="a.com"),
            create_item(url="b.com", item_id="7"),
            create_item(url="c.com"),
            create_item(url="d.com", item_id="7"),
            create_item(url="e.com"),
        ]

        result, removed = deduplicate_items(
            items, strategy=DedupStrategy.RAW_ID, with_duplicate_count=True
        )

        assert [item.url for item in result] == ["a.com", "b.com", "c.com", "e.com"]
        assert [item.duplicate_count for item in result] == [1, 2, 1, 1]
        assert removed == 1

    def test_composite_strategy(self):
        """Test composite keys require every part to match."""
        items = [
            create_item(title="Launch", source="HN"),
            create_item(title="launch", source="HN"),
            create_item(title="Launch", source="Reddit"),
        ]

        result, removed = deduplicate_items(
            items, strategy=DedupStrategy.COMPOSITE, fields=["title", "source"]
        )

        assert len(result) == 2
        assert removed == 1

    def test_unknown_policy(self):
        """Test unknown policy names are rejected."""
        with pytest.raises(ConfigurationError):
            deduplicate_items([create_item()], policy="random")

    def test_with_config(self):
        """Test the DedupConfig entry point."""
        config = DedupConfig(policy=DedupPolicy.HIGHEST_SCORE_WINS, with_duplicate_count=True)
        items = [create_item(url="x.com", score=1), create_item(url="x.com", score=2)]

        result, removed = deduplicate_with_config(items, config)

        assert result[0].score == 2
        assert result[0].duplicate_count == 2
        assert removed == 1
