"""Tests for field cleaning helpers."""

from datetime import datetime, timedelta, timezone

import pytest

from aggregator.normalization.cleaning import (
    age_in_hours,
    clean_text,
    extract_domain,
    format_timestamp,
    normalize_url,
    parse_timestamp,
    round_half_up,
)

JAN_1 = datetime(2024, 1, 1, tzinfo=timezone.utc)


class TestNormalizeUrl:
    """Tests for URL normalization."""

    @pytest.mark.parametrize(
        "raw",
        [
            "https://www.example.com/a",
            "http://example.com/a/",
            "https://example.com/a",
            "HTTPS://WWW.EXAMPLE.COM/A",
            "  example.com/a  ",
        ],
    )
    def test_variants_share_one_form(self, raw):
        """Test scheme, www, case and trailing slash variants collapse."""
        assert normalize_url(raw) == "example.com/a"

    def test_missing_url(self):
        """Test None and empty values normalize to an empty string."""
        assert normalize_url(None) == ""
        assert normalize_url("") == ""

    def test_query_string_kept(self):
        """Test only the trailing slash is removed from the path."""
        assert normalize_url("https://news.ycombinator.com/item?id=1") == "news.ycombinator.com/item?id=1"

    @pytest.mark.parametrize(
        "raw",
        [
            "https://www.example.com/a",
            "http://http://example.com//",
            "https://www.www.example.com/",
            "example.com/a//",
            "ftp://files.example.com/",
            "",
        ],
    )
    def test_idempotent(self, raw):
        """Test normalizing twice equals normalizing once."""
        once = normalize_url(raw)
        assert normalize_url(once) == once


class TestExtractDomain:
    """Tests for domain extraction."""

    def test_strips_www(self):
        """Test the www prefix is removed from the host."""
        assert extract_domain("https://www.techcrunch.com/2024/01/01/ai/") == "techcrunch.com"

    def test_keeps_subdomain(self):
        """Test other subdomains survive."""
        assert extract_domain("http://blog.example.org/post") == "blog.example.org"

    def test_accepts_normalized_url(self):
        """Test an already-normalized URL parses."""
        assert extract_domain("example.com/a") == "example.com"

    @pytest.mark.parametrize("raw", [None, "", "not a url"])
    def test_unparsable(self, raw):
        """Test unparsable URLs yield the unknown sentinel."""
        assert extract_domain(raw) == "unknown"


class TestCleanText:
    """Tests for text cleaning."""

    def test_collapses_whitespace(self):
        """Test newlines, tabs and runs of spaces collapse."""
        assert clean_text("  Hello\n\n  world\t!  ", 100) == "Hello world !"

    def test_truncates(self):
        """Test output is cut to the maximum length."""
        assert clean_text("abcdefghij", 4) == "abcd"

    def test_none(self):
        """Test None cleans to an empty string."""
        assert clean_text(None, 10) == ""


class TestTimestamps:
    """Tests for timestamp parsing and ages."""

    def test_iso_with_z(self):
        """Test ISO strings with a Z suffix."""
        assert parse_timestamp("2024-01-01T00:00:00Z") == JAN_1

    def test_iso_with_offset(self):
        """Test ISO strings with an explicit offset are converted to UTC."""
        assert parse_timestamp("2024-01-01T02:00:00+02:00") == JAN_1

    def test_rfc2822(self):
        """Test RSS-style pubDate strings."""
        assert parse_timestamp("Mon, 01 Jan 2024 00:00:00 GMT") == JAN_1

    def test_epoch_seconds(self):
        """Test numeric epoch seconds."""
        assert parse_timestamp(1704067200) == JAN_1

    def test_epoch_milliseconds(self):
        """Test numeric epoch milliseconds."""
        assert parse_timestamp(1704067200000) == JAN_1

    def test_epoch_string(self):
        """Test digit-only strings are read as epoch values."""
        assert parse_timestamp("1704067200") == JAN_1

    def test_year_string(self):
        """Test a bare year is the start of that year, not an epoch offset."""
        assert parse_timestamp("2024") == JAN_1

    @pytest.mark.parametrize("raw", ["7", "123", "12345678"])
    def test_short_digit_strings_are_not_epochs(self, raw):
        """Test short digit strings do not land near 1970."""
        parsed = parse_timestamp(raw)
        assert parsed is None or parsed.year > 1970

    def test_naive_datetime_is_utc(self):
        """Test naive datetimes are taken as UTC."""
        assert parse_timestamp(datetime(2024, 1, 1)) == JAN_1

    @pytest.mark.parametrize("raw", [None, "", "not a date", True, {"a": 1}, float("nan"), 10**30, 10**400])
    def test_unparsable(self, raw):
        """Test unparsable values return None."""
        assert parse_timestamp(raw) is None

    def test_format(self):
        """Test ISO output with milliseconds and Z."""
        assert format_timestamp(JAN_1) == "2024-01-01T00:00:00.000Z"

    def test_age_rounds_half_up(self):
        """Test ages round to the nearest hour, halves up."""
        now = JAN_1 + timedelta(hours=24)
        assert age_in_hours(JAN_1, now) == 24
        assert age_in_hours(JAN_1 + timedelta(minutes=30), JAN_1 + timedelta(hours=1)) == 1
        assert age_in_hours(JAN_1 + timedelta(minutes=31), JAN_1 + timedelta(hours=1)) == 0

    def test_future_age_is_negative(self):
        """Test future timestamps keep a negative age."""
        assert age_in_hours(JAN_1 + timedelta(hours=5), JAN_1) == -5

    def test_round_half_up(self):
        """Test rounding of halves."""
        assert round_half_up(2.5) == 3
        assert round_half_up(-2.5) == -2
        assert round_half_up(49.4) == 49
