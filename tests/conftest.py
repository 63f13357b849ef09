"""Pytest fixtures for testing."""

from datetime import datetime, timezone

import pytest

from aggregator.config.settings import Settings

FIXED_NOW = datetime(2024, 1, 2, 0, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def fixed_now() -> datetime:
    """Pipeline time shared by tests: 2024-01-02T00:00:00Z."""
    return FIXED_NOW


@pytest.fixture
def mock_settings():
    """Create settings for testing."""
    return Settings(
        debug=True,
        log_level="DEBUG",
        log_format="console",
        max_batch_records=100,
    )


@pytest.fixture
def hackernews_record():
    """Hacker News story as returned by the Firebase API."""
    return {
        "id": 123456,
        "title": "Show HN: My Project",
        "url": "https://example.com",
        "score": 150,
        "descendants": 42,
        "time": 1704067200,
    }


@pytest.fixture
def newsapi_record():
    """NewsAPI article."""
    return {
        "source": {"id": None, "name": "TechCrunch"},
        "title": "AI automation startup raises funding",
        "description": "A  workflow\nautomation company announced a new round.",
        "url": "https://www.techcrunch.com/2024/01/01/ai-startup/",
        "publishedAt": "2024-01-01T18:00:00Z",
    }


@pytest.fixture
def rss_record():
    """RSS feed entry."""
    return {
        "title": "Release notes",
        "link": "http://blog.example.org/releases/",
        "creator": "Example Blog",
        "pubDate": "Mon, 01 Jan 2024 12:00:00 GMT",
        "contentSnippet": "What changed this week.",
    }
