"""Canonical and ranked content item models."""

from typing import Any

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class CanonicalItem(BaseModel):
    """A content record normalized to one field set regardless of its source.

    Items are immutable once built: deduplication selects or copies them and
    ranking extends copies with score fields.
    """

    title: str = Field(default="Untitled", description="Cleaned, truncated title")
    url: str = Field(default="", description="Lower-cased URL without scheme, www. or trailing slash")
    source: str = Field(default="Unknown", description="Publishing source name")
    timestamp: str = Field(..., description="ISO-8601 UTC publication time")
    summary: str = Field(default="", description="Cleaned, truncated summary")

    score: float = Field(default=0.0, description="Source-native score (points, upvotes)")
    comments: int = Field(default=0, description="Comment count")

    domain: str = Field(default="unknown", description="Host of the normalized URL")
    age_hours: int = Field(default=0, description="Whole hours between publication and pipeline time")

    id: str | None = Field(default=None, description="Identifier in the originating source")
    upvotes: int = Field(default=0, description="Up-vote count")
    downvotes: int = Field(default=0, description="Down-vote count")
    likes: int = Field(default=0, description="Like/reaction count")
    shares: int = Field(default=0, description="Share/retweet count")

    duplicate_count: int | None = Field(
        default=None, description="Input items sharing this item's dedup key (when requested)"
    )

    # Raw record for debugging
    original: dict[str, Any] | None = Field(default=None, exclude=True)

    class Config:
        """Pydantic config."""

        alias_generator = to_camel
        populate_by_name = True
        frozen = True
        json_schema_extra = {
            "example": {
                "title": "Show HN: My Project",
                "url": "example.com",
                "source": "Hacker News",
                "timestamp": "2024-01-01T00:00:00.000Z",
                "summary": "Show HN: My Project",
                "score": 150,
                "comments": 42,
                "domain": "example.com",
                "ageHours": 5,
            }
        }


class RankedItem(CanonicalItem):
    """Canonical item extended with the score fields of one ranking strategy."""

    # Multi-factor
    relevance_score: float | None = Field(default=None)
    recency_score: float | None = Field(default=None)
    engagement_score: float | None = Field(default=None)
    final_score: float | None = Field(default=None)

    # Time decay
    original_score: float | None = Field(default=None)
    decayed_score: int | None = Field(default=None)

    # Wilson lower bound
    bayesian_score: float | None = Field(default=None)
