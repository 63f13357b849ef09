"""Field-level cleaning helpers shared by the normalizer and deduplicator.

None of these raise on malformed input; each degrades to a documented
default so one bad record never aborts a batch.
"""

import math
import re
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any

from pydantic import HttpUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

UNKNOWN_DOMAIN = "unknown"

# Epoch values below this magnitude are seconds, otherwise milliseconds
EPOCH_SECONDS_LIMIT = 10_000_000_000

_SCHEME_PREFIX = re.compile(r"^https?://")
_WWW_PREFIX = re.compile(r"^www\.")
# Shorter digit strings are not epochs; a bare 4-digit string is a year
_EPOCH_STRING = re.compile(r"^-?\d{9,}(\.\d+)?$")
_YEAR_STRING = re.compile(r"^\d{4}$")

_HTTP_URL_ADAPTER = TypeAdapter(HttpUrl)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward positive infinity."""
    return math.floor(value + 0.5)


def clean_text(text: Any, max_length: int) -> str:
    """Trim, collapse all whitespace runs to one space and truncate."""
    if text is None:
        return ""
    return " ".join(str(text).split())[:max_length]


def _strip_url_once(url: str) -> str:
    url = _SCHEME_PREFIX.sub("", url)
    url = _WWW_PREFIX.sub("", url)
    if url.endswith("/"):
        url = url[:-1]
    return url


def normalize_url(url: Any) -> str:
    """Canonical comparison form of a URL.

    Lower-cases, drops a leading ``http://``/``https://`` and ``www.``, and a
    trailing slash. Stripping repeats until nothing changes, so the result is
    a fixed point and ``normalize_url(normalize_url(u)) == normalize_url(u)``.
    """
    if url is None:
        return ""
    current = str(url).strip().lower()
    while True:
        stripped = _strip_url_once(current).strip()
        if stripped == current:
            return current
        current = stripped


def extract_domain(url: Any) -> str:
    """Host of a URL without ``www.``, or ``"unknown"`` when it cannot be parsed."""
    normalized = normalize_url(url)
    if not normalized:
        return UNKNOWN_DOMAIN
    try:
        parsed = _HTTP_URL_ADAPTER.validate_python(f"https://{normalized}")
    except PydanticValidationError:
        return UNKNOWN_DOMAIN
    host = parsed.host
    if not host:
        return UNKNOWN_DOMAIN
    return _WWW_PREFIX.sub("", host)


def _from_epoch(value: float) -> datetime | None:
    seconds = value if abs(value) < EPOCH_SECONDS_LIMIT else value / 1000
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def _from_string(raw: str) -> datetime | None:
    raw = raw.strip()
    if not raw:
        return None

    if _EPOCH_STRING.match(raw):
        return _from_epoch(float(raw))
    if _YEAR_STRING.match(raw):
        year = int(raw)
        return datetime(year, 1, 1, tzinfo=timezone.utc) if year >= 1 else None

    iso_candidate = raw[:-1] + "+00:00" if raw.endswith(("Z", "z")) else raw
    try:
        return datetime.fromisoformat(iso_candidate)
    except ValueError:
        pass

    # RFC 2822, as used by RSS pubDate
    try:
        return parsedate_to_datetime(raw)
    except (TypeError, ValueError, IndexError):
        return None


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO/RFC 2822 string, epoch seconds/milliseconds or datetime.

    Returns an aware UTC datetime, or ``None`` when the value is missing or
    unparsable.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        parsed: datetime | None = value
    elif isinstance(value, (int, float)):
        try:
            seconds = float(value)
        except OverflowError:
            return None
        if not math.isfinite(seconds):
            return None
        parsed = _from_epoch(seconds)
    elif isinstance(value, str):
        parsed = _from_string(value)
    else:
        return None

    if parsed is None:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except (OverflowError, ValueError):
        return None


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 UTC with millisecond precision and a ``Z`` suffix."""
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def age_in_hours(moment: datetime, now: datetime) -> int:
    """Whole hours from ``moment`` to ``now``; negative for future timestamps."""
    return round_half_up((now - moment).total_seconds() / 3600)
