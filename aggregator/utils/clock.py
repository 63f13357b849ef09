"""Wall-clock access for the pipeline.

The pipeline reads the clock once per invocation and threads the value
through every stage; tests inject a fixed clock instead.
"""

from collections.abc import Callable
from datetime import datetime, timezone

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def as_utc(moment: datetime) -> datetime:
    """Aware UTC view of ``moment``; naive values are taken as UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def fixed_clock(moment: datetime) -> Clock:
    """Build a clock that always returns ``moment``."""
    moment = as_utc(moment)

    def _clock() -> datetime:
        return moment

    return _clock
