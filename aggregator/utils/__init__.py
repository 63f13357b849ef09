"""Utility modules."""

from aggregator.utils.clock import Clock, as_utc, fixed_clock, utc_now
from aggregator.utils.exceptions import AggregatorError, ConfigurationError, ValidationError
from aggregator.utils.logging import get_logger, setup_logging

__all__ = [
    "AggregatorError",
    "ConfigurationError",
    "ValidationError",
    "Clock",
    "as_utc",
    "fixed_clock",
    "utc_now",
    "get_logger",
    "setup_logging",
]
