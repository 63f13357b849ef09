"""Exception hierarchy for the aggregation service.

The core pipeline recovers malformed records locally and never raises for
them; these exceptions cover caller mistakes (bad stage configuration,
oversized batches) that surface at the API boundary.
"""


class AggregatorError(Exception):
    """Base exception for aggregation errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(AggregatorError):
    """Stage configuration that cannot be applied (unknown strategy, empty composite key)."""

    pass


class ValidationError(AggregatorError):
    """Input validation errors."""

    def __init__(self, message: str, field: str | None = None, details: dict | None = None):
        super().__init__(message, details)
        self.field = field
