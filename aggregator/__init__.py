"""Content aggregation: normalize, deduplicate and rank fetched records."""

__version__ = "0.1.0"
