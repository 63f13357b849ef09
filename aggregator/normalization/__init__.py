"""Record normalization module."""

from aggregator.normalization.cleaning import (
    clean_text,
    extract_domain,
    normalize_url,
    parse_timestamp,
)
from aggregator.normalization.normalizer import Normalizer, normalize_records

__all__ = [
    "Normalizer",
    "normalize_records",
    "clean_text",
    "extract_domain",
    "normalize_url",
    "parse_timestamp",
]
