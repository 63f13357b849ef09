"""HTTP API for the aggregation pipeline."""
