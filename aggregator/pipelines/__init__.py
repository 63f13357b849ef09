"""Pipeline orchestration module."""

from aggregator.pipelines.aggregate import AggregationPipeline, PipelineResult, run_pipeline

__all__ = ["AggregationPipeline", "PipelineResult", "run_pipeline"]
