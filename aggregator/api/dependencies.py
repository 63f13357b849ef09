"""FastAPI dependency injection."""

from typing import Annotated

from fastapi import Depends

from aggregator.config.settings import Settings, get_settings
from aggregator.pipelines.aggregate import AggregationPipeline
from aggregator.utils.clock import Clock, utc_now


def get_clock() -> Clock:
    """Get the wall clock used to stamp pipeline runs."""
    return utc_now


def get_pipeline(
    settings: Annotated[Settings, Depends(get_settings)],
    clock: Annotated[Clock, Depends(get_clock)],
) -> AggregationPipeline:
    """Build the aggregation pipeline with its dependencies."""
    return AggregationPipeline(settings=settings, clock=clock)


# Type aliases for dependency injection
PipelineDep = Annotated[AggregationPipeline, Depends(get_pipeline)]
