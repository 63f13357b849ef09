"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from aggregator import __version__
from aggregator.api.error_handlers import register_error_handlers
from aggregator.api.middleware import setup_middleware
from aggregator.api.routes import router
from aggregator.config.settings import get_settings
from aggregator.utils.logging import get_logger, setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings = get_settings()
    setup_logging(log_level=settings.log_level, log_format=settings.log_format)

    logger = get_logger(__name__)
    logger.info("application_starting", version=__version__, debug=settings.debug)

    yield

    logger.info("application_shutdown")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Content Aggregator API",
        description=(
            "Normalizes records fetched from news APIs, RSS feeds and forums into one "
            "canonical schema, removes duplicates across sources and ranks the result."
        ),
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    setup_middleware(app)
    register_error_handlers(app)
    app.include_router(router)

    return app


# Create application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "aggregator.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
    )
