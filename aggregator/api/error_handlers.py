"""API error handlers."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from aggregator.utils.exceptions import AggregatorError, ConfigurationError, ValidationError
from aggregator.utils.logging import get_logger

logger = get_logger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register custom error handlers with the FastAPI app."""

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
        logger.warning("validation_error", message=exc.message, field=exc.field)
        return JSONResponse(
            status_code=400,
            content={
                "error": "validation_error",
                "message": exc.message,
                "field": exc.field,
                "details": exc.details,
            },
        )

    @app.exception_handler(ConfigurationError)
    async def configuration_error_handler(
        request: Request, exc: ConfigurationError
    ) -> JSONResponse:
        logger.warning("configuration_error", message=exc.message)
        return JSONResponse(
            status_code=400,
            content={
                "error": "configuration_error",
                "message": exc.message,
                "details": exc.details,
            },
        )

    @app.exception_handler(AggregatorError)
    async def aggregator_error_handler(request: Request, exc: AggregatorError) -> JSONResponse:
        logger.error("aggregator_error", message=exc.message)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_error",
                "message": exc.message,
                "details": exc.details,
            },
        )

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("unhandled_exception", error=str(exc))
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_error",
                "message": "An unexpected error occurred",
            },
        )
