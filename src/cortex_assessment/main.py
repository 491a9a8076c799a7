"""CORTEX assessment service entry point."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from cortex_assessment import __version__
from cortex_assessment.api.router import router
from cortex_assessment.observability import configure_logging, get_logger
from cortex_assessment.settings import Settings

settings = Settings()

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application startup and shutdown lifecycle.

    Args:
        app: The FastAPI application instance.

    Yields:
        None
    """
    configure_logging(level=settings.log_level, json_logs=settings.json_logs)
    logger.info("Service starting", service_name=settings.service_name, version=__version__)
    yield
    logger.info("Service stopped", service_name=settings.service_name)


app: FastAPI = FastAPI(
    title=settings.service_name,
    version=__version__,
    lifespan=lifespan,
)


@app.get("/health", tags=["Health"])
async def health() -> dict[str, str]:
    """Liveness check."""
    return {"status": "ok", "service": settings.service_name, "version": __version__}


app.include_router(router, prefix=settings.api_prefix)
