"""FastAPI application entry point."""

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from loguru import logger

from mailvault.infrastructure import configure_logging, get_settings
from mailvault.infrastructure.http import CorrelationMiddleware, register_error_handlers, router
from mailvault.infrastructure.http.dependencies import get_secret_cache


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load the shared token before serving; a secret store failure is fatal."""
    settings = get_settings()
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")

    try:
        get_secret_cache().reload()
    except Exception as e:
        logger.error(f"Failed to load API token at startup: {e}")
        raise

    yield

    logger.info("Shutdown complete")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Email record ingestion: validate, queue and archive",
        lifespan=lifespan,
    )

    app.add_middleware(CorrelationMiddleware)
    register_error_handlers(app)
    app.include_router(router)

    return app


# Create app instance
app = create_app()


def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)


if __name__ == "__main__":
    main()
