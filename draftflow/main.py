"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from draftflow import __version__
from draftflow.api.routes import admin, seeds, summarize
from draftflow.core.config import get_settings
from draftflow.core.exceptions import (
    DraftflowError,
    draftflow_exception_handler,
    http_exception_handler,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    settings = get_settings()
    logger.info(f"Starting {settings.app_name} {__version__}")
    if not settings.openai_api_key:
        logger.warning("OPENAI_API_KEY is not set; summarize requests will fail with 500")

    yield

    logger.info("Shutting down...")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Summarize uploaded documents and notes into bullet points for drafting",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register exception handlers
    app.add_exception_handler(DraftflowError, draftflow_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    # Register routers
    api_prefix = "/api/v1"
    app.include_router(admin.router, prefix=api_prefix)
    app.include_router(summarize.router, prefix=api_prefix)
    app.include_router(seeds.router, prefix=api_prefix)

    @app.get("/")
    async def root():
        return {
            "service": settings.app_name,
            "version": __version__,
            "docs": "/docs",
        }

    # Generic error handler
    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled exception: {exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": str(exc) or "Internal Server Error"},
        )

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "draftflow.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        reload_dirs=["draftflow"],
    )
