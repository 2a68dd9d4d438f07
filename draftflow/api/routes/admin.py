"""Admin API routes."""

import logging
from typing import Annotated, Any, Dict

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from draftflow import __version__
from draftflow.core.config import Settings, get_settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    openai_configured: bool
    seed_store_backend: str


@router.get("/health", response_model=HealthResponse)
async def health_check(
    settings: Annotated[Settings, Depends(get_settings)],
) -> HealthResponse:
    """Check service health and whether the model credential is set."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        openai_configured=bool(settings.openai_api_key),
        seed_store_backend=settings.seed_store_backend,
    )


@router.get("/config")
async def get_config(
    settings: Annotated[Settings, Depends(get_settings)],
) -> Dict[str, Any]:
    """Get current configuration (non-sensitive values only)."""
    return {
        "app_name": settings.app_name,
        "debug": settings.debug,
        "openai_base_url": settings.openai_base_url,
        "openai_model": settings.openai_model,
        "openai_configured": bool(settings.openai_api_key),
        "summary_temperature": settings.summary_temperature,
        "summary_max_tokens": settings.summary_max_tokens,
        "request_timeout_seconds": settings.request_timeout_seconds,
        "upstream_max_retries": settings.upstream_max_retries,
        "seed_store_backend": settings.seed_store_backend,
    }
