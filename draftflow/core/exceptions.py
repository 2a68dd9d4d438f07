"""Custom exceptions and exception handlers."""

from typing import Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException


class DraftflowError(Exception):
    """Base exception for Draftflow."""

    def __init__(self, message: str, status_code: int = 500):
        self.message = message
        self.status_code = status_code
        super().__init__(message)

    def to_content(self) -> dict:
        """Body rendered for this error."""
        return {"error": self.message}


class InvalidRequestError(DraftflowError):
    """Request body does not match any accepted shape."""

    def __init__(self, message: str):
        super().__init__(message, status_code=status.HTTP_400_BAD_REQUEST)


class NoContentError(DraftflowError):
    """No files or notes, or nothing extractable in them."""

    def __init__(self, message: str):
        super().__init__(message, status_code=status.HTTP_400_BAD_REQUEST)


class ConfigurationError(DraftflowError):
    """Server is missing required configuration."""

    def __init__(self, message: str):
        super().__init__(message, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


class UpstreamError(DraftflowError):
    """The model provider answered with a non-success status."""

    def __init__(
        self,
        upstream_status: int,
        details: str = "",
        message: str = "OpenAI request failed",
    ):
        self.upstream_status = upstream_status
        self.details = details
        super().__init__(message, status_code=status.HTTP_502_BAD_GATEWAY)

    def to_content(self) -> dict:
        return {
            "error": self.message,
            "status": self.upstream_status,
            "details": self.details,
        }


class SummarizationError(DraftflowError):
    """Unexpected failure while handling a summarize request."""

    def __init__(self, message: str):
        super().__init__(
            message or "Internal Server Error",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )


class SeedNotFoundError(DraftflowError):
    """No seed saved under the requested key."""

    def __init__(self, key: str):
        super().__init__(
            f"No saved seed under '{key}'",
            status_code=status.HTTP_404_NOT_FOUND,
        )


def truncate_details(text: Optional[str], limit: int = 800) -> str:
    """Cut upstream error bodies down to ``limit`` characters."""
    if not text:
        return ""
    if len(text) <= limit:
        return text
    return text[: limit - 1] + "…"


async def draftflow_exception_handler(
    request: Request, exc: DraftflowError
) -> JSONResponse:
    """Handle DraftflowError exceptions."""
    return JSONResponse(status_code=exc.status_code, content=exc.to_content())


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Render HTTPExceptions with the same ``{"error": ...}`` body."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )
