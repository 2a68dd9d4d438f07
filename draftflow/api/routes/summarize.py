"""Summarize API route."""

import logging
from typing import Annotated, List

from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError
from starlette.datastructures import UploadFile as StarletteUploadFile

from draftflow.core.exceptions import DraftflowError, InvalidRequestError, SummarizationError
from draftflow.models.summary import (
    SummarizeInput,
    SummarizeRequest,
    SummarizeResponse,
    SummaryMode,
    UploadedFile,
)
from draftflow.services.summarizer import SummarizationService, get_summarizer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/summarize", tags=["summarize"])

FORM_CONTENT_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


def _format_validation_error(e: ValidationError) -> str:
    problems = []
    for err in e.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        problems.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    return "Invalid request body: " + "; ".join(problems)


async def _read_form(request: Request) -> SummarizeInput:
    try:
        form = await request.form()
    except Exception as e:
        raise InvalidRequestError(f"Could not parse form body: {e}")

    files: List[UploadedFile] = []
    for item in form.getlist("file"):
        if not isinstance(item, StarletteUploadFile):
            continue
        data = await item.read()
        if not item.filename and not data:
            continue  # empty file input
        files.append(
            UploadedFile(
                name=item.filename or "upload.bin",
                content_type=item.content_type or "",
                data=data,
            )
        )

    notes = [n for n in form.getlist("note") if isinstance(n, str)]

    mode = form.get("mode") or SummaryMode.COMBINED.value
    try:
        mode = SummaryMode(mode)
    except ValueError:
        raise InvalidRequestError(f"Unknown mode '{mode}'")

    return SummarizeInput(mode=mode, files=files, notes=notes)


async def _read_json(request: Request) -> SummarizeInput:
    body = await request.body()
    try:
        payload = SummarizeRequest.model_validate_json(body)
    except ValidationError as e:
        raise InvalidRequestError(_format_validation_error(e))

    return SummarizeInput(
        mode=payload.mode,
        files=[f.to_upload() for f in payload.files],
        notes=payload.notes,
    )


async def read_summarize_input(request: Request) -> SummarizeInput:
    """Parse either accepted wire shape into a ``SummarizeInput``."""
    content_type = request.headers.get("content-type", "").lower()

    if content_type.startswith(FORM_CONTENT_TYPES):
        return await _read_form(request)
    if content_type.startswith("application/json"):
        return await _read_json(request)

    raise InvalidRequestError(
        "Unsupported content type. Send multipart/form-data or application/json."
    )


@router.post("", response_model=SummarizeResponse, response_model_exclude_none=True)
async def summarize(
    request: Request,
    summarizer: Annotated[SummarizationService, Depends(get_summarizer)],
) -> SummarizeResponse:
    """Summarize uploaded files and notes into bullet points.

    Accepts multipart form data (``file`` and ``note`` parts, optional
    ``mode``) or a JSON body ``{files: [{name, type, base64}], notes: [...]}``.

    Returns:
        ``{"summary": ...}``; per-file mode adds ``results``.
    """
    try:
        payload = await read_summarize_input(request)
        return await summarizer.summarize(payload)
    except DraftflowError:
        raise
    except Exception as e:
        logger.exception(f"Summarize failed: {e}")
        raise SummarizationError(str(e))
