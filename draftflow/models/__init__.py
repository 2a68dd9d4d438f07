"""Pydantic models package."""

from draftflow.models.seed import (
    DEFAULT_SEED_KEY,
    DraftView,
    SavedSeed,
    SeedRecord,
    SourceBullets,
)
from draftflow.models.summary import (
    ChunkKind,
    DocumentFormat,
    FilePayload,
    SourceSummary,
    SummarizeInput,
    SummarizeRequest,
    SummarizeResponse,
    SummaryMode,
    TextChunk,
    TokenUsage,
    UploadedFile,
)

__all__ = [
    # Summary models
    "ChunkKind",
    "DocumentFormat",
    "FilePayload",
    "SourceSummary",
    "SummarizeInput",
    "SummarizeRequest",
    "SummarizeResponse",
    "SummaryMode",
    "TextChunk",
    "TokenUsage",
    "UploadedFile",
    # Seed models
    "DEFAULT_SEED_KEY",
    "DraftView",
    "SavedSeed",
    "SeedRecord",
    "SourceBullets",
]
