"""Seed models handed from the gathering stage to the drafting stage."""

from datetime import datetime, timezone
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from draftflow.models.summary import SummaryMode

SEED_SCHEMA_VERSION = 1
DEFAULT_SEED_KEY = "draft_seed"


class SourceBullets(BaseModel):
    """Bullets produced for one source in per-file mode."""

    name: str
    bullets: List[str] = Field(default_factory=list)


class SavedSeed(BaseModel):
    """Snapshot of a gathering session."""

    mode: SummaryMode = SummaryMode.COMBINED
    bullets: List[str] = Field(default_factory=list)
    results: List[SourceBullets] = Field(default_factory=list)
    source_files: List[str] = Field(default_factory=list)
    note_count: int = Field(default=0, ge=0)
    saved_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class SeedRecord(BaseModel):
    """Versioned envelope a seed is stored in."""

    schema_version: Literal[1] = SEED_SCHEMA_VERSION
    payload: SavedSeed


class DraftView(BaseModel):
    """Initial state of the drafting editor."""

    seed: Optional[SavedSeed] = None
    draft: str = ""
    message: Optional[str] = None
