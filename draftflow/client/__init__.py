"""Gathering and drafting workflow clients."""

from draftflow.client.bullets import SummaryResult, parse_bullets
from draftflow.client.drafting import (
    DraftingError,
    download_outline,
    export_outline,
    load_draft,
    render_outline,
)
from draftflow.client.gathering import (
    GatheringError,
    GatheringSession,
    SessionBusyError,
    SessionState,
)

__all__ = [
    "DraftingError",
    "GatheringError",
    "GatheringSession",
    "SessionBusyError",
    "SessionState",
    "SummaryResult",
    "download_outline",
    "export_outline",
    "load_draft",
    "parse_bullets",
    "render_outline",
]
