"""Drafting view - prefill the editor from a saved seed."""

import logging
from pathlib import Path
from typing import List, Optional

from draftflow.models.seed import DEFAULT_SEED_KEY, DraftView, SavedSeed
from draftflow.models.summary import SummaryMode
from draftflow.services.seed_store import SeedStore

logger = logging.getLogger(__name__)

COMBINED_TITLE = "Key Points Outline"
PER_FILE_TITLE = "Per-file Outline"
MISSING_SEED_MESSAGE = (
    "No saved summary found. Go back to the gathering step and save a summary "
    "to continue to drafting."
)


class DraftingError(Exception):
    """Drafting view error."""

    pass


def render_outline(seed: SavedSeed) -> str:
    """Render a seed as editable outline text, one ``- `` line per bullet."""
    if seed.mode == SummaryMode.PER_FILE and seed.results:
        lines: List[str] = [PER_FILE_TITLE, ""]
        for result in seed.results:
            lines.append(f"# {result.name}")
            lines.extend(f"- {b}" for b in result.bullets)
            lines.append("")
        return "\n".join(lines).rstrip() + "\n"

    lines = [COMBINED_TITLE, ""]
    lines.extend(f"- {b}" for b in seed.bullets)
    return "\n".join(lines) + "\n"


def load_draft(store: SeedStore, key: str = DEFAULT_SEED_KEY) -> DraftView:
    """Build the drafting editor's initial state.

    A missing or unreadable seed gives an empty editor and a message
    pointing back to the gathering step.
    """
    seed = store.load(key)
    if seed is None:
        return DraftView(draft="", message=MISSING_SEED_MESSAGE)

    logger.info(f"Loaded seed saved at {seed.saved_at.isoformat()}")
    return DraftView(seed=seed, draft=render_outline(seed))


def export_outline(view: DraftView) -> Optional[str]:
    """Outline text for the clipboard, or None when the editor is blank."""
    return view.draft if view.draft.strip() else None


def download_outline(view: DraftView, path: str | Path = "outline.txt") -> Path:
    """Write the current outline to a text file."""
    text = export_outline(view)
    if text is None:
        raise DraftingError("Nothing to download yet")
    target = Path(path)
    target.write_text(text, encoding="utf-8")
    return target
