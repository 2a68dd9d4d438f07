"""Gathering session - collect files and notes, summarize, save a seed.

Models the gathering page as a small state machine::

    idle -> collecting -> summarizing -> summary_ready | error

Inputs may be edited at any time; while a request is in flight an edit
changes the inputs but not the state. Only one summarize request per session
may be outstanding at a time.
"""

import json
import logging
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple

import httpx
from pydantic import ValidationError

from draftflow.client.bullets import parse_bullets
from draftflow.models.seed import DEFAULT_SEED_KEY, SavedSeed, SeedRecord, SourceBullets
from draftflow.models.summary import SourceSummary, SummaryMode, UploadedFile
from draftflow.services.seed_store import SeedStore

logger = logging.getLogger(__name__)

SUMMARIZE_PATH = "/api/v1/summarize"
EMPTY_INPUT_MESSAGE = "Please add at least one file or a note before summarizing."
NO_SUMMARY_TEXT = "(No summary)"
INTERRUPTED_MESSAGE = "Summarize request was interrupted"


class GatheringError(Exception):
    """Gathering session error."""

    pass


class SessionBusyError(GatheringError):
    """A summarize request is already in flight."""

    def __init__(self):
        super().__init__("A summarize request is already in progress")


class SessionState(str, Enum):
    """Gathering page state."""

    IDLE = "idle"
    COLLECTING = "collecting"
    SUMMARIZING = "summarizing"
    SUMMARY_READY = "summary_ready"
    ERROR = "error"


class GatheringSession:
    """One user's gathering page."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        mode: SummaryMode = SummaryMode.COMBINED,
        path: str = SUMMARIZE_PATH,
    ):
        self.client = client
        self.mode = mode
        self.path = path
        self.files: List[UploadedFile] = []
        self.notes: List[str] = []
        self.summary_text: str = ""
        self.results: List[SourceSummary] = []
        self.error: str = ""
        self.state = SessionState.IDLE

    # ------------ Inputs ------------

    def _inputs_changed(self) -> None:
        if self.state == SessionState.SUMMARIZING:
            return
        self.state = SessionState.COLLECTING if self.files or self.notes else SessionState.IDLE

    def add_files(self, *files: UploadedFile) -> None:
        self.files.extend(files)
        self._inputs_changed()

    def remove_file(self, index: int) -> None:
        del self.files[index]
        self._inputs_changed()

    def add_note(self, text: str) -> bool:
        """Add a note; blank notes are ignored. Returns True if added."""
        value = (text or "").strip()
        if not value:
            return False
        self.notes.append(value)
        self._inputs_changed()
        return True

    def remove_note(self, index: int) -> None:
        del self.notes[index]
        self._inputs_changed()

    def clear_all(self) -> None:
        self.files = []
        self.notes = []
        self.summary_text = ""
        self.results = []
        self.error = ""
        self._inputs_changed()

    # ------------ Summarize ------------

    @property
    def is_summarizing(self) -> bool:
        return self.state == SessionState.SUMMARIZING

    def _multipart(self) -> dict:
        files = [
            ("file", (f.name, f.data, f.content_type or "application/octet-stream"))
            for f in self.files
        ]
        data = {"mode": self.mode.value, "note": [n for n in self.notes if n.strip()]}
        return {"files": files, "data": data}

    async def summarize_all(self) -> Optional[str]:
        """Send all files and notes to the summarize endpoint.

        Returns:
            The summary text, or None if the request failed (see ``error``).

        Raises:
            SessionBusyError: If a request from this session is in flight.
        """
        if self.is_summarizing:
            raise SessionBusyError()

        self.error = ""
        self.summary_text = ""
        self.results = []

        if not self.files and not self.notes:
            self.error = EMPTY_INPUT_MESSAGE
            self.state = SessionState.ERROR
            return None

        self.state = SessionState.SUMMARIZING
        try:
            response = await self.client.post(self.path, **self._multipart())
            self.summary_text, self.results = self._read_result(self._parse_response(response))
            self.state = SessionState.SUMMARY_READY
            logger.info(f"Summary received: {len(self.bullets)} bullets")
            return self.summary_text
        except (GatheringError, httpx.HTTPError) as e:
            self.error = str(e)
            self.state = SessionState.ERROR
            logger.warning(f"Summarize failed: {e}")
            return None
        finally:
            # cancelled or failed unexpectedly; never stay busy
            if self.state == SessionState.SUMMARIZING:
                self.error = self.error or INTERRUPTED_MESSAGE
                self.state = SessionState.ERROR

    @staticmethod
    def _read_result(data: dict) -> Tuple[str, List[SourceSummary]]:
        summary = data.get("summary") or NO_SUMMARY_TEXT
        if not isinstance(summary, str):
            raise GatheringError("Malformed response: summary is not text")

        raw_results = data.get("results") or []
        if not isinstance(raw_results, list):
            raise GatheringError("Malformed response: results is not a list")
        try:
            results = [SourceSummary.model_validate(r) for r in raw_results]
        except ValidationError as e:
            raise GatheringError(f"Malformed response: {e.error_count()} invalid result(s)")
        return summary, results

    @staticmethod
    def _parse_response(response: httpx.Response) -> dict:
        text = response.text
        try:
            data = json.loads(text)
        except ValueError:
            # Non-JSON body: surface it as the error, or take it as the summary
            if not response.is_success:
                raise GatheringError(text or f"Summarize failed ({response.status_code})")
            return {"summary": text}

        if not isinstance(data, dict):
            data = {"summary": text}
        if not response.is_success:
            raise GatheringError(data.get("error") or f"Summarize failed ({response.status_code})")
        return data

    # ------------ Results ------------

    @property
    def bullets(self) -> List[str]:
        """Bullet lines; per-file results are flattened in source order."""
        if self.results:
            return [b for source in self.source_bullets for b in source.bullets]
        return parse_bullets(self.summary_text)

    @property
    def source_bullets(self) -> List[SourceBullets]:
        return [SourceBullets(name=r.name, bullets=parse_bullets(r.summary)) for r in self.results]

    def export_text(self) -> str:
        return self.summary_text or ""

    def download(self, path: str | Path = "summary.txt") -> Path:
        """Write the summary to a text file."""
        text = self.export_text()
        if not text:
            raise GatheringError("Nothing to download yet")
        target = Path(path)
        target.write_text(text, encoding="utf-8")
        return target

    def build_seed(self) -> SavedSeed:
        per_file = self.mode == SummaryMode.PER_FILE and bool(self.results)
        return SavedSeed(
            mode=SummaryMode.PER_FILE if per_file else SummaryMode.COMBINED,
            bullets=self.bullets,
            results=self.source_bullets if per_file else [],
            source_files=[f.name for f in self.files],
            note_count=len(self.notes),
        )

    def save_seed(self, store: SeedStore, key: str = DEFAULT_SEED_KEY) -> SeedRecord:
        """Save the current result for drafting, replacing any earlier seed."""
        if not self.summary_text:
            raise GatheringError("Nothing to save yet - summarize first")
        return store.save(self.build_seed(), key)
