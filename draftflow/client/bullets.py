"""Splitting model output into display bullets."""

import re
from typing import List, Optional

from pydantic import BaseModel, Field

from draftflow.services.prompt_builder import SUMMARY_HEADING

_BULLET_MARKER = re.compile(r"^(?:[•‣◦▪·–—]\s*|[-*+]\s+|\d+[.)]\s+)")
_HEADING_LINE = re.compile(
    r"^[#*\s\"'“”]*" + re.escape(SUMMARY_HEADING) + r"[\"'“”*:.\s]*$",
    re.IGNORECASE,
)


def is_heading(line: str) -> bool:
    """True for the fixed heading the model is asked to start with."""
    return bool(_HEADING_LINE.match(line))


def strip_marker(line: str) -> str:
    return _BULLET_MARKER.sub("", line.strip(), count=1).strip()


def parse_bullets(text: Optional[str]) -> List[str]:
    """Split raw model text into bullets, in the order the model emitted them.

    Leading bullet/dash/number markers and whitespace are stripped, empty
    lines are dropped and the fixed heading line is removed.
    """
    bullets: List[str] = []
    for line in (text or "").splitlines():
        line = line.strip()
        if not line or is_heading(line):
            continue
        bullet = strip_marker(line)
        if bullet:
            bullets.append(bullet)
    return bullets


class SummaryResult(BaseModel):
    """Bullets derived from a summary."""

    bullets: List[str] = Field(default_factory=list)

    @classmethod
    def from_text(cls, text: Optional[str]) -> "SummaryResult":
        return cls(bullets=parse_bullets(text))
