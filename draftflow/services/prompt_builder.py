"""Prompt assembly for the summarization call."""

from typing import Dict, List, Sequence

from draftflow.models.summary import TextChunk

SYSTEM_PROMPT = "You are a precise, concise summarizer."
SUMMARY_HEADING = "Key points from your material"
CHUNK_SEPARATOR = "\n\n---\n\n"

INSTRUCTION = (
    "Summarize the following material into 5–10 crisp, non-duplicative bullets "
    "for a working outline.\n"
    "Use plain language, one sentence per bullet, and group related points. "
    "Start the output with:\n"
    f'"{SUMMARY_HEADING}"\n'
    "Then list the bullets."
)


def join_chunks(chunks: Sequence[TextChunk]) -> str:
    """Concatenate chunks in order, separated by a horizontal rule."""
    return CHUNK_SEPARATOR.join(chunk.render() for chunk in chunks).strip()


def build_prompt(chunks: Sequence[TextChunk]) -> str:
    """Build the user prompt for a set of chunks."""
    return f"{INSTRUCTION}\n\nText:\n---\n{join_chunks(chunks)}\n---"


def build_messages(chunks: Sequence[TextChunk]) -> List[Dict[str, str]]:
    """Build the system + user messages sent to the model."""
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": build_prompt(chunks)},
    ]
