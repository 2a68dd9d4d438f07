"""Tests for prompt assembly."""

from draftflow.models.summary import ChunkKind, TextChunk
from draftflow.services.prompt_builder import (
    CHUNK_SEPARATOR,
    SUMMARY_HEADING,
    SYSTEM_PROMPT,
    build_messages,
    build_prompt,
    join_chunks,
)


def file_chunk(name: str, text: str) -> TextChunk:
    return TextChunk(kind=ChunkKind.FILE, name=name, text=text)


def note_chunk(text: str) -> TextChunk:
    return TextChunk(kind=ChunkKind.NOTE, text=text)


class TestPromptBuilder:
    """Tests for build_prompt and build_messages."""

    def test_chunks_rendered_with_labels(self):
        joined = join_chunks([file_chunk("a.txt", "alpha"), note_chunk("beta")])
        assert joined == f"File: a.txt\nalpha{CHUNK_SEPARATOR}Note:\nbeta"

    def test_prompt_keeps_chunk_order(self):
        prompt = build_prompt(
            [file_chunk("one.pdf", "first"), file_chunk("two.docx", "second"), note_chunk("third")]
        )
        assert prompt.index("File: one.pdf") < prompt.index("File: two.docx") < prompt.index("Note:")

    def test_prompt_carries_instruction_and_heading(self):
        prompt = build_prompt([note_chunk("something")])
        assert "5–10" in prompt
        assert "one sentence per bullet" in prompt
        assert f'"{SUMMARY_HEADING}"' in prompt
        assert prompt.rstrip().endswith("something\n---")

    def test_messages_are_system_then_user(self):
        messages = build_messages([note_chunk("x")])
        assert [m["role"] for m in messages] == ["system", "user"]
        assert messages[0]["content"] == SYSTEM_PROMPT
        assert "Note:\nx" in messages[1]["content"]
