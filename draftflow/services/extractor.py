"""Text extraction for uploaded files.

Dispatches on filename extension and declared content type:

- ``.pdf`` / ``*pdf*`` -> pypdf text layer
- ``.docx`` / Office Open XML word-processing type -> python-docx paragraphs
- ``.txt`` / ``text/*`` -> UTF-8
- anything else -> best-effort UTF-8

No format is rejected. Decoder failures raise ``ExtractionError``;
``extract_chunks`` isolates them so one bad file never sinks the batch.
"""

import asyncio
import io
import logging
from typing import Iterable, List, Optional

import docx
from pypdf import PdfReader

from draftflow.models.summary import ChunkKind, DocumentFormat, TextChunk, UploadedFile

logger = logging.getLogger(__name__)

DOCX_CONTENT_TYPE_MARKER = "officedocument.wordprocessingml.document"


class ExtractionError(Exception):
    """A decoder could not read the file."""

    def __init__(self, filename: str, reason: str):
        self.filename = filename
        super().__init__(f"Could not extract text from '{filename}': {reason}")


def detect_format(filename: Optional[str], content_type: Optional[str] = None) -> DocumentFormat:
    """Pick the decoder for a file. First match wins."""
    name = (filename or "").lower()
    ctype = (content_type or "").lower()

    if name.endswith(".pdf") or "pdf" in ctype:
        return DocumentFormat.PDF
    if name.endswith(".docx") or DOCX_CONTENT_TYPE_MARKER in ctype:
        return DocumentFormat.DOCX
    if name.endswith(".txt") or ctype.startswith("text/"):
        return DocumentFormat.TEXT
    return DocumentFormat.UNKNOWN


def _decode_utf8(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


def _extract_pdf(data: bytes) -> str:
    reader = PdfReader(io.BytesIO(data))
    pages: List[str] = []
    for page in reader.pages:
        pages.append(page.extract_text() or "")
    return "\n".join(pages)


def _extract_docx(data: bytes) -> str:
    document = docx.Document(io.BytesIO(data))
    parts = [p.text for p in document.paragraphs]
    for table in document.tables:
        for row in table.rows:
            parts.append("\t".join(cell.text for cell in row.cells))
    return "\n".join(parts)


def extract_text(data: bytes, filename: str, content_type: Optional[str] = None) -> str:
    """Extract plain text from raw file bytes.

    Args:
        data: Raw file content.
        filename: Original filename (used for extension sniffing).
        content_type: Declared MIME type, if any.

    Returns:
        Extracted text. Empty string for a PDF without a text layer.

    Raises:
        ExtractionError: If the PDF or DOCX decoder fails.
    """
    fmt = detect_format(filename, content_type)

    if fmt == DocumentFormat.PDF:
        try:
            return _extract_pdf(data)
        except Exception as e:
            raise ExtractionError(filename, str(e)) from e

    if fmt == DocumentFormat.DOCX:
        try:
            return _extract_docx(data)
        except Exception as e:
            raise ExtractionError(filename, str(e)) from e

    return _decode_utf8(data)


async def _extract_file(upload: UploadedFile) -> Optional[TextChunk]:
    try:
        text = await asyncio.to_thread(
            extract_text, upload.data, upload.name, upload.content_type
        )
    except ExtractionError as e:
        logger.warning(f"Skipping file: {e}")
        return None

    text = text.strip()
    if not text:
        logger.info(f"No extractable text in '{upload.name}'")
        return None
    return TextChunk(kind=ChunkKind.FILE, name=upload.name, text=text)


async def extract_chunks(
    files: Iterable[UploadedFile],
    notes: Iterable[str],
) -> List[TextChunk]:
    """Turn files and notes into labelled chunks.

    Files are extracted concurrently; the result keeps files in upload
    order followed by notes in entry order. Blank results are dropped.
    """
    file_chunks = await asyncio.gather(*(_extract_file(f) for f in files))
    chunks = [c for c in file_chunks if c is not None]

    for note in notes:
        if isinstance(note, str) and note.strip():
            chunks.append(TextChunk(kind=ChunkKind.NOTE, text=note.strip()))

    return chunks
