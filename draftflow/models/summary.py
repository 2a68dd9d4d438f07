"""Summarization request/response models."""

import base64
import binascii
from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from draftflow.core.exceptions import InvalidRequestError

REQUEST_SCHEMA_VERSION = 1


class SummaryMode(str, Enum):
    """How sources are sent to the model."""

    COMBINED = "combined"
    PER_FILE = "per_file"


class DocumentFormat(str, Enum):
    """Decoder chosen for an uploaded file."""

    PDF = "pdf"
    DOCX = "docx"
    TEXT = "text"
    UNKNOWN = "unknown"  # best-effort UTF-8


class ChunkKind(str, Enum):
    """Origin of a text chunk."""

    FILE = "file"
    NOTE = "note"


class UploadedFile(BaseModel):
    """A file as received by the endpoint."""

    name: str = Field(default="upload.bin")
    content_type: str = Field(default="")
    data: bytes = Field(default=b"", repr=False)


class TextChunk(BaseModel):
    """Labelled text contributed to a prompt."""

    kind: ChunkKind
    name: str = ""
    text: str

    @property
    def label(self) -> str:
        if self.kind == ChunkKind.FILE:
            return f"File: {self.name}"
        return "Note"

    def render(self) -> str:
        """Render as ``<Label>:`` style block for the prompt."""
        if self.kind == ChunkKind.FILE:
            return f"{self.label}\n{self.text}"
        return f"{self.label}:\n{self.text}"


class FilePayload(BaseModel):
    """A file inside a JSON summarize request."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(default="upload.bin")
    type: str = Field(default="")
    content: str = Field(..., alias="base64", description="Base64 file content")

    def decode(self) -> bytes:
        """Decode the base64 content, tolerating a data URL prefix."""
        content = self.content
        if content.startswith("data:") and "," in content:
            content = content.split(",", 1)[1]
        try:
            return base64.b64decode(content)
        except (binascii.Error, ValueError) as e:
            raise InvalidRequestError(f"File '{self.name}' is not valid base64: {e}")

    def to_upload(self) -> UploadedFile:
        return UploadedFile(name=self.name, content_type=self.type, data=self.decode())


class SummarizeRequest(BaseModel):
    """JSON body accepted by the summarize endpoint."""

    model_config = ConfigDict(extra="forbid")

    version: Literal[1] = REQUEST_SCHEMA_VERSION
    mode: SummaryMode = SummaryMode.COMBINED
    files: List[FilePayload] = Field(default_factory=list)
    notes: List[str] = Field(default_factory=list)


class SummarizeInput(BaseModel):
    """Normalized input shared by both wire shapes."""

    mode: SummaryMode = SummaryMode.COMBINED
    files: List[UploadedFile] = Field(default_factory=list)
    notes: List[str] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.files and not any(n.strip() for n in self.notes)


class SourceSummary(BaseModel):
    """Summary of a single source in per-file mode."""

    name: str
    summary: str


class SummarizeResponse(BaseModel):
    """Successful summarize response."""

    summary: str
    results: Optional[List[SourceSummary]] = None


class TokenUsage(BaseModel):
    """Token usage tracking."""

    input_tokens: int = Field(default=0)
    output_tokens: int = Field(default=0)
    total_tokens: int = Field(default=0)
