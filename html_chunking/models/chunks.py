"""
Data models for the HTML chunking engine.

Chunk records are plain dataclasses (serialised with ``to_dict`` for JSON
output); chunking options are a validated, immutable pydantic model.
"""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class HtmlType(str, Enum):
    """
    Shape of the source HTML.
    - STRUCTURED: real heading markup (DOCX / Markdown conversions)
    - FLAT: paragraph-only markup (PDF extraction)
    """

    STRUCTURED = "structured"
    FLAT = "flat"


class ChunkingStatus(Enum):
    """Status of a chunking run for a single source."""

    SUCCESS = "success"
    FAILED = "failed"


class ChunkingOptions(BaseModel):
    """Word bounds and overlap used by the chunk accumulator."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    target_words: int = Field(default=300, gt=0)
    max_words: int = Field(default=400, gt=0)
    min_words: int = Field(default=50, ge=0)
    overlap_sentences: int = Field(default=2, ge=0)

    @classmethod
    def from_config(cls, config: dict[str, Any] | None) -> "ChunkingOptions":
        """Build options from the ``chunking`` section of a loaded config."""
        section = (config or {}).get("chunking") or {}
        return cls(**section)


@dataclass
class Chunk:
    """A word-bounded, sentence-aligned span of a source document."""

    id: str  # "{source_id}:{ordinal}"
    source_id: str
    source_title: str
    heading_chain: list[str]  # Root to leaf
    text: str  # Includes overlap carried from the previous chunk
    html: str  # Display rendering of the non-overlap content
    word_count: int
    start_offset: int
    end_offset: int

    def to_dict(self) -> dict[str, Any]:
        """Convert chunk to dictionary for JSON serialization."""
        return asdict(self)


@dataclass(frozen=True)
class HtmlElement:
    """A block-level element recognised by the block parser."""

    tag: str
    content: str  # Raw matched markup
    text: str  # Plain text
    is_heading: bool
    heading_level: int  # 1-6 for headings, 0 otherwise
    offset: int = 0  # Summed content length of preceding elements


@dataclass
class DetectedSection:
    """A run of flat-mode elements under one inferred heading."""

    heading: str | None
    elements: list[HtmlElement]
    position: int = 0
    total_sections: int = 0

    @property
    def label(self) -> str:
        """Heading text, or a positional label when none was inferred."""
        if self.heading:
            return self.heading
        return f"Section {self.position + 1} of {self.total_sections}"


@dataclass
class ChunkingResult:
    """Result of chunking a single source."""

    source_id: str
    source_title: str
    html_type: HtmlType | None  # None when the requested type was not recognised
    chunks: list[Chunk]
    total_chunks: int
    processing_time: float
    status: ChunkingStatus
    error_message: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert result to dictionary for JSON serialization."""
        result = asdict(self)
        # Convert enums to values
        result["html_type"] = self.html_type.value if self.html_type else None
        result["status"] = self.status.value
        return result
