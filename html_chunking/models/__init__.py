"""
Models module for the HTML chunking engine.
"""

# Import models to make them available from html_chunking.models
from html_chunking.models.chunks import (
    Chunk,
    ChunkingOptions,
    ChunkingResult,
    ChunkingStatus,
    DetectedSection,
    HtmlElement,
    HtmlType,
)

__all__ = [
    "Chunk",
    "ChunkingOptions",
    "ChunkingResult",
    "ChunkingStatus",
    "DetectedSection",
    "HtmlElement",
    "HtmlType",
]
