"""
HTML chunking engine: sentence-aligned, heading-aware chunks for retrieval.
"""

from html_chunking.models.chunks import Chunk, ChunkingOptions, HtmlType
from html_chunking.utils.text_chunker import (
    chunk_flat_html,
    chunk_html,
    chunk_structured_html,
    html_type_from_mime,
)

__all__ = [
    "Chunk",
    "ChunkingOptions",
    "HtmlType",
    "chunk_flat_html",
    "chunk_html",
    "chunk_structured_html",
    "html_type_from_mime",
]
