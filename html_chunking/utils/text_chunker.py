"""
HTML Chunking Engine.

This module turns HTML source documents into overlapping, sentence-aligned
chunks for embedding and keyword retrieval. Two modes are supported:

1. Structured HTML (DOCX / Markdown): real headings drive the heading chain.
2. Flat HTML (PDF): headings are inferred heuristically, with a positional
   label ("Section 2 of 8") when none can be inferred.

The driver functions are pure: the same input always yields the same chunks
and nothing is shared between calls, so documents can be chunked in parallel
by the caller. ``SourceChunker`` wraps them for file- and manifest-based runs.
"""

import json
import time
from pathlib import Path
from typing import Any

import yaml
from loguru import logger

from html_chunking.models.chunks import (
    Chunk,
    ChunkingOptions,
    ChunkingResult,
    ChunkingStatus,
    HtmlElement,
    HtmlType,
)
from html_chunking.utils.accumulator import AccumulatorState, add_sentences, flush
from html_chunking.utils.heading_chain import HeadingChain
from html_chunking.utils.html_blocks import parse_html_blocks
from html_chunking.utils.section_detector import detect_flat_sections

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[1] / "config.yaml"
PDF_MIME_TYPE = "application/pdf"


def _end_offset(elements: list[HtmlElement]) -> int:
    """Offset just past the last recognised element."""
    if not elements:
        return 0
    return elements[-1].offset + len(elements[-1].content)


def chunk_structured_html(
    source_id: str,
    source_title: str,
    html: str,
    options: ChunkingOptions | None = None,
) -> list[Chunk]:
    """Chunk HTML with real heading markup, keeping the heading hierarchy."""
    state = AccumulatorState(source_id, source_title, options or ChunkingOptions())
    elements = parse_html_blocks(html)
    headings = HeadingChain()

    for element in elements:
        if element.is_heading:
            # Close the previous heading's content before the chain changes
            flush(state, element.offset, headings.snapshot())
            headings.push(element.heading_level, element.text)
        else:
            add_sentences(state, element.text, element.offset, headings.snapshot())

    flush(state, _end_offset(elements), headings.snapshot())

    logger.debug(
        f"Structured chunking of {source_id}: {len(elements)} elements -> "
        f"{len(state.emitted)} chunks"
    )
    return state.emitted


def chunk_flat_html(
    source_id: str,
    source_title: str,
    html: str,
    options: ChunkingOptions | None = None,
) -> list[Chunk]:
    """Chunk paragraph-only HTML using inferred sections."""
    state = AccumulatorState(source_id, source_title, options or ChunkingOptions())
    elements = parse_html_blocks(html)
    sections = detect_flat_sections(elements)

    heading_chain: tuple[str, ...] = ()
    for section in sections:
        # Flush under the outgoing label, then switch to this section's label
        flush(state, section.elements[0].offset, heading_chain)
        heading_chain = (section.label,)

        for element in section.elements:
            add_sentences(state, element.text, element.offset, heading_chain)

    flush(state, _end_offset(elements), heading_chain)

    logger.debug(
        f"Flat chunking of {source_id}: {len(elements)} elements in "
        f"{len(sections)} sections -> {len(state.emitted)} chunks"
    )
    return state.emitted


def chunk_html(
    source_id: str,
    source_title: str,
    html: str,
    html_type: HtmlType | str,
    options: ChunkingOptions | None = None,
) -> list[Chunk]:
    """
    Chunk a source according to its HTML type.

    Args:
        source_id: Source material ID
        source_title: Human-readable source title
        html: HTML fragment produced by the upstream converter
        html_type: "structured" for DOCX/MD, "flat" for PDF
        options: Override default chunking parameters

    Raises:
        ValueError: If ``html_type`` is not a known HTML type
    """
    if HtmlType(html_type) is HtmlType.STRUCTURED:
        return chunk_structured_html(source_id, source_title, html, options)
    return chunk_flat_html(source_id, source_title, html, options)


def html_type_from_mime(mime_type: str) -> HtmlType:
    """PDF conversion produces flat HTML; everything else is structured."""
    if mime_type == PDF_MIME_TYPE:
        return HtmlType.FLAT
    return HtmlType.STRUCTURED


def load_config(config_path: str | Path | None = None) -> dict[str, Any]:
    """Load configuration from YAML file."""
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
    try:
        with open(path, encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    except Exception as e:
        logger.error(f"Failed to load config from {path}: {e}")
        raise


class SourceChunker:
    """Chunks source HTML files and fixture manifests using a YAML config."""

    def __init__(self, config_path: str | Path | None = None):
        """Initialize the chunker with configuration."""
        self.config_path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
        self.config = load_config(self.config_path)
        self.options = ChunkingOptions.from_config(self.config)

        logger.info(
            f"SourceChunker initialized: target={self.options.target_words} "
            f"max={self.options.max_words} min={self.options.min_words} "
            f"overlap={self.options.overlap_sentences}"
        )

    def chunk_source(
        self,
        source_id: str,
        source_title: str,
        html: str,
        html_type: HtmlType | str,
    ) -> list[Chunk]:
        """Chunk one source with the configured options."""
        return chunk_html(source_id, source_title, html, html_type, self.options)

    def process_source_file(
        self,
        html_path: Path,
        source_id: str | None = None,
        source_title: str | None = None,
        html_type: HtmlType | str = HtmlType.STRUCTURED,
    ) -> ChunkingResult:
        """Chunk a single HTML file, isolating any failure in the result."""
        start_time = time.time()
        html_path = Path(html_path)
        source_id = source_id or html_path.stem
        source_title = source_title or source_id

        logger.info(f"Processing source: {source_id}")

        resolved_type: HtmlType | None = None
        try:
            resolved_type = HtmlType(html_type)

            with open(html_path, encoding="utf-8") as f:
                html = f.read()

            if not html.strip():
                raise ValueError("Empty HTML file")

            chunks = self.chunk_source(source_id, source_title, html, resolved_type)
            if not chunks:
                raise ValueError("No chunks produced")

            processing_time = time.time() - start_time

            logger.info(
                f"Chunked {source_id} ({resolved_type.value}): {len(chunks)} chunks "
                f"in {processing_time:.2f}s"
            )
            return ChunkingResult(
                source_id=source_id,
                source_title=source_title,
                html_type=resolved_type,
                chunks=chunks,
                total_chunks=len(chunks),
                processing_time=processing_time,
                status=ChunkingStatus.SUCCESS,
            )

        except FileNotFoundError:
            error_msg = f"File not found: {html_path}"
        except Exception as e:
            error_msg = str(e)

        logger.error(f"Failed to process {source_id}: {error_msg}")
        return ChunkingResult(
            source_id=source_id,
            source_title=source_title,
            html_type=resolved_type,
            chunks=[],
            total_chunks=0,
            processing_time=time.time() - start_time,
            status=ChunkingStatus.FAILED,
            error_message=error_msg,
        )

    def process_manifest(self, manifest_path: Path) -> list[ChunkingResult]:
        """Chunk every source listed in a fixture ``manifest.json``."""
        manifest_path = Path(manifest_path)
        with open(manifest_path, encoding="utf-8") as f:
            manifest = json.load(f)

        sources = manifest.get("sources", [])
        logger.info(
            f"Processing fixture {manifest.get('name', manifest_path.parent.name)}: "
            f"{len(sources)} sources"
        )

        results: list[ChunkingResult] = []
        for source in sources:
            result = self.process_source_file(
                manifest_path.parent / source["file"],
                source_id=source.get("id"),
                source_title=source.get("title"),
                html_type=self._resolve_html_type(source),
            )
            result.metadata["fixture"] = manifest.get("name", manifest_path.parent.name)
            if "wordCount" in source:
                result.metadata["source_word_count"] = source["wordCount"]
            results.append(result)

        return results

    def process_fixtures_dir(self, fixtures_dir: Path) -> list[ChunkingResult]:
        """Process every ``fixture-*`` directory that holds a manifest."""
        fixtures_dir = Path(fixtures_dir)
        results: list[ChunkingResult] = []

        if not fixtures_dir.exists():
            logger.warning(f"Fixtures directory not found: {fixtures_dir}")
            return results

        fixture_dirs = sorted(
            d
            for d in fixtures_dir.iterdir()
            if d.is_dir() and d.name.startswith("fixture-")
        )
        logger.info(f"Found {len(fixture_dirs)} fixture directories")

        for fixture_dir in fixture_dirs:
            manifest_path = fixture_dir / "manifest.json"
            try:
                results.extend(self.process_manifest(manifest_path))
            except (OSError, ValueError, KeyError) as e:
                logger.warning(
                    f"Skipping {fixture_dir.name}: unreadable manifest ({e})"
                )

        return results

    def save_chunks(self, result: ChunkingResult, output_dir: Path) -> Path | None:
        """Save a successful result to ``<output_dir>/<source_id>/chunks.json``."""
        if result.status != ChunkingStatus.SUCCESS or not result.chunks:
            logger.warning(f"Skipping save for failed result: {result.source_id}")
            return None

        source_dir = Path(output_dir) / result.source_id
        source_dir.mkdir(parents=True, exist_ok=True)
        output_file = source_dir / "chunks.json"

        # Resume capability: if chunks already exist, skip writing
        if output_file.exists():
            logger.info(
                f"Chunks already exist for {result.source_id} at {output_file}. "
                "Skipping save."
            )
            return output_file

        chunks_data = [chunk.to_dict() for chunk in result.chunks]
        with open(output_file, "w", encoding="utf-8") as f:
            json.dump(chunks_data, f, indent=2, ensure_ascii=False)

        logger.info(f"Saved {len(result.chunks)} chunks to {output_file}")
        return output_file

    @staticmethod
    def _resolve_html_type(source: dict[str, Any]) -> HtmlType | str:
        """Manifest ``htmlType`` wins; otherwise map ``mimeType``."""
        if source.get("htmlType"):
            return source["htmlType"]
        if source.get("mimeType"):
            return html_type_from_mime(source["mimeType"])
        return HtmlType.STRUCTURED
