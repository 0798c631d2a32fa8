"""
Chunk quality evaluation.

Used by validation tooling and tests rather than by the chunking pipeline:
checks that chunks end on clean boundaries, measures how many chunks carry
heading context, and summarises the word-count distribution.
"""

import re
from dataclasses import asdict, dataclass, field
from typing import Any

from html_chunking.models.chunks import Chunk, HtmlType

# Sentence-ending punctuation, optionally followed by a closing quote/bracket
_SENTENCE_END_RE = re.compile(r"[.!?][\"')\]]?\s*$")
_CLOSING_PAREN_RE = re.compile(r"\)\s*$")

DEFAULT_COVERAGE_THRESHOLDS = {
    HtmlType.STRUCTURED: 0.9,
    HtmlType.FLAT: 0.5,
}


def has_clean_boundary(chunk: Chunk) -> bool:
    """
    Check whether a chunk ends at a clean boundary.

    A chunk with heading context counts as clean even without terminal
    punctuation: tables and lists end where the chunker was forced to flush at
    a structural boundary, not mid-sentence.
    """
    text = chunk.text.strip()
    if _SENTENCE_END_RE.search(text):
        return True
    # Parenthetical reference like "(Smith, 2019)"
    if _CLOSING_PAREN_RE.search(text):
        return True
    return bool(chunk.heading_chain)


@dataclass
class WordCountDistribution:
    """Chunk counts per fixed word-count bucket."""

    under_50: int = 0
    r50_200: int = 0
    r200_300: int = 0
    r300_400: int = 0
    over_400: int = 0

    @classmethod
    def from_counts(cls, word_counts: list[int]) -> "WordCountDistribution":
        distribution = cls()
        for words in word_counts:
            if words < 50:
                distribution.under_50 += 1
            elif words < 200:
                distribution.r50_200 += 1
            elif words < 300:
                distribution.r200_300 += 1
            elif words <= 400:
                distribution.r300_400 += 1
            else:
                distribution.over_400 += 1
        return distribution

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


@dataclass
class ChunkEvaluation:
    """Quality checks for one source's chunk sequence."""

    chunk_count: int
    clean_boundaries: list[bool]
    no_mid_sentence_splits: bool
    heading_coverage: float
    heading_context_preserved: bool
    min_word_count: int
    max_word_count: int
    mean_word_count: float
    no_empty_chunks: bool
    distribution: WordCountDistribution = field(default_factory=WordCountDistribution)

    def to_dict(self) -> dict[str, Any]:
        """Convert evaluation to dictionary for JSON serialization."""
        return asdict(self)


def evaluate_chunks(
    chunks: list[Chunk],
    html_type: HtmlType | str | None = None,
    coverage_thresholds: dict[HtmlType, float] | None = None,
) -> ChunkEvaluation:
    """
    Evaluate a chunk sequence.

    Args:
        chunks: Chunks of a single source, in output order
        html_type: Source HTML type; selects the heading coverage threshold.
            Structured thresholds apply when omitted.
        coverage_thresholds: Override the per-type minimum heading coverage

    Returns:
        ChunkEvaluation computed over the non-empty chunks
    """
    thresholds = {**DEFAULT_COVERAGE_THRESHOLDS, **(coverage_thresholds or {})}
    resolved_type = HtmlType(html_type) if html_type else HtmlType.STRUCTURED

    non_empty = [c for c in chunks if c.word_count > 0]
    clean = [has_clean_boundary(c) for c in non_empty]
    with_headings = sum(1 for c in non_empty if c.heading_chain)
    coverage = with_headings / len(non_empty) if non_empty else 0.0
    word_counts = [c.word_count for c in non_empty]

    return ChunkEvaluation(
        chunk_count=len(non_empty),
        clean_boundaries=clean,
        no_mid_sentence_splits=all(clean),
        heading_coverage=coverage,
        heading_context_preserved=coverage >= thresholds[resolved_type],
        min_word_count=min(word_counts, default=0),
        max_word_count=max(word_counts, default=0),
        mean_word_count=sum(word_counts) / len(word_counts) if word_counts else 0.0,
        no_empty_chunks=len(non_empty) == len(chunks),
        distribution=WordCountDistribution.from_counts(word_counts),
    )
