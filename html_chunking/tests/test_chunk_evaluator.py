"""Tests for chunk quality evaluation."""

import pytest

from html_chunking.models.chunks import Chunk, HtmlType
from html_chunking.utils.chunk_evaluator import (
    WordCountDistribution,
    evaluate_chunks,
    has_clean_boundary,
)
from html_chunking.utils.text_chunker import chunk_flat_html, chunk_structured_html


def make_chunk(text, heading_chain=None, word_count=None):
    return Chunk(
        id="src:0",
        source_id="src",
        source_title="Source",
        heading_chain=heading_chain or [],
        text=text,
        html=f"<p>{text}</p>",
        word_count=len(text.split()) if word_count is None else word_count,
        start_offset=0,
        end_offset=len(text),
    )


class TestHasCleanBoundary:
    """Tests for has_clean_boundary."""

    @pytest.mark.parametrize(
        "text",
        [
            "It ended.",
            "Did it end?",
            "It ended!",
            'He said "stop."',
            "It ended (see appendix.)",
            "As shown by (Smith, 2019)",
            "Trailing whitespace.   ",
        ],
    )
    def test_clean_endings(self, text):
        assert has_clean_boundary(make_chunk(text))

    def test_mid_sentence_without_headings_is_not_clean(self):
        assert not has_clean_boundary(make_chunk("and then the text just"))

    def test_heading_context_counts_as_clean(self):
        assert has_clean_boundary(make_chunk("Column A Column B", ["Results"]))


class TestWordCountDistribution:
    """Tests for WordCountDistribution."""

    def test_bucket_edges(self):
        distribution = WordCountDistribution.from_counts(
            [0, 49, 50, 199, 200, 299, 300, 400, 401]
        )

        assert distribution.to_dict() == {
            "under_50": 2,
            "r50_200": 2,
            "r200_300": 2,
            "r300_400": 2,
            "over_400": 1,
        }

    def test_empty(self):
        assert WordCountDistribution.from_counts([]) == WordCountDistribution()


class TestEvaluateChunks:
    """Tests for evaluate_chunks."""

    def test_empty_sequence(self):
        evaluation = evaluate_chunks([])

        assert evaluation.chunk_count == 0
        assert evaluation.heading_coverage == 0.0
        assert evaluation.heading_context_preserved is False
        assert evaluation.no_mid_sentence_splits is True
        assert evaluation.mean_word_count == 0.0

    def test_structured_output_passes(self, long_structured_html):
        chunks = chunk_structured_html("q", "Quality", long_structured_html)

        evaluation = evaluate_chunks(chunks, HtmlType.STRUCTURED)

        assert evaluation.chunk_count == len(chunks)
        assert evaluation.no_mid_sentence_splits
        assert evaluation.heading_coverage == 1.0
        assert evaluation.heading_context_preserved
        assert evaluation.no_empty_chunks
        assert evaluation.max_word_count <= 450

    def test_flat_output_passes(self, make_sentences):
        html = "".join(
            f"<p>SECTION {n}</p><p>{make_sentences(20)}</p>" for n in ("ONE", "TWO")
        )

        evaluation = evaluate_chunks(chunk_flat_html("f", "Flat", html), "flat")

        assert evaluation.no_mid_sentence_splits
        assert evaluation.heading_context_preserved

    def test_threshold_depends_on_html_type(self):
        chunks = [
            make_chunk("One here.", ["A"]),
            make_chunk("Two here.", ["A"]),
            make_chunk("Three here."),
        ]

        # Two thirds of chunks carry headings
        assert not evaluate_chunks(chunks, HtmlType.STRUCTURED).heading_context_preserved
        assert evaluate_chunks(chunks, HtmlType.FLAT).heading_context_preserved
        assert evaluate_chunks(
            chunks, HtmlType.STRUCTURED, {HtmlType.STRUCTURED: 0.5}
        ).heading_context_preserved

    def test_untyped_source_uses_structured_threshold(self):
        chunks = [make_chunk("One here.", ["A"]), make_chunk("Two here.")]

        assert not evaluate_chunks(chunks).heading_context_preserved

    def test_empty_chunks_are_excluded(self):
        chunks = [make_chunk("Real text here.", ["A"]), make_chunk("", ["A"], word_count=0)]

        evaluation = evaluate_chunks(chunks)

        assert evaluation.chunk_count == 1
        assert evaluation.no_empty_chunks is False
        assert evaluation.min_word_count == evaluation.max_word_count == 3

    def test_statistics(self):
        chunks = [make_chunk("a b c d.", ["H"]), make_chunk("a b.", ["H"])]

        evaluation = evaluate_chunks(chunks)

        assert (evaluation.min_word_count, evaluation.max_word_count) == (2, 4)
        assert evaluation.mean_word_count == 3.0
        assert evaluation.distribution.under_50 == 2
        assert evaluation.to_dict()["distribution"]["under_50"] == 2
