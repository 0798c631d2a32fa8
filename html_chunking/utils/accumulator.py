"""
Sentence accumulation: the chunking state machine shared by both modes.

State lives in an ``AccumulatorState`` value and changes only through
``add_sentences`` and ``flush``. The heading chain is passed in with every
call, so a chunk records the chain that was current when it was flushed.

Flush policy:
- before appending a sentence that would push the buffer past ``max_words``
  (only when the buffer already holds something)
- as soon as the buffer reaches ``target_words``
- whenever the caller forces it at a heading or section boundary

A flushed buffer smaller than ``min_words`` is merged into the previous chunk
when there is one. Every new chunk after the first starts with the last
``overlap_sentences`` sentences of the previously flushed buffer.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from html import escape

from html_chunking.models.chunks import Chunk, ChunkingOptions
from html_chunking.utils.sentences import count_words, split_sentences


@dataclass
class AccumulatorState:
    """Buffer and output of one chunking run."""

    source_id: str
    source_title: str
    options: ChunkingOptions = field(default_factory=ChunkingOptions)
    buffer: list[str] = field(default_factory=list)
    word_count: int = 0
    overlap: str = ""
    start_offset: int = 0
    emitted: list[Chunk] = field(default_factory=list)


def add_sentences(
    state: AccumulatorState,
    text: str,
    offset: int,
    heading_chain: Sequence[str],
) -> None:
    """Split ``text`` into sentences and feed them into the buffer."""
    opts = state.options

    for sentence in split_sentences(text):
        sentence_words = count_words(sentence)

        # Adding this sentence would pass the hard maximum
        if state.word_count + sentence_words > opts.max_words and state.buffer:
            flush(state, offset, heading_chain)

        if not state.buffer:
            state.start_offset = offset

        state.buffer.append(sentence)
        state.word_count += sentence_words

        if state.word_count >= opts.target_words:
            flush(state, offset, heading_chain)


def flush(
    state: AccumulatorState,
    end_offset: int,
    heading_chain: Sequence[str],
) -> None:
    """Turn the buffered sentences into a chunk, or merge them into the last one."""
    if not state.buffer:
        return

    opts = state.options
    text = " ".join(state.buffer)
    word_count = count_words(text)

    if word_count < opts.min_words and state.emitted:
        previous = state.emitted[-1]
        previous.text = f"{previous.text} {text}"
        previous.html = f"{previous.html}<p>{escape(text)}</p>"
        previous.word_count = count_words(previous.text)
        previous.end_offset = end_offset
    elif word_count > 0:
        full_text = f"{state.overlap} {text}" if state.overlap else text
        state.emitted.append(
            Chunk(
                id=f"{state.source_id}:{len(state.emitted)}",
                source_id=state.source_id,
                source_title=state.source_title,
                heading_chain=list(heading_chain),
                text=full_text,
                html=f"<p>{escape(text)}</p>",
                word_count=count_words(full_text),
                start_offset=state.start_offset,
                end_offset=end_offset,
            )
        )

    if opts.overlap_sentences > 0:
        state.overlap = " ".join(state.buffer[-opts.overlap_sentences :])
    else:
        state.overlap = ""

    state.buffer = []
    state.word_count = 0
