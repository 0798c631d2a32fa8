"""
Sentence boundary detection.

The splitter biases toward never splitting inside a sentence: periods that
usually do not end a sentence are protected first, then the text is scanned
for boundaries.

Protected periods:
- after a title or abbreviation in ``ABBREVIATIONS`` (case-sensitive, whole word)
- after a single capital letter ``A``-``Z`` (initials)
- after a digit (decimals, ordinals, numbered items)
- both periods of ``e.g.`` and ``i.e.``
- ``p.`` followed by whitespace (page references)

A boundary follows an unprotected ``.``, ``!`` or ``?``, optionally followed by
one closing quote or bracket, when it is followed by whitespace and then an
ASCII capital letter, ``"`` or ``(``.
"""

ABBREVIATIONS = frozenset(
    {
        "Dr",
        "Mr",
        "Mrs",
        "Ms",
        "Prof",
        "Jr",
        "Sr",
        "Inc",
        "Ltd",
        "Corp",
        "Co",
        "vs",
        "etc",
        "al",
        "ed",
        "vol",
        "Rev",
        "Gen",
        "Gov",
    }
)

TERMINATORS = ".!?"
CLOSERS = "\"')]"
OPENERS = '"('


def _is_word_char(char: str) -> bool:
    return char.isalnum() or char == "_"


def _is_ascii_upper(char: str) -> bool:
    return "A" <= char <= "Z"


def _word_before(text: str, index: int) -> str:
    """Return the run of word characters ending just before ``index``."""
    start = index
    while start > 0 and _is_word_char(text[start - 1]):
        start -= 1
    return text[start:index]


def _protected_periods(text: str) -> set[int]:
    """Indices of periods that must not be treated as sentence terminators."""
    protected: set[int] = set()

    for i, char in enumerate(text):
        if char != "." or i == 0:
            continue

        if text[i - 1].isdigit():
            protected.add(i)
            continue

        word = _word_before(text, i)
        if word in ABBREVIATIONS:
            protected.add(i)
        elif len(word) == 1 and _is_ascii_upper(word):
            protected.add(i)
        elif word == "p" and i + 1 < len(text) and text[i + 1].isspace():
            protected.add(i)

    for marker in ("e.g.", "i.e."):
        start = text.find(marker)
        while start != -1:
            if start == 0 or not _is_word_char(text[start - 1]):
                protected.update((start + 1, start + 3))
            start = text.find(marker, start + 1)

    return protected


def split_sentences(text: str) -> list[str]:
    """Split text into trimmed, non-empty sentences."""
    if not text.strip():
        return []

    protected = _protected_periods(text)
    sentences: list[str] = []
    length = len(text)
    sentence_start = 0
    i = 0

    while i < length:
        if text[i] not in TERMINATORS or i in protected:
            i += 1
            continue

        end = i + 1
        if end < length and text[end] in CLOSERS:
            end += 1

        next_start = end
        while next_start < length and text[next_start].isspace():
            next_start += 1

        if (
            next_start > end
            and next_start < length
            and (_is_ascii_upper(text[next_start]) or text[next_start] in OPENERS)
        ):
            sentences.append(text[sentence_start:end])
            sentence_start = next_start
            i = next_start
        else:
            i += 1

    sentences.append(text[sentence_start:])
    return [s.strip() for s in sentences if s.strip()]


def count_words(text: str) -> int:
    """Count whitespace-delimited tokens."""
    return len(text.split())


def last_sentences(text: str, n: int) -> str:
    """Return the final ``n`` sentences of ``text`` joined with single spaces."""
    if n <= 0:
        return ""
    return " ".join(split_sentences(text)[-n:])
