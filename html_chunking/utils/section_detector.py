"""
Heuristic section detection for flat HTML.

PDF extraction produces paragraph-only markup, so section headings have to be
guessed from the shape of each block:

- short (fewer than ``HEADING_MAX_WORDS`` words), and
- either ALL CAPS with at least one letter, or not ending in terminal
  punctuation while the next block is longer.
"""

from html_chunking.models.chunks import DetectedSection, HtmlElement
from html_chunking.utils.sentences import count_words

HEADING_MAX_WORDS = 10
TERMINAL_PUNCTUATION = (".", "!", "?")


def _is_all_caps(text: str) -> bool:
    return text == text.upper() and any(char.isalpha() for char in text)


def looks_like_heading(element: HtmlElement, next_element: HtmlElement | None) -> bool:
    """Decide whether a flat-mode block reads like a section heading."""
    word_count = count_words(element.text)
    if word_count >= HEADING_MAX_WORDS:
        return False

    if _is_all_caps(element.text):
        return True

    ends_with_terminal = element.text.strip().endswith(TERMINAL_PUNCTUATION)
    next_is_longer = (
        next_element is not None and count_words(next_element.text) > word_count
    )
    return not ends_with_terminal and next_is_longer


def detect_flat_sections(elements: list[HtmlElement]) -> list[DetectedSection]:
    """
    Partition flat elements into sections under inferred headings.

    Heading-like elements become section labels rather than section content.
    Sections are returned in document order with ``position`` and
    ``total_sections`` filled in.
    """
    sections: list[DetectedSection] = []
    current_heading: str | None = None
    current_elements: list[HtmlElement] = []

    for i, element in enumerate(elements):
        next_element = elements[i + 1] if i + 1 < len(elements) else None

        if looks_like_heading(element, next_element):
            if current_elements:
                sections.append(DetectedSection(current_heading, current_elements))
            current_heading = element.text
            current_elements = []
        else:
            current_elements.append(element)

    # Close the final section
    if current_elements:
        sections.append(DetectedSection(current_heading, current_elements))

    for position, section in enumerate(sections):
        section.position = position
        section.total_sections = len(sections)

    return sections
