"""
Block-level HTML segmentation.

Scans an HTML fragment for the block elements the chunker understands and
reduces each one to plain text. The scanner recognises an opening tag when:

- ``<`` is followed by one of the block tag names (ASCII, any case), and
- the name is followed either by ``>`` or by whitespace, attributes and ``>``.

The element then extends to the first matching ``</name>`` (same case
folding). A matched element is consumed whole, so recognised tags nested
inside it are not reported on their own. An opening tag without a closing tag
is ignored and scanning resumes at the next character.
"""

import re
import string

from html_chunking.models.chunks import HtmlElement

BLOCK_TAGS = frozenset(
    {"h1", "h2", "h3", "h4", "h5", "h6", "p", "li", "table", "ul", "ol", "blockquote"}
)

# Decoded in this order
HTML_ENTITIES = (
    ("&amp;", "&"),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#39;", "'"),
    ("&nbsp;", " "),
)

_TAG_RE = re.compile(r"<[^>]+>")
_WHITESPACE_RE = re.compile(r"\s+")

# Length-preserving lowercase so indices stay valid in the original string
_ASCII_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)


def strip_html(html: str) -> str:
    """Strip tags, decode the basic entities and collapse whitespace."""
    text = _TAG_RE.sub(" ", html)
    for entity, char in HTML_ENTITIES:
        text = text.replace(entity, char)
    return _WHITESPACE_RE.sub(" ", text).strip()


def _match_opening_tag(lowered: str, start: int) -> tuple[str | None, int]:
    """
    Match a block opening tag at ``lowered[start] == "<"``.

    Returns:
        ``(tag, end)`` where ``end`` is the index just past ``>``, or
        ``(None, start)`` when no block tag opens here.
    """
    name_end = start + 1
    while name_end < len(lowered) and lowered[name_end].isalnum():
        name_end += 1

    tag = lowered[start + 1 : name_end]
    if tag not in BLOCK_TAGS or name_end >= len(lowered):
        return None, start

    follower = lowered[name_end]
    if follower == ">":
        return tag, name_end + 1
    if follower.isspace():
        close = lowered.find(">", name_end)
        if close != -1:
            return tag, close + 1
    return None, start


def parse_html_blocks(html: str) -> list[HtmlElement]:
    """Parse an HTML fragment into its ordered block-level elements."""
    elements: list[HtmlElement] = []
    lowered = html.translate(_ASCII_LOWER)
    offset = 0
    pos = 0

    while True:
        start = lowered.find("<", pos)
        if start == -1:
            break

        tag, body_start = _match_opening_tag(lowered, start)
        if tag is None:
            pos = start + 1
            continue

        closing = f"</{tag}>"
        close_at = lowered.find(closing, body_start)
        if close_at == -1:
            pos = start + 1
            continue

        end = close_at + len(closing)
        content = html[start:end]
        pos = end

        text = strip_html(content)
        if not text:
            continue

        is_heading = tag[0] == "h" and tag[1:].isdigit()
        elements.append(
            HtmlElement(
                tag=tag,
                content=content,
                text=text,
                is_heading=is_heading,
                heading_level=int(tag[1]) if is_heading else 0,
                offset=offset,
            )
        )
        offset += len(content)

    return elements
