"""Shared fixtures for chunking tests."""

import json
from pathlib import Path

import pytest
from loguru import logger


# Register custom markers to avoid warnings
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: mark tests that read or write fixture files on disk",
    )


def numbered_sentences(count: int) -> str:
    """Sentences of 13 words each, numbered so every one is distinct."""
    return " ".join(
        f"This is sentence number {i + 1} with some additional words to fill the space."
        for i in range(count)
    )


def ten_word_sentences(count: int, label: str = "Alpha") -> str:
    """Sentences of exactly ten words each."""
    return " ".join(
        f"{label} sentence {i + 1} has exactly ten words in it here."
        for i in range(count)
    )


@pytest.fixture
def make_sentences():
    """Return the 13-word numbered sentence generator."""
    return numbered_sentences


@pytest.fixture
def make_ten_word_sentences():
    """Return the ten-word sentence generator."""
    return ten_word_sentences


@pytest.fixture
def long_structured_html():
    """A multi-chapter structured document."""
    return f"""
    <h1>Chapter 1: Introduction</h1>
    <p>{numbered_sentences(30)}</p>
    <h2>Background</h2>
    <p>{numbered_sentences(30)}</p>
    <h2>Literature Review</h2>
    <p>{numbered_sentences(30)}</p>
    <h1>Chapter 2: Methodology</h1>
    <p>{numbered_sentences(30)}</p>
    <h2>Research Design</h2>
    <p>{numbered_sentences(30)}</p>
    <h1>Chapter 3: Results</h1>
    <p>{numbered_sentences(30)}</p>
    """


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    """Temporary YAML config with non-default chunking options."""
    path = tmp_path / "config.yaml"
    path.write_text(
        """
chunking:
  target_words: 120
  max_words: 160
  min_words: 20
  overlap_sentences: 1
evaluation:
  heading_coverage:
    structured: 0.9
    flat: 0.5
  max_word_ceiling: 450
runtime:
  output_dir: "out/chunks"
"""
    )
    return path


@pytest.fixture
def fixtures_dir(tmp_path: Path) -> Path:
    """A fixtures directory with one fixture set holding two sources."""
    root = tmp_path / "fixtures"
    fixture = root / "fixture-01-small"
    fixture.mkdir(parents=True)

    (fixture / "guide.html").write_text(
        "<h1>Guide</h1>"
        f"<p>{numbered_sentences(30)}</p>"
        "<h2>Details</h2>"
        f"<p>{numbered_sentences(10)}</p>",
        encoding="utf-8",
    )
    (fixture / "paper.html").write_text(
        f"<p>ABSTRACT</p>\n<p>{numbered_sentences(12)}</p>",
        encoding="utf-8",
    )

    manifest = {
        "name": "Small fixture",
        "totalWordCount": 676,
        "sources": [
            {
                "id": "guide",
                "title": "Field Guide",
                "htmlType": "structured",
                "wordCount": 520,
                "file": "guide.html",
            },
            {
                "id": "paper",
                "title": "Working Paper",
                "mimeType": "application/pdf",
                "wordCount": 157,
                "file": "paper.html",
            },
        ],
    }
    (fixture / "manifest.json").write_text(json.dumps(manifest), encoding="utf-8")
    return root


@pytest.fixture
def error_logs():
    """Collect loguru messages logged at ERROR or above during a test."""
    messages: list[str] = []
    handler_id = logger.add(
        lambda message: messages.append(message.record["message"]), level="ERROR"
    )
    yield messages
    logger.remove(handler_id)
