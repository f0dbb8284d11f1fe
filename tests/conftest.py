"""
Pytest configuration and shared fixtures for litcorpus tests.

Fixtures build small in-memory corpora and reference tables so that no
test needs network access or NLTK data.
"""

import pytest

from litcorpus import Corpus, Document, SentimentLexicon, StopwordRemover, Tokenizer


@pytest.fixture
def tokenizer():
    return Tokenizer()


@pytest.fixture
def stopwords():
    """Small stop-word set used instead of the NLTK list."""
    return StopwordRemover(stopwords={"the", "a", "and", "of", "to", "was", "she", "her", "it"})


@pytest.fixture
def cat_dog_corpus():
    """Two one-line documents sharing 'the' and 'sat'."""
    return Corpus([
        Document.from_text("A", "the cat sat"),
        Document.from_text("B", "the dog sat"),
    ])


@pytest.fixture
def novel_factory():
    """Factory for short novel-like documents with chapter headings."""
    def _make_novel(title: str, author: str = "Unknown", chapters: int = 2) -> Document:
        lines = [title.upper(), "", "by " + author, ""]
        for number in range(1, chapters + 1):
            lines.append(f"CHAPTER {number}")
            lines.append("")
            lines.append(f"It was a happy day in chapter {number}, and Miss Smith smiled.")
            lines.append("She was sad to leave the garden; the rain was cold.")
            lines.append("")
        return Document(title, lines, {"author": author})

    return _make_novel


@pytest.fixture
def small_corpus(novel_factory):
    return Corpus([
        novel_factory("Garden Days", author="Austen, Jane", chapters=3),
        novel_factory("Moor House", author="Brontë, Charlotte", chapters=2),
        novel_factory("Time Engine", author="Wells, H. G.", chapters=1),
    ])


@pytest.fixture
def tiny_lexicon():
    return SentimentLexicon.from_mapping({
        "happy": "positive",
        "smiled": "positive",
        "sad": "negative",
        "cold": "negative",
        "miss": "negative",
    })
