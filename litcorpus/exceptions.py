"""
Exception hierarchy for the litcorpus package.

Lookup misses (stop words, lexicon) are never errors; these cover the
failures that abort a run.
"""

from typing import Optional


class LitCorpusError(Exception):
    """Base class for all litcorpus errors."""


class FetchError(LitCorpusError):
    """A source text or catalog could not be retrieved."""

    def __init__(self, book_id: Optional[int], reason: str):
        self.book_id = book_id
        self.reason = reason
        if book_id is None:
            message = f"Fetch failed: {reason}"
        else:
            message = f"Fetch failed for book {book_id}: {reason}"
        super().__init__(message)


class CorpusError(LitCorpusError):
    """Invalid corpus construction or lookup."""


class ComparisonError(LitCorpusError):
    """Cross-corpus comparison called with unusable groups."""


class ConfigurationError(LitCorpusError):
    """Configuration file holds a value of the wrong shape."""
