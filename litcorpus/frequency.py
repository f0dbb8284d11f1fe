"""
FrequencyCounter: Counts term occurrences per document.

Counts are sparse: a (title, term) pair exists only when the term was
seen at least once in that title.
"""

from collections import Counter
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

import polars as pl

CountKey = Tuple[str, str]


@dataclass(frozen=True)
class TermCount:
    """Raw count of one term in one document."""

    title: str
    term: str
    n: int

    def __post_init__(self):
        if self.n < 1:
            raise ValueError(f"TermCount requires n >= 1, got {self.n}")


class FrequencyCounter:
    """
    Builds (title, term) -> count mappings from token sequences.

    Counting is order independent, so the counts for a corpus equal the
    merge of the per-document counts.
    """

    def count(self, tokens: Iterable[str], title: str) -> Dict[CountKey, int]:
        """
        Count the tokens of one document.

        Args:
            tokens: Filtered token sequence
            title: Document title used in the keys

        Returns:
            Dictionary (title, term) -> n
        """
        counts = Counter(tokens)
        return {(title, term): n for term, n in counts.items()}

    def count_corpus(self, streams: Mapping[str, Iterable[str]]) -> Dict[CountKey, int]:
        """
        Count every document of a corpus.

        Args:
            streams: Mapping title -> token sequence

        Returns:
            Dictionary (title, term) -> n over all titles
        """
        return self.merge(*(self.count(tokens, title) for title, tokens in streams.items()))

    @staticmethod
    def merge(*counts: Mapping[CountKey, int]) -> Dict[CountKey, int]:
        """Combine count mappings by adding counts for shared keys."""
        merged: Counter = Counter()
        for mapping in counts:
            merged.update(mapping)
        return {key: n for key, n in merged.items() if n > 0}

    @staticmethod
    def totals(
        counts: Mapping[CountKey, int],
        titles: Optional[Iterable[str]] = None
    ) -> Dict[str, int]:
        """
        Total kept tokens per title.

        Args:
            counts: Dictionary (title, term) -> n
            titles: Every title of the corpus; titles without counts get 0

        Returns:
            Dictionary title -> total
        """
        totals: Counter = Counter({title: 0 for title in titles or ()})
        for (title, _), n in counts.items():
            totals[title] += n
        return dict(totals)

    @staticmethod
    def to_records(counts: Mapping[CountKey, int]) -> List[TermCount]:
        """TermCounts sorted by count descending, then term, then title."""
        records = [TermCount(title, term, n) for (title, term), n in counts.items()]
        records.sort(key=lambda r: (-r.n, r.term, r.title))
        return records

    @classmethod
    def to_frame(cls, counts: Mapping[CountKey, int]) -> pl.DataFrame:
        """Counts as a polars DataFrame with columns title, term, n."""
        records = cls.to_records(counts)
        return pl.DataFrame(
            {
                'title': [r.title for r in records],
                'term': [r.term for r in records],
                'n': [r.n for r in records],
            },
            schema={'title': pl.Utf8, 'term': pl.Utf8, 'n': pl.Int64}
        )

    def __repr__(self) -> str:
        return "FrequencyCounter()"
