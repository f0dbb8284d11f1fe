"""
CrossCorpusComparator: Compares word frequencies between groups of texts.

Each group (usually an author) gets term proportions over its kept
tokens; terms are then aligned across groups, keeping only the terms
every group uses.
"""

from collections import Counter
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Sequence

import numpy as np
import polars as pl
from loguru import logger

from .exceptions import ComparisonError
from .preprocessing import StopwordRemover, Tokenizer


@dataclass(frozen=True)
class FrequencyComparison:
    """One aligned term with its proportion in every group."""

    term: str
    proportions: Mapping[str, float]

    def __post_init__(self):
        object.__setattr__(self, 'proportions', MappingProxyType(dict(self.proportions)))

    def __hash__(self) -> int:
        return hash((self.term, tuple(sorted(self.proportions.items()))))

    @property
    def max_proportion(self) -> float:
        return max(self.proportions.values())

    def exceeds(self, threshold: float) -> bool:
        """True when at least one group's proportion is above the threshold."""
        return any(p > threshold for p in self.proportions.values())


class CrossCorpusComparator:
    """
    Computes and aligns per-group term proportions.

    Tokens go through the same letter-only normalization as the
    Tokenizer, then stopword removal, before they are counted.
    """

    def __init__(
        self,
        stopword_remover: Optional[StopwordRemover] = None,
        tokenizer: Optional[Tokenizer] = None
    ):
        self.stopword_remover = stopword_remover
        self.tokenizer = tokenizer or Tokenizer()

    def _normalize(self, tokens: Iterable[str]) -> Iterator[str]:
        for token in tokens:
            normalized = self.tokenizer.normalize(token)
            if normalized is None:
                continue
            if self.stopword_remover is not None and normalized in self.stopword_remover:
                continue
            yield normalized

    def proportions(self, group_tokens: Mapping[str, Iterable[str]]) -> Dict[str, Dict[str, float]]:
        """
        Term proportions for every group.

        Args:
            group_tokens: Mapping group label -> tokens

        Returns:
            Dictionary group -> {term: count / total kept tokens}. A group
            with no kept tokens maps to an empty dictionary.
        """
        result = {}
        for group, tokens in group_tokens.items():
            counts = Counter(self._normalize(tokens))
            total = sum(counts.values())
            if total == 0:
                logger.warning(f"Group {group!r} has no tokens after filtering")
                result[group] = {}
                continue
            result[group] = {term: n / total for term, n in counts.items()}
        return result

    def align(self, proportions: Mapping[str, Mapping[str, float]]) -> List[FrequencyComparison]:
        """
        Keep the terms present in every group.

        Returns:
            Rows sorted by their largest proportion descending, then term
        """
        if len(proportions) < 2:
            raise ComparisonError(
                f"At least two groups are needed, got {len(proportions)}")

        groups = list(proportions)
        shared = set(proportions[groups[0]])
        for group in groups[1:]:
            shared &= set(proportions[group])

        rows = [
            FrequencyComparison(term, {group: proportions[group][term] for group in groups})
            for term in shared
        ]
        rows.sort(key=lambda r: (-r.max_proportion, r.term))
        return rows

    @staticmethod
    def filter_threshold(
        rows: Iterable[FrequencyComparison],
        threshold: float
    ) -> List[FrequencyComparison]:
        """Rows where at least one group's proportion exceeds ``threshold``."""
        if threshold < 0:
            raise ValueError(f"threshold must not be negative, got {threshold}")
        return [row for row in rows if row.exceeds(threshold)]

    def compare(
        self,
        group_tokens: Mapping[str, Iterable[str]],
        threshold: Optional[float] = None
    ) -> List[FrequencyComparison]:
        """
        Align term proportions across groups.

        Args:
            group_tokens: Mapping group label -> tokens (two or more groups)
            threshold: When given, keep only rows where some group's
                       proportion is above it

        Returns:
            List of FrequencyComparison rows
        """
        if len(group_tokens) < 2:
            raise ComparisonError(
                f"At least two groups are needed, got {len(group_tokens)}")

        rows = self.align(self.proportions(group_tokens))
        if threshold is not None:
            rows = self.filter_threshold(rows, threshold)

        logger.info(f"Compared {len(group_tokens)} groups: {len(rows)} shared terms kept")
        return rows

    @staticmethod
    def correlate(rows: Sequence[FrequencyComparison], group_a: str, group_b: str) -> float:
        """
        Pearson correlation of two groups' proportions over the given rows.
        """
        if len(rows) < 2:
            raise ComparisonError("Correlation needs at least two shared terms")

        try:
            a = np.array([row.proportions[group_a] for row in rows], dtype=np.float64)
            b = np.array([row.proportions[group_b] for row in rows], dtype=np.float64)
        except KeyError as e:
            raise ComparisonError(f"Unknown group {e.args[0]!r}") from e

        if np.std(a) == 0 or np.std(b) == 0:
            raise ComparisonError("Correlation is undefined for constant proportions")

        return float(np.corrcoef(a, b)[0, 1])

    @staticmethod
    def to_frame(rows: Sequence[FrequencyComparison]) -> pl.DataFrame:
        """Wide table: one row per term, one proportion column per group."""
        groups = list(rows[0].proportions) if rows else []
        if 'term' in groups:
            raise ComparisonError("A group cannot be named 'term'")
        data = {'term': [row.term for row in rows]}
        for group in groups:
            data[group] = [row.proportions[group] for row in rows]

        schema = {'term': pl.Utf8, **{group: pl.Float64 for group in groups}}
        return pl.DataFrame(data, schema=schema)

    def __repr__(self) -> str:
        return f"CrossCorpusComparator(stopwords={self.stopword_remover!r})"
