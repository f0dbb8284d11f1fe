"""
TfIdfRanker: Weights terms by how characteristic they are of one title.

tf = n / total, idf = ln(N / df), tf-idf = tf * idf. A term found in every
title gets idf 0 and therefore tf-idf 0.
"""

from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

import numpy as np
import polars as pl
from loguru import logger
from scipy.sparse import csr_matrix

from .frequency import CountKey, FrequencyCounter, TermCount


@dataclass(frozen=True)
class TfIdfRecord(TermCount):
    """TermCount extended with the tf-idf statistics of the term."""

    total: int
    tf: float
    df: int
    idf: float
    tf_idf: float


class TfIdfRanker:
    """
    Computes and ranks tf-idf records from per-title term counts.

    Counts are arranged in a sparse title x term matrix; document
    frequencies are the number of stored entries per column.
    """

    def _build_matrix(
        self,
        counts: Mapping[CountKey, int],
        titles: Sequence[str]
    ) -> Tuple[csr_matrix, List[str]]:
        """Sparse count matrix with rows in ``titles`` order and sorted term columns."""
        terms = sorted({term for (_, term), n in counts.items() if n > 0})
        title_index = {title: i for i, title in enumerate(titles)}
        term_index = {term: j for j, term in enumerate(terms)}

        rows, cols, data = [], [], []
        for (title, term), n in counts.items():
            if n < 1:
                continue
            rows.append(title_index[title])
            cols.append(term_index[term])
            data.append(n)

        matrix = csr_matrix(
            (np.array(data, dtype=np.int64),
             (np.array(rows, dtype=np.int64), np.array(cols, dtype=np.int64))),
            shape=(len(titles), len(terms))
        )
        return matrix, terms

    def compute(
        self,
        counts: Mapping[CountKey, int],
        totals: Optional[Mapping[str, int]] = None
    ) -> List[TfIdfRecord]:
        """
        Compute a TfIdfRecord for every observed (title, term) pair.

        Args:
            counts: Mapping (title, term) -> n
            totals: Optional title -> total kept tokens. Titles listed here
                    count towards the corpus size even when they have no
                    terms. Computed from ``counts`` when None.

        Returns:
            Records sorted by title, then term
        """
        if totals is None:
            totals = FrequencyCounter.totals(counts)

        titles = sorted(set(totals) | {title for title, _ in counts})
        n_titles = len(titles)
        if n_titles == 0:
            return []

        matrix, terms = self._build_matrix(counts, titles)
        document_frequency = matrix.getnnz(axis=0)
        with np.errstate(divide='ignore'):
            idf = np.log(n_titles / document_frequency)

        records = []
        for i, title in enumerate(titles):
            total = totals.get(title, 0)
            if total <= 0:
                logger.debug(f"Skipping tf-idf for {title!r}: no kept tokens")
                continue

            start, end = matrix.indptr[i], matrix.indptr[i + 1]
            for j, n in zip(matrix.indices[start:end], matrix.data[start:end]):
                tf = int(n) / total
                term_idf = float(idf[j])
                records.append(TfIdfRecord(
                    title=title,
                    term=terms[j],
                    n=int(n),
                    total=int(total),
                    tf=tf,
                    df=int(document_frequency[j]),
                    idf=term_idf,
                    tf_idf=tf * term_idf
                ))

        records.sort(key=lambda r: (r.title, r.term))
        logger.info(f"Computed tf-idf for {len(records)} terms across {n_titles} titles")
        return records

    @staticmethod
    def _rank_key(record: TfIdfRecord):
        return (-record.tf_idf, record.term, record.title)

    def rank_global(self, records: Sequence[TfIdfRecord]) -> List[TfIdfRecord]:
        """All records by tf-idf descending, ties broken by term then title."""
        return sorted(records, key=self._rank_key)

    def top_per_title(
        self,
        records: Sequence[TfIdfRecord],
        k: int = 15
    ) -> Dict[str, List[TfIdfRecord]]:
        """
        Select the top-k records of every title.

        Args:
            records: Records from compute()
            k: Number of records per title

        Returns:
            Dictionary title -> ranked records, titles in sorted order
        """
        if k < 1:
            raise ValueError(f"k must be at least 1, got {k}")

        by_title = defaultdict(list)
        for record in self.rank_global(records):
            if len(by_title[record.title]) < k:
                by_title[record.title].append(record)

        return {title: by_title[title] for title in sorted(by_title)}

    @staticmethod
    def to_frame(records: Sequence[TfIdfRecord]) -> pl.DataFrame:
        """Records as a polars DataFrame, preserving their order."""
        schema = {
            'title': pl.Utf8,
            'term': pl.Utf8,
            'n': pl.Int64,
            'total': pl.Int64,
            'tf': pl.Float64,
            'df': pl.Int64,
            'idf': pl.Float64,
            'tf_idf': pl.Float64,
        }
        return pl.DataFrame(
            {column: [getattr(r, column) for r in records] for column in schema},
            schema=schema
        )

    @staticmethod
    def to_matrix(records: Sequence[TfIdfRecord]) -> Tuple[csr_matrix, List[str], List[str]]:
        """
        Arrange tf-idf values in a sparse title x term matrix.

        Returns:
            Tuple of (matrix, row titles, column terms)
        """
        titles = sorted({r.title for r in records})
        terms = sorted({r.term for r in records})
        title_index = {title: i for i, title in enumerate(titles)}
        term_index = {term: j for j, term in enumerate(terms)}

        matrix = csr_matrix(
            (
                np.array([r.tf_idf for r in records], dtype=np.float64),
                (np.array([title_index[r.title] for r in records], dtype=np.int64),
                 np.array([term_index[r.term] for r in records], dtype=np.int64))
            ),
            shape=(len(titles), len(terms))
        )
        matrix.eliminate_zeros()
        return matrix, titles, terms

    def __repr__(self) -> str:
        return "TfIdfRanker()"
