"""
Sentiment: Lexicon-based sentiment scoring of token sequences.

Each token is looked up in a word -> label lexicon; tokens that are not in
the lexicon are dropped. Matching is one word at a time, so a word is
always scored with its dictionary polarity whatever its use in context
(e.g., "miss" as a form of address still counts as negative).
"""

import csv
from collections import Counter, defaultdict
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Union

import polars as pl
from loguru import logger

from .document import Document
from .preprocessing import Tokenizer, ensure_nltk_data


class SentimentLabel(str, Enum):
    POSITIVE = 'positive'
    NEGATIVE = 'negative'


@dataclass(frozen=True)
class SentimentWordCount:
    """Number of times a lexicon word occurred, with its label."""

    term: str
    label: SentimentLabel
    n: int


class SentimentLexicon:
    """
    Read-only mapping from word to SentimentLabel.

    Build it once with one of the constructors and share it; the
    underlying mapping cannot be modified.
    """

    def __init__(self, entries: Mapping[str, Union[SentimentLabel, str]], name: str = 'custom'):
        self.name = name
        self._entries = MappingProxyType(
            {word.lower(): SentimentLabel(label) for word, label in entries.items()})

    @classmethod
    def from_mapping(cls, entries: Mapping[str, Union[SentimentLabel, str]]) -> 'SentimentLexicon':
        return cls(entries)

    @classmethod
    def from_word_lists(
        cls,
        positive: Iterable[str],
        negative: Iterable[str],
        name: str = 'custom'
    ) -> 'SentimentLexicon':
        """
        Build a lexicon from positive and negative word lists.

        A word listed under both labels keeps the positive label.
        """
        entries: Dict[str, SentimentLabel] = {}
        for word in positive:
            entries.setdefault(word.lower(), SentimentLabel.POSITIVE)
        for word in negative:
            entries.setdefault(word.lower(), SentimentLabel.NEGATIVE)
        return cls(entries, name=name)

    @classmethod
    def from_nltk(cls) -> 'SentimentLexicon':
        """Load the Hu & Liu opinion lexicon (the "bing" lexicon) shipped with NLTK."""
        ensure_nltk_data('corpora/opinion_lexicon', 'opinion_lexicon')
        from nltk.corpus import opinion_lexicon

        lexicon = cls.from_word_lists(
            opinion_lexicon.positive(), opinion_lexicon.negative(), name='bing')
        logger.info(f"Loaded {len(lexicon)} words from the bing opinion lexicon")
        return lexicon

    @classmethod
    def from_csv(cls, path: Union[str, Path]) -> 'SentimentLexicon':
        """
        Load a lexicon from a CSV file with 'word' and 'sentiment' columns.
        """
        entries = {}
        with open(path, 'r', encoding='utf-8', newline='') as f:
            for row in csv.DictReader(f):
                entries[row['word']] = row['sentiment']
        return cls(entries, name=Path(path).stem)

    def get(self, word: str) -> Optional[SentimentLabel]:
        return self._entries.get(word)

    def words(self, label: SentimentLabel) -> List[str]:
        return sorted(word for word, value in self._entries.items() if value == label)

    def __contains__(self, word: object) -> bool:
        return word in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"SentimentLexicon(name={self.name!r}, words={len(self._entries)})"


class SentimentScorer:
    """
    Joins token sequences against a sentiment lexicon.

    Expects unfiltered tokens: stopwords stay in, since some of them carry
    sentiment in the lexicon.
    """

    def __init__(self, lexicon: SentimentLexicon, tokenizer: Optional[Tokenizer] = None):
        self.lexicon = lexicon
        self.tokenizer = tokenizer or Tokenizer()

    def _matches(self, tokens: Iterable[str]) -> Counter:
        counts: Counter = Counter()
        for token in tokens:
            label = self.lexicon.get(token)
            if label is not None:
                counts[(token, label)] += 1
        return counts

    @staticmethod
    def _sorted(counts: Counter) -> List[SentimentWordCount]:
        rows = [SentimentWordCount(term, label, n) for (term, label), n in counts.items()]
        rows.sort(key=lambda r: (-r.n, r.term))
        return rows

    def word_counts(self, tokens: Iterable[str]) -> List[SentimentWordCount]:
        """
        Count lexicon words in a token sequence.

        Args:
            tokens: Unfiltered tokens

        Returns:
            (term, label, n) rows sorted by n descending, then term
        """
        return self._sorted(self._matches(tokens))

    def corpus_word_counts(self, streams: Mapping[str, Iterable[str]]) -> List[SentimentWordCount]:
        """Word counts summed over several documents."""
        total: Counter = Counter()
        for tokens in streams.values():
            total.update(self._matches(tokens))
        return self._sorted(total)

    def contribution(
        self,
        word_counts: Iterable[SentimentWordCount],
        n: int = 10
    ) -> Dict[SentimentLabel, List[SentimentWordCount]]:
        """
        Top-n contributing words for each label.

        Args:
            word_counts: Rows from word_counts()
            n: Words kept per label

        Returns:
            Dictionary label -> rows, each list sorted by count
        """
        if n < 1:
            raise ValueError(f"n must be at least 1, got {n}")

        by_label = defaultdict(list)
        for row in sorted(word_counts, key=lambda r: (-r.n, r.term)):
            if len(by_label[row.label]) < n:
                by_label[row.label].append(row)
        return {label: by_label[label] for label in SentimentLabel if label in by_label}

    def trajectory(self, document: Document, block_size: int = 80) -> pl.DataFrame:
        """
        Net sentiment through a document, in blocks of lines.

        Each line belongs to block ``linenumber // block_size``. Blocks
        without any lexicon word are absent.

        Args:
            document: Document to score
            block_size: Number of lines per block

        Returns:
            Polars DataFrame with title, index, positive, negative and
            sentiment (positive - negative), ordered by index
        """
        if block_size < 1:
            raise ValueError(f"block_size must be at least 1, got {block_size}")

        blocks: Dict[int, Counter] = defaultdict(Counter)
        for linenumber, _, token in self.tokenizer.tokenize_lines(document):
            label = self.lexicon.get(token)
            if label is not None:
                blocks[linenumber // block_size][label] += 1

        indices = sorted(blocks)
        positive = [blocks[i][SentimentLabel.POSITIVE] for i in indices]
        negative = [blocks[i][SentimentLabel.NEGATIVE] for i in indices]

        return pl.DataFrame(
            {
                'title': [document.title] * len(indices),
                'index': indices,
                'positive': positive,
                'negative': negative,
                'sentiment': [p - n for p, n in zip(positive, negative)],
            },
            schema={
                'title': pl.Utf8,
                'index': pl.Int64,
                'positive': pl.Int64,
                'negative': pl.Int64,
                'sentiment': pl.Int64,
            }
        )

    @staticmethod
    def to_frame(word_counts: Iterable[SentimentWordCount]) -> pl.DataFrame:
        rows = list(word_counts)
        return pl.DataFrame(
            {
                'term': [r.term for r in rows],
                'sentiment': [r.label.value for r in rows],
                'n': [r.n for r in rows],
            },
            schema={'term': pl.Utf8, 'sentiment': pl.Utf8, 'n': pl.Int64}
        )

    def __repr__(self) -> str:
        return f"SentimentScorer(lexicon={self.lexicon!r})"
