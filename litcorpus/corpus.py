"""
Corpus: The collection of documents under analysis.

Documents are keyed by title and the collection never changes after it
is built. Provides tidy one-token-per-row tables, grouped token streams
and descriptive statistics.
"""

from collections import defaultdict
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Mapping, Optional

import numpy as np
import polars as pl

from .document import Document
from .exceptions import CorpusError
from .preprocessing import StopwordRemover, TokenStream, Tokenizer


class Corpus:
    """
    Read-only, title-keyed collection of documents.

    Provides token streams per title or per metadata group, tidy token
    tables and corpus statistics.
    """

    def __init__(self, documents: Iterable[Document] = ()):
        """
        Initialize the corpus.

        Args:
            documents: Documents to include. Titles must be unique.
        """
        by_title: Dict[str, Document] = {}
        for doc in documents:
            if doc.title in by_title:
                raise CorpusError(f"Duplicate document title: {doc.title!r}")
            by_title[doc.title] = doc

        self._documents = MappingProxyType(by_title)

    @property
    def documents(self) -> Mapping[str, Document]:
        return self._documents

    @property
    def titles(self) -> List[str]:
        """Titles in load order."""
        return list(self._documents.keys())

    def get_document(self, title: str) -> Document:
        if title not in self._documents:
            raise CorpusError(f"No document titled {title!r} in corpus")
        return self._documents[title]

    def token_streams(
        self,
        tokenizer: Optional[Tokenizer] = None,
        stopword_remover: Optional[StopwordRemover] = None
    ) -> Dict[str, TokenStream]:
        """
        Get a restartable token stream for every document.

        Args:
            tokenizer: Tokenizer to use (default settings if None)
            stopword_remover: When given, stopwords are filtered out

        Returns:
            Dictionary title -> TokenStream
        """
        tokenizer = tokenizer or Tokenizer()
        streams = {}
        for title, doc in self._documents.items():
            stream = tokenizer.tokenize(doc)
            if stopword_remover is not None:
                stream = stopword_remover.process(stream)
            streams[title] = stream
        return streams

    def group_by(self, field: str = 'author') -> Dict[str, List[Document]]:
        """
        Group documents by a metadata field.

        Documents missing the field are grouped under 'unknown'.
        """
        groups = defaultdict(list)
        for doc in self._documents.values():
            groups[doc.metadata.get(field) or 'unknown'].append(doc)
        return dict(groups)

    def group_token_streams(
        self,
        groups: Mapping[str, Iterable[str]],
        tokenizer: Optional[Tokenizer] = None,
        stopword_remover: Optional[StopwordRemover] = None
    ) -> Dict[str, TokenStream]:
        """
        Concatenate the token streams of several titles under a group label.

        Args:
            groups: Mapping group label -> titles in that group
            tokenizer: Tokenizer to use
            stopword_remover: Optional stopword filter

        Returns:
            Dictionary group -> TokenStream over all of its titles
        """
        streams = self.token_streams(tokenizer, stopword_remover)
        grouped = {}

        for group, titles in groups.items():
            members = [streams[title] for title in titles if title in streams]
            missing = [title for title in titles if title not in streams]
            if missing:
                raise CorpusError(f"Group {group!r} refers to unknown titles: {missing}")

            def chain(members=members) -> Iterator[str]:
                for stream in members:
                    yield from stream

            grouped[group] = TokenStream(chain)

        return grouped

    def tidy(
        self,
        tokenizer: Optional[Tokenizer] = None,
        stopword_remover: Optional[StopwordRemover] = None
    ) -> pl.DataFrame:
        """
        One row per token: title, author, linenumber, chapter, word.

        Args:
            tokenizer: Tokenizer to use
            stopword_remover: Optional stopword filter

        Returns:
            Polars DataFrame in reading order
        """
        tokenizer = tokenizer or Tokenizer()
        data = []

        for title, doc in self._documents.items():
            for linenumber, chapter, token in tokenizer.tokenize_lines(doc):
                if stopword_remover is not None and token in stopword_remover:
                    continue
                data.append({
                    'title': title,
                    'author': doc.author,
                    'linenumber': linenumber,
                    'chapter': chapter,
                    'word': token,
                })

        schema = {
            'title': pl.Utf8,
            'author': pl.Utf8,
            'linenumber': pl.Int64,
            'chapter': pl.Int64,
            'word': pl.Utf8,
        }
        return pl.DataFrame(data, schema=schema)

    def get_statistics(self, tokenizer: Optional[Tokenizer] = None) -> Dict:
        """
        Compute descriptive statistics about the corpus.

        Returns:
            Dictionary with document, line and token statistics
        """
        tokenizer = tokenizer or Tokenizer()

        stats = {
            'total_documents': len(self._documents),
            'authors': sorted({doc.author for doc in self._documents.values() if doc.author}),
        }

        line_counts = [len(doc) for doc in self._documents.values()]
        token_counts = [sum(1 for _ in tokenizer.tokenize(doc))
                        for doc in self._documents.values()]
        stats['tokens_per_document'] = dict(zip(self._documents.keys(), token_counts))

        if line_counts:
            stats['line_count'] = {
                'mean': float(np.mean(line_counts)),
                'median': float(np.median(line_counts)),
                'min': int(np.min(line_counts)),
                'max': int(np.max(line_counts)),
            }
            stats['token_count'] = {
                'total': int(np.sum(token_counts)),
                'mean': float(np.mean(token_counts)),
                'median': float(np.median(token_counts)),
                'min': int(np.min(token_counts)),
                'max': int(np.max(token_counts)),
                'std': float(np.std(token_counts)),
            }

        return stats

    def filter_by_titles(self, titles: Iterable[str]) -> 'Corpus':
        """
        Create a new corpus containing only the given titles.

        Args:
            titles: Titles to include

        Returns:
            New Corpus instance
        """
        wanted = set(titles)
        return Corpus(doc for title, doc in self._documents.items() if title in wanted)

    def __getitem__(self, title: str) -> Document:
        return self._documents[title]

    def __contains__(self, title: object) -> bool:
        return title in self._documents

    def __iter__(self) -> Iterator[Document]:
        return iter(self._documents.values())

    def __len__(self) -> int:
        """Return the number of documents in the corpus."""
        return len(self._documents)

    def __repr__(self) -> str:
        return f"Corpus(documents={len(self._documents)})"
