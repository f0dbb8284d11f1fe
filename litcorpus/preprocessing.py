"""
Preprocessing: Turns raw Gutenberg lines into normalized word tokens.

Provides boilerplate removal, chapter detection, the letter-only
tokenizer and stop-word filtering.
"""

import re
from typing import Callable, Iterable, Iterator, List, Optional, Sequence, Tuple

import nltk
from loguru import logger


def ensure_nltk_data(data_path: str, package_name: str):
    """Download an NLTK resource if it is not installed yet."""
    try:
        nltk.data.find(data_path)
    except LookupError:
        logger.info(f"Downloading NLTK resource '{package_name}'")
        nltk.download(package_name, quiet=True)


class GutenbergBoilerplateRemover:
    """Strips the Project Gutenberg license header and footer from a text."""

    START_PATTERN = re.compile(
        r"^\*\*\*\s*START OF (THE|THIS) PROJECT GUTENBERG EBOOK", re.IGNORECASE)
    END_PATTERN = re.compile(
        r"^\*\*\*\s*END OF (THE|THIS) PROJECT GUTENBERG EBOOK", re.IGNORECASE)

    def process(self, lines: Sequence[str]) -> List[str]:
        """
        Keep only the lines between the START and END markers.

        Texts without markers are returned unchanged.
        """
        start = 0
        end = len(lines)

        for idx, line in enumerate(lines):
            if self.START_PATTERN.match(line.strip()):
                start = idx + 1
                break

        for idx in range(len(lines) - 1, start - 1, -1):
            if self.END_PATTERN.match(lines[idx].strip()):
                end = idx
                break

        return list(lines[start:end])


class ChapterDetector:
    """Numbers chapters by matching heading lines like 'CHAPTER IV' or 'Chapter 12'."""

    CHAPTER_PATTERN = re.compile(r"^chapter [\divxlc]", re.IGNORECASE)

    def is_heading(self, line: str) -> bool:
        return bool(self.CHAPTER_PATTERN.match(line.strip()))

    def annotate(self, lines: Iterable[str]) -> Iterator[Tuple[int, int, str]]:
        """
        Yield (linenumber, chapter, line) for every line.

        Line numbers start at 1; lines before the first heading belong
        to chapter 0.
        """
        chapter = 0
        for linenumber, line in enumerate(lines, start=1):
            if self.is_heading(line):
                chapter += 1
            yield linenumber, chapter, line


class TokenStream:
    """
    Lazy, restartable sequence of tokens.

    Each iteration calls the underlying generator factory again, so the
    same stream can be consumed any number of times.
    """

    def __init__(self, factory: Callable[[], Iterator[str]]):
        self._factory = factory

    def __iter__(self) -> Iterator[str]:
        return self._factory()

    def to_list(self) -> List[str]:
        return list(self)

    def __repr__(self) -> str:
        return "TokenStream()"


class Tokenizer:
    """
    Splits text into normalized word tokens.

    Words are separated on whitespace and punctuation, lower-cased, and
    reduced to their first run of letters and apostrophes. Anything that
    leaves nothing behind (numbers, stray symbols) is dropped.
    """

    WORD_PATTERN = re.compile(r"[\w']+")
    # typographic apostrophes used by the UTF-8 Gutenberg texts
    APOSTROPHES = str.maketrans({"\u2019": "'", "\u2018": "'"})
    EXTRACT_PATTERN = re.compile(r"[a-z']+")

    def __init__(self, chapter_detector: Optional[ChapterDetector] = None):
        self.chapter_detector = chapter_detector or ChapterDetector()

    def normalize(self, word: str) -> Optional[str]:
        """Apply the extraction rule to one word; None when nothing is left."""
        match = self.EXTRACT_PATTERN.search(word.lower().translate(self.APOSTROPHES))
        if match is None:
            return None
        token = match.group(0).strip("'")
        return token or None

    def _iter_line(self, line: str) -> Iterator[str]:
        for word in self.WORD_PATTERN.findall(line.lower().translate(self.APOSTROPHES)):
            token = self.normalize(word)
            if token is not None:
                yield token

    def _iter_lines(self, lines: Iterable[str]) -> Iterator[str]:
        for line in lines:
            yield from self._iter_line(line)

    def tokenize_text(self, text: str) -> TokenStream:
        """Tokenize a plain string."""
        return TokenStream(lambda: self._iter_lines(text.splitlines()))

    def tokenize(self, document) -> TokenStream:
        """
        Tokenize a Document in reading order.

        Args:
            document: Document whose lines are tokenized

        Returns:
            TokenStream with one token per occurrence
        """
        return TokenStream(lambda: self._iter_lines(document.lines))

    def tokenize_lines(self, document) -> Iterator[Tuple[int, int, str]]:
        """
        Yield (linenumber, chapter, token) for each token of a Document.
        """
        for linenumber, chapter, line in self.chapter_detector.annotate(document.lines):
            for token in self._iter_line(line):
                yield linenumber, chapter, token


class StopwordRemover:
    """Removes stopwords from token sequences."""

    def __init__(
        self,
        stopwords: Optional[Iterable[str]] = None,
        language: str = 'english',
        custom_stopwords: Optional[Iterable[str]] = None
    ):
        """
        Initialize stopword remover.

        Args:
            stopwords: Explicit stop-word set. When None, the NLTK list
                       for ``language`` is used.
            language: Language for NLTK stopwords
            custom_stopwords: Additional stopwords to remove
        """
        if stopwords is None:
            ensure_nltk_data('corpora/stopwords', 'stopwords')
            from nltk.corpus import stopwords as nltk_stopwords
            words = set(nltk_stopwords.words(language))
        else:
            words = set(stopwords)

        if custom_stopwords:
            words.update(custom_stopwords)

        self.stopwords = frozenset(word.lower() for word in words)

    def filter(self, tokens: Iterable[str]) -> Iterator[str]:
        """Yield the tokens that are not stopwords, in order."""
        for token in tokens:
            if token not in self.stopwords:
                yield token

    def process(self, tokens: Iterable[str]) -> TokenStream:
        """Restartable filtered view over a (restartable) token sequence."""
        return TokenStream(lambda: self.filter(tokens))

    def __contains__(self, word: str) -> bool:
        return word in self.stopwords

    def __len__(self) -> int:
        return len(self.stopwords)

    def __repr__(self) -> str:
        return f"StopwordRemover(words={len(self.stopwords)})"
