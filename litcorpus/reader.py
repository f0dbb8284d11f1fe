"""
CorpusReader: Handles retrieval of source texts and catalog metadata.

Texts are looked up in a local cache directory first and otherwise
downloaded from a Project Gutenberg mirror. Retrieval is synchronous with
a bounded number of retries; any failure aborts the load.
"""

import re
import time
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

import polars as pl
import requests
from loguru import logger
from tqdm import autonotebook

from .corpus import Corpus
from .document import Document
from .exceptions import FetchError
from .preprocessing import GutenbergBoilerplateRemover


class CorpusReader:
    """
    Loads Project Gutenberg books into a Corpus.

    Supports a local cache of plain-text files and HTTP retrieval from a
    configurable mirror, plus metadata lookup in the Gutenberg catalog CSV.
    """

    # Metadata field -> column of the Gutenberg catalog CSV
    CATALOG_COLUMNS = {
        'title': 'Title',
        'author': 'Authors',
        'language': 'Language',
        'subjects': 'Subjects',
        'bookshelves': 'Bookshelves',
        'issued': 'Issued',
    }

    AUTHOR_DATES_PATTERN = re.compile(r",\s*\d{1,4}\??\s*-\s*(\d{1,4}\??)?$")

    def __init__(
        self,
        cache_dir: Union[str, Path] = "data/gutenberg",
        mirror_url: str = "https://www.gutenberg.org/cache/epub/{id}/pg{id}.txt",
        catalog_url: str = "https://www.gutenberg.org/cache/epub/feeds/pg_catalog.csv",
        max_retries: int = 3,
        backoff_seconds: float = 2.0,
        timeout_seconds: float = 30.0,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize the corpus reader.

        Args:
            cache_dir: Directory holding <id>.txt files and the catalog
            mirror_url: URL template with an {id} placeholder
            catalog_url: URL of the Gutenberg catalog CSV
            max_retries: Attempts per download before giving up
            backoff_seconds: Pause between attempts
            timeout_seconds: Per-request timeout
            session: Optional requests session (a new one is created if None)
        """
        if max_retries < 1:
            raise ValueError("max_retries must be at least 1")

        self.cache_dir = Path(cache_dir)
        self.mirror_url = mirror_url
        self.catalog_url = catalog_url
        self.max_retries = max_retries
        self.backoff_seconds = backoff_seconds
        self.timeout_seconds = timeout_seconds
        self._session = session or requests.Session()
        self._catalog: Optional[pl.DataFrame] = None
        self._boilerplate = GutenbergBoilerplateRemover()

    @classmethod
    def from_config(cls, config, session: Optional[requests.Session] = None) -> 'CorpusReader':
        """Build a reader from an AnalysisConfig."""
        fetch = config.fetch
        return cls(
            cache_dir=fetch.cache_dir,
            mirror_url=fetch.mirror_url,
            catalog_url=fetch.catalog_url,
            max_retries=fetch.max_retries,
            backoff_seconds=fetch.backoff_seconds,
            timeout_seconds=fetch.timeout_seconds,
            session=session
        )

    def _fetch(self, url: str, book_id: Optional[int]) -> bytes:
        """GET a URL, retrying transient failures up to max_retries times."""
        last_error = None

        for attempt in range(1, self.max_retries + 1):
            try:
                response = self._session.get(url, timeout=self.timeout_seconds)
                response.raise_for_status()
                return response.content
            except requests.HTTPError as e:
                status = e.response.status_code if e.response is not None else None
                if status is not None and 400 <= status < 500:
                    logger.error(f"{url} returned HTTP {status}")
                    raise FetchError(book_id, f"HTTP {status} from {url}") from e
                last_error = e
            except requests.RequestException as e:
                last_error = e

            logger.warning(
                f"Attempt {attempt}/{self.max_retries} for {url} failed: {last_error}")
            if attempt < self.max_retries:
                time.sleep(self.backoff_seconds)

        logger.error(f"Giving up on {url} after {self.max_retries} attempts")
        raise FetchError(book_id, str(last_error)) from last_error

    def _cache_path(self, book_id: int) -> Path:
        return self.cache_dir / f"{book_id}.txt"

    def fetch_lines(self, book_id: int) -> List[str]:
        """
        Return the body lines of a book, without the license boilerplate.

        Args:
            book_id: Gutenberg book id

        Returns:
            List of text lines in reading order
        """
        cache_path = self._cache_path(book_id)

        if cache_path.exists():
            logger.debug(f"Reading book {book_id} from {cache_path}")
            raw = cache_path.read_bytes()
        else:
            url = self.mirror_url.format(id=book_id)
            logger.info(f"Downloading book {book_id} from {url}")
            raw = self._fetch(url, book_id)
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            cache_path.write_bytes(raw)

        text = raw.decode('utf-8-sig', errors='replace')
        return self._boilerplate.process(text.splitlines())

    def load_catalog(self) -> pl.DataFrame:
        """
        Load the Gutenberg catalog, downloading it on first use.

        Returns:
            Polars DataFrame with one row per catalog entry
        """
        if self._catalog is not None:
            return self._catalog

        catalog_path = self.cache_dir / "pg_catalog.csv"
        if not catalog_path.exists():
            logger.info(f"Downloading catalog from {self.catalog_url}")
            content = self._fetch(self.catalog_url, None)
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            catalog_path.write_bytes(content)

        # every column as text; ids are compared as strings
        self._catalog = pl.read_csv(catalog_path, infer_schema_length=0)
        return self._catalog

    def _clean_author(self, authors: Optional[str]) -> Optional[str]:
        """Drop life dates: 'Austen, Jane, 1775-1817' -> 'Austen, Jane'."""
        if not authors:
            return None
        names = [self.AUTHOR_DATES_PATTERN.sub('', name.strip())
                 for name in authors.split(';')]
        return '; '.join(name for name in names if name)

    def get_metadata(self, book_id: int, meta_fields: Sequence[str]) -> Dict[str, Any]:
        """
        Look up catalog metadata for a book.

        Args:
            book_id: Gutenberg book id
            meta_fields: Field names, any of CATALOG_COLUMNS

        Returns:
            Dictionary of the requested fields plus 'gutenberg_id'
        """
        unknown = [f for f in meta_fields if f not in self.CATALOG_COLUMNS]
        if unknown:
            raise ValueError(f"Unknown metadata fields: {unknown}")

        metadata: Dict[str, Any] = {'gutenberg_id': book_id}
        if not meta_fields:
            return metadata

        catalog = self.load_catalog()
        rows = catalog.filter(pl.col('Text#') == str(book_id))
        if rows.height == 0:
            raise FetchError(book_id, "not found in catalog")

        row = rows.row(0, named=True)
        for field in meta_fields:
            value = row.get(self.CATALOG_COLUMNS[field])
            if field == 'author':
                value = self._clean_author(value)
            metadata[field] = value

        return metadata

    def download(
        self,
        book_ids: Iterable[int],
        meta_fields: Sequence[str] = ('title',),
        titles: Optional[Mapping[int, str]] = None,
        show_progress: bool = True
    ) -> Corpus:
        """
        Retrieve books and assemble them into a Corpus.

        Args:
            book_ids: Gutenberg ids, in the order documents should appear
            meta_fields: Catalog fields to attach to each document
            titles: Optional id -> title overrides
            show_progress: Whether to show a progress bar

        Returns:
            Corpus keyed by title
        """
        book_ids = list(book_ids)
        titles = dict(titles or {})

        id_stream = book_ids
        if show_progress:
            id_stream = autonotebook.tqdm(book_ids, desc="Loading books")

        documents = []
        for book_id in id_stream:
            fields = [f for f in meta_fields
                      if not (f == 'title' and book_id in titles)]
            metadata = self.get_metadata(book_id, fields)

            title = titles.get(book_id) or metadata.get('title')
            if not title:
                raise FetchError(book_id, "no title available")
            metadata['title'] = title

            lines = self.fetch_lines(book_id)
            documents.append(Document(title, lines, metadata))

        corpus = Corpus(documents)
        logger.info(f"Loaded {len(corpus)} documents")
        return corpus

    def load_local(
        self,
        paths: Mapping[str, Union[str, Path]],
        metadata: Optional[Mapping[str, Mapping[str, Any]]] = None
    ) -> Corpus:
        """
        Build a Corpus from local text files.

        Args:
            paths: Mapping title -> file path
            metadata: Optional mapping title -> metadata

        Returns:
            Corpus keyed by title
        """
        metadata = metadata or {}
        documents = []

        for title, path in paths.items():
            path = Path(path)
            if not path.exists():
                raise FetchError(None, f"file not found: {path}")
            text = path.read_text(encoding='utf-8-sig', errors='replace')
            lines = self._boilerplate.process(text.splitlines())
            documents.append(Document(title, lines, metadata.get(title)))

        corpus = Corpus(documents)
        logger.info(f"Loaded {len(corpus)} documents from local files")
        return corpus
