"""
AnalysisConfig: Settings for retrieval, analysis and output.

Values are read from a TOML file; anything the file leaves out falls back
to the defaults below.
"""

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import toml

from .exceptions import ConfigurationError


DEFAULT_BOOKS: Dict[str, List[int]] = {
    'austen': [1342, 161, 158, 141, 121, 105],
    'bronte': [1260, 768, 969, 9182, 767],
    'wells': [35, 36, 5230, 159],
}


@dataclass(frozen=True)
class FetchSettings:
    mirror_url: str = "https://www.gutenberg.org/cache/epub/{id}/pg{id}.txt"
    catalog_url: str = "https://www.gutenberg.org/cache/epub/feeds/pg_catalog.csv"
    cache_dir: str = "data/gutenberg"
    max_retries: int = 3
    backoff_seconds: float = 2.0
    timeout_seconds: float = 30.0


@dataclass(frozen=True)
class AnalysisSettings:
    stopword_language: str = "english"
    custom_stopwords: Tuple[str, ...] = ()
    top_k: int = 15
    comparison_threshold: float = 0.0025
    sentiment_block_size: int = 80


@dataclass(frozen=True)
class OutputSettings:
    directory: str = "output"
    log_level: str = "INFO"
    log_file: Optional[str] = None


@dataclass(frozen=True)
class AnalysisConfig:
    """Complete, read-only configuration for one analysis run."""

    fetch: FetchSettings = field(default_factory=FetchSettings)
    analysis: AnalysisSettings = field(default_factory=AnalysisSettings)
    output: OutputSettings = field(default_factory=OutputSettings)
    books: Dict[str, Tuple[int, ...]] = field(
        default_factory=lambda: {group: tuple(ids) for group, ids in DEFAULT_BOOKS.items()})

    @property
    def all_book_ids(self) -> List[int]:
        """Every configured book id, in group order, without duplicates."""
        seen = []
        for ids in self.books.values():
            for book_id in ids:
                if book_id not in seen:
                    seen.append(book_id)
        return seen


def _find_config_path(path: Optional[Union[str, Path]]) -> Optional[Path]:
    """Return the first existing config file, or None."""
    if path is not None:
        explicit = Path(path)
        if not explicit.exists():
            raise ConfigurationError(f"Config file not found: {explicit}")
        return explicit

    current_dir = Path.cwd()
    for candidate in [current_dir / "config" / "options.toml",
                      current_dir / "options.toml"]:
        if candidate.exists():
            return candidate
    return None


def _build_section(cls, values: Dict[str, Any], section: str):
    """Instantiate a settings dataclass, checking every value's type."""
    if not isinstance(values, dict):
        raise ConfigurationError(f"[{section}] must be a table")

    defaults = cls()
    kwargs = {}
    known = {f.name for f in fields(cls)}

    for key, value in values.items():
        if key not in known:
            raise ConfigurationError(f"Unknown setting '{key}' in [{section}]")

        default = getattr(defaults, key)
        if isinstance(value, bool) and not isinstance(default, bool):
            raise ConfigurationError(f"[{section}] {key} must not be a boolean")
        if isinstance(default, tuple):
            if not isinstance(value, list):
                raise ConfigurationError(f"[{section}] {key} must be a list")
            value = tuple(value)
        elif isinstance(default, bool) or default is None:
            pass
        elif isinstance(default, float) and isinstance(value, int):
            value = float(value)
        elif not isinstance(value, type(default)):
            raise ConfigurationError(
                f"[{section}] {key} must be {type(default).__name__}, "
                f"got {type(value).__name__}")
        kwargs[key] = value

    return cls(**kwargs)


def _build_books(values: Dict[str, Any]) -> Dict[str, Tuple[int, ...]]:
    if not isinstance(values, dict) or not values:
        raise ConfigurationError("[books] must be a non-empty table of id lists")

    books = {}
    for group, ids in values.items():
        if not isinstance(ids, list) or not all(
                isinstance(i, int) and not isinstance(i, bool) for i in ids):
            raise ConfigurationError(f"[books] {group} must be a list of integers")
        books[group] = tuple(ids)
    return books


def load_config(path: Optional[Union[str, Path]] = None) -> AnalysisConfig:
    """
    Load the analysis configuration.

    Args:
        path: Explicit TOML file. When None, ./config/options.toml and
              ./options.toml are tried in turn; if neither exists the
              defaults are returned.

    Returns:
        AnalysisConfig instance
    """
    config_path = _find_config_path(path)
    if config_path is None:
        return AnalysisConfig()

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            raw = toml.load(f)
    except toml.TomlDecodeError as e:
        raise ConfigurationError(f"Invalid TOML in {config_path}: {e}") from e

    kwargs = {}
    if 'fetch' in raw:
        kwargs['fetch'] = _build_section(FetchSettings, raw['fetch'], 'fetch')
    if 'analysis' in raw:
        kwargs['analysis'] = _build_section(
            AnalysisSettings, raw['analysis'], 'analysis')
    if 'output' in raw:
        kwargs['output'] = _build_section(OutputSettings, raw['output'], 'output')
    if 'books' in raw:
        kwargs['books'] = _build_books(raw['books'])

    return AnalysisConfig(**kwargs)
