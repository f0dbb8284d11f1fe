"""
Exploratory text analysis of public-domain novels

Tokenization, stop-word filtering, lexicon sentiment, tf-idf ranking and
cross-author frequency comparison over Project Gutenberg books.
"""

from .reader import CorpusReader
from .document import Document
from .corpus import Corpus
from .preprocessing import Tokenizer, TokenStream, StopwordRemover
from .frequency import FrequencyCounter, TermCount
from .tfidf import TfIdfRanker, TfIdfRecord
from .sentiment import SentimentLabel, SentimentLexicon, SentimentScorer
from .comparison import CrossCorpusComparator, FrequencyComparison
from .persistence import PersistenceManager
from .config import AnalysisConfig, load_config
from .exceptions import (
    LitCorpusError,
    FetchError,
    CorpusError,
    ComparisonError,
    ConfigurationError,
)

__version__ = "1.0.0"
__all__ = [
    "CorpusReader",
    "Document",
    "Corpus",
    "Tokenizer",
    "TokenStream",
    "StopwordRemover",
    "FrequencyCounter",
    "TermCount",
    "TfIdfRanker",
    "TfIdfRecord",
    "SentimentLabel",
    "SentimentLexicon",
    "SentimentScorer",
    "CrossCorpusComparator",
    "FrequencyComparison",
    "PersistenceManager",
    "AnalysisConfig",
    "load_config",
    "LitCorpusError",
    "FetchError",
    "CorpusError",
    "ComparisonError",
    "ConfigurationError",
]
