"""
Document: A single novel, identified by its title.

Holds the ordered raw lines of the text and its catalog metadata. A
Document never changes after it is created.
"""

from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple


class Document:
    """
    Represents a single book with its raw lines and metadata.

    Lines keep their original reading order; metadata carries catalog
    fields such as the Gutenberg id and author.
    """

    __slots__ = ('_title', '_lines', '_metadata')

    def __init__(
        self,
        title: str,
        lines: Iterable[str],
        metadata: Optional[Mapping[str, Any]] = None
    ):
        """
        Initialize a document.

        Args:
            title: Unique identifier within a corpus (e.g., "Emma")
            lines: Raw text lines, in reading order
            metadata: Additional data (gutenberg_id, author, ...)
        """
        if not title:
            raise ValueError("Document title must be a non-empty string")

        self._title = title
        self._lines: Tuple[str, ...] = tuple(lines)
        self._metadata = MappingProxyType(dict(metadata or {}))

    @classmethod
    def from_text(cls, title: str, text: str,
                  metadata: Optional[Mapping[str, Any]] = None) -> 'Document':
        """Build a document from a single string, split on line breaks."""
        return cls(title, text.splitlines(), metadata)

    @property
    def title(self) -> str:
        return self._title

    @property
    def lines(self) -> Tuple[str, ...]:
        return self._lines

    @property
    def metadata(self) -> Mapping[str, Any]:
        return self._metadata

    @property
    def text(self) -> str:
        """The full text, lines joined with newlines."""
        return "\n".join(self._lines)

    @property
    def gutenberg_id(self) -> Optional[int]:
        """Get the Gutenberg id from metadata."""
        return self._metadata.get('gutenberg_id')

    @property
    def author(self) -> Optional[str]:
        """Get the author from metadata."""
        return self._metadata.get('author')

    def is_empty(self) -> bool:
        return not any(line.strip() for line in self._lines)

    def __setattr__(self, name, value):
        if hasattr(self, '_metadata'):
            raise AttributeError("Document is immutable")
        object.__setattr__(self, name, value)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Document):
            return NotImplemented
        return (self._title == other._title and self._lines == other._lines
                and dict(self._metadata) == dict(other._metadata))

    def __hash__(self) -> int:
        return hash((self._title, self._lines))

    def __repr__(self) -> str:
        return f"Document(title={self._title!r}, lines={len(self._lines)})"

    def __len__(self) -> int:
        """Return the number of lines."""
        return len(self._lines)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert document to a dictionary for serialization.

        Returns:
            Dictionary representation of the document
        """
        return {
            'title': self._title,
            'text': self.text,
            'line_count': len(self._lines),
            **dict(self._metadata),
        }
