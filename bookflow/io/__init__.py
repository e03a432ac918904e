"""Storage components for Bookflow.

This package contains the library row store and chapter cache serialization.
"""

from .chapter_cache import deserialize_chapters, serialize_chapters
from .storage import LibraryStore

__all__ = ["LibraryStore", "serialize_chapters", "deserialize_chapters"]
