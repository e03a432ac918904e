"""Core datatypes shared across Bookflow modules.

Responsibilities:
- Represent immutable records exchanged between parsing, caching, and playback.
- Provide explicit typing for chapter cache serialization.

Key types:
- `Chapter`, `BookRecord`, `BookSearchResult`, `GutenbergMatch`,
  `SegmentationReport`, `PlaybackState`, `SourceRef`, `SessionKey`,
  `SessionSnapshot`, and `NavigationTarget`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Hashable


@dataclass(frozen=True, slots=True)
class Chapter:
    """A chapter segmented from stripped document text.

    Attributes:
        index: 0-based chapter index defining reading order.
        title: Heading line or synthetic `Section N` label.
        content: Raw prose for this chapter, heading line included.
    """

    index: int
    title: str
    content: str


@dataclass(frozen=True, slots=True)
class BookRecord:
    """Library row describing one readable document.

    Attributes:
        id: Stable book identifier used as the row key.
        title: Human-readable title.
        author: Optional author name.
        text_url: Optional remote plain-text URL.
        gutenberg_id: Optional Project Gutenberg book id.
    """

    id: str
    title: str
    author: str | None = None
    text_url: str | None = None
    gutenberg_id: str | None = None


@dataclass(frozen=True, slots=True)
class BookSearchResult:
    """One catalog search hit."""

    title: str
    author: str
    cover_url: str | None
    description: str
    google_books_id: str
    gutenberg_id: str | None = None
    total_chapters: int | None = None


@dataclass(frozen=True, slots=True)
class GutenbergMatch:
    """Resolved Project Gutenberg book with a plain-text download URL."""

    id: str
    text_url: str


@dataclass(frozen=True, slots=True)
class SegmentationReport:
    """Structured output of chapter segmentation.

    Attributes:
        chapters: Ordered chapter records.
        source: `headings` when heading detection succeeded, `pages` otherwise.
        fallback_reason: Why heading detection was rejected, empty when it was not.
        truncated: Whether paging dropped content beyond the page cap.
    """

    chapters: tuple[Chapter, ...]
    source: str
    fallback_reason: str = ""
    truncated: bool = False


class PlaybackState(str, Enum):
    """Lifecycle state of the playback session."""

    IDLE = "idle"
    PLAYING = "playing"
    PAUSED = "paused"


@dataclass(frozen=True, slots=True)
class SourceRef:
    """Pointer from a playback session back to its originating document."""

    book_id: str
    book_title: str | None = None
    text_url: str | None = None


@dataclass(frozen=True, slots=True)
class SessionKey:
    """Identity of one logical reading session (document plus chapter)."""

    book_id: str
    chapter_index: int
    title: str


@dataclass(frozen=True, slots=True)
class SessionSnapshot:
    """Immutable read-only view of the playback session.

    Attributes:
        state: Current lifecycle state.
        units: Loaded speakable units.
        current_index: Index into `units` of the current unit.
        session_key: Opaque identity of the loaded session, or `None`.
        source_ref: Optional pointer back to the source document.
    """

    state: PlaybackState = PlaybackState.IDLE
    units: tuple[str, ...] = field(default_factory=tuple)
    current_index: int = 0
    session_key: Hashable | None = None
    source_ref: SourceRef | None = None

    @property
    def is_playing(self) -> bool:
        return self.state is PlaybackState.PLAYING

    @property
    def is_paused(self) -> bool:
        return self.state is PlaybackState.PAUSED

    @property
    def has_session(self) -> bool:
        """Return whether a session identity is loaded, regardless of state."""

        return self.session_key is not None or bool(self.units)

    @property
    def current_unit(self) -> str | None:
        if 0 <= self.current_index < len(self.units):
            return self.units[self.current_index]
        return None


@dataclass(frozen=True, slots=True)
class NavigationTarget:
    """Reader deep-link target reconstructed from a session snapshot."""

    book_id: str
    book_title: str | None = None
    text_url: str | None = None
    chapter_index: int | None = None

    @classmethod
    def from_snapshot(cls, snapshot: SessionSnapshot) -> NavigationTarget | None:
        """Derive a reader target from snapshot identity alone."""

        source_ref = snapshot.source_ref
        session_key = snapshot.session_key
        chapter_index = (
            session_key.chapter_index if isinstance(session_key, SessionKey) else None
        )
        if source_ref is not None:
            return cls(
                book_id=source_ref.book_id,
                book_title=source_ref.book_title,
                text_url=source_ref.text_url,
                chapter_index=chapter_index,
            )
        if isinstance(session_key, SessionKey):
            return cls(book_id=session_key.book_id, chapter_index=chapter_index)
        return None
