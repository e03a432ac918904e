"""Observer surfaces over the shared playback session.

Responsibilities:
- Open documents for reader surfaces, loading chapters cache-first.
- Attach a surface to an in-flight session for the same document instead of
  starting a second one, so a reader and the mini-player stay consistent.
- Route every playback request through `PlaybackSessionManager` operations.

Surfaces never write session fields; they keep a local reading position only
while they are not attached to the active session.
"""

from __future__ import annotations

from typing import Callable

from ..library import ChapterLoader
from ..models.datatypes import (
    BookRecord,
    Chapter,
    NavigationTarget,
    PlaybackState,
    SessionKey,
    SessionSnapshot,
    SourceRef,
)
from ..text.sentences import SentenceTokenizer
from .session import PlaybackSessionManager


class ReaderView:
    """One reader surface showing a book's chapters and the current reading position."""

    def __init__(
        self,
        manager: PlaybackSessionManager,
        tokenizer: SentenceTokenizer,
        book: BookRecord,
        chapters: list[Chapter],
    ) -> None:
        self._manager = manager
        self._tokenizer = tokenizer
        self.book = book
        self.chapters = chapters
        self.chapter: Chapter | None = None
        self.units: tuple[str, ...] = ()
        self.current_index = 0
        self.state = PlaybackState.IDLE
        self.attached = False
        self._listeners: list[Callable[[ReaderView], None]] = []
        self._unsubscribe: Callable[[], None] | None = manager.subscribe(self._on_snapshot)

    @property
    def source_ref(self) -> SourceRef:
        return SourceRef(
            book_id=self.book.id,
            book_title=self.book.title,
            text_url=self.book.text_url,
        )

    @property
    def session_key(self) -> SessionKey | None:
        if self.chapter is None:
            return None
        return SessionKey(
            book_id=self.book.id,
            chapter_index=self.chapter.index,
            title=self.chapter.title,
        )

    @property
    def current_unit(self) -> str | None:
        if 0 <= self.current_index < len(self.units):
            return self.units[self.current_index]
        return None

    def on_change(self, listener: Callable[[ReaderView], None]) -> None:
        """Register a re-render callback invoked after every view change."""

        self._listeners.append(listener)

    def attach(self, snapshot: SessionSnapshot) -> bool:
        """Adopt an in-flight session for this book, if the snapshot holds one."""

        source_ref = snapshot.source_ref
        key = snapshot.session_key
        if source_ref is None or source_ref.book_id != self.book.id:
            return False
        if not isinstance(key, SessionKey) or not snapshot.units:
            return False
        if 0 <= key.chapter_index < len(self.chapters):
            self.chapter = self.chapters[key.chapter_index]
        self.attached = True
        self._adopt(snapshot)
        return True

    def open_chapter(self, index: int) -> Chapter | None:
        """Switch to a chapter and reset the local reading position to its start.

        An attached session for another chapter is stopped first.
        """

        if not self.chapters:
            return None
        chapter = self.chapters[index] if 0 <= index < len(self.chapters) else self.chapters[0]
        if self.attached:
            self.attached = False
            self._manager.stop()
        self.chapter = chapter
        self.units = tuple(self._tokenizer.tokenize(chapter.content))
        self.current_index = 0
        self.state = PlaybackState.IDLE
        self._changed()
        return chapter

    def next_chapter(self) -> Chapter | None:
        if self.chapter is None or self.chapter.index >= len(self.chapters) - 1:
            return None
        return self.open_chapter(self.chapter.index + 1)

    def prev_chapter(self) -> Chapter | None:
        if self.chapter is None or self.chapter.index <= 0:
            return None
        return self.open_chapter(self.chapter.index - 1)

    def play(self) -> None:
        """Start (or resume) speaking this chapter from the current position."""

        if self.attached and self.state is PlaybackState.PAUSED:
            self._manager.resume()
            return
        if self.attached and self.state is PlaybackState.PLAYING:
            return
        if not self.units:
            return
        self.attached = True
        self._manager.play(
            self.units,
            self.current_index,
            session_key=self.session_key,
            source_ref=self.source_ref,
        )

    def pause(self) -> None:
        if self.attached:
            self._manager.pause()

    def toggle(self) -> None:
        """Pause while playing; otherwise play or resume."""

        if self.attached and self.state is PlaybackState.PLAYING:
            self.pause()
        else:
            self.play()

    def stop(self) -> None:
        """Stop the shared session and keep the position locally."""

        if not self.attached:
            return
        position = self.current_index
        self.attached = False
        self._manager.stop()
        self.current_index = position
        self.state = PlaybackState.IDLE
        self._changed()

    def seek(self, index: int) -> int:
        if self.attached:
            return self._manager.seek(index)
        if self.units:
            self.current_index = min(max(index, 0), len(self.units) - 1)
            self._changed()
        return self.current_index

    def next_unit(self) -> int:
        if self.attached:
            return self._manager.next()
        if self.current_index + 1 < len(self.units):
            return self.seek(self.current_index + 1)
        return self.current_index

    def prev_unit(self) -> int:
        if self.attached:
            return self._manager.prev()
        if self.current_index > 0:
            return self.seek(self.current_index - 1)
        return self.current_index

    def close(self) -> None:
        """Detach from the manager without touching the shared session."""

        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._listeners.clear()

    def _on_snapshot(self, snapshot: SessionSnapshot) -> None:
        if not self.attached:
            return
        if snapshot.session_key != self.session_key or not snapshot.units:
            self.attached = False
            self.state = PlaybackState.IDLE
            self._changed()
            return
        self._adopt(snapshot)

    def _adopt(self, snapshot: SessionSnapshot) -> None:
        self.units = snapshot.units
        self.current_index = snapshot.current_index
        self.state = snapshot.state
        self._changed()

    def _changed(self) -> None:
        for listener in list(self._listeners):
            listener(self)


class MiniPlayerView:
    """Persistent compact surface mirroring whatever session is loaded."""

    def __init__(
        self,
        manager: PlaybackSessionManager,
        current_route_book_id: str | None = None,
    ) -> None:
        self._manager = manager
        self.current_route_book_id = current_route_book_id
        self.snapshot = manager.snapshot()
        self._unsubscribe: Callable[[], None] | None = manager.subscribe(self._on_snapshot)

    @property
    def visible(self) -> bool:
        """Shown while a session is loaded and its book is not already on screen."""

        if not self.snapshot.has_session:
            return False
        source_ref = self.snapshot.source_ref
        if source_ref is not None and source_ref.book_id == self.current_route_book_id:
            return False
        return True

    @property
    def title(self) -> str:
        key = self.snapshot.session_key
        if isinstance(key, SessionKey):
            return key.title
        source_ref = self.snapshot.source_ref
        if source_ref is not None and source_ref.book_title:
            return source_ref.book_title
        return "Unknown Book"

    def toggle(self) -> None:
        if self.snapshot.is_playing:
            self._manager.pause()
        else:
            self._manager.resume()

    def close(self) -> None:
        self._manager.stop()

    def handoff(self) -> NavigationTarget | None:
        """Build the reader deep link from the session snapshot alone."""

        return NavigationTarget.from_snapshot(self.snapshot)

    def dispose(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _on_snapshot(self, snapshot: SessionSnapshot) -> None:
        self.snapshot = snapshot


class SessionBridge:
    """Factory for observer surfaces sharing one playback session manager."""

    def __init__(
        self,
        manager: PlaybackSessionManager,
        loader: ChapterLoader,
        tokenizer: SentenceTokenizer | None = None,
    ) -> None:
        self.manager = manager
        self.loader = loader
        self.tokenizer = tokenizer or SentenceTokenizer()

    def open_reader(self, book: BookRecord, chapter_index: int | None = None) -> ReaderView:
        """Open a reader for a book, attaching to its in-flight session when present.

        The reader attaches only when `chapter_index` is None or names the
        session's chapter. Otherwise the requested chapter (or the only chapter)
        is tokenized with a fresh local position and the session keeps running
        until the reader starts playback of its own.
        """

        chapters = self.loader.load(book)
        view = ReaderView(self.manager, self.tokenizer, book, chapters)
        snapshot = self.manager.snapshot()
        key = snapshot.session_key
        same_chapter = (
            chapter_index is None
            or not isinstance(key, SessionKey)
            or key.chapter_index == chapter_index
        )
        if same_chapter and view.attach(snapshot):
            return view
        if chapter_index is not None or len(chapters) == 1:
            view.open_chapter(chapter_index or 0)
        return view

    def open_target(self, target: NavigationTarget) -> ReaderView:
        """Reopen a reader from a mini-player handoff target."""

        book = self.loader.store.get_book(target.book_id) or BookRecord(
            id=target.book_id,
            title=target.book_title or target.book_id,
            text_url=target.text_url,
        )
        return self.open_reader(book, target.chapter_index)

    def mini_player(self, current_route_book_id: str | None = None) -> MiniPlayerView:
        return MiniPlayerView(self.manager, current_route_book_id)
