"""Chapter loading with cache-first semantics.

Responsibilities:
- Return cached chapters for a book when the row store already holds them.
- Otherwise fetch raw text, strip boundaries, segment, and persist the result.
"""

from __future__ import annotations

from .errors import ReaderStageError
from .io.chapter_cache import deserialize_chapters, serialize_chapters
from .io.storage import LibraryStore
from .models.datatypes import BookRecord, Chapter, SegmentationReport
from .sources.gutenberg import GutenbergClient
from .telemetry.logger import ReaderLogger
from .text.boundaries import BoundaryStripper
from .text.segmenter import ChapterSegmenter


class ChapterLoader:
    """Load a book's chapters from cache, or build and cache them from source text."""

    def __init__(
        self,
        store: LibraryStore,
        client: GutenbergClient,
        stripper: BoundaryStripper | None = None,
        segmenter: ChapterSegmenter | None = None,
        logger: ReaderLogger | None = None,
    ) -> None:
        self.store = store
        self.client = client
        self.stripper = stripper or BoundaryStripper()
        self.segmenter = segmenter or ChapterSegmenter()
        self._logger = logger or ReaderLogger()

    def load(self, book: BookRecord) -> list[Chapter]:
        """Return chapters for a book; `[]` when no text is reachable."""

        cached = self.cached(book.id)
        if cached is not None:
            return cached
        if not book.text_url:
            self._logger.info("cache", "miss_no_source", book_id=book.id)
            return []

        raw = self.client.fetch_text(book.text_url)
        if raw is None:
            return []
        report = self.parse(raw)
        chapters = list(report.chapters)
        if chapters:
            self.store.save_chapters_payload(book.id, serialize_chapters(chapters))
            self._logger.info(
                "cache",
                "stored",
                book_id=book.id,
                chapters=len(chapters),
                source=report.source,
            )
        return chapters

    def cached(self, book_id: str) -> list[Chapter] | None:
        """Return cached chapters, dropping a corrupt payload so it is rebuilt."""

        payload = self.store.load_chapters_payload(book_id)
        if payload is None:
            return None
        try:
            chapters = deserialize_chapters(payload)
        except ReaderStageError as exc:
            self._logger.failure("cache", "corrupt_payload", book_id=book_id, detail=exc.detail)
            self.store.save_chapters_payload(book_id, None)
            return None
        self._logger.debug("cache", "hit", book_id=book_id, chapters=len(chapters))
        return chapters

    def parse(self, raw: str) -> SegmentationReport:
        """Strip archival boundaries from raw text and segment it."""

        stripped = self.stripper.strip(raw)
        self._logger.debug("boundary", "stripped", raw_chars=len(raw), kept_chars=len(stripped))
        return self.segmenter.segment_with_report(stripped)
