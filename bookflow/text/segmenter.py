"""Chapter segmentation logic.

Responsibilities:
- Convert stripped document text into ordered chapter records.
- Fall back to fixed-size pages when heading detection is unreliable.
- Keep output deterministic so segmented chapters can be cached indefinitely.

Only English `CHAPTER`/`PART` headings with Roman or Arabic numerals are
recognized; other heading conventions end up on the paging fallback.
"""

from __future__ import annotations

import re

from ..models.datatypes import Chapter, SegmentationReport
from ..telemetry.logger import ReaderLogger


class ChapterSegmenter:
    """Split stripped text into chapters by heading lines or fixed-size pages."""

    # Marker word in any case; Roman numerals all upper- or all lower-case.
    _HEADING_RE = re.compile(
        r"^(?i:chapter|part)[ \t]+(?:[IVXLCDM]+|[ivxlcdm]+|\d+)\b\.?[^\n]*",
        re.MULTILINE,
    )
    MIN_HEADINGS = 2

    def __init__(
        self,
        page_size_chars: int = 5000,
        max_pages: int = 50,
        logger: ReaderLogger | None = None,
    ) -> None:
        if page_size_chars <= 0:
            raise ValueError("`page_size_chars` must be a positive integer.")
        if max_pages <= 0:
            raise ValueError("`max_pages` must be a positive integer.")
        self.page_size_chars = page_size_chars
        self.max_pages = max_pages
        self._logger = logger or ReaderLogger()

    def segment(self, text: str) -> list[Chapter]:
        """Split text into chapters."""

        return list(self.segment_with_report(text).chapters)

    def segment_with_report(self, text: str) -> SegmentationReport:
        """Split text into chapters and describe which strategy produced them.

        Each heading match starts a chapter whose content runs up to the next
        heading (or the end of text); the trimmed heading line is the title.
        With fewer than two headings, the text is paged instead, so
        whitespace-only text still yields blank sections.
        """

        if not text:
            return SegmentationReport(chapters=(), source="headings")

        matches = list(self._HEADING_RE.finditer(text))
        if len(matches) < self.MIN_HEADINGS:
            reason = f"found {len(matches)} heading(s); need at least {self.MIN_HEADINGS}"
            return self._paginate(text, reason)

        chapters: list[Chapter] = []
        for position, match in enumerate(matches):
            end = matches[position + 1].start() if position + 1 < len(matches) else len(text)
            chapters.append(
                Chapter(
                    index=position,
                    title=match.group(0).strip(),
                    content=text[match.start():end].strip(),
                )
            )
        self._logger.debug("segment", "headings", chapters=len(chapters))
        return SegmentationReport(chapters=tuple(chapters), source="headings")

    def _paginate(self, text: str, reason: str) -> SegmentationReport:
        """Slice text into fixed-size `Section N` pages, capped at `max_pages`."""

        total_pages = -(-len(text) // self.page_size_chars)
        kept_pages = min(total_pages, self.max_pages)
        pages = tuple(
            Chapter(
                index=page,
                title=f"Section {page + 1}",
                content=text[
                    page * self.page_size_chars : (page + 1) * self.page_size_chars
                ].strip(),
            )
            for page in range(kept_pages)
        )
        truncated = total_pages > kept_pages
        if truncated:
            self._logger.warning(
                "segment",
                "pages_truncated",
                total_pages=total_pages,
                kept_pages=kept_pages,
            )
        self._logger.debug("segment", "pages", pages=kept_pages, reason=reason)
        return SegmentationReport(
            chapters=pages,
            source="pages",
            fallback_reason=reason,
            truncated=truncated,
        )
