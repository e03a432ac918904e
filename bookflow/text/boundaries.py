"""Archival boundary stripping.

Responsibilities:
- Remove Project Gutenberg license front matter and back matter.
- Pass unmarked text through untouched.
"""

from __future__ import annotations

import re
from typing import Sequence

DEFAULT_START_MARKERS = (
    "*** START OF",
    "***START OF",
    "START OF THE PROJECT GUTENBERG",
)
DEFAULT_END_MARKERS = (
    "*** END OF",
    "***END OF",
    "END OF THE PROJECT GUTENBERG",
)


class BoundaryStripper:
    """Keep only the text between the first start marker and the end marker after it."""

    def __init__(
        self,
        start_markers: Sequence[str] = DEFAULT_START_MARKERS,
        end_markers: Sequence[str] = DEFAULT_END_MARKERS,
    ) -> None:
        self.start_markers = tuple(start_markers)
        self.end_markers = tuple(end_markers)

    def strip(self, raw: str) -> str:
        """Return text strictly between recognized start and end marker lines.

        Markers are tried in priority order and matched case-insensitively.
        The start marker line is dropped entirely; the end marker line and
        everything after it are dropped as well.
        """

        text = raw.replace("\r\n", "\n").replace("\r", "\n")

        cursor = 0
        for marker in self.start_markers:
            match = self._marker_pattern(marker).search(text)
            if match is None:
                continue
            line_end = text.find("\n", match.start())
            cursor = len(text) if line_end == -1 else line_end + 1
            break

        end = len(text)
        for marker in self.end_markers:
            match = self._marker_pattern(marker).search(text, cursor)
            if match is None:
                continue
            end = max(text.rfind("\n", cursor, match.start()) + 1, cursor)
            break

        return text[cursor:end]

    @staticmethod
    def _marker_pattern(marker: str) -> re.Pattern[str]:
        return re.compile(re.escape(marker), re.IGNORECASE)
