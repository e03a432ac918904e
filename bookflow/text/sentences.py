"""Sentence tokenization for speech playback.

Responsibilities:
- Turn one chapter's prose into ordered speakable units.
- Drop stray short fragments such as headings and page numbers.

No quote, abbreviation, or numeral normalization is attempted, so units like
`Mr.` can end a sentence early.
"""

from __future__ import annotations

import re


class SentenceTokenizer:
    """Split chapter content into sentence-like units."""

    _WHITESPACE_RE = re.compile(r"\s+")
    _BOUNDARY_RE = re.compile(r"(?<=[.!?])\s+")

    def __init__(self, min_sentence_chars: int = 10) -> None:
        if min_sentence_chars < 0:
            raise ValueError("`min_sentence_chars` must not be negative.")
        self.min_sentence_chars = min_sentence_chars

    def collapse(self, content: str) -> str:
        """Collapse every whitespace run, newlines included, to one space."""

        return self._WHITESPACE_RE.sub(" ", content).strip()

    def tokenize(self, content: str) -> list[str]:
        """Return units strictly longer than `min_sentence_chars`, in order."""

        collapsed = self.collapse(content)
        if not collapsed:
            return []
        units: list[str] = []
        for fragment in self._BOUNDARY_RE.split(collapsed):
            unit = fragment.strip()
            if len(unit) > self.min_sentence_chars:
                units.append(unit)
        return units
