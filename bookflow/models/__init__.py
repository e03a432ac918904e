"""Shared typed data models for Bookflow.

This package contains dataclasses used across parsing, storage, and playback
modules to avoid cross-module coupling and circular imports.
"""

from .datatypes import (
    BookRecord,
    BookSearchResult,
    Chapter,
    GutenbergMatch,
    NavigationTarget,
    PlaybackState,
    SegmentationReport,
    SessionKey,
    SessionSnapshot,
    SourceRef,
)

__all__ = [
    "BookRecord",
    "BookSearchResult",
    "Chapter",
    "GutenbergMatch",
    "NavigationTarget",
    "PlaybackState",
    "SegmentationReport",
    "SessionKey",
    "SessionSnapshot",
    "SourceRef",
]
