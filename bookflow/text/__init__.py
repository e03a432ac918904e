"""Text parsing components.

This package provides boundary stripping, chapter segmentation, and sentence
tokenization used between the remote text source and the playback session.
"""

from .boundaries import BoundaryStripper
from .segmenter import ChapterSegmenter
from .sentences import SentenceTokenizer

__all__ = ["BoundaryStripper", "ChapterSegmenter", "SentenceTokenizer"]
