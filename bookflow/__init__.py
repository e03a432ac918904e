"""Top-level package for Bookflow.

Bookflow fetches public-domain texts, segments them into cached chapters, and
reads them aloud through a single shared playback session. The main entry
points are `ChapterLoader` and `PlaybackSessionManager`.
"""

from loguru import logger

from .library import ChapterLoader
from .playback.session import PlaybackSessionManager

logger.disable("bookflow")

__all__ = ["ChapterLoader", "PlaybackSessionManager", "__version__"]

__version__ = "0.1.0"
