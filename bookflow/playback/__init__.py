"""Speech playback session and its observer surfaces.

This package contains the speech engine protocol, the process-wide session
manager, and the bridge that lets several surfaces share one session.
"""

from .bridge import MiniPlayerView, ReaderView, SessionBridge
from .session import PlaybackSessionManager
from .speech import SpeechEngine, TimedSpeechEngine

__all__ = [
    "MiniPlayerView",
    "PlaybackSessionManager",
    "ReaderView",
    "SessionBridge",
    "SpeechEngine",
    "TimedSpeechEngine",
]
