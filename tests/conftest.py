"""Shared pytest fixtures for the full Bookflow test suite."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

import pytest

from bookflow.io.storage import LibraryStore
from bookflow.library import ChapterLoader
from bookflow.playback.session import PlaybackSessionManager
from bookflow.sources.gutenberg import GutenbergClient

SAMPLE_RAW_TEXT = (
    "The Project Gutenberg eBook of A Sample\n"
    "License boilerplate line.\n"
    "*** START OF THE PROJECT GUTENBERG EBOOK A SAMPLE ***\n"
    "A SAMPLE\n"
    "\n"
    "CHAPTER I. The Beginning\n"
    "It was a bright cold day in April. The clocks were striking thirteen.\n"
    "\n"
    "CHAPTER II. The Middle\n"
    "Nobody expected the middle to arrive so soon! Was it really here?\n"
    "\n"
    "CHAPTER III. The End\n"
    "And so the story came to its quiet close.\n"
    "*** END OF THE PROJECT GUTENBERG EBOOK A SAMPLE ***\n"
    "Trailing license text.\n"
)


@dataclass(slots=True)
class _PendingUtterance:
    text: str
    rate: float
    on_done: Callable[[], None]
    on_stopped: Callable[[], None]
    on_error: Callable[[Exception], None]
    settled: bool = False


@dataclass(slots=True)
class ManualSpeechEngine:
    """Speech engine double whose callbacks fire only when a test says so.

    Unlike a real engine, it keeps every utterance around after `stop()` so a
    test can deliberately deliver a late `done` or `error` callback.
    """

    utterances: list[_PendingUtterance] = field(default_factory=list)
    stop_calls: int = 0

    def speak(self, text, *, rate, on_done, on_stopped, on_error) -> None:
        self.stop()
        self.utterances.append(_PendingUtterance(text, rate, on_done, on_stopped, on_error))

    def stop(self) -> None:
        self.stop_calls += 1
        for utterance in self.utterances:
            if not utterance.settled:
                utterance.settled = True
                utterance.on_stopped()

    @property
    def spoken(self) -> list[str]:
        return [utterance.text for utterance in self.utterances]

    @property
    def last(self) -> _PendingUtterance:
        return self.utterances[-1]

    def finish_last(self) -> None:
        """Complete the newest utterance successfully."""

        utterance = self.last
        utterance.settled = True
        utterance.on_done()

    def fail_last(self, exc: Exception | None = None) -> None:
        utterance = self.last
        utterance.settled = True
        utterance.on_error(exc or RuntimeError("synthesis failed"))


class FakeGutenbergClient(GutenbergClient):
    """Catalog client double serving raw text from memory and counting fetches."""

    def __init__(self, texts: dict[str, str] | None = None) -> None:
        super().__init__()
        self.texts = dict(texts or {})
        self.fetched: list[str] = []

    def fetch_text(self, url: str) -> str | None:
        self.fetched.append(url)
        return self.texts.get(url)


@pytest.fixture
def sample_raw_text() -> str:
    return SAMPLE_RAW_TEXT


@pytest.fixture
def speech_engine() -> ManualSpeechEngine:
    return ManualSpeechEngine()


@pytest.fixture
def manager(speech_engine: ManualSpeechEngine) -> PlaybackSessionManager:
    return PlaybackSessionManager(speech_engine, speech_rate=0.9)


@pytest.fixture
def library_store(tmp_path: Path) -> LibraryStore:
    return LibraryStore(tmp_path / "library")


@pytest.fixture
def fake_client() -> FakeGutenbergClient:
    return FakeGutenbergClient({"https://example.org/sample.txt": SAMPLE_RAW_TEXT})


@pytest.fixture
def chapter_loader(
    library_store: LibraryStore, fake_client: FakeGutenbergClient
) -> ChapterLoader:
    return ChapterLoader(library_store, fake_client)
