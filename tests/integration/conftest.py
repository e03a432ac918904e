"""Integration-test fixtures for deterministic, offline CLI behavior."""

from __future__ import annotations

from pathlib import Path

import pytest
import requests

from bookflow.io.storage import LibraryStore
from bookflow.library import ChapterLoader
from bookflow.models.datatypes import BookRecord

SAMPLE_URL = "https://example.org/sample.txt"


@pytest.fixture(autouse=True)
def _offline_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Block real network access and ignore ambient `BOOKFLOW_*` variables."""

    def _no_network(url: str, **kwargs: object) -> requests.Response:
        """Fail every request not mocked by the test itself."""

        _ = kwargs
        raise requests.ConnectionError(f"network disabled in tests: {url}")

    monkeypatch.setattr(requests, "get", _no_network)
    for key in [
        "BOOKFLOW_LIBRARY_DIR",
        "BOOKFLOW_PAGE_SIZE_CHARS",
        "BOOKFLOW_MAX_PAGES",
        "BOOKFLOW_MIN_SENTENCE_CHARS",
        "BOOKFLOW_SPEECH_RATE",
        "BOOKFLOW_WORDS_PER_MINUTE",
        "BOOKFLOW_FETCH_TIMEOUT_SECONDS",
        "BOOKFLOW_SEARCH_MAX_RESULTS",
        "BOOKFLOW_USER_AGENT",
    ]:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def cached_library(library_store: LibraryStore, chapter_loader: ChapterLoader) -> Path:
    """Library directory holding the sample book with chapters already cached."""

    book = BookRecord(id="sample", title="A Sample", author="Anon", text_url=SAMPLE_URL)
    library_store.save_book(book)
    assert len(chapter_loader.load(book)) == 3
    return library_store.root
