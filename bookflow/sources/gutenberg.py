"""Remote catalog and full-text client.

Responsibilities:
- Search Google Books for title/author metadata.
- Resolve a Project Gutenberg plain-text URL through the gutendex catalog.
- Fetch raw document text with bounded timeouts.

Every public call degrades to an empty result (`[]` or `None`) on failure;
the failure is logged, never retried, and never raised to callers.
"""

from __future__ import annotations

import re
from typing import Any

import requests

from ..errors import SourceFetchError
from ..models.datatypes import BookSearchResult, GutenbergMatch
from ..telemetry.logger import ReaderLogger

GOOGLE_BOOKS_URL = "https://www.googleapis.com/books/v1/volumes"
GUTENDEX_URL = "https://gutendex.com/books/"

_PLAIN_TEXT_FORMATS = (
    "text/plain; charset=utf-8",
    "text/plain; charset=us-ascii",
    "text/plain",
)


class GutenbergClient:
    """HTTP client for catalog search and raw text download."""

    def __init__(
        self,
        *,
        timeout_seconds: float = 6.0,
        user_agent: str = "BookFlowApp/1.0",
        max_results: int = 8,
        session: requests.Session | None = None,
        logger: ReaderLogger | None = None,
    ) -> None:
        self.timeout_seconds = timeout_seconds
        self.user_agent = user_agent
        self.max_results = max_results
        self._http = session or requests
        self._logger = logger or ReaderLogger()

    def search_books(self, query: str) -> list[BookSearchResult]:
        """Search Google Books and return normalized hits, or `[]` on failure."""

        if not query.strip():
            return []
        try:
            payload = self._get_json(
                GOOGLE_BOOKS_URL,
                params={
                    "q": query,
                    "maxResults": self.max_results,
                    "printType": "books",
                },
            )
        except SourceFetchError as exc:
            self._logger.failure("search", exc.failure_kind, status=exc.status_code)
            return []

        items = payload.get("items") if isinstance(payload, dict) else None
        if not isinstance(items, list):
            return []
        results = [self._search_result(item) for item in items if isinstance(item, dict)]
        self._logger.info("search", "complete", results=len(results))
        return results

    def find_gutenberg_book(self, title: str, author: str | None = None) -> GutenbergMatch | None:
        """Find the first Gutenberg result offering a plain-text download."""

        query = " ".join(
            part for part in (self._clean_title(title), self._clean_author(author)) if part
        )
        if not query:
            return None
        try:
            payload = self._get_json(
                GUTENDEX_URL,
                params={"search": query},
                headers={"User-Agent": self.user_agent},
            )
        except SourceFetchError as exc:
            self._logger.failure("search", exc.failure_kind, status=exc.status_code)
            return None

        results = payload.get("results") if isinstance(payload, dict) else None
        if not isinstance(results, list):
            return None
        for book in results:
            if not isinstance(book, dict):
                continue
            formats = book.get("formats")
            if not isinstance(formats, dict):
                continue
            text_url = next(
                (formats[key] for key in _PLAIN_TEXT_FORMATS if formats.get(key)),
                None,
            )
            if text_url:
                return GutenbergMatch(id=str(book.get("id")), text_url=str(text_url))
        return None

    def fetch_text(self, url: str) -> str | None:
        """Download the full raw document body, or return `None` on failure."""

        try:
            response = self._get(url)
        except SourceFetchError as exc:
            self._logger.failure("fetch", exc.failure_kind, status=exc.status_code)
            return None
        if response.encoding is None or response.encoding.lower() == "iso-8859-1":
            response.encoding = "utf-8"
        text = response.text
        self._logger.info("fetch", "complete", chars=len(text))
        return text

    def _get(
        self,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> requests.Response:
        """Issue one GET request and map failures to `SourceFetchError`."""

        try:
            response = self._http.get(
                url,
                params=params,
                headers=headers,
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
        except requests.HTTPError as exc:
            status_code = exc.response.status_code if exc.response is not None else None
            raise SourceFetchError(
                f"HTTP error from `{url}`.",
                failure_kind="http",
                status_code=status_code,
            ) from exc
        except requests.Timeout as exc:
            raise SourceFetchError(
                f"Request to `{url}` timed out.",
                failure_kind="timeout",
            ) from exc
        except requests.RequestException as exc:
            raise SourceFetchError(
                f"Transport error for `{url}`: {exc}",
                failure_kind="transport",
            ) from exc
        return response

    def _get_json(
        self,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        response = self._get(url, params=params, headers=headers)
        try:
            return response.json()
        except ValueError as exc:
            raise SourceFetchError(
                f"Response from `{url}` is not valid JSON.",
                failure_kind="invalid_payload",
            ) from exc

    @staticmethod
    def _search_result(item: dict[str, Any]) -> BookSearchResult:
        info = item.get("volumeInfo") or {}
        image_links = info.get("imageLinks") or {}
        cover = image_links.get("thumbnail") or image_links.get("smallThumbnail")
        authors = info.get("authors") or []
        return BookSearchResult(
            title=info.get("title") or "Unknown Title",
            author=authors[0] if authors else "Unknown Author",
            cover_url=cover.replace("http://", "https://") if cover else None,
            description=info.get("description") or "",
            google_books_id=str(item.get("id") or ""),
        )

    @staticmethod
    def _clean_title(title: str) -> str:
        """Drop subtitles after `:` and parenthesized annotations."""

        head = title.split(":")[0]
        return re.sub(r"\(.*?\)", "", head).strip()

    @staticmethod
    def _clean_author(author: str | None) -> str:
        return author.split(",")[0].strip() if author else ""
