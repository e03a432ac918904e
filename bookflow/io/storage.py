"""Library row storage.

Responsibilities:
- Persist one JSON row per book, keyed by book id.
- Hold the cached chapter payload as an opaque string column on that row.
"""

from __future__ import annotations

import json
from pathlib import Path

from ..errors import ReaderStageError
from ..models.datatypes import BookRecord
from ..text.slug import slugify_book_id

_ROW_FIELDS = ("id", "title", "author", "text_url", "gutenberg_id")


class LibraryStore:
    """Filesystem-backed key-value row store for book records."""

    def __init__(self, root: Path) -> None:
        """Initialize the store with a root library directory."""

        self.root = root

    def _row_path(self, book_id: str) -> Path:
        return self.root / "books" / f"{slugify_book_id(book_id)}.json"

    def _load_row(self, book_id: str) -> dict[str, object] | None:
        path = self._row_path(book_id)
        if not path.exists():
            return None
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ReaderStageError(
                stage="library",
                detail=f"Library row is not valid JSON: {path}",
                hint="Delete the corrupted row and add the book again.",
            ) from exc
        if not isinstance(payload, dict):
            raise ReaderStageError(
                stage="library",
                detail=f"Library row must be a JSON object: {path}",
                hint="Delete the corrupted row and add the book again.",
            )
        return payload

    def _save_row(self, book_id: str, row: dict[str, object]) -> Path:
        path = self._row_path(book_id)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(row, ensure_ascii=False, indent=2, sort_keys=True),
            encoding="utf-8",
        )
        return path

    def get_book(self, book_id: str) -> BookRecord | None:
        """Return the stored book record, or `None` when the id is unknown."""

        row = self._load_row(book_id)
        if row is None:
            return None
        return BookRecord(
            id=str(row.get("id") or book_id),
            title=str(row.get("title") or book_id),
            author=_optional_text(row.get("author")),
            text_url=_optional_text(row.get("text_url")),
            gutenberg_id=_optional_text(row.get("gutenberg_id")),
        )

    def save_book(self, record: BookRecord) -> Path:
        """Insert or update a book row, keeping any cached chapter payload."""

        row = self._load_row(record.id) or {}
        for field_name in _ROW_FIELDS:
            row[field_name] = getattr(record, field_name)
        return self._save_row(record.id, row)

    def list_books(self) -> list[BookRecord]:
        """Return all stored book records ordered by id."""

        books_dir = self.root / "books"
        if not books_dir.is_dir():
            return []
        records: list[BookRecord] = []
        for path in sorted(books_dir.glob("*.json")):
            try:
                row = json.loads(path.read_text(encoding="utf-8"))
            except json.JSONDecodeError:
                continue
            if isinstance(row, dict) and row.get("id"):
                record = self.get_book(str(row["id"]))
                if record is not None:
                    records.append(record)
        return sorted(records, key=lambda record: record.id)

    def load_chapters_payload(self, book_id: str) -> str | None:
        """Return the cached chapter payload string for a book, when present."""

        row = self._load_row(book_id)
        if row is None:
            return None
        payload = row.get("chapters")
        return payload if isinstance(payload, str) and payload else None

    def save_chapters_payload(self, book_id: str, payload: str | None) -> Path:
        """Store (or clear, with `None`) the cached chapter payload for a book."""

        row = self._load_row(book_id) or {"id": book_id, "title": book_id}
        row["chapters"] = payload
        return self._save_row(book_id, row)


def _optional_text(value: object) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None
