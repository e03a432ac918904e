"""Chapter cache serialization helpers.

Responsibilities:
- Serialize chapter lists into the JSON array stored in a book row.
- Load cached payloads back into typed `Chapter` records, rejecting malformed data.
"""

from __future__ import annotations

from dataclasses import asdict
import json

from ..errors import ReaderStageError
from ..models.datatypes import Chapter


def serialize_chapters(chapters: list[Chapter]) -> str:
    """Serialize chapters as a JSON array of `{index, title, content}` objects."""

    return json.dumps(
        [asdict(chapter) for chapter in sorted(chapters, key=lambda item: item.index)],
        ensure_ascii=False,
        separators=(",", ":"),
    )


def deserialize_chapters(payload: str) -> list[Chapter]:
    """Load cached chapters from a JSON array payload."""

    try:
        items = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise ReaderStageError(
            stage="chapter-cache",
            detail="Cached chapter payload is not valid JSON.",
            hint="Clear the cached chapters so they are segmented again.",
        ) from exc
    if not isinstance(items, list):
        raise ReaderStageError(
            stage="chapter-cache",
            detail="Cached chapter payload must be a JSON array.",
            hint="Clear the cached chapters so they are segmented again.",
        )

    chapters: list[Chapter] = []
    for item in items:
        if not isinstance(item, dict):
            raise ReaderStageError(
                stage="chapter-cache",
                detail="Malformed chapter item in cached payload.",
                hint="Clear the cached chapters so they are segmented again.",
            )
        try:
            chapters.append(
                Chapter(
                    index=int(item["index"]),
                    title=str(item["title"]),
                    content=str(item["content"]),
                )
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise ReaderStageError(
                stage="chapter-cache",
                detail=f"Cached chapter item is missing or has invalid fields: {exc}",
                hint="Clear the cached chapters so they are segmented again.",
            ) from exc

    if [chapter.index for chapter in chapters] != list(range(len(chapters))):
        raise ReaderStageError(
            stage="chapter-cache",
            detail="Cached chapter indices must be contiguous and start at 0.",
            hint="Clear the cached chapters so they are segmented again.",
        )
    return chapters
