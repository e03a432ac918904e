"""Deterministic slug helpers for filesystem-safe library keys.

Responsibilities:
- Normalize free-form book ids into stable ASCII file stems.
- Keep slug behavior locale-independent so row lookups are reproducible.
"""

from __future__ import annotations

from hashlib import sha256
import re
import unicodedata


def slugify_book_id(value: str) -> str:
    """Return a filesystem-safe ASCII slug for a book id.

    Ids that lose characters during slugging get a short hash suffix so two
    distinct ids never share one row file.
    """

    normalized = unicodedata.normalize("NFKD", value)
    ascii_only = normalized.encode("ascii", "ignore").decode("ascii")
    lowered = ascii_only.lower().strip()
    collapsed = re.sub(r"[^a-z0-9]+", "-", lowered)
    slug = collapsed.strip("-") or "book"
    if slug != value:
        slug = f"{slug}-{sha256(value.encode('utf-8')).hexdigest()[:8]}"
    return slug
