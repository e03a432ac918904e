"""Remote catalog and text sources."""

from .gutenberg import GutenbergClient

__all__ = ["GutenbergClient"]
