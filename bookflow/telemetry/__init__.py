"""Observability helpers.

This package emits deterministic event lines for reader diagnostics.
"""

from .logger import ReaderLogger

__all__ = ["ReaderLogger"]
