"""Structured reader event logging utilities.

Responsibilities:
- Emit concise, deterministic stage/event log lines through `loguru`.
- Keep context values shell-safe and ordered for stable diagnostics.
"""

from __future__ import annotations

from typing import TextIO

from loguru import logger as _loguru_logger


def _sanitize_context_value(value: object) -> str:
    """Convert context values into stable, shell-safe tokens."""

    raw = str(value).strip()
    if not raw:
        return "none"
    return "".join(
        character if character.isalnum() or character in {"-", "_", ".", ":", "/"} else "_"
        for character in raw
    )


def _format_context(context: dict[str, object]) -> str:
    """Serialize context key/value pairs in deterministic key order."""

    if not context:
        return ""
    tokens = [
        f"{key}={_sanitize_context_value(context[key])}"
        for key in sorted(context.keys())
    ]
    return " " + " ".join(tokens)


class ReaderLogger:
    """Emit deterministic event lines for parsing, fetching, and playback activity.

    The `bookflow` package is disabled in `loguru` until a logger is created
    with a sink; that sink then replaces every previously configured handler,
    so CLI runs print each line exactly once.
    """

    def __init__(self, sink: TextIO | None = None, level: str = "INFO") -> None:
        """Initialize the logger and optionally configure a dedicated sink."""

        self._handler_id: int | None = None
        if sink is not None:
            _loguru_logger.remove()
            self._handler_id = _loguru_logger.add(
                sink, format="{message}", level=level, colorize=False
            )
            _loguru_logger.enable("bookflow")

    def close(self) -> None:
        """Detach the dedicated sink and silence the package again."""

        if self._handler_id is not None:
            _loguru_logger.remove(self._handler_id)
            _loguru_logger.disable("bookflow")
            self._handler_id = None

    def _emit(self, level: str, event: str, stage: str, **context: object) -> None:
        """Emit one structured log line."""

        line = f"[bookflow] level={level} stage={stage} event={event}{_format_context(context)}"
        _loguru_logger.log(level, line)

    def debug(self, stage: str, event: str, **context: object) -> None:
        self._emit("DEBUG", event, stage, **context)

    def info(self, stage: str, event: str, **context: object) -> None:
        self._emit("INFO", event, stage, **context)

    def warning(self, stage: str, event: str, **context: object) -> None:
        self._emit("WARNING", event, stage, **context)

    def failure(self, stage: str, error_type: str, **context: object) -> None:
        """Emit a stage-failure event without sensitive payload details."""

        self._emit("ERROR", "failure", stage, error_type=error_type, **context)
