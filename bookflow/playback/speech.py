"""Speech primitive interfaces and a timer-driven engine.

Responsibilities:
- Define the fire-and-forget "speak one utterance" protocol consumed by playback.
- Provide a cooperative engine that schedules utterance completion on an
  `asyncio`-style scheduler.

Contract for every `SpeechEngine`:
- Exactly one of `on_done`, `on_stopped`, `on_error` fires per `speak` call.
- `stop()` may be called at any time and reports `on_stopped`, never `on_error`.
- Speaking while an utterance is in flight stops the previous one first.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Protocol

DoneCallback = Callable[[], None]
StoppedCallback = Callable[[], None]
ErrorCallback = Callable[[Exception], None]


class SpeechEngine(Protocol):
    """Protocol for speech synthesis primitives."""

    def speak(
        self,
        text: str,
        *,
        rate: float,
        on_done: DoneCallback,
        on_stopped: StoppedCallback,
        on_error: ErrorCallback,
    ) -> None:
        """Start speaking one utterance and report its outcome through a callback."""

    def stop(self) -> None:
        """Cancel the in-flight utterance, if any."""


class Scheduler(Protocol):
    """Subset of `asyncio.AbstractEventLoop` used for deferred callbacks."""

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> Any:
        """Run `callback` after `delay` seconds; the result has `cancel()`."""


@dataclass(slots=True)
class _Utterance:
    text: str
    handle: Any
    on_done: DoneCallback
    on_stopped: StoppedCallback
    on_error: ErrorCallback


class TimedSpeechEngine:
    """Speech engine that "speaks" by waiting an estimated utterance duration.

    Useful wherever audio output is unavailable: the `on_utterance` hook lets a
    caller render each unit (for example, printing it) when speech starts.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        *,
        words_per_minute: int = 170,
        min_seconds: float = 0.2,
        on_utterance: Callable[[str], None] | None = None,
    ) -> None:
        if words_per_minute <= 0:
            raise ValueError("`words_per_minute` must be a positive integer.")
        self._scheduler = scheduler
        self.words_per_minute = words_per_minute
        self.min_seconds = min_seconds
        self._on_utterance = on_utterance
        self._current: _Utterance | None = None

    def estimate_seconds(self, text: str, rate: float) -> float:
        """Estimate utterance duration from word count and speech rate."""

        words = max(1, len(text.split()))
        words_per_second = self.words_per_minute * max(rate, 0.01) / 60.0
        return max(self.min_seconds, words / words_per_second)

    def speak(
        self,
        text: str,
        *,
        rate: float,
        on_done: DoneCallback,
        on_stopped: StoppedCallback,
        on_error: ErrorCallback,
    ) -> None:
        self.stop()
        try:
            if self._on_utterance is not None:
                self._on_utterance(text)
            delay = self.estimate_seconds(text, rate)
        except Exception as exc:
            on_error(exc)
            return
        utterance = _Utterance(
            text=text,
            handle=None,
            on_done=on_done,
            on_stopped=on_stopped,
            on_error=on_error,
        )
        utterance.handle = self._scheduler.call_later(delay, self._finish, utterance)
        self._current = utterance

    def stop(self) -> None:
        utterance = self._current
        if utterance is None:
            return
        self._current = None
        utterance.handle.cancel()
        utterance.on_stopped()

    @property
    def speaking(self) -> bool:
        return self._current is not None

    def _finish(self, utterance: _Utterance) -> None:
        if self._current is not utterance:
            return
        self._current = None
        utterance.on_done()
