"""Process-wide playback session manager.

Responsibilities:
- Own the single speech session: loaded units, current index, lifecycle state,
  and session identity.
- Sequence utterances strictly in order, one in flight at a time.
- Discard stale speech callbacks through a generation token.

Every state-changing operation bumps the generation before it cancels speech,
so a callback fired by (or after) that cancellation sees an outdated token and
does nothing. Pause is implemented as stop-and-remember: `resume` re-speaks the
current unit from its beginning.
"""

from __future__ import annotations

from typing import Callable, Hashable, Sequence

from ..models.datatypes import PlaybackState, SessionSnapshot, SourceRef
from ..telemetry.logger import ReaderLogger
from .speech import SpeechEngine

SessionListener = Callable[[SessionSnapshot], None]


class PlaybackSessionManager:
    """Single writer of the playback session state machine.

    States: `IDLE` -> `PLAYING` <-> `PAUSED`, and any state -> `IDLE` on `stop`.
    Reaching the end of the units, or a synthesis error, also ends in `IDLE`
    but keeps the units and identity so observers can still show and reopen
    the session; only `stop` clears them.
    """

    def __init__(
        self,
        engine: SpeechEngine,
        *,
        speech_rate: float = 0.9,
        logger: ReaderLogger | None = None,
    ) -> None:
        self._engine = engine
        self.speech_rate = speech_rate
        self._logger = logger or ReaderLogger()
        self._state = PlaybackState.IDLE
        self._units: tuple[str, ...] = ()
        self._index = 0
        self._session_key: Hashable | None = None
        self._source_ref: SourceRef | None = None
        self._generation = 0
        self._listeners: list[SessionListener] = []
        self._notify_seq = 0

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def current_index(self) -> int:
        return self._index

    def snapshot(self) -> SessionSnapshot:
        """Return an immutable view of the current session."""

        return SessionSnapshot(
            state=self._state,
            units=self._units,
            current_index=self._index,
            session_key=self._session_key,
            source_ref=self._source_ref,
        )

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register a snapshot listener and return a function that unregisters it."""

        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def play(
        self,
        units: Sequence[str],
        start_index: int = 0,
        session_key: Hashable | None = None,
        source_ref: SourceRef | None = None,
    ) -> None:
        """Replace any existing session and start speaking at `start_index`."""

        self._cancel_in_flight()
        self._units = tuple(units)
        self._index = self._clamp(start_index)
        self._session_key = session_key
        self._source_ref = source_ref
        self._state = PlaybackState.PLAYING
        self._logger.debug(
            "playback", "play", units=len(self._units), index=self._index, key=session_key
        )
        self._speak_current()
        self._notify()

    def pause(self) -> bool:
        """Pause a playing session, keeping its position. No-op unless playing."""

        if self._state is not PlaybackState.PLAYING:
            return False
        self._cancel_in_flight()
        self._state = PlaybackState.PAUSED
        self._logger.debug("playback", "pause", index=self._index)
        self._notify()
        return True

    def resume(self) -> bool:
        """Resume a paused session from the start of its current unit."""

        if self._state is not PlaybackState.PAUSED:
            return False
        self._cancel_in_flight()
        self._state = PlaybackState.PLAYING
        self._logger.debug("playback", "resume", index=self._index)
        self._speak_current()
        self._notify()
        return True

    def stop(self) -> None:
        """Cancel speech and clear the session entirely."""

        self._cancel_in_flight()
        self._state = PlaybackState.IDLE
        self._units = ()
        self._index = 0
        self._session_key = None
        self._source_ref = None
        self._logger.debug("playback", "stop")
        self._notify()

    def seek(self, index: int) -> int:
        """Move to a clamped unit index, speaking from it only when playing."""

        if not self._units:
            return self._index
        self._cancel_in_flight()
        self._index = self._clamp(index)
        self._logger.debug("playback", "seek", index=self._index, state=self._state.value)
        if self._state is PlaybackState.PLAYING:
            self._speak_current()
        self._notify()
        return self._index

    def next(self) -> int:
        """Seek one unit forward; no-op on the last unit."""

        if not self._units or self._index + 1 >= len(self._units):
            return self._index
        return self.seek(self._index + 1)

    def prev(self) -> int:
        """Seek one unit back; no-op on the first unit."""

        if not self._units or self._index <= 0:
            return self._index
        return self.seek(self._index - 1)

    def _clamp(self, index: int) -> int:
        if not self._units:
            return 0
        return min(max(index, 0), len(self._units) - 1)

    def _cancel_in_flight(self) -> None:
        self._generation += 1
        self._engine.stop()

    def _speak_current(self) -> None:
        """Dispatch the unit at the current index under the current generation."""

        if not self._units or self._index >= len(self._units):
            self._finish("end_of_units")
            return

        generation = self._generation
        index = self._index
        self._engine.speak(
            self._units[index],
            rate=self.speech_rate,
            on_done=lambda: self._on_unit_done(generation, index),
            on_stopped=lambda: None,
            on_error=lambda exc: self._on_unit_error(generation, index, exc),
        )

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation and self._state is PlaybackState.PLAYING

    def _on_unit_done(self, generation: int, index: int) -> None:
        if not self._is_current(generation):
            self._logger.debug("playback", "stale_callback", index=index)
            return
        if index + 1 >= len(self._units):
            self._finish("end_of_units")
            self._notify()
            return
        self._generation += 1
        self._index = index + 1
        self._speak_current()
        self._notify()

    def _on_unit_error(self, generation: int, index: int, exc: Exception) -> None:
        if not self._is_current(generation):
            self._logger.debug("playback", "stale_callback", index=index)
            return
        self._logger.failure("playback", type(exc).__name__, index=index)
        self._finish("synthesis_error")
        self._notify()

    def _finish(self, reason: str) -> None:
        """Fail-stop or end of units: go idle but keep the loaded session."""

        self._generation += 1
        self._state = PlaybackState.IDLE
        self._logger.debug("playback", "finish", reason=reason, index=self._index)

    def _notify(self) -> None:
        """Deliver the current snapshot, yielding to any transition a listener starts."""

        self._notify_seq += 1
        seq = self._notify_seq
        for listener in list(self._listeners):
            if seq != self._notify_seq:
                return
            try:
                listener(self.snapshot())
            except Exception as exc:
                self._logger.failure("playback", type(exc).__name__, source="listener")
