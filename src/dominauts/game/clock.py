"""Per-turn countdown used to inject timeouts."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass

from dominauts.game.interfaces import ITurnClock

TimeSource = Callable[[], float]


@dataclass(frozen=True, slots=True)
class ClockSnapshot:
    """Serializable clock state."""

    active_player: str | None
    remaining: float
    is_running: bool


class TurnClock(ITurnClock):
    """Single countdown restarted at the beginning of every turn.

    Uses monotonic time by default; tests inject their own *time_source*.
    """

    __slots__ = (
        "_turn_seconds",
        "_time_source",
        "_remaining",
        "_active_player",
        "_last_tick",
        "_running",
    )

    def __init__(
        self, turn_seconds: float, time_source: TimeSource = time.monotonic
    ) -> None:
        if turn_seconds <= 0:
            raise ValueError("turn_seconds must be positive")
        self._turn_seconds = turn_seconds
        self._time_source = time_source
        self._remaining = turn_seconds
        self._active_player: str | None = None
        self._last_tick = 0.0
        self._running = False

    # ── ITurnClock implementation ────────────────────────────────────────

    def start(self, player_id: str) -> None:
        self._active_player = player_id
        self._remaining = self._turn_seconds
        self._last_tick = self._time_source()
        self._running = True

    def stop(self) -> None:
        if self._running:
            self._consume_elapsed()
            self._running = False

    def remaining(self) -> float:
        if self._running:
            elapsed = self._time_source() - self._last_tick
            return max(0.0, self._remaining - elapsed)
        return max(0.0, self._remaining)

    def is_expired(self) -> bool:
        return self._active_player is not None and self.remaining() <= 0.0

    @property
    def active_player(self) -> str | None:
        return self._active_player

    # ── Extra helpers ────────────────────────────────────────────────────

    @property
    def turn_seconds(self) -> float:
        return self._turn_seconds

    @property
    def is_running(self) -> bool:
        return self._running

    def snapshot(self) -> ClockSnapshot:
        return ClockSnapshot(
            active_player=self._active_player,
            remaining=self.remaining(),
            is_running=self._running,
        )

    # ── Internal ─────────────────────────────────────────────────────────

    def _consume_elapsed(self) -> None:
        now = self._time_source()
        self._remaining = max(0.0, self._remaining - (now - self._last_tick))
        self._last_tick = now
