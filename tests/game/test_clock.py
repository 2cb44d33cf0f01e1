"""Tests for the per-turn clock."""

from __future__ import annotations

import pytest

from dominauts.game.clock import TurnClock


class _FakeTime:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


def _make_clock(seconds: float = 30.0) -> tuple[TurnClock, _FakeTime]:
    fake = _FakeTime()
    return TurnClock(seconds, time_source=fake), fake


class TestTurnClock:
    def test_idle_clock(self) -> None:
        clock, _ = _make_clock()
        assert clock.active_player is None
        assert not clock.is_running
        assert not clock.is_expired()
        assert clock.remaining() == 30.0

    def test_counts_down_while_running(self) -> None:
        clock, fake = _make_clock()
        clock.start("A")
        fake.now += 12
        assert clock.remaining() == pytest.approx(18.0)
        assert clock.active_player == "A"

    def test_expires(self) -> None:
        clock, fake = _make_clock()
        clock.start("A")
        fake.now += 30
        assert clock.is_expired()
        fake.now += 5
        assert clock.remaining() == 0.0

    def test_stop_freezes(self) -> None:
        clock, fake = _make_clock()
        clock.start("A")
        fake.now += 10
        clock.stop()
        fake.now += 100
        assert clock.remaining() == pytest.approx(20.0)
        assert not clock.is_running
        assert not clock.is_expired()

    def test_start_resets_for_next_player(self) -> None:
        clock, fake = _make_clock()
        clock.start("A")
        fake.now += 25
        clock.start("B")
        assert clock.remaining() == pytest.approx(30.0)
        assert clock.active_player == "B"

    def test_snapshot(self) -> None:
        clock, fake = _make_clock(10)
        clock.start("A")
        fake.now += 4
        snap = clock.snapshot()
        assert snap.active_player == "A"
        assert snap.remaining == pytest.approx(6.0)
        assert snap.is_running

    def test_rejects_non_positive_duration(self) -> None:
        with pytest.raises(ValueError):
            TurnClock(0)
