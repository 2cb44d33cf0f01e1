"""Abstract interfaces for the game layer.

Follows Dependency Inversion: the high-level GameSession depends on
these ABCs, not on concrete Player/Clock implementations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from dominauts.core.move import Move
    from dominauts.core.state import MoveRecord, SessionState
    from dominauts.engine.models import Hint, SkillLevel
    from dominauts.game.protocol import MoveResult, SessionSnapshot


class IPlayer(ABC):
    """Interface for a seated participant (human or bot)."""

    @property
    @abstractmethod
    def id(self) -> str: ...

    @property
    @abstractmethod
    def name(self) -> str: ...

    @property
    @abstractmethod
    def is_human(self) -> bool: ...

    @abstractmethod
    def request_move(self, state: SessionState) -> None:
        """Begin the move-selection process.

        For humans this is a no-op (moves arrive through the transport).
        For bots this may kick off a background evaluation.
        """

    @abstractmethod
    def choose_move(self, state: SessionState) -> Move | None:
        """Pick a move synchronously (``None`` for humans)."""

    @abstractmethod
    def cancel(self) -> None:
        """Cancel an ongoing move computation (bots only, no-op for humans)."""


class ITurnClock(ABC):
    """Interface for a per-turn countdown."""

    @abstractmethod
    def start(self, player_id: str) -> None:
        """Start a fresh turn for *player_id*."""

    @abstractmethod
    def stop(self) -> None:
        """Freeze the running turn."""

    @abstractmethod
    def remaining(self) -> float:
        """Seconds left in the current turn."""

    @abstractmethod
    def is_expired(self) -> bool:
        """Has the current turn run out of time?"""

    @property
    @abstractmethod
    def active_player(self) -> str | None: ...


class IGameSession(ABC):
    """Interface for the match orchestrator."""

    @abstractmethod
    def start(self) -> SessionState:
        """Deal the first round."""

    @abstractmethod
    def restore(
        self, round_start: SessionState, history: Iterable[MoveRecord] = ()
    ) -> SessionState:
        """Resume a round from its dealt state and recorded history."""

    @abstractmethod
    def submit(self, move: Move) -> MoveResult:
        """Validate and resolve *move*; rejected moves leave state untouched."""

    @abstractmethod
    def start_next_round(self) -> SessionState:
        """Deal the next round after a round is over."""

    @abstractmethod
    def hint(self, player_id: str, skill: SkillLevel | None = None) -> Hint:
        """Ranked advice for *player_id* on the current snapshot."""

    @abstractmethod
    def snapshot(self, viewer_id: str | None = None) -> SessionSnapshot:
        """Wire view of the session as seen by *viewer_id*."""
