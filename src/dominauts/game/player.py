"""Concrete player implementations."""

from __future__ import annotations

import random
from collections.abc import Sequence
from typing import TYPE_CHECKING, Callable

from dominauts.core.move import PlaceTile
from dominauts.engine.advisor import MoveAdvisor
from dominauts.engine.models import BotDifficulty
from dominauts.game.interfaces import IPlayer

if TYPE_CHECKING:
    from dominauts.core.move import Move
    from dominauts.core.state import SessionState
    from dominauts.engine.models import IAdvisor, MoveEvaluation

_MEDIUM_BEST_RATE = 0.7
_HARD_DOUBLE_RATE = 0.8
_HARD_BLOCK_RATE = 0.7
_EXPERT_SLIP_RATE = 0.1


class HumanPlayer(IPlayer):
    """A human participant. Moves come from the transport layer.

    ``request_move`` is a no-op because humans pick moves interactively.
    """

    __slots__ = ("_id", "_name")

    def __init__(self, player_id: str, name: str = "") -> None:
        self._id = player_id
        self._name = name or player_id

    @property
    def id(self) -> str:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_human(self) -> bool:
        return True

    def request_move(self, state: SessionState) -> None:
        pass  # Human moves arrive via session.submit()

    def choose_move(self, state: SessionState) -> Move | None:
        return None

    def cancel(self) -> None:
        pass


class BotPlayer(IPlayer):
    """A bot that picks from the advisor's ranking.

    Without a *difficulty* the bot always plays the top-ranked move.  With
    one, it mixes in weaker choices drawn from *rng*, so a seeded
    ``random.Random`` makes its play reproducible:

    * ``EASY``: any legal placement.
    * ``MEDIUM``: the top move 70% of the time, otherwise any placement.
    * ``HARD``: a double when one fits (80%), else the strongest blocker
      (70%), else as ``MEDIUM``.
    * ``EXPERT``: the top move, or the runner-up 10% of the time.

    ``choose_move`` evaluates synchronously.  ``request_move`` only
    forwards to *on_request_move*, which in production dispatches work to
    an ``AdvisorWorker`` running in a ``QThread``.

    Args:
        player_id: Seat id.
        name: Display name.
        advisor: Evaluator used by :meth:`choose_move`.
        on_request_move: ``(SessionState) -> None``: called when the
            session asks the bot to start thinking.
        on_cancel: ``() -> None``: called to abort a running evaluation.
        difficulty: Playing strength, ``None`` for flawless play.
        rng: Random source for the weaker difficulties.
    """

    __slots__ = (
        "_id",
        "_name",
        "_advisor",
        "_on_request_move",
        "_on_cancel",
        "_difficulty",
        "_rng",
    )

    def __init__(
        self,
        player_id: str,
        name: str = "Bot",
        advisor: IAdvisor | None = None,
        on_request_move: Callable[[SessionState], None] | None = None,
        on_cancel: Callable[[], None] | None = None,
        difficulty: BotDifficulty | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._id = player_id
        self._name = name
        self._advisor = advisor or MoveAdvisor()
        self._on_request_move = on_request_move
        self._on_cancel = on_cancel
        self._difficulty = difficulty
        self._rng = rng or random.Random()

    @property
    def id(self) -> str:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_human(self) -> bool:
        return False

    @property
    def difficulty(self) -> BotDifficulty | None:
        return self._difficulty

    def request_move(self, state: SessionState) -> None:
        if self._on_request_move is not None:
            self._on_request_move(state)

    def choose_move(self, state: SessionState) -> Move | None:
        if self._difficulty is not None:
            ranked = self._advisor.evaluate(state, state.index_of(self._id))
            if ranked:
                return pick_evaluation(ranked, self._difficulty, self._rng).move
        # Draw / pass fallbacks come with the hint.
        return self._advisor.advise(state, self._id).best_move

    def cancel(self) -> None:
        if self._on_cancel is not None:
            self._on_cancel()


def pick_evaluation(
    ranked: Sequence[MoveEvaluation], difficulty: BotDifficulty, rng: random.Random
) -> MoveEvaluation:
    """Choose from *ranked* (best first) the way a *difficulty* bot would."""
    if difficulty == BotDifficulty.EASY:
        return rng.choice(ranked)
    if difficulty == BotDifficulty.MEDIUM:
        return ranked[0] if rng.random() < _MEDIUM_BEST_RATE else rng.choice(ranked)
    if difficulty == BotDifficulty.HARD:
        doubles = [e for e in ranked if _is_double(e.move)]
        if doubles and rng.random() < _HARD_DOUBLE_RATE:
            return doubles[0]
        blocker = max(ranked, key=lambda e: e.blocking)
        if blocker.blocking > 0 and rng.random() < _HARD_BLOCK_RATE:
            return blocker
        return pick_evaluation(ranked, BotDifficulty.MEDIUM, rng)
    if len(ranked) > 1 and rng.random() < _EXPERT_SLIP_RATE:
        return ranked[1]
    return ranked[0]


def _is_double(move: Move) -> bool:
    return isinstance(move, PlaceTile) and move.tile.is_double
