"""Variant-specific scoring.

Each variant has one :class:`ScoringEngine` implementation.  All functions are
pure: they read the state they are given and return score deltas; applying
the deltas is the applier's and the session's job.
"""

from __future__ import annotations

from abc import ABC
from typing import TYPE_CHECKING, ClassVar

from dominauts.core.enums import TiePolicy, Variant
from dominauts.core.scores import Blocked, Domination, ScoreDelta, Terminal
from dominauts.core.tile import Tile

if TYPE_CHECKING:
    from dominauts.core.board import BoardState
    from dominauts.core.move import PlaceTile
    from dominauts.core.rules import RuleSet
    from dominauts.core.state import PlayerState, SessionState

_DOUBLE_BLANK = Tile(0, 0)


def round_to_five(points: int) -> int:
    """Nearest multiple of five, halves rounding up."""
    return (points + 2) // 5 * 5


def ends_total(board: BoardState, rules: RuleSet) -> int:
    """Sum of the open ends as counted by end-sum scoring."""
    return sum(board.scoring_values(rules.double_ends_count_twice))


class ScoringEngine(ABC):
    """Per-move and per-round scoring for one variant.

    The default round scoring is the pip-count rule: whoever goes out (or
    holds the lowest hand when the round blocks) collects the pips left in
    the other hands.
    """

    variant: ClassVar[Variant]

    def move_deltas(self, state: SessionState, move: PlaceTile) -> list[ScoreDelta]:
        """Points earned by *move*; *state* already shows it on the board."""
        return []

    def round_deltas(self, state: SessionState, terminal: Terminal) -> list[ScoreDelta]:
        if isinstance(terminal, Domination):
            return self._domination(state, terminal.winner)
        if isinstance(terminal, Blocked):
            return self._blocked(state)
        return []

    # ── Hooks ────────────────────────────────────────────────────────────

    def hand_value(self, state: SessionState, player: PlayerState) -> int:
        """What *player*'s remaining hand is worth to the round winner."""
        return player.hand_pips

    def adjust(self, points: int) -> int:
        return points

    # ── Internal ─────────────────────────────────────────────────────────

    def _domination(self, state: SessionState, winner: str) -> list[ScoreDelta]:
        pot = sum(self.hand_value(state, p) for p in state.players if p.id != winner)
        points = self.adjust(pot)
        return [ScoreDelta(winner, points, "domination")] if points > 0 else []

    def _blocked(self, state: SessionState) -> list[ScoreDelta]:
        values = {p.id: self.hand_value(state, p) for p in state.players}
        low = min(values.values())
        lowest = [pid for pid, v in values.items() if v == low]
        pot = sum(v for pid, v in values.items() if pid not in lowest)
        if len(lowest) == 1:
            points = self.adjust(pot)
            return [ScoreDelta(lowest[0], points, "blocked")] if points > 0 else []
        if state.rules.block_tie_policy == TiePolicy.NONE:
            return []
        share = self.adjust(pot // len(lowest))
        if share <= 0:
            return []
        return [ScoreDelta(pid, share, "blocked_split") for pid in lowest]


class AllFivesScoring(ScoringEngine):
    """Muggins: score the ends whenever they total a multiple of five."""

    variant = Variant.ALL_FIVES

    def move_deltas(self, state: SessionState, move: PlaceTile) -> list[ScoreDelta]:
        total = ends_total(state.board, state.rules)
        if total > 0 and total % 5 == 0:
            return [ScoreDelta(move.player_id, total, "ends_sum")]
        return []

    def adjust(self, points: int) -> int:
        return round_to_five(points)


class BlockScoring(ScoringEngine):
    variant = Variant.BLOCK


class CubanScoring(BlockScoring):
    # The spinner restriction is enforced by the board, not by scoring.
    variant = Variant.CUBAN


class ChickenFootScoring(ScoringEngine):
    """Pip count, with a surcharge for a double-blank left in hand."""

    variant = Variant.CHICKEN_FOOT

    def hand_value(self, state: SessionState, player: PlayerState) -> int:
        value = player.hand_pips
        if _DOUBLE_BLANK in player.hand:
            value += state.rules.double_blank_penalty
        return value


class MexicanTrainScoring(BlockScoring):
    variant = Variant.MEXICAN_TRAIN


_ENGINES: dict[Variant, ScoringEngine] = {
    engine.variant: engine
    for engine in (
        AllFivesScoring(),
        BlockScoring(),
        CubanScoring(),
        ChickenFootScoring(),
        MexicanTrainScoring(),
    )
}


def scoring_for(variant: Variant) -> ScoringEngine:
    return _ENGINES[variant]
