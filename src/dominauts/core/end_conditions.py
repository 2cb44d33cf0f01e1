"""Round and match termination: domination, block, round/match completion."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from dominauts.core.enums import Variant
from dominauts.core.scores import Blocked, Domination, Terminal
from dominauts.core.scoring import scoring_for
from dominauts.core.validator import MoveValidator

if TYPE_CHECKING:
    from dominauts.core.rules import RuleSet
    from dominauts.core.state import SessionState


class EndConditionDetector:
    """Static rule-checker that operates on a :class:`SessionState`."""

    __slots__ = ("_state",)

    def __init__(self, state: SessionState) -> None:
        self._state = state

    def check_end(self) -> Terminal | None:
        """The terminal condition the round has reached, if any."""
        for player in self._state.players:
            if not player.hand:
                return Domination(player.id)
        if self.is_blocked():
            return Blocked(self.block_winner())
        return None

    def is_blocked(self) -> bool:
        """Nothing left to draw and no seat can place a tile.

        Either every player has passed since the last placement, or no hand
        holds a tile that fits anywhere on the table.
        """
        state = self._state
        if state.rules.can_draw and state.boneyard:
            return False
        # A pass can open a Mexican Train, so a full round of passes there
        # does not by itself prove the table is stuck.
        if state.variant != Variant.MEXICAN_TRAIN and all(
            p.consecutive_passes > 0 for p in state.players
        ):
            return True
        return not any(self._could_place(i) for i in range(state.player_count))

    def block_winner(self) -> str | None:
        """The unique lowest hand, or ``None`` when several tie."""
        state = self._state
        scoring = scoring_for(state.variant)
        values = [(scoring.hand_value(state, p), p.id) for p in state.players]
        low = min(v for v, _ in values)
        lowest = [pid for v, pid in values if v == low]
        return lowest[0] if len(lowest) == 1 else None

    def _could_place(self, index: int) -> bool:
        state = self._state
        board = state.board
        if board.is_empty:
            return MoveValidator(state).has_placement(index)
        # Trains that are private now may turn public later, so every end
        # counts when deciding whether the round can still move.
        ends = board.open_ends()
        return any(
            board.check(tile, end.branch) is None
            for tile in state.players[index].hand
            for end in ends
        )


def is_match_over(rules: RuleSet, match_scores: Sequence[int], round_number: int) -> bool:
    """Target score reached, or the configured number of rounds played."""
    if rules.target_score is not None and max(match_scores) >= rules.target_score:
        return True
    return rules.round_count is not None and round_number >= rules.round_count


def match_leader(player_ids: Sequence[str], match_scores: Sequence[int]) -> str | None:
    """Highest match score, or ``None`` when the lead is shared."""
    best = max(match_scores)
    leaders = [pid for pid, s in zip(player_ids, match_scores) if s == best]
    return leaders[0] if len(leaders) == 1 else None
