"""Pure state transitions: ``apply(move, state) -> state'``."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace

from dominauts.core.board import TrainBoard
from dominauts.core.end_conditions import EndConditionDetector, is_match_over
from dominauts.core.enums import Phase
from dominauts.core.errors import IllegalMoveError
from dominauts.core.move import TERMINAL_MOVES, Draw, Move, Pass, PlaceTile
from dominauts.core.scores import Forfeit, ScoreDelta, Terminal
from dominauts.core.scoring import ScoringEngine, scoring_for
from dominauts.core.state import MoveRecord, SessionState
from dominauts.core.validator import MoveValidator


class MoveApplier:
    """Produces the next :class:`SessionState` for a legal move.

    Every applied move is appended to the round history with the next
    sequence number.  A move that ends the round also settles it: round-end
    deltas go into the scores and the phase becomes ``ROUND_OVER`` or
    ``MATCH_OVER``.  Replaying the history from the dealt state therefore
    reproduces the same snapshot.
    """

    __slots__ = ("_scoring",)

    def __init__(self, scoring: ScoringEngine | None = None) -> None:
        self._scoring = scoring

    def apply(self, move: Move, state: SessionState) -> SessionState:
        """Return the state after *move*.

        Raises:
            IllegalMoveError: the validator rejects *move*.
        """
        reason = MoveValidator(state).check(move)
        if reason is not None:
            raise IllegalMoveError(reason, f"{move} rejected: {reason}")

        index = state.index_of(move.player_id)
        assert index is not None
        deltas: list[ScoreDelta] = []
        if isinstance(move, PlaceTile):
            state, deltas = self._place(move, index, state)
        elif isinstance(move, Draw):
            state = self._draw(index, state)
        elif isinstance(move, Pass):
            state = self._pass(index, state)

        terminal: Terminal | None
        if isinstance(move, TERMINAL_MOVES):
            terminal = Forfeit(move.player_id, move.kind.value)
        else:
            terminal = EndConditionDetector(state).check_end()
        round_deltas: list[ScoreDelta] = []
        if terminal is not None:
            state, round_deltas = self._finish_round(terminal, state)

        record = MoveRecord(
            seq=state.next_seq,
            move=move,
            score_deltas=tuple(deltas),
            terminal=terminal,
            round_deltas=tuple(round_deltas),
        )
        return replace(state, history=state.history + (record,), next_seq=state.next_seq + 1)

    # ── Transitions ──────────────────────────────────────────────────────

    def _place(
        self, move: PlaceTile, index: int, state: SessionState
    ) -> tuple[SessionState, list[ScoreDelta]]:
        player = state.players[index]
        board = state.board.place(move.tile, move.end, player.id)
        mover = player.without(move.tile)
        players = tuple(
            replace(mover if i == index else p, consecutive_passes=0)
            for i, p in enumerate(state.players)
        )
        placed = replace(state, board=board, players=players)

        deltas = self._scoring_for(state).move_deltas(placed, move)
        round_scores = _add_deltas(placed, placed.round_scores, deltas)

        extra_play = (
            state.rules.double_grants_extra_play and move.tile.is_double and bool(mover.hand)
        )
        next_index = index if extra_play else (index + 1) % state.player_count
        return (
            replace(
                placed,
                round_scores=round_scores,
                current_turn_index=next_index,
                draws_this_turn=0,
            ),
            deltas,
        )

    def _draw(self, index: int, state: SessionState) -> SessionState:
        # Boneyard order was fixed by the deal; draws never reshuffle.
        tile = state.boneyard[0]
        player = state.players[index]
        drawn = state.with_player(index, replace(player, hand=player.hand + (tile,)))
        return replace(
            drawn,
            boneyard=state.boneyard[1:],
            draws_this_turn=state.draws_this_turn + 1,
        )

    def _pass(self, index: int, state: SessionState) -> SessionState:
        player = state.players[index]
        passed = state.with_player(
            index, replace(player, consecutive_passes=player.consecutive_passes + 1)
        )
        board = passed.board
        if isinstance(board, TrainBoard):
            board = board.mark_public(player.id)
        return replace(
            passed,
            board=board,
            current_turn_index=(index + 1) % state.player_count,
            draws_this_turn=0,
        )

    def _finish_round(
        self, terminal: Terminal, state: SessionState
    ) -> tuple[SessionState, list[ScoreDelta]]:
        deltas = self._scoring_for(state).round_deltas(state, terminal)
        round_scores = _add_deltas(state, state.round_scores, deltas)
        match_scores = tuple(m + r for m, r in zip(state.match_scores, round_scores))
        # A resignation or timeout ends the whole match.
        match_over = isinstance(terminal, Forfeit) or is_match_over(
            state.rules, match_scores, state.round_number
        )
        finished = replace(
            state,
            round_scores=round_scores,
            match_scores=match_scores,
            phase=Phase.MATCH_OVER if match_over else Phase.ROUND_OVER,
        )
        return finished, deltas

    def _scoring_for(self, state: SessionState) -> ScoringEngine:
        return self._scoring or scoring_for(state.variant)


def _add_deltas(
    state: SessionState, scores: tuple[int, ...], deltas: Iterable[ScoreDelta]
) -> tuple[int, ...]:
    totals = list(scores)
    for delta in deltas:
        index = state.index_of(delta.player_id)
        assert index is not None
        totals[index] += delta.points
    return tuple(totals)


def replay(initial: SessionState, moves: Iterable[Move]) -> SessionState:
    """Re-apply *moves* from *initial* (e.g. a round's dealt state)."""
    applier = MoveApplier()
    state = initial
    for move in moves:
        state = applier.apply(move, state)
    return state


def replay_history(initial: SessionState, history: Iterable[MoveRecord]) -> SessionState:
    return replay(initial, (record.move for record in history))
