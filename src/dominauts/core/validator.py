"""Move legality: a pure predicate over a :class:`SessionState`."""

from __future__ import annotations

from typing import TYPE_CHECKING

from dominauts.core.enums import ErrorKind, Phase
from dominauts.core.move import Draw, Move, Pass, PlaceTile, Resign, Timeout
from dominauts.core.tileset import highest_double

if TYPE_CHECKING:
    from dominauts.core.state import PlayerState, SessionState


class MoveValidator:
    """Checks moves against a state snapshot.

    Never mutates the state, so it is safe to call speculatively (the advisor
    enumerates candidates through it).
    """

    __slots__ = ("_state",)

    def __init__(self, state: SessionState) -> None:
        self._state = state

    # ── Public API ───────────────────────────────────────────────────────

    def check(self, move: Move) -> ErrorKind | None:
        """Why *move* is illegal, or ``None`` if it may be applied."""
        state = self._state
        index = state.index_of(move.player_id)
        if index is None:
            return ErrorKind.UNKNOWN_PLAYER
        if state.phase != Phase.AWAITING_MOVE:
            return ErrorKind.INVALID_PHASE_TRANSITION
        if isinstance(move, Resign):
            return None
        if index != state.current_turn_index:
            return ErrorKind.NOT_YOUR_TURN
        if isinstance(move, Timeout):
            return None
        if isinstance(move, PlaceTile):
            return self._check_place(move, state.players[index])
        if isinstance(move, Draw):
            return self._check_draw(index)
        if isinstance(move, Pass):
            return self._check_pass(index)
        raise TypeError(f"Unknown move type: {type(move).__name__}")

    def is_legal(self, move: Move) -> bool:
        return self.check(move) is None

    def legal_placements(self, player_index: int | None = None) -> list[PlaceTile]:
        """Every legal placement for a player, in hand order then end order.

        Turn order is ignored so hints can be computed for any seat.
        """
        state = self._state
        if player_index is None:
            player_index = state.current_turn_index
        player = state.players[player_index]
        moves: list[PlaceTile] = []
        for tile in player.hand:
            for end in state.board.open_ends(player.id):
                move = PlaceTile(player.id, tile, end.branch)
                if self._check_place(move, player) is None:
                    moves.append(move)
        return moves

    def has_placement(self, player_index: int | None = None) -> bool:
        return bool(self.legal_placements(player_index))

    def can_draw(self, player_index: int | None = None) -> bool:
        """Drawing is available (ignoring whether a placement exists)."""
        state = self._state
        rules = state.rules
        if player_index is None:
            player_index = state.current_turn_index
        if not rules.can_draw or not state.boneyard:
            return False
        if rules.draws_per_turn is None or player_index != state.current_turn_index:
            return True
        return state.draws_this_turn < rules.draws_per_turn

    def generate_legal_moves(self, player_index: int | None = None) -> list[Move]:
        """Placements, or the forced ``Draw`` / ``Pass`` when there are none."""
        state = self._state
        if player_index is None:
            player_index = state.current_turn_index
        placements: list[Move] = list(self.legal_placements(player_index))
        if placements:
            return placements
        player_id = state.players[player_index].id
        if self.can_draw(player_index):
            return [Draw(player_id)]
        return [Pass(player_id)]

    # ── Internal ─────────────────────────────────────────────────────────

    def _check_place(self, move: PlaceTile, player: PlayerState) -> ErrorKind | None:
        if not player.holds(move.tile):
            return ErrorKind.TILE_NOT_IN_HAND
        board = self._state.board
        reason = board.check(move.tile, move.end, player.id)
        if reason is not None:
            return reason
        if board.is_empty:
            return self._check_opening(move, player)
        return None

    def _check_opening(self, move: PlaceTile, player: PlayerState) -> ErrorKind | None:
        rules = self._state.rules
        if rules.opening_requires_double and not move.tile.is_double:
            return ErrorKind.ILLEGAL_OPENING
        if rules.opening_highest_double:
            best = highest_double(player.hand)
            if best is not None and move.tile != best:
                return ErrorKind.ILLEGAL_OPENING
        return None

    def _check_draw(self, index: int) -> ErrorKind | None:
        if self.has_placement(index):
            return ErrorKind.MUST_PLAY
        if not self.can_draw(index):
            return ErrorKind.DRAW_NOT_ALLOWED
        return None

    def _check_pass(self, index: int) -> ErrorKind | None:
        if self.has_placement(index):
            return ErrorKind.MUST_PLAY
        if self.can_draw(index):
            return ErrorKind.MUST_DRAW
        return None
