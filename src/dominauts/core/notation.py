"""Compact text notation for tiles and moves.

Moves are written the way they appear in logs and test fixtures::

    6-6@center    3-5@left    draw    pass    resign    timeout

A sequence is a whitespace-separated list of such tokens.  On the wire a move
is a mapping ``{"type", "tileId"?, "endRef"?}``.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from dominauts.core.enums import MoveType
from dominauts.core.move import Draw, Move, Pass, PlaceTile, Resign, Timeout
from dominauts.core.tile import Tile

_SIMPLE: dict[str, type[Draw] | type[Pass] | type[Resign] | type[Timeout]] = {
    MoveType.DRAW.value: Draw,
    MoveType.PASS.value: Pass,
    MoveType.RESIGN.value: Resign,
    MoveType.TIMEOUT.value: Timeout,
}


def parse_tiles(text: str) -> tuple[Tile, ...]:
    """Parse ``"6-6 3-5 0-1"`` into tiles, keeping order."""
    return tuple(Tile.parse(token) for token in text.replace(",", " ").split())


def tiles_to_text(tiles: Iterable[Tile]) -> str:
    return " ".join(t.id for t in tiles)


def move_to_text(move: Move) -> str:
    return str(move)


def parse_move(player_id: str, text: str) -> Move:
    """Parse a single move token for *player_id*.

    Raises:
        ValueError: *text* is not a valid move token.
    """
    token = text.strip().lower()
    if token in _SIMPLE:
        return _SIMPLE[token](player_id)
    tile_text, sep, end = token.partition("@")
    if not sep or not end:
        raise ValueError(f"Invalid move: {text!r}")
    return PlaceTile(player_id, Tile.parse(tile_text), end)


def parse_moves(player_ids: Sequence[str], text: str, first: int = 0) -> list[Move]:
    """Parse a move list, attributing tokens to players in seat order.

    Drawing keeps the turn, so the seat only advances after a placement or
    a pass.  Extra plays after doubles are not modelled; build such
    sequences move by move.
    """
    moves: list[Move] = []
    seat = first
    for token in text.split():
        move = parse_move(player_ids[seat], token)
        moves.append(move)
        if not isinstance(move, Draw):
            seat = (seat + 1) % len(player_ids)
    return moves


def moves_to_text(moves: Iterable[Move]) -> str:
    return " ".join(move_to_text(m) for m in moves)


# ── Wire mappings ────────────────────────────────────────────────────────────


def move_to_dict(move: Move) -> dict[str, Any]:
    data: dict[str, Any] = {"type": move.kind.value, "playerId": move.player_id}
    if isinstance(move, PlaceTile):
        data["tileId"] = move.tile.id
        data["endRef"] = move.end
    return data


def move_from_dict(player_id: str, data: Mapping[str, Any]) -> Move:
    """Decode a wire move ``{"type", "tileId"?, "endRef"?}``.

    Raises:
        ValueError: unknown type or missing placement fields.
    """
    try:
        kind = MoveType(str(data["type"]))
    except (KeyError, ValueError):
        raise ValueError(f"Invalid move type in {dict(data)!r}") from None
    if kind == MoveType.PLACE_TILE:
        tile_id = data.get("tileId")
        end = data.get("endRef")
        if not tile_id or not end:
            raise ValueError("place_tile needs 'tileId' and 'endRef'")
        return PlaceTile(player_id, Tile.parse(str(tile_id)), str(end))
    return _SIMPLE[kind.value](player_id)
