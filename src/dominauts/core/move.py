"""Move value objects (tagged union)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias

from dominauts.core.enums import MoveType
from dominauts.core.tile import Tile


@dataclass(frozen=True, slots=True)
class PlaceTile:
    """Lay *tile* on the open end named *end*."""

    player_id: str
    tile: Tile
    end: str

    @property
    def kind(self) -> MoveType:
        return MoveType.PLACE_TILE

    def __str__(self) -> str:
        return f"{self.tile}@{self.end}"


@dataclass(frozen=True, slots=True)
class Draw:
    player_id: str

    @property
    def kind(self) -> MoveType:
        return MoveType.DRAW

    def __str__(self) -> str:
        return "draw"


@dataclass(frozen=True, slots=True)
class Pass:
    player_id: str

    @property
    def kind(self) -> MoveType:
        return MoveType.PASS

    def __str__(self) -> str:
        return "pass"


@dataclass(frozen=True, slots=True)
class Resign:
    player_id: str

    @property
    def kind(self) -> MoveType:
        return MoveType.RESIGN

    def __str__(self) -> str:
        return "resign"


@dataclass(frozen=True, slots=True)
class Timeout:
    """Synthetic move injected when the turn clock runs out."""

    player_id: str

    @property
    def kind(self) -> MoveType:
        return MoveType.TIMEOUT

    def __str__(self) -> str:
        return "timeout"


Move: TypeAlias = PlaceTile | Draw | Pass | Resign | Timeout

TERMINAL_MOVES: tuple[type, ...] = (Resign, Timeout)
