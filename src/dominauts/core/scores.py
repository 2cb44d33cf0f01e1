"""Score deltas and terminal outcomes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TypeAlias


@dataclass(frozen=True, slots=True)
class ScoreDelta:
    """Points awarded to one player, with the rule that produced them."""

    player_id: str
    points: int
    reason: str

    def to_dict(self) -> dict[str, Any]:
        return {"playerId": self.player_id, "points": self.points, "reason": self.reason}


@dataclass(frozen=True, slots=True)
class Domination:
    """A player emptied their hand."""

    winner: str

    def to_dict(self) -> dict[str, Any]:
        return {"type": "domination", "winner": self.winner}


@dataclass(frozen=True, slots=True)
class Blocked:
    """Nobody can place and nothing is left to draw.

    *winner* is the unique lowest hand, or ``None`` on a tie.
    """

    winner: str | None

    def to_dict(self) -> dict[str, Any]:
        return {"type": "blocked", "winner": self.winner}


@dataclass(frozen=True, slots=True)
class Forfeit:
    """A player resigned or ran out of time; the match ends."""

    player_id: str
    reason: str

    def to_dict(self) -> dict[str, Any]:
        return {"type": "forfeit", "playerId": self.player_id, "reason": self.reason}


Terminal: TypeAlias = Domination | Blocked | Forfeit
