"""Core enumerations for the domino domain."""

from __future__ import annotations

from enum import IntEnum, StrEnum, auto


class Variant(StrEnum):
    """Supported game variants."""

    ALL_FIVES = "all_fives"
    BLOCK = "block"
    CUBAN = "cuban"
    CHICKEN_FOOT = "chicken_foot"
    MEXICAN_TRAIN = "mexican_train"

    @classmethod
    def parse(cls, name: str) -> Variant:
        """Parse a variant name, accepting the common aliases."""
        key = name.strip().lower().replace("-", "_").replace(" ", "_")
        try:
            return _ALIASES[key]
        except KeyError:
            raise ValueError(f"Unknown variant: {name!r}") from None


_ALIASES: dict[str, Variant] = {
    "all_fives": Variant.ALL_FIVES,
    "allfives": Variant.ALL_FIVES,
    "muggins": Variant.ALL_FIVES,
    "block": Variant.BLOCK,
    "cuban": Variant.CUBAN,
    "cuba": Variant.CUBAN,
    "chicken_foot": Variant.CHICKEN_FOOT,
    "chickenfoot": Variant.CHICKEN_FOOT,
    "chicken": Variant.CHICKEN_FOOT,
    "mexican_train": Variant.MEXICAN_TRAIN,
    "mexicantrain": Variant.MEXICAN_TRAIN,
    "mexican": Variant.MEXICAN_TRAIN,
}


class MoveType(StrEnum):
    """Wire tag of a move."""

    PLACE_TILE = "place_tile"
    DRAW = "draw"
    PASS = "pass"
    RESIGN = "resign"
    TIMEOUT = "timeout"


class Phase(IntEnum):
    """Finite-state-machine states of a game session."""

    DEALING = auto()
    AWAITING_MOVE = auto()
    RESOLVING = auto()
    ROUND_OVER = auto()
    MATCH_OVER = auto()

    def __str__(self) -> str:
        return self.name.lower()


class ErrorKind(StrEnum):
    """Reason attached to a rejected request."""

    NOT_YOUR_TURN = "not_your_turn"
    TILE_NOT_IN_HAND = "tile_not_in_hand"
    END_NOT_OPEN = "end_not_open"
    PIP_MISMATCH = "pip_mismatch"
    ILLEGAL_BRANCH = "illegal_branch"
    ILLEGAL_OPENING = "illegal_opening"
    MUST_PLAY = "must_play"
    MUST_DRAW = "must_draw"
    DRAW_NOT_ALLOWED = "draw_not_allowed"
    UNKNOWN_PLAYER = "unknown_player"
    INSUFFICIENT_TILES = "insufficient_tiles"
    INVALID_PHASE_TRANSITION = "invalid_phase_transition"
    SESSION_NOT_FOUND = "session_not_found"


class TiePolicy(StrEnum):
    """How a blocked round with several lowest hands is settled."""

    SPLIT = "split"
    NONE = "none"
