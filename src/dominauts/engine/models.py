"""Shared advisor models, weight tables and protocol."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any, Protocol

from dominauts.core.enums import Variant
from dominauts.core.notation import move_to_dict

if TYPE_CHECKING:
    from dominauts.core.move import Move
    from dominauts.core.state import SessionState

CancelCheck = Callable[[], bool]


class AdviceCancelled(Exception):
    """Raised when a running evaluation was cancelled."""


class SkillLevel(StrEnum):
    """How much explanation a hint carries."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    EXPERT = "expert"

    @classmethod
    def parse(cls, name: str) -> SkillLevel:
        key = name.strip().lower()
        if key == "advanced":
            return cls.EXPERT
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"Unknown skill level: {name!r}") from None


class BotDifficulty(StrEnum):
    """How closely a bot follows the advisor's ranking."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    EXPERT = "expert"

    @classmethod
    def parse(cls, name: str) -> BotDifficulty:
        try:
            return cls(name.strip().lower())
        except ValueError:
            raise ValueError(f"Unknown bot difficulty: {name!r}") from None


class HintCategory(StrEnum):
    """Coarse label for the kind of play a hint recommends."""

    OPENING = "opening"
    ENDGAME = "endgame"
    SCORING = "scoring"
    BLOCKING = "blocking"
    SETUP = "setup"
    DEFENSIVE = "defensive"
    AGGRESSIVE = "aggressive"


@dataclass(slots=True, frozen=True)
class FactorWeights:
    """Multipliers for the six evaluation factors (risk is subtracted)."""

    immediate: float = 1.0
    future: float = 1.0
    blocking: float = 1.0
    setup: float = 1.0
    risk: float = 1.0
    endgame: float = 1.0


WEIGHTS: dict[Variant, FactorWeights] = {
    Variant.ALL_FIVES: FactorWeights(2.0, 1.5, 1.0, 0.8, 1.2, 1.5),
    Variant.BLOCK: FactorWeights(1.0, 0.8, 2.0, 0.5, 1.5, 2.0),
    Variant.CUBAN: FactorWeights(1.0, 0.8, 2.0, 1.0, 1.5, 2.0),
    Variant.CHICKEN_FOOT: FactorWeights(1.2, 1.0, 1.5, 1.5, 1.0, 1.8),
    Variant.MEXICAN_TRAIN: FactorWeights(1.0, 1.2, 1.0, 1.2, 1.0, 2.0),
}


@dataclass(slots=True, frozen=True)
class MoveEvaluation:
    """Factor breakdown for one candidate move."""

    move: Move
    immediate: float
    future: float
    blocking: float
    setup: float
    risk: float
    endgame: float
    total: float

    def factors(self) -> dict[str, float]:
        return {
            "immediate": self.immediate,
            "future": self.future,
            "blocking": self.blocking,
            "setup": self.setup,
            "risk": self.risk,
            "endgame": self.endgame,
        }


@dataclass(slots=True, frozen=True)
class Hint:
    """Ranked advice for one player."""

    player_id: str
    best_move: Move
    alternates: tuple[Move, ...]
    reasoning: tuple[str, ...]
    confidence: int
    category: HintCategory
    score: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "playerId": self.player_id,
            "bestMove": move_to_dict(self.best_move),
            "alternates": [move_to_dict(m) for m in self.alternates],
            "reasoning": list(self.reasoning),
            "confidence": self.confidence,
            "category": self.category.value,
            "score": self.score,
        }


class IAdvisor(Protocol):
    """Protocol for move advisors used by bots and hint requests."""

    def advise(
        self,
        state: SessionState,
        player_id: str | None = None,
        skill: SkillLevel | None = None,
        is_cancelled: CancelCheck | None = None,
    ) -> Hint: ...

    def evaluate(
        self,
        state: SessionState,
        player_index: int | None = None,
        is_cancelled: CancelCheck | None = None,
    ) -> list[MoveEvaluation]: ...
