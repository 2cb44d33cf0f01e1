"""Data models produced by replay review."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from dominauts.core.move import PlaceTile


class MoveJudgment(StrEnum):
    """Human-friendly placement quality buckets."""

    FORCED = "Forced"
    BEST = "Best"
    GOOD = "Good"
    INACCURACY = "Inaccuracy"
    MISTAKE = "Mistake"
    BLUNDER = "Blunder"

    @property
    def symbol(self) -> str:
        """Annotation suffix for move lists."""
        return _JUDGMENT_SYMBOL[self]


_JUDGMENT_SYMBOL: dict[MoveJudgment, str] = {
    MoveJudgment.FORCED: "",
    MoveJudgment.BEST: "",
    MoveJudgment.GOOD: "",
    MoveJudgment.INACCURACY: "?!",
    MoveJudgment.MISTAKE: "?",
    MoveJudgment.BLUNDER: "??",
}


@dataclass(slots=True, frozen=True)
class PlayerReviewSummary:
    """Aggregate placement quality for one player."""

    placements: int
    avg_loss: float
    inaccuracies: int
    mistakes: int
    blunders: int
    forced: int = 0
    best: int = 0
    good: int = 0
    accuracy: float = 0.0


@dataclass(slots=True, frozen=True)
class PlacementReview:
    """Advisor-backed review of a single placement."""

    seq: int
    player_id: str
    played_move: PlaceTile
    best_move: PlaceTile
    played_total: float
    best_total: float
    # 1-based position of the played move in the advisor's ranking.
    rank: int
    candidates: int
    loss: float
    judgment: MoveJudgment


@dataclass(slots=True, frozen=True)
class ReviewReport:
    """Placement-by-placement review with per-player summaries."""

    round_number: int
    total_moves: int
    placements: tuple[PlacementReview, ...]
    players: tuple[tuple[str, PlayerReviewSummary], ...]
    critical_seqs: tuple[int, ...]
    fingerprint: str = ""

    def summary_for(self, player_id: str) -> PlayerReviewSummary:
        for pid, summary in self.players:
            if pid == player_id:
                return summary
        raise KeyError(player_id)
