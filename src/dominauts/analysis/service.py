"""Replay reviewer: grades a played round against the move advisor."""

from __future__ import annotations

import hashlib
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from dominauts.analysis.models import (
    MoveJudgment,
    PlacementReview,
    PlayerReviewSummary,
    ReviewReport,
)
from dominauts.core.applier import MoveApplier
from dominauts.core.move import PlaceTile
from dominauts.core.notation import move_to_text, tiles_to_text
from dominauts.core.state import MoveRecord, SessionState
from dominauts.engine.advisor import MoveAdvisor
from dominauts.engine.models import CancelCheck, MoveEvaluation

_BEST_MAX_LOSS = 0.0
_GOOD_MAX_LOSS = 10.0
_INACCURACY_MAX_LOSS = 25.0
_MISTAKE_MAX_LOSS = 50.0
_CRITICAL_MOVE_COUNT = 3

ProgressCallback = Callable[[int, int], None]


class ReviewCancelled(Exception):
    """Raised when a running review was cancelled."""


@dataclass(slots=True)
class _PlayerAcc:
    placements: int = 0
    loss_sum: float = 0.0
    forced: int = 0
    best: int = 0
    good: int = 0
    inaccuracies: int = 0
    mistakes: int = 0
    blunders: int = 0


class ReplayReviewer:
    """Replays a round history and ranks every placement with the advisor."""

    __slots__ = ("_advisor", "_applier")

    def __init__(self, advisor: MoveAdvisor | None = None) -> None:
        self._advisor = advisor or MoveAdvisor()
        self._applier = MoveApplier()

    def review_round(
        self,
        *,
        initial: SessionState,
        history: Iterable[MoveRecord],
        is_cancelled: CancelCheck | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> ReviewReport:
        """Review the round dealt as *initial* and played as *history*.

        Raises:
            ReviewCancelled: *is_cancelled* returned true.
            IllegalMoveError: *history* does not replay from *initial*.
        """
        records = list(history)
        cancelled = is_cancelled or (lambda: False)
        state = initial
        reviews: list[PlacementReview] = []
        total = len(records)

        for done, record in enumerate(records, start=1):
            if cancelled():
                raise ReviewCancelled
            move = record.move
            after = self._applier.apply(move, state)
            if isinstance(move, PlaceTile):
                index = state.index_of(move.player_id)
                assert index is not None
                ranked = self._advisor.evaluate(state, index)
                reviews.append(_review_placement(record.seq, move, ranked))
            state = after
            if on_progress is not None:
                on_progress(done, total)

        players = tuple(
            (p.id, _build_player_summary(r for r in reviews if r.player_id == p.id))
            for p in initial.players
        )
        critical = tuple(
            r.seq
            for r in sorted(reviews, key=lambda r: r.loss, reverse=True)[
                :_CRITICAL_MOVE_COUNT
            ]
            if r.loss > 0
        )
        return ReviewReport(
            round_number=initial.round_number,
            total_moves=total,
            placements=tuple(reviews),
            players=players,
            critical_seqs=critical,
            fingerprint=compute_round_fingerprint(initial, records),
        )


def compute_round_fingerprint(initial: SessionState, history: Iterable[MoveRecord]) -> str:
    """Content hash of a dealt round and its moves (cache validation)."""
    h = hashlib.sha256(initial.variant.value.encode(), usedforsecurity=False)
    for player in initial.players:
        h.update(f"{player.id}:{tiles_to_text(player.hand)};".encode())
    h.update(tiles_to_text(initial.boneyard).encode())
    for rec in history:
        h.update(f"|{rec.seq}:{rec.move.player_id}:{move_to_text(rec.move)}".encode())
    return h.hexdigest()


def _review_placement(
    seq: int, move: PlaceTile, ranked: list[MoveEvaluation]
) -> PlacementReview:
    best = ranked[0]
    rank, played = next(
        (i, e) for i, e in enumerate(ranked, start=1) if e.move == move
    )
    loss = max(0.0, best.total - played.total)
    if len(ranked) == 1:
        judgment = MoveJudgment.FORCED
    else:
        judgment = _classify_loss(loss)
    assert isinstance(best.move, PlaceTile)
    return PlacementReview(
        seq=seq,
        player_id=move.player_id,
        played_move=move,
        best_move=best.move,
        played_total=played.total,
        best_total=best.total,
        rank=rank,
        candidates=len(ranked),
        loss=loss,
        judgment=judgment,
    )


def _classify_loss(loss: float) -> MoveJudgment:
    if loss <= _BEST_MAX_LOSS:
        return MoveJudgment.BEST
    if loss <= _GOOD_MAX_LOSS:
        return MoveJudgment.GOOD
    if loss <= _INACCURACY_MAX_LOSS:
        return MoveJudgment.INACCURACY
    if loss <= _MISTAKE_MAX_LOSS:
        return MoveJudgment.MISTAKE
    return MoveJudgment.BLUNDER


def _build_player_summary(reviews: Iterable[PlacementReview]) -> PlayerReviewSummary:
    acc = _PlayerAcc()
    for review in reviews:
        acc.placements += 1
        acc.loss_sum += review.loss
        if review.judgment == MoveJudgment.FORCED:
            acc.forced += 1
        elif review.judgment == MoveJudgment.BEST:
            acc.best += 1
        elif review.judgment == MoveJudgment.GOOD:
            acc.good += 1
        elif review.judgment == MoveJudgment.INACCURACY:
            acc.inaccuracies += 1
        elif review.judgment == MoveJudgment.MISTAKE:
            acc.mistakes += 1
        elif review.judgment == MoveJudgment.BLUNDER:
            acc.blunders += 1

    avg = (acc.loss_sum / acc.placements) if acc.placements > 0 else 0.0
    if acc.placements > 0:
        accuracy = 100.0 * (acc.forced + acc.best + acc.good) / acc.placements
    else:
        accuracy = 100.0
    return PlayerReviewSummary(
        placements=acc.placements,
        avg_loss=avg,
        inaccuracies=acc.inaccuracies,
        mistakes=acc.mistakes,
        blunders=acc.blunders,
        forced=acc.forced,
        best=acc.best,
        good=acc.good,
        accuracy=accuracy,
    )
