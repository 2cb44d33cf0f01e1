"""Replay review APIs."""

from dominauts.analysis.models import (
    MoveJudgment,
    PlacementReview,
    PlayerReviewSummary,
    ReviewReport,
)
from dominauts.analysis.service import (
    ReplayReviewer,
    ReviewCancelled,
    compute_round_fingerprint,
)

__all__ = [
    "MoveJudgment",
    "PlacementReview",
    "PlayerReviewSummary",
    "ReplayReviewer",
    "ReviewCancelled",
    "ReviewReport",
    "compute_round_fingerprint",
]
