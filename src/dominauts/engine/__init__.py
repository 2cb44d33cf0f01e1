"""Move advisor package: heuristic evaluator and Qt worker bridge."""

from dominauts.engine.advisor import MoveAdvisor
from dominauts.engine.models import (
    WEIGHTS,
    AdviceCancelled,
    BotDifficulty,
    FactorWeights,
    Hint,
    HintCategory,
    IAdvisor,
    MoveEvaluation,
    SkillLevel,
)
from dominauts.engine.qt_bridge import AdvisorWorker

__all__ = [
    "WEIGHTS",
    "AdviceCancelled",
    "AdvisorWorker",
    "BotDifficulty",
    "FactorWeights",
    "Hint",
    "HintCategory",
    "IAdvisor",
    "MoveAdvisor",
    "MoveEvaluation",
    "SkillLevel",
]
