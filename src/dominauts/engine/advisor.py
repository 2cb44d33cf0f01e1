"""Weighted heuristic move advisor (hints and bot play).

Every legal placement is scored by six pure factor functions; the variant's
:class:`FactorWeights` combine them into a total (risk subtracted).  Ranking
is a stable sort on ``(-total, risk)``, so equal candidates keep the
validator's enumeration order.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import replace

from dominauts.core.board import BoardState, SpinnerBoard
from dominauts.core.enums import Variant
from dominauts.core.move import Draw, Move, PlaceTile
from dominauts.core.scoring import scoring_for
from dominauts.core.state import PlayerState, SessionState
from dominauts.core.validator import MoveValidator
from dominauts.engine.models import (
    WEIGHTS,
    AdviceCancelled,
    CancelCheck,
    FactorWeights,
    Hint,
    HintCategory,
    IAdvisor,
    MoveEvaluation,
    SkillLevel,
)

_PLAYABLE_BONUS = 10
_DOUBLE_BLOCK_BONUS = 15
_SCARCE_END_BONUS = 20
_FLEXIBLE_HAND_PIPS = 4
_FLEXIBILITY_BONUS = 10
_EARLY_SPINNER_BONUS = 30
_CUBAN_SPINNER_BONUS = 20
_HEAVY_TILE_PIPS = 10
_CROWDED_HAND = 5
_LAST_OF_PIP_PENALTY = 15
_ENDGAME_HAND_TILES = 10
_ENDGAME_BONEYARD = 5
_GOING_OUT_BONUS = 100
_OPENING_BOARD_TILES = 3
_MAX_ALTERNATES = 3

# Reasoning thresholds.
_BLOCKING_NOTE = 15
_FUTURE_NOTE = 20
_SETUP_NOTE = 10
_RISK_NOTE = 10
_SETUP_CATEGORY = 15
_RISK_CATEGORY = 20


def _never_cancelled() -> bool:
    return False


# ── Factors ──────────────────────────────────────────────────────────────────


def end_values(board: BoardState, player_id: str) -> list[int]:
    """Numeric open ends of *board* as seen by *player_id*."""
    return [e.value for e in board.open_ends(player_id) if e.value is not None]


def immediate_score(
    move: PlaceTile, state: SessionState, player: PlayerState, after: BoardState
) -> float:
    """Points the placement scores now, else the double bonus."""
    placed = replace(state, board=after)
    award = sum(d.points for d in scoring_for(state.variant).move_deltas(placed, move))
    if award > 0:
        return float(award)
    if move.tile.is_double:
        return float(move.tile.left * 2)
    return 0.0


def future_score(
    move: PlaceTile, state: SessionState, player: PlayerState, after: BoardState
) -> float:
    """Follow-up plays the rest of the hand gets against the new ends."""
    values = end_values(after, player.id)
    all_fives = state.variant == Variant.ALL_FIVES
    score = 0.0
    for tile in player.without(move.tile).hand:
        for value in values:
            if not tile.has(value):
                continue
            score += _PLAYABLE_BONUS
            if all_fives:
                potential = sum(values) - value + tile.other(value)
                if potential > 0 and potential % 5 == 0:
                    score += potential / 5
    return score


def blocking_score(
    move: PlaceTile, state: SessionState, player: PlayerState, after: BoardState
) -> float:
    """Doubles, and ends whose pip is nearly exhausted on the table."""
    score = 0.0
    if move.tile.is_double:
        score += _DOUBLE_BLOCK_BONUS
    scarce = state.rules.max_pip
    for value in end_values(after, player.id):
        if after.copies_played(value) >= scarce:
            score += _SCARCE_END_BONUS
    return score


def setup_score(
    move: PlaceTile, state: SessionState, player: PlayerState, after: BoardState
) -> float:
    """Hand flexibility plus early-spinner bonuses."""
    remaining = player.without(move.tile).hand
    pips = {p for t in remaining for p in (t.left, t.right)}
    score = float(_FLEXIBILITY_BONUS) if len(pips) >= _FLEXIBLE_HAND_PIPS else 0.0
    if not move.tile.is_double:
        return score
    board = state.board
    if state.variant == Variant.CHICKEN_FOOT and len(board.tiles) < _OPENING_BOARD_TILES:
        score += _EARLY_SPINNER_BONUS
    elif (
        state.variant == Variant.CUBAN
        and isinstance(board, SpinnerBoard)
        and board.spinner is None
    ):
        score += _CUBAN_SPINNER_BONUS
    return score


def risk_score(
    move: PlaceTile, state: SessionState, player: PlayerState, after: BoardState
) -> float:
    """Heavy tiles spent early, and pips left with a single tile."""
    tile = move.tile
    risk = 0.0
    if len(player.hand) > _CROWDED_HAND and tile.pips > _HEAVY_TILE_PIPS:
        risk += tile.pips / 2
    for pip in {tile.left, tile.right}:
        if sum(1 for t in player.hand if t.has(pip)) == 2:
            risk += _LAST_OF_PIP_PENALTY
    return risk


def is_endgame(state: SessionState) -> bool:
    return (
        state.tiles_in_hands < _ENDGAME_HAND_TILES
        or len(state.boneyard) < _ENDGAME_BONEYARD
    )


def endgame_score(
    move: PlaceTile, state: SessionState, player: PlayerState, after: BoardState
) -> float:
    """Shed heavy tiles and go out once the round is nearly done."""
    if not is_endgame(state):
        return 0.0
    score = float(move.tile.pips * 2)
    if len(player.hand) == 1:
        score += _GOING_OUT_BONUS
    return score


# ── Advisor ──────────────────────────────────────────────────────────────────


class MoveAdvisor(IAdvisor):
    """Ranks legal moves with the weighted six-factor heuristic."""

    __slots__ = ("_skill", "_weights")

    def __init__(
        self,
        skill: SkillLevel = SkillLevel.INTERMEDIATE,
        weights: Mapping[Variant, FactorWeights] | None = None,
    ) -> None:
        self._skill = skill
        self._weights = dict(weights) if weights is not None else WEIGHTS

    @property
    def skill(self) -> SkillLevel:
        return self._skill

    def weights_for(self, variant: Variant) -> FactorWeights:
        return self._weights.get(variant, FactorWeights())

    def evaluate(
        self,
        state: SessionState,
        player_index: int | None = None,
        is_cancelled: CancelCheck | None = None,
    ) -> list[MoveEvaluation]:
        """Ranked evaluations of every legal placement (best first)."""
        if player_index is None:
            player_index = state.current_turn_index
        cancelled = is_cancelled or _never_cancelled
        player = state.players[player_index]
        weights = self.weights_for(state.variant)

        evaluations: list[MoveEvaluation] = []
        for move in MoveValidator(state).legal_placements(player_index):
            if cancelled():
                raise AdviceCancelled
            after = state.board.place(move.tile, move.end, player.id)
            evaluations.append(_evaluate(move, state, player, after, weights))
        # Stable: equal keys keep enumeration order.
        return sorted(evaluations, key=lambda e: (-e.total, e.risk))

    def advise(
        self,
        state: SessionState,
        player_id: str | None = None,
        skill: SkillLevel | None = None,
        is_cancelled: CancelCheck | None = None,
    ) -> Hint:
        """Best move, alternates, reasoning and confidence for a player."""
        index = state.current_turn_index if player_id is None else state.index_of(player_id)
        if index is None:
            raise KeyError(player_id)
        level = skill or self._skill
        ranked = self.evaluate(state, index, is_cancelled)
        if not ranked:
            return _fallback_hint(state, index)

        best = ranked[0]
        weights = self.weights_for(state.variant)
        return Hint(
            player_id=state.players[index].id,
            best_move=best.move,
            alternates=tuple(e.move for e in ranked[1 : 1 + _MAX_ALTERNATES]),
            reasoning=build_reasoning(best, level, state.variant, weights),
            confidence=confidence(ranked),
            category=categorize(best, state),
            score=best.total,
        )

    def choose_move(self, state: SessionState, player_id: str | None = None) -> Move:
        """The move a bot plays: the advisor's top choice."""
        return self.advise(state, player_id, SkillLevel.BEGINNER).best_move


def _evaluate(
    move: PlaceTile,
    state: SessionState,
    player: PlayerState,
    after: BoardState,
    weights: FactorWeights,
) -> MoveEvaluation:
    immediate = immediate_score(move, state, player, after)
    future = future_score(move, state, player, after)
    blocking = blocking_score(move, state, player, after)
    setup = setup_score(move, state, player, after)
    risk = risk_score(move, state, player, after)
    endgame = endgame_score(move, state, player, after)
    total = (
        immediate * weights.immediate
        + future * weights.future
        + blocking * weights.blocking
        + setup * weights.setup
        - risk * weights.risk
        + endgame * weights.endgame
    )
    return MoveEvaluation(
        move=move,
        immediate=immediate,
        future=future,
        blocking=blocking,
        setup=setup,
        risk=risk,
        endgame=endgame,
        total=total,
    )


def confidence(ranked: list[MoveEvaluation]) -> int:
    """``min(100, 50 + 2 * margin)`` between the top two candidates."""
    if len(ranked) == 1:
        return 100
    margin = ranked[0].total - ranked[1].total
    return int(round(min(100.0, 50.0 + 2.0 * margin)))


def categorize(best: MoveEvaluation, state: SessionState) -> HintCategory:
    if len(state.board.tiles) < _OPENING_BOARD_TILES:
        return HintCategory.OPENING
    if is_endgame(state):
        return HintCategory.ENDGAME
    if best.immediate > best.future * 2:
        return HintCategory.SCORING
    if best.blocking > best.immediate:
        return HintCategory.BLOCKING
    if best.setup > _SETUP_CATEGORY:
        return HintCategory.SETUP
    if best.risk > _RISK_CATEGORY:
        return HintCategory.DEFENSIVE
    return HintCategory.AGGRESSIVE


def build_reasoning(
    best: MoveEvaluation,
    skill: SkillLevel,
    variant: Variant,
    weights: FactorWeights,
) -> tuple[str, ...]:
    """Explain *best* from the factors that crossed their thresholds."""
    reasons: list[str] = []
    if skill == SkillLevel.BEGINNER:
        if best.immediate > 0:
            reasons.append(f"This move scores {best.immediate:g} points immediately!")
        if best.blocking > _BLOCKING_NOTE:
            reasons.append("This blocks your opponent from high-scoring plays")
        if best.future > _FUTURE_NOTE:
            reasons.append("This sets up good plays for your next turn")
    elif skill == SkillLevel.INTERMEDIATE:
        if best.immediate > 0:
            if variant == Variant.ALL_FIVES and not _is_double(best.move):
                reasons.append(
                    f"Scores {best.immediate:g} points (ends sum to a multiple of 5)"
                )
            else:
                reasons.append(f"Worth {best.immediate:g} points")
        if best.blocking > _BLOCKING_NOTE:
            reasons.append("Leaves ends your opponents are unlikely to match")
        if best.setup > _SETUP_NOTE:
            reasons.append("Maintains hand flexibility for future plays")
        if best.risk > _RISK_NOTE:
            reasons.append("Reduces options for specific numbers")
    else:
        for name, value in best.factors().items():
            if value == 0:
                continue
            weight = getattr(weights, name)
            signed = -value * weight if name == "risk" else value * weight
            reasons.append(f"{name}: {value:g} x {weight:g} = {signed:+g}")
        reasons.append(f"total: {best.total:g}")
    if not reasons:
        reasons.append("A safe play that keeps your options open")
    return tuple(reasons)


def _is_double(move: Move) -> bool:
    return isinstance(move, PlaceTile) and move.tile.is_double


def _fallback_hint(state: SessionState, index: int) -> Hint:
    """Draw or pass when nothing can be placed."""
    move = MoveValidator(state).generate_legal_moves(index)[0]
    if isinstance(move, Draw):
        reason = "No playable tiles. Draw from the boneyard."
    elif not state.boneyard:
        reason = "No playable tiles and boneyard is empty. Must pass."
    elif not state.rules.can_draw:
        reason = "No playable tiles and drawing is not allowed. Must pass."
    else:
        reason = "No playable tiles and no draws left this turn. Must pass."
    return Hint(
        player_id=move.player_id,
        best_move=move,
        alternates=(),
        reasoning=(reason,),
        confidence=100,
        category=HintCategory.DEFENSIVE,
    )
