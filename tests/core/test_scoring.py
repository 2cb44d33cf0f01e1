"""Tests for per-variant scoring."""

from __future__ import annotations

import pytest

from dominauts.core.board import OPENING, BoardState, LinearBoard
from dominauts.core.enums import TiePolicy, Variant
from dominauts.core.move import PlaceTile
from dominauts.core.notation import parse_tiles
from dominauts.core.rules import RuleSet
from dominauts.core.scores import Blocked, Domination, Forfeit, ScoreDelta
from dominauts.core.scoring import (
    AllFivesScoring,
    BlockScoring,
    ChickenFootScoring,
    CubanScoring,
    MexicanTrainScoring,
    round_to_five,
    scoring_for,
)
from dominauts.core.state import SessionState
from dominauts.core.tile import Tile


def _make_state(
    rules: RuleSet, hands: dict[str, str], board: BoardState | None = None
) -> SessionState:
    return SessionState.from_hands(
        rules, {pid: parse_tiles(h) for pid, h in hands.items()}, board=board
    )


class TestRoundToFive:
    @pytest.mark.parametrize(
        "points, expected", [(0, 0), (7, 5), (8, 10), (11, 10), (12, 10), (13, 15)]
    )
    def test_nearest_multiple(self, points: int, expected: int) -> None:
        assert round_to_five(points) == expected


class TestAllFives:
    def test_ends_sum_scores(self) -> None:
        board = LinearBoard().place(Tile(2, 3), OPENING)
        state = _make_state(RuleSet.all_fives(), {"A": "", "B": ""}, board)
        deltas = AllFivesScoring().move_deltas(state, PlaceTile("A", Tile(2, 3), OPENING))
        assert deltas == [ScoreDelta("A", 5, "ends_sum")]

    def test_ends_not_multiple_score_nothing(self) -> None:
        board = LinearBoard().place(Tile(2, 4), OPENING)
        state = _make_state(RuleSet.all_fives(), {"A": "", "B": ""}, board)
        assert AllFivesScoring().move_deltas(state, PlaceTile("A", Tile(2, 4), OPENING)) == []

    def test_double_on_an_end_counts_twice_when_enabled(self) -> None:
        board = LinearBoard().place(Tile(1, 2), OPENING).place(Tile(2, 2), "right")
        move = PlaceTile("A", Tile(2, 2), "right")
        plain = _make_state(RuleSet.all_fives(), {"A": "", "B": ""}, board)
        twice = _make_state(
            RuleSet.all_fives(double_ends_count_twice=True), {"A": "", "B": ""}, board
        )
        assert AllFivesScoring().move_deltas(plain, move) == []
        assert AllFivesScoring().move_deltas(twice, move) == [ScoreDelta("A", 5, "ends_sum")]

    def test_domination_rounds_to_five(self) -> None:
        state = _make_state(RuleSet.all_fives(), {"A": "", "B": "0-1 5-5"})
        deltas = AllFivesScoring().round_deltas(state, Domination("A"))
        assert deltas == [ScoreDelta("A", 10, "domination")]


class TestPipCount:
    def test_block_example(self) -> None:
        state = _make_state(RuleSet.block(), {"A": "1-1 2-2", "B": "0-0"})
        deltas = BlockScoring().round_deltas(state, Blocked("B"))
        assert deltas == [ScoreDelta("B", 6, "blocked")]

    def test_domination_collects_all_hands(self) -> None:
        state = _make_state(RuleSet.block(), {"A": "", "B": "1-2", "C": "3-3"})
        assert BlockScoring().round_deltas(state, Domination("A")) == [
            ScoreDelta("A", 9, "domination")
        ]

    def test_tie_splits_the_pot(self) -> None:
        state = _make_state(RuleSet.block(), {"A": "1-2", "B": "0-3", "C": "4-4"})
        assert BlockScoring().round_deltas(state, Blocked(None)) == [
            ScoreDelta("A", 4, "blocked_split"),
            ScoreDelta("B", 4, "blocked_split"),
        ]

    def test_tie_policy_none(self) -> None:
        rules = RuleSet.block(block_tie_policy=TiePolicy.NONE)
        state = _make_state(rules, {"A": "1-2", "B": "0-3", "C": "4-4"})
        assert BlockScoring().round_deltas(state, Blocked(None)) == []

    def test_empty_pot_scores_nothing(self) -> None:
        state = _make_state(RuleSet.block(), {"A": "", "B": "0-0"})
        assert BlockScoring().round_deltas(state, Domination("A")) == []

    def test_forfeit_scores_nothing(self) -> None:
        state = _make_state(RuleSet.block(), {"A": "1-2", "B": "0-3"})
        assert BlockScoring().round_deltas(state, Forfeit("A", "resign")) == []

    def test_placements_never_score(self) -> None:
        board = LinearBoard().place(Tile(2, 3), OPENING)
        state = _make_state(RuleSet.block(), {"A": "", "B": ""}, board)
        assert BlockScoring().move_deltas(state, PlaceTile("A", Tile(2, 3), OPENING)) == []


class TestChickenFoot:
    def test_double_blank_penalty(self) -> None:
        state = _make_state(RuleSet.chicken_foot(), {"A": "", "B": "0-0 1-2"})
        assert ChickenFootScoring().round_deltas(state, Domination("A")) == [
            ScoreDelta("A", 53, "domination")
        ]

    def test_penalty_counts_towards_block_winner(self) -> None:
        state = _make_state(RuleSet.chicken_foot(), {"A": "0-0", "B": "6-6"})
        deltas = ChickenFootScoring().round_deltas(state, Blocked("B"))
        assert deltas == [ScoreDelta("B", 50, "blocked")]


class TestScoringFor:
    @pytest.mark.parametrize(
        "variant, engine",
        [
            (Variant.ALL_FIVES, AllFivesScoring),
            (Variant.BLOCK, BlockScoring),
            (Variant.CUBAN, CubanScoring),
            (Variant.CHICKEN_FOOT, ChickenFootScoring),
            (Variant.MEXICAN_TRAIN, MexicanTrainScoring),
        ],
    )
    def test_one_engine_per_variant(self, variant: Variant, engine: type) -> None:
        assert type(scoring_for(variant)) is engine
