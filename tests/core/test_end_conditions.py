"""Tests for round and match termination."""

from __future__ import annotations

from dataclasses import replace

from dominauts.core.board import OPENING, BoardState, LinearBoard, TrainBoard
from dominauts.core.end_conditions import EndConditionDetector, is_match_over, match_leader
from dominauts.core.notation import parse_tiles
from dominauts.core.rules import RuleSet
from dominauts.core.scores import Blocked, Domination
from dominauts.core.state import SessionState
from dominauts.core.tile import Tile


def _make_state(
    rules: RuleSet,
    hands: dict[str, str],
    *,
    board: BoardState | None = None,
    boneyard: str = "",
) -> SessionState:
    return SessionState.from_hands(
        rules,
        {pid: parse_tiles(h) for pid, h in hands.items()},
        board=board,
        boneyard=parse_tiles(boneyard),
    )


class TestCheckEnd:
    def test_domination(self) -> None:
        state = _make_state(RuleSet.all_fives(), {"A": "1-2", "B": ""})
        assert EndConditionDetector(state).check_end() == Domination("B")

    def test_round_in_progress(self) -> None:
        state = _make_state(RuleSet.all_fives(), {"A": "1-2", "B": "3-4"})
        assert EndConditionDetector(state).check_end() is None

    def test_block_example(self) -> None:
        state = _make_state(
            RuleSet.block(),
            {"A": "1-1 2-2", "B": "0-0"},
            board=LinearBoard().place(Tile(5, 6), OPENING),
        )
        detector = EndConditionDetector(state)
        assert detector.is_blocked()
        assert detector.check_end() == Blocked("B")

    def test_tied_block_has_no_winner(self) -> None:
        state = _make_state(
            RuleSet.block(),
            {"A": "1-2", "B": "0-3"},
            board=LinearBoard().place(Tile(5, 6), OPENING),
        )
        assert EndConditionDetector(state).check_end() == Blocked(None)


class TestIsBlocked:
    def test_boneyard_keeps_round_alive(self) -> None:
        state = _make_state(
            RuleSet.all_fives(),
            {"A": "1-1", "B": "0-0"},
            board=LinearBoard().place(Tile(5, 6), OPENING),
            boneyard="2-2",
        )
        assert not EndConditionDetector(state).is_blocked()

    def test_playable_tile_keeps_round_alive(self) -> None:
        state = _make_state(
            RuleSet.block(),
            {"A": "1-1", "B": "0-5"},
            board=LinearBoard().place(Tile(5, 6), OPENING),
        )
        assert not EndConditionDetector(state).is_blocked()

    def test_everybody_passed(self) -> None:
        state = _make_state(
            RuleSet.block(),
            {"A": "1-1", "B": "0-0"},
            board=LinearBoard().place(Tile(5, 6), OPENING),
        )
        state = replace(
            state, players=tuple(replace(p, consecutive_passes=1) for p in state.players)
        )
        assert EndConditionDetector(state).is_blocked()

    def test_private_train_still_counts(self) -> None:
        board = TrainBoard.create(Tile(6, 6), ["A", "B"]).place(Tile(3, 6), "B", "B")
        state = _make_state(
            RuleSet.mexican_train(), {"A": "3-4", "B": "0-1"}, board=board
        )
        assert not EndConditionDetector(state).is_blocked()

    def test_train_all_stuck(self) -> None:
        board = TrainBoard.create(Tile(6, 6), ["A", "B"])
        state = _make_state(
            RuleSet.mexican_train(), {"A": "3-4", "B": "0-1"}, board=board
        )
        assert EndConditionDetector(state).check_end() == Blocked("B")


class TestMatch:
    def test_target_score(self) -> None:
        rules = RuleSet.all_fives()
        assert is_match_over(rules, [150, 20], 3)
        assert not is_match_over(rules, [145, 20], 3)

    def test_round_count(self) -> None:
        rules = RuleSet.mexican_train()
        assert not is_match_over(rules, [300, 20], 12)
        assert is_match_over(rules, [300, 20], 13)

    def test_leader(self) -> None:
        assert match_leader(["A", "B"], [10, 5]) == "A"
        assert match_leader(["A", "B"], [10, 10]) is None
