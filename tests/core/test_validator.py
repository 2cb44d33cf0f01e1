"""Tests for move legality."""

from __future__ import annotations

from dataclasses import replace

from dominauts.core.board import OPENING, ChickenFootBoard, LinearBoard, TrainBoard
from dominauts.core.enums import ErrorKind, Phase
from dominauts.core.move import Draw, Pass, PlaceTile, Resign, Timeout
from dominauts.core.notation import parse_tiles
from dominauts.core.rules import RuleSet
from dominauts.core.state import SessionState
from dominauts.core.tile import Tile
from dominauts.core.validator import MoveValidator


def _make_opening_state(rules: RuleSet | None = None) -> SessionState:
    return SessionState.from_hands(
        rules or RuleSet.all_fives(),
        {"A": parse_tiles("6-6 1-2"), "B": parse_tiles("3-4 5-5")},
        boneyard=parse_tiles("0-0"),
    )


def _make_open_board_state(
    rules: RuleSet, hand: str, boneyard: str = ""
) -> SessionState:
    return SessionState.from_hands(
        rules,
        {"A": parse_tiles(hand), "B": parse_tiles("0-0")},
        boneyard=parse_tiles(boneyard),
        board=LinearBoard().place(Tile(6, 6), OPENING),
    )


class TestCheck:
    def test_highest_double_opens(self) -> None:
        v = MoveValidator(_make_opening_state())
        assert v.check(PlaceTile("A", Tile(6, 6), OPENING)) is None
        assert v.check(PlaceTile("A", Tile(1, 2), OPENING)) == ErrorKind.ILLEGAL_OPENING

    def test_lenient_opening(self) -> None:
        v = MoveValidator(_make_opening_state(RuleSet.all_fives(strict=False)))
        assert v.check(PlaceTile("A", Tile(1, 2), OPENING)) is None

    def test_chicken_foot_needs_double_even_lenient(self) -> None:
        state = SessionState.from_hands(
            RuleSet.chicken_foot(strict=False),
            {"A": parse_tiles("1-2 3-3"), "B": parse_tiles("4-5")},
        )
        v = MoveValidator(state)
        assert v.check(PlaceTile("A", Tile(1, 2), OPENING)) == ErrorKind.ILLEGAL_OPENING
        assert v.check(PlaceTile("A", Tile(3, 3), OPENING)) is None

    def test_not_your_turn(self) -> None:
        v = MoveValidator(_make_opening_state())
        assert v.check(PlaceTile("B", Tile(5, 5), OPENING)) == ErrorKind.NOT_YOUR_TURN
        assert v.check(Timeout("B")) == ErrorKind.NOT_YOUR_TURN

    def test_resign_any_time(self) -> None:
        assert MoveValidator(_make_opening_state()).check(Resign("B")) is None

    def test_tile_not_in_hand(self) -> None:
        v = MoveValidator(_make_opening_state())
        assert v.check(PlaceTile("A", Tile(3, 4), OPENING)) == ErrorKind.TILE_NOT_IN_HAND

    def test_end_not_open(self) -> None:
        v = MoveValidator(_make_opening_state())
        assert v.check(PlaceTile("A", Tile(6, 6), "left")) == ErrorKind.END_NOT_OPEN

    def test_unknown_player(self) -> None:
        v = MoveValidator(_make_opening_state())
        assert v.check(Draw("Z")) == ErrorKind.UNKNOWN_PLAYER

    def test_round_over_rejects_everything(self) -> None:
        state = _make_opening_state().with_phase(Phase.ROUND_OVER)
        v = MoveValidator(state)
        assert v.check(PlaceTile("A", Tile(6, 6), OPENING)) == (
            ErrorKind.INVALID_PHASE_TRANSITION
        )
        assert v.check(Resign("A")) == ErrorKind.INVALID_PHASE_TRANSITION

    def test_must_play_before_draw_or_pass(self) -> None:
        v = MoveValidator(_make_opening_state())
        assert v.check(Draw("A")) == ErrorKind.MUST_PLAY
        assert v.check(Pass("A")) == ErrorKind.MUST_PLAY

    def test_must_draw_before_pass(self) -> None:
        state = _make_open_board_state(RuleSet.all_fives(), "1-2", "0-1")
        v = MoveValidator(state)
        assert v.check(Draw("A")) is None
        assert v.check(Pass("A")) == ErrorKind.MUST_DRAW

    def test_empty_boneyard_allows_pass(self) -> None:
        v = MoveValidator(_make_open_board_state(RuleSet.all_fives(), "1-2"))
        assert v.check(Draw("A")) == ErrorKind.DRAW_NOT_ALLOWED
        assert v.check(Pass("A")) is None

    def test_block_never_draws(self) -> None:
        v = MoveValidator(_make_open_board_state(RuleSet.block(), "1-2", "0-1"))
        assert v.check(Draw("A")) == ErrorKind.DRAW_NOT_ALLOWED
        assert v.check(Pass("A")) is None

    def test_draw_limit_per_turn(self) -> None:
        rules = RuleSet.chicken_foot()
        state = SessionState.from_hands(
            rules,
            {"A": parse_tiles("1-2"), "B": parse_tiles("0-0")},
            boneyard=parse_tiles("0-1 0-2"),
            board=ChickenFootBoard().place(Tile(6, 6), OPENING),
        )
        assert MoveValidator(state).check(Draw("A")) is None
        drawn = replace(state, draws_this_turn=1)
        assert MoveValidator(drawn).check(Draw("A")) == ErrorKind.DRAW_NOT_ALLOWED
        assert MoveValidator(drawn).check(Pass("A")) is None


class TestGeneration:
    def test_hand_order_then_end_order(self) -> None:
        state = _make_open_board_state(RuleSet.all_fives(), "1-6 2-3 4-6")
        moves = MoveValidator(state).legal_placements()
        assert [str(m) for m in moves] == [
            "1-6@left",
            "1-6@right",
            "4-6@left",
            "4-6@right",
        ]

    def test_any_seat(self) -> None:
        state = _make_open_board_state(RuleSet.all_fives(), "1-2")
        assert MoveValidator(state).legal_placements(1) == []

    def test_forced_draw(self) -> None:
        state = _make_open_board_state(RuleSet.all_fives(), "1-2", "0-1")
        assert MoveValidator(state).generate_legal_moves() == [Draw("A")]

    def test_forced_pass(self) -> None:
        state = _make_open_board_state(RuleSet.block(), "1-2")
        assert MoveValidator(state).generate_legal_moves() == [Pass("A")]

    def test_generated_moves_are_legal(self) -> None:
        state = _make_open_board_state(RuleSet.all_fives(), "1-6 6-5 0-0")
        v = MoveValidator(state)
        assert all(v.is_legal(m) for m in v.generate_legal_moves())

    def test_private_trains_hidden(self) -> None:
        board = TrainBoard.create(Tile(6, 6), ["A", "B"])
        state = SessionState.from_hands(
            RuleSet.mexican_train(),
            {"A": parse_tiles("2-6"), "B": parse_tiles("0-0")},
            board=board,
        )
        ends = {m.end for m in MoveValidator(state).legal_placements()}
        assert ends == {"A", "mexican"}
        assert not MoveValidator(state).is_legal(PlaceTile("A", Tile(2, 6), "B"))
