"""Tests for session state construction and dealing."""

from __future__ import annotations

import random

import pytest

from dominauts.core.board import TrainBoard
from dominauts.core.enums import Phase
from dominauts.core.errors import InsufficientTilesError
from dominauts.core.notation import parse_tiles
from dominauts.core.rules import RuleSet
from dominauts.core.state import PlayerState, SessionState, deal_round
from dominauts.core.tile import Tile
from dominauts.core.tileset import highest_double


class TestSessionState:
    def test_scores_default_to_zero(self) -> None:
        state = SessionState.from_hands(
            RuleSet.block(), {"A": parse_tiles("1-2"), "B": parse_tiles("3-4")}
        )
        assert state.round_scores == (0, 0)
        assert state.match_scores == (0, 0)
        assert state.phase == Phase.AWAITING_MOVE

    def test_duplicate_ids_rejected(self) -> None:
        with pytest.raises(ValueError):
            SessionState(
                rules=RuleSet.block(),
                players=(PlayerState("A"), PlayerState("A")),
                board=SessionState.from_hands(RuleSet.block(), {"X": ()}).board,
            )

    def test_turn_index_range(self) -> None:
        with pytest.raises(ValueError):
            SessionState.from_hands(RuleSet.block(), {"A": (), "B": ()}, current=2)

    def test_queries(self) -> None:
        state = SessionState.from_hands(
            RuleSet.block(),
            {"A": parse_tiles("1-2 3-3"), "B": parse_tiles("0-4")},
            boneyard=parse_tiles("5-5"),
            bots=["B"],
        )
        assert state.index_of("B") == 1
        assert state.index_of("Z") is None
        assert state.player("A").hand_pips == 9
        assert state.players[1].is_bot
        assert state.tiles_in_hands == 3
        assert state.tile_count() == 4
        with pytest.raises(KeyError):
            state.player("Z")

    def test_without_removes_one_copy(self) -> None:
        player = PlayerState("A", parse_tiles("1-2 3-4"))
        assert player.without(Tile(1, 2)).hand == (Tile(3, 4),)
        assert player.hand == (Tile(1, 2), Tile(3, 4))


class TestDealRound:
    def test_hands_and_boneyard(self, rng: random.Random) -> None:
        state = deal_round(RuleSet.all_fives(), ["A", "B"], rng)
        assert [len(p.hand) for p in state.players] == [7, 7]
        assert len(state.boneyard) == 14
        assert state.tile_count() == 28
        assert state.board.is_empty

    def test_highest_double_leads(self) -> None:
        for seed in range(5):
            state = deal_round(RuleSet.block(), ["A", "B", "C"], random.Random(seed))
            doubles = [highest_double(p.hand) for p in state.players]
            pips = [d.left if d is not None else -1 for d in doubles]
            if max(pips) >= 0:
                assert pips[state.current_turn_index] == max(pips)

    def test_same_seed_same_deal(self) -> None:
        a = deal_round(RuleSet.cuban(), ["A", "B"], random.Random(11))
        b = deal_round(RuleSet.cuban(), ["A", "B"], random.Random(11))
        assert a == b

    def test_mexican_train_hub(self) -> None:
        rules = RuleSet.mexican_train()
        first = deal_round(rules, ["A", "B", "C"], random.Random(1))
        assert isinstance(first.board, TrainBoard)
        assert first.board.hub == Tile(12, 12)
        assert all(not p.holds(Tile(12, 12)) for p in first.players)
        assert Tile(12, 12) not in first.boneyard
        assert first.current_turn_index == 0
        assert first.tile_count() == 91

        second = deal_round(rules, ["A", "B", "C"], random.Random(1), round_number=2)
        assert isinstance(second.board, TrainBoard)
        assert second.board.hub == Tile(11, 11)
        assert second.current_turn_index == 1

    def test_carries_match_state(self, rng: random.Random) -> None:
        state = deal_round(
            RuleSet.all_fives(),
            ["A", "B"],
            rng,
            round_number=3,
            match_scores=[40, 15],
            bots=["B"],
            next_seq=30,
        )
        assert state.round_number == 3
        assert state.match_scores == (40, 15)
        assert state.round_scores == (0, 0)
        assert state.next_seq == 30
        assert state.players[1].is_bot

    def test_insufficient_tiles(self, rng: random.Random) -> None:
        with pytest.raises(InsufficientTilesError):
            deal_round(RuleSet.all_fives(), ["A", "B", "C", "D", "E"], rng)
