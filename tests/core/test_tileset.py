"""Tests for tiles, tile-set generation, shuffling and dealing."""

from __future__ import annotations

import random

import pytest

from dominauts.core.enums import ErrorKind
from dominauts.core.errors import InsufficientTilesError
from dominauts.core.tile import Tile, hand_pips
from dominauts.core.tileset import deal, generate, highest_double, set_size, shuffle


class TestTile:
    def test_of_normalises(self) -> None:
        assert Tile.of(5, 3) == Tile(3, 5)

    def test_unnormalised_rejected(self) -> None:
        with pytest.raises(ValueError):
            Tile(5, 3)

    def test_negative_rejected(self) -> None:
        with pytest.raises(ValueError):
            Tile(-1, 2)

    @pytest.mark.parametrize("text", ["3-5", "5-3", "[3|5]", "35", " 3 : 5 "])
    def test_parse(self, text: str) -> None:
        assert Tile.parse(text) == Tile(3, 5)

    def test_parse_garbage(self) -> None:
        with pytest.raises(ValueError):
            Tile.parse("x-y")

    def test_queries(self) -> None:
        tile = Tile(2, 6)
        assert tile.id == "2-6"
        assert str(tile) == "2-6"
        assert tile.pips == 8
        assert not tile.is_double
        assert tile.has(6) and not tile.has(3)
        assert tile.other(2) == 6
        assert Tile(4, 4).other(4) == 4

    def test_other_requires_pip(self) -> None:
        with pytest.raises(ValueError):
            Tile(1, 2).other(3)

    def test_hand_pips(self) -> None:
        assert hand_pips([Tile(1, 1), Tile(2, 2)]) == 6


class TestGenerate:
    def test_double_six_has_28_unique_tiles(self) -> None:
        tiles = generate(6)
        assert len(tiles) == 28 == set_size(6)
        assert len({t.id for t in tiles}) == 28

    def test_order_is_deterministic(self) -> None:
        tiles = generate(6)
        assert tiles[0] == Tile(0, 0)
        assert tiles[-1] == Tile(6, 6)
        assert tiles == sorted(tiles)

    @pytest.mark.parametrize("max_pip, size", [(9, 55), (12, 91)])
    def test_bigger_sets(self, max_pip: int, size: int) -> None:
        assert len(generate(max_pip)) == size == set_size(max_pip)


class TestShuffle:
    def test_is_permutation(self, rng: random.Random) -> None:
        tiles = generate(6)
        shuffled = shuffle(tiles, rng)
        assert sorted(shuffled) == tiles
        assert tiles == generate(6)  # input untouched

    def test_same_seed_same_order(self) -> None:
        a = shuffle(generate(6), random.Random(42))
        b = shuffle(generate(6), random.Random(42))
        assert a == b

    def test_different_seeds_differ(self) -> None:
        a = shuffle(generate(6), random.Random(1))
        b = shuffle(generate(6), random.Random(2))
        assert a != b


class TestDeal:
    def test_two_players_seven_tiles(self) -> None:
        tiles = generate(6)
        dealt = deal(tiles, 2, 7)
        assert [len(h) for h in dealt.hands] == [7, 7]
        assert len(dealt.boneyard) == 14

    def test_round_robin_from_front(self) -> None:
        tiles = generate(6)
        dealt = deal(tiles, 2, 7)
        assert dealt.hands[0][0] == tiles[0]
        assert dealt.hands[1][0] == tiles[1]
        assert dealt.boneyard == tuple(tiles[14:])

    def test_hands_and_boneyard_are_disjoint(self) -> None:
        dealt = deal(generate(6), 4, 7)
        everything = [t for h in dealt.hands for t in h] + list(dealt.boneyard)
        assert sorted(everything) == generate(6)

    def test_insufficient_tiles(self) -> None:
        with pytest.raises(InsufficientTilesError) as info:
            deal(generate(6), 5, 7)
        assert info.value.kind == ErrorKind.INSUFFICIENT_TILES
        assert info.value.needed == 35
        assert info.value.available == 28
        assert isinstance(info.value, ValueError)


class TestHighestDouble:
    def test_picks_highest(self) -> None:
        assert highest_double([Tile(1, 1), Tile(2, 5), Tile(4, 4)]) == Tile(4, 4)

    def test_none_without_doubles(self) -> None:
        assert highest_double([Tile(1, 2), Tile(3, 4)]) is None
