"""Tile set generation, shuffling and dealing."""

from __future__ import annotations

import random
from collections.abc import Sequence
from dataclasses import dataclass

from dominauts.core.errors import InsufficientTilesError
from dominauts.core.tile import Tile


@dataclass(frozen=True, slots=True)
class Deal:
    """Result of dealing: one hand per player plus the undealt boneyard."""

    hands: tuple[tuple[Tile, ...], ...]
    boneyard: tuple[Tile, ...]


def set_size(max_pip: int) -> int:
    """Number of tiles in a double-*max_pip* set (28 for double-six)."""
    return (max_pip + 1) * (max_pip + 2) // 2


def generate(max_pip: int = 6) -> list[Tile]:
    """Every unordered pip pair exactly once, in ascending order."""
    if max_pip < 0:
        raise ValueError("max_pip must be >= 0")
    return [Tile(a, b) for a in range(max_pip + 1) for b in range(a, max_pip + 1)]


def shuffle(tiles: Sequence[Tile], rng: random.Random) -> list[Tile]:
    """Uniform Fisher-Yates permutation driven by the injected *rng*."""
    out = list(tiles)
    for i in range(len(out) - 1, 0, -1):
        j = rng.randint(0, i)
        out[i], out[j] = out[j], out[i]
    return out


def deal(tiles: Sequence[Tile], player_count: int, hand_size: int) -> Deal:
    """Deal *hand_size* tiles round-robin to *player_count* players.

    Raises:
        InsufficientTilesError: the set is too small for the requested deal.
    """
    if player_count <= 0 or hand_size < 0:
        raise ValueError("player_count must be > 0 and hand_size >= 0")
    needed = player_count * hand_size
    if needed > len(tiles):
        raise InsufficientTilesError(needed, len(tiles))

    hands: list[list[Tile]] = [[] for _ in range(player_count)]
    for i in range(needed):
        hands[i % player_count].append(tiles[i])
    return Deal(
        hands=tuple(tuple(h) for h in hands),
        boneyard=tuple(tiles[needed:]),
    )


def highest_double(tiles: Sequence[Tile]) -> Tile | None:
    """The highest double among *tiles*, or ``None``."""
    doubles = [t for t in tiles if t.is_double]
    return max(doubles, key=lambda t: t.left) if doubles else None
