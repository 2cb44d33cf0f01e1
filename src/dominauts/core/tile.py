"""Tile value object."""

from __future__ import annotations

from dataclasses import dataclass

_SEPARATORS = ("|", ":", ",")


@dataclass(frozen=True, slots=True, order=True)
class Tile:
    """Immutable domino tile, normalised so that ``left <= right``."""

    left: int
    right: int

    def __post_init__(self) -> None:
        if self.left < 0 or self.right < 0:
            raise ValueError(f"Pips must be non-negative: {self.left}-{self.right}")
        if self.left > self.right:
            raise ValueError(
                f"Tile must be normalised (left <= right): {self.left}-{self.right}"
            )

    @classmethod
    def of(cls, a: int, b: int) -> Tile:
        """Build a tile from two pips in any order."""
        return cls(a, b) if a <= b else cls(b, a)

    @classmethod
    def parse(cls, text: str) -> Tile:
        """Parse ``"6-6"``, ``"[3|5]"`` or ``"35"`` into a tile."""
        s = text.strip().strip("[]").replace(" ", "")
        for sep in _SEPARATORS:
            s = s.replace(sep, "-")
        try:
            if "-" in s:
                a, b = s.split("-", 1)
                return cls.of(int(a), int(b))
            if len(s) == 2 and s.isdigit():
                return cls.of(int(s[0]), int(s[1]))
        except ValueError:
            pass
        raise ValueError(f"Cannot parse tile: {text!r}")

    # ── Queries ──────────────────────────────────────────────────────────

    @property
    def id(self) -> str:
        return f"{self.left}-{self.right}"

    @property
    def is_double(self) -> bool:
        return self.left == self.right

    @property
    def pips(self) -> int:
        """Total pip count (used for hand values and risk)."""
        return self.left + self.right

    def has(self, pip: int) -> bool:
        return self.left == pip or self.right == pip

    def other(self, pip: int) -> int:
        """The face left exposed when this tile is matched against *pip*."""
        if self.left == pip:
            return self.right
        if self.right == pip:
            return self.left
        raise ValueError(f"{self.id} does not contain {pip}")

    def __str__(self) -> str:
        return self.id


def hand_pips(tiles: tuple[Tile, ...] | list[Tile]) -> int:
    """Pip-sum of a collection of tiles."""
    return sum(t.pips for t in tiles)
