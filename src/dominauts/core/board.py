"""Board layouts: immutable graphs of placed tiles and their open ends.

Every layout is a frozen value: :meth:`BoardState.place` returns a new board
and never touches the receiver, so snapshots can be shared freely between the
session, the validator and the advisor.

Ends are addressed by branch name:

* linear chains: ``"left"`` / ``"right"`` (plus ``"up"`` / ``"down"`` for the
  Cuban spinner arms),
* Chicken Foot: ``"b1"`` .. ``"bN"`` off the spinner, ``"<branch>.<n>"`` for
  the toes of a foot grown by a later double,
* Mexican Train: the owning player id, or ``"mexican"`` for the shared train.

An empty board exposes a single :data:`OPENING_END` that accepts any tile.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any

from dominauts.core.enums import ErrorKind, Variant
from dominauts.core.errors import IllegalMoveError
from dominauts.core.tile import Tile

if TYPE_CHECKING:
    from dominauts.core.rules import RuleSet

OPENING = "center"
MEXICAN = "mexican"


@dataclass(frozen=True, slots=True)
class EndRef:
    """An open end: the branch it belongs to and the pip it accepts."""

    branch: str
    value: int | None

    def accepts(self, tile: Tile) -> bool:
        return self.value is None or tile.has(self.value)

    def __str__(self) -> str:
        return self.branch if self.value is None else f"{self.branch}:{self.value}"


OPENING_END = EndRef(OPENING, None)


@dataclass(frozen=True, slots=True)
class Placement:
    """A tile laid in a chain; *inner* is the pip touching its predecessor."""

    tile: Tile
    inner: int

    @property
    def outer(self) -> int:
        return self.tile.other(self.inner)


@dataclass(frozen=True, slots=True)
class Branch:
    """A chain growing from an anchor pip."""

    name: str
    anchor: int
    tiles: tuple[Placement, ...] = ()
    closed: bool = False

    @property
    def started(self) -> bool:
        return bool(self.tiles)

    @property
    def open_value(self) -> int:
        return self.tiles[-1].outer if self.tiles else self.anchor

    @property
    def last_tile(self) -> Tile | None:
        return self.tiles[-1].tile if self.tiles else None

    def extended(self, tile: Tile) -> Branch:
        return replace(self, tiles=self.tiles + (Placement(tile, self.open_value),))

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "anchor": self.anchor,
            "tiles": [p.tile.id for p in self.tiles],
            "openValue": self.open_value,
            "closed": self.closed,
        }


# ── Abstract board ───────────────────────────────────────────────────────────


class BoardState(ABC):
    """Interface shared by every layout."""

    __slots__ = ()

    @property
    @abstractmethod
    def tiles(self) -> tuple[Tile, ...]:
        """Every tile on the table."""

    @abstractmethod
    def open_ends(self, player_id: str | None = None) -> tuple[EndRef, ...]:
        """Ends currently accepting a tile (as seen by *player_id*)."""

    @abstractmethod
    def end_tile(self, branch: str) -> Tile | None:
        """The tile occupying the end of *branch* (``None`` if unstarted)."""

    @abstractmethod
    def _placed(self, tile: Tile, end: EndRef, player_id: str | None) -> BoardState:
        """Return the board with *tile* laid on *end* (already checked)."""

    @abstractmethod
    def to_dict(self) -> dict[str, Any]: ...

    # ── Shared behaviour ─────────────────────────────────────────────────

    @property
    def is_empty(self) -> bool:
        return not self.tiles

    def find_end(self, branch: str, player_id: str | None = None) -> EndRef | None:
        for end in self.open_ends(player_id):
            if end.branch == branch:
                return end
        return None

    def check(
        self, tile: Tile, branch: str, player_id: str | None = None
    ) -> ErrorKind | None:
        """Why *tile* cannot go on *branch*, or ``None`` if it can."""
        end = self.find_end(branch, player_id)
        if end is None:
            return ErrorKind.END_NOT_OPEN
        if not end.accepts(tile):
            return ErrorKind.PIP_MISMATCH
        return self._check_branch(tile, end)

    def _check_branch(self, tile: Tile, end: EndRef) -> ErrorKind | None:
        """Variant-specific branching restrictions."""
        return None

    def place(self, tile: Tile, branch: str, player_id: str | None = None) -> BoardState:
        """Lay *tile* on *branch* and return the new board.

        Raises:
            IllegalMoveError: the placement breaks the layout rules.
        """
        reason = self.check(tile, branch, player_id)
        if reason is not None:
            raise IllegalMoveError(reason, f"Cannot place {tile} on {branch}")
        end = self.find_end(branch, player_id)
        assert end is not None
        return self._placed(tile, end, player_id)

    def scoring_values(self, doubles_twice: bool = False) -> tuple[int, ...]:
        """Pip values counted by end-sum scoring (All Fives)."""
        out: list[int] = []
        for end in self.open_ends():
            if end.value is None:
                continue
            occupant = self.end_tile(end.branch)
            if doubles_twice and occupant is not None and occupant.is_double:
                out.append(end.value * 2)
            else:
                out.append(end.value)
        return tuple(out)

    def copies_played(self, pip: int) -> int:
        """How many tiles bearing *pip* are already on the table."""
        return sum(1 for t in self.tiles if t.has(pip))


# ── Linear chain (All Fives, Block) ──────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class LinearBoard(BoardState):
    """Two-ended line of play."""

    origin: Tile | None = None
    left: Branch | None = None
    right: Branch | None = None

    @property
    def tiles(self) -> tuple[Tile, ...]:
        if self.origin is None:
            return ()
        return (
            (self.origin,)
            + tuple(p.tile for p in self._branch("left").tiles)
            + tuple(p.tile for p in self._branch("right").tiles)
        )

    def open_ends(self, player_id: str | None = None) -> tuple[EndRef, ...]:
        if self.origin is None:
            return (OPENING_END,)
        return (
            EndRef("left", self._branch("left").open_value),
            EndRef("right", self._branch("right").open_value),
        )

    def end_tile(self, branch: str) -> Tile | None:
        b = self._branch(branch)
        return b.last_tile if b.started else self.origin

    def scoring_values(self, doubles_twice: bool = False) -> tuple[int, ...]:
        # An opening double is one tile: its two faces already sum to its pips.
        if (
            doubles_twice
            and self.origin is not None
            and self.origin.is_double
            and not self._branch("left").started
            and not self._branch("right").started
        ):
            return (self.origin.pips,)
        return BoardState.scoring_values(self, doubles_twice)

    def _branch(self, name: str) -> Branch:
        branch = {"left": self.left, "right": self.right}.get(name)
        if branch is None:
            raise KeyError(name)
        return branch

    def _placed(self, tile: Tile, end: EndRef, player_id: str | None) -> BoardState:
        if self.origin is None:
            return replace(
                self,
                origin=tile,
                left=Branch("left", tile.left),
                right=Branch("right", tile.right),
            )
        if end.branch == "left":
            return replace(self, left=self._branch("left").extended(tile))
        return replace(self, right=self._branch("right").extended(tile))

    def to_dict(self) -> dict[str, Any]:
        return {
            "layout": "linear",
            "origin": self.origin.id if self.origin else None,
            "branches": [b.to_dict() for b in (self.left, self.right) if b],
            "openEnds": [_end_dict(e) for e in self.open_ends()],
        }


# ── Linear chain with a spinner (Cuban) ──────────────────────────────────────


@dataclass(frozen=True, slots=True)
class SpinnerBoard(LinearBoard):
    """Line of play whose first double becomes a four-way spinner.

    The spinner's ``up`` / ``down`` faces open once both of its linear sides
    are covered.  With *fill_required* no tile may extend ``left`` / ``right``
    while an opened face is still bare.
    """

    spinner: Tile | None = None
    # Branch holding the spinner ("center" when it opened the round).
    spinner_branch: str | None = None
    spinner_index: int = -1
    up: Branch | None = None
    down: Branch | None = None
    fill_required: bool = False

    @property
    def tiles(self) -> tuple[Tile, ...]:
        arms = tuple(
            p.tile for b in (self.up, self.down) if b is not None for p in b.tiles
        )
        return LinearBoard.tiles.fget(self) + arms  # type: ignore[attr-defined]

    @property
    def spinner_open(self) -> bool:
        """Both linear sides of the spinner are covered."""
        if self.spinner is None:
            return False
        if self.spinner_branch == OPENING:
            return self._branch("left").started and self._branch("right").started
        assert self.spinner_branch is not None
        return len(self._branch(self.spinner_branch).tiles) > self.spinner_index + 1

    def open_ends(self, player_id: str | None = None) -> tuple[EndRef, ...]:
        ends = LinearBoard.open_ends(self, player_id)
        if self.spinner_open:
            ends += tuple(
                EndRef(b.name, b.open_value)
                for b in (self.up, self.down)
                if b is not None
            )
        return ends

    def end_tile(self, branch: str) -> Tile | None:
        if branch in ("up", "down"):
            arm = self.up if branch == "up" else self.down
            assert arm is not None
            return arm.last_tile if arm.started else self.spinner
        return LinearBoard.end_tile(self, branch)

    def _check_branch(self, tile: Tile, end: EndRef) -> ErrorKind | None:
        if (
            self.fill_required
            and self.spinner_open
            and end.branch in ("left", "right")
            and not all(b is not None and b.started for b in (self.up, self.down))
        ):
            return ErrorKind.ILLEGAL_BRANCH
        return None

    def _placed(self, tile: Tile, end: EndRef, player_id: str | None) -> BoardState:
        if end.branch in ("up", "down"):
            arm = self.up if end.branch == "up" else self.down
            assert arm is not None
            return replace(self, **{end.branch: arm.extended(tile)})

        board = LinearBoard._placed(self, tile, end, player_id)
        assert isinstance(board, SpinnerBoard)
        if self.spinner is not None or not tile.is_double:
            return board
        if end.branch == OPENING:
            index = -1
        else:
            index = len(board._branch(end.branch).tiles) - 1
        return replace(
            board,
            spinner=tile,
            spinner_branch=end.branch,
            spinner_index=index,
            up=Branch("up", tile.left),
            down=Branch("down", tile.left),
        )

    def to_dict(self) -> dict[str, Any]:
        data = LinearBoard.to_dict(self)
        data["layout"] = "spinner"
        data["spinner"] = self.spinner.id if self.spinner else None
        data["branches"] += [b.to_dict() for b in (self.up, self.down) if b]
        return data


# ── Chicken Foot ─────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class ChickenFootBoard(BoardState):
    """Spinner with independent branches; doubles grow new feet.

    A branch closes once it holds *branch_cap* tiles, or when a double is
    laid on it (the double then sprouts *foot_size* toes).  ``pending`` lists
    the branches of the newest foot that are still bare.
    """

    spinner: Tile | None = None
    branches: tuple[Branch, ...] = ()
    pending: tuple[str, ...] = ()
    spinner_branches: int = 4
    branch_cap: int = 4
    foot_size: int = 3
    fill_required: bool = False

    @property
    def tiles(self) -> tuple[Tile, ...]:
        if self.spinner is None:
            return ()
        return (self.spinner,) + tuple(p.tile for b in self.branches for p in b.tiles)

    def open_ends(self, player_id: str | None = None) -> tuple[EndRef, ...]:
        if self.spinner is None:
            return (OPENING_END,)
        return tuple(EndRef(b.name, b.open_value) for b in self.branches if not b.closed)

    def end_tile(self, branch: str) -> Tile | None:
        b = self._branch(branch)
        if b.started:
            return b.last_tile
        if "." in branch:
            # A bare toe hangs off the double that closed its parent.
            return self._branch(branch.rsplit(".", 1)[0]).last_tile
        return self.spinner

    def _branch(self, name: str) -> Branch:
        for b in self.branches:
            if b.name == name:
                return b
        raise KeyError(name)

    def _check_branch(self, tile: Tile, end: EndRef) -> ErrorKind | None:
        if end.branch == OPENING:
            return None if tile.is_double else ErrorKind.ILLEGAL_OPENING
        if self.fill_required and self.pending and end.branch not in self.pending:
            return ErrorKind.ILLEGAL_BRANCH
        return None

    def _placed(self, tile: Tile, end: EndRef, player_id: str | None) -> BoardState:
        if self.spinner is None:
            branches = tuple(
                Branch(f"b{i + 1}", tile.left) for i in range(self.spinner_branches)
            )
            return replace(
                self,
                spinner=tile,
                branches=branches,
                pending=tuple(b.name for b in branches),
            )

        out: list[Branch] = []
        pending = tuple(p for p in self.pending if p != end.branch)
        for b in self.branches:
            if b.name != end.branch:
                out.append(b)
                continue
            grown = b.extended(tile)
            if tile.is_double:
                out.append(replace(grown, closed=True))
                toes = [
                    Branch(f"{b.name}.{i + 1}", tile.left) for i in range(self.foot_size)
                ]
                out.extend(toes)
                pending = tuple(t.name for t in toes)
            else:
                out.append(replace(grown, closed=len(grown.tiles) >= self.branch_cap))
        return replace(self, branches=tuple(out), pending=pending)

    def to_dict(self) -> dict[str, Any]:
        return {
            "layout": "chicken_foot",
            "spinner": self.spinner.id if self.spinner else None,
            "branches": [b.to_dict() for b in self.branches],
            "pending": list(self.pending),
            "openEnds": [_end_dict(e) for e in self.open_ends()],
        }


# ── Mexican Train ────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class TrainBoard(BoardState):
    """Hub double with a public Mexican train and one train per player."""

    hub: Tile
    trains: tuple[Branch, ...]
    public: frozenset[str] = frozenset()
    # Train ending in a double nobody has covered yet.
    pending_double: str | None = None
    satisfy_required: bool = False

    @classmethod
    def create(
        cls, hub: Tile, player_ids: Sequence[str], satisfy_required: bool = False
    ) -> TrainBoard:
        if not hub.is_double:
            raise ValueError("The hub must be a double")
        trains = (Branch(MEXICAN, hub.left),) + tuple(
            Branch(pid, hub.left) for pid in player_ids
        )
        return cls(hub=hub, trains=trains, satisfy_required=satisfy_required)

    @property
    def tiles(self) -> tuple[Tile, ...]:
        return (self.hub,) + tuple(p.tile for b in self.trains for p in b.tiles)

    def open_ends(self, player_id: str | None = None) -> tuple[EndRef, ...]:
        # An uncovered double is open to everybody until it is satisfied.
        def playable(name: str) -> bool:
            return (
                player_id is None
                or name in (MEXICAN, player_id, self.pending_double)
                or name in self.public
            )

        # Own train first, then the Mexican train, then the other public ones.
        ordered = sorted(
            (b for b in self.trains if playable(b.name)),
            key=lambda b: 0 if b.name == player_id else (1 if b.name == MEXICAN else 2),
        )
        return tuple(EndRef(b.name, b.open_value) for b in ordered)

    def end_tile(self, branch: str) -> Tile | None:
        b = self.train(branch)
        return b.last_tile if b.started else self.hub

    def train(self, name: str) -> Branch:
        for b in self.trains:
            if b.name == name:
                return b
        raise KeyError(name)

    def is_public(self, name: str) -> bool:
        return name == MEXICAN or name in self.public

    def mark_public(self, player_id: str) -> TrainBoard:
        self.train(player_id)
        return replace(self, public=self.public | {player_id})

    def _check_branch(self, tile: Tile, end: EndRef) -> ErrorKind | None:
        if (
            self.satisfy_required
            and self.pending_double is not None
            and end.branch != self.pending_double
        ):
            return ErrorKind.ILLEGAL_BRANCH
        return None

    def _placed(self, tile: Tile, end: EndRef, player_id: str | None) -> BoardState:
        trains = tuple(b.extended(tile) if b.name == end.branch else b for b in self.trains)
        public = self.public
        if player_id is not None and end.branch == player_id:
            public = public - {player_id}
        if tile.is_double:
            pending: str | None = end.branch
        elif end.branch == self.pending_double:
            pending = None
        else:
            pending = self.pending_double
        return replace(self, trains=trains, public=public, pending_double=pending)

    def to_dict(self) -> dict[str, Any]:
        return {
            "layout": "train",
            "hub": self.hub.id,
            "branches": [
                {**b.to_dict(), "public": self.is_public(b.name)} for b in self.trains
            ],
            "pendingDouble": self.pending_double,
            "openEnds": [_end_dict(e) for e in self.open_ends()],
        }


# ── Factory ──────────────────────────────────────────────────────────────────


def new_board(
    rules: RuleSet, player_ids: Sequence[str], hub: Tile | None = None
) -> BoardState:
    """Empty board for *rules* (Mexican Train needs the round's *hub*)."""
    if rules.variant in (Variant.ALL_FIVES, Variant.BLOCK):
        return LinearBoard()
    if rules.variant == Variant.CUBAN:
        return SpinnerBoard(fill_required=rules.spinner_fill_required)
    if rules.variant == Variant.CHICKEN_FOOT:
        return ChickenFootBoard(
            spinner_branches=rules.spinner_branches,
            branch_cap=rules.branch_cap,
            foot_size=rules.foot_size,
            fill_required=rules.spinner_fill_required,
        )
    if hub is None:
        raise ValueError("Mexican Train boards need a hub double")
    return TrainBoard.create(hub, player_ids, rules.double_must_be_satisfied)


def _end_dict(end: EndRef) -> dict[str, Any]:
    return {"branch": end.branch, "value": end.value}
