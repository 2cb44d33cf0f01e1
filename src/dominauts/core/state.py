"""Session state: the immutable snapshot every rule function operates on."""

from __future__ import annotations

import random
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, replace

from dominauts.core.board import BoardState, new_board
from dominauts.core.enums import Phase, Variant
from dominauts.core.move import Move
from dominauts.core.rules import RuleSet
from dominauts.core.scores import ScoreDelta, Terminal
from dominauts.core.tile import Tile, hand_pips
from dominauts.core.tileset import deal, generate, highest_double, shuffle


@dataclass(frozen=True, slots=True)
class PlayerState:
    """Engine view of a seated player."""

    id: str
    hand: tuple[Tile, ...] = ()
    is_bot: bool = False
    consecutive_passes: int = 0

    def holds(self, tile: Tile) -> bool:
        return tile in self.hand

    @property
    def hand_pips(self) -> int:
        return hand_pips(self.hand)

    def without(self, tile: Tile) -> PlayerState:
        hand = list(self.hand)
        hand.remove(tile)
        return replace(self, hand=tuple(hand))


@dataclass(frozen=True, slots=True)
class MoveRecord:
    """A single entry in the round history.

    The move that ends a round also carries how it ended and the round-end
    deltas, so the history alone rebuilds the final scores.
    """

    seq: int
    move: Move
    score_deltas: tuple[ScoreDelta, ...] = ()
    terminal: Terminal | None = None
    round_deltas: tuple[ScoreDelta, ...] = ()


@dataclass(frozen=True, slots=True)
class SessionState:
    """Everything the rules need to know about a round in progress.

    Instances are never mutated; the applier returns fresh copies.
    """

    rules: RuleSet
    players: tuple[PlayerState, ...]
    board: BoardState
    boneyard: tuple[Tile, ...] = ()
    current_turn_index: int = 0
    phase: Phase = Phase.AWAITING_MOVE
    round_number: int = 1
    round_scores: tuple[int, ...] = field(default=())
    match_scores: tuple[int, ...] = field(default=())
    history: tuple[MoveRecord, ...] = ()
    draws_this_turn: int = 0
    next_seq: int = 1

    def __post_init__(self) -> None:
        n = len(self.players)
        if n == 0:
            raise ValueError("A session needs at least one player")
        if len({p.id for p in self.players}) != n:
            raise ValueError("Player ids must be unique")
        if not self.round_scores:
            object.__setattr__(self, "round_scores", (0,) * n)
        if not self.match_scores:
            object.__setattr__(self, "match_scores", (0,) * n)
        if len(self.round_scores) != n or len(self.match_scores) != n:
            raise ValueError("Score tables must have one entry per player")
        if not 0 <= self.current_turn_index < n:
            raise ValueError("current_turn_index out of range")

    # ── Construction ─────────────────────────────────────────────────────

    @classmethod
    def from_hands(
        cls,
        rules: RuleSet,
        hands: Mapping[str, Sequence[Tile]],
        *,
        boneyard: Sequence[Tile] = (),
        board: BoardState | None = None,
        current: int = 0,
        bots: Sequence[str] = (),
        hub: Tile | None = None,
    ) -> SessionState:
        """Build a state from explicit hands (reconstruction and fixtures)."""
        ids = list(hands)
        players = tuple(
            PlayerState(pid, tuple(hand), is_bot=pid in bots)
            for pid, hand in hands.items()
        )
        if board is None:
            board = new_board(rules, ids, hub)
        return cls(
            rules=rules,
            players=players,
            board=board,
            boneyard=tuple(boneyard),
            current_turn_index=current,
        )

    # ── Queries ──────────────────────────────────────────────────────────

    @property
    def current_player(self) -> PlayerState:
        return self.players[self.current_turn_index]

    @property
    def player_count(self) -> int:
        return len(self.players)

    @property
    def variant(self) -> Variant:
        return self.rules.variant

    def index_of(self, player_id: str) -> int | None:
        for i, p in enumerate(self.players):
            if p.id == player_id:
                return i
        return None

    def player(self, player_id: str) -> PlayerState:
        index = self.index_of(player_id)
        if index is None:
            raise KeyError(player_id)
        return self.players[index]

    @property
    def tiles_in_hands(self) -> int:
        return sum(len(p.hand) for p in self.players)

    def all_tiles(self) -> list[Tile]:
        """Board, hands and boneyard together (conservation checks)."""
        out = list(self.board.tiles)
        for p in self.players:
            out.extend(p.hand)
        out.extend(self.boneyard)
        return out

    def tile_count(self) -> int:
        return len(self.all_tiles())

    @property
    def is_over(self) -> bool:
        return self.phase in (Phase.ROUND_OVER, Phase.MATCH_OVER)

    # ── Copy helpers ─────────────────────────────────────────────────────

    def with_player(self, index: int, player: PlayerState) -> SessionState:
        players = self.players[:index] + (player,) + self.players[index + 1 :]
        return replace(self, players=players)

    def with_phase(self, phase: Phase) -> SessionState:
        return replace(self, phase=phase)


def deal_round(
    rules: RuleSet,
    player_ids: Sequence[str],
    rng: random.Random,
    *,
    round_number: int = 1,
    match_scores: Sequence[int] = (),
    bots: Sequence[str] = (),
    next_seq: int = 1,
) -> SessionState:
    """Shuffle, deal and seat a fresh round.

    Mexican Train sets the round's engine double aside as the hub before
    shuffling.  The first player is the holder of the highest double
    (Mexican Train rotates instead).

    Raises:
        InsufficientTilesError: not enough tiles for every hand.
    """
    tiles = generate(rules.max_pip)
    hub: Tile | None = None
    if rules.variant == Variant.MEXICAN_TRAIN:
        pip = rules.engine_pip(round_number)
        hub = Tile(pip, pip)
        tiles.remove(hub)

    dealt = deal(shuffle(tiles, rng), len(player_ids), rules.hand_size)
    players = tuple(
        PlayerState(pid, hand, is_bot=pid in bots)
        for pid, hand in zip(player_ids, dealt.hands)
    )
    return SessionState(
        rules=rules,
        players=players,
        board=new_board(rules, player_ids, hub),
        boneyard=dealt.boneyard,
        current_turn_index=_first_player(rules, players, round_number),
        phase=Phase.AWAITING_MOVE,
        round_number=round_number,
        match_scores=tuple(match_scores),
        next_seq=next_seq,
    )


def _first_player(
    rules: RuleSet, players: Sequence[PlayerState], round_number: int
) -> int:
    if rules.variant == Variant.MEXICAN_TRAIN:
        return (round_number - 1) % len(players)
    best = -1
    first = 0
    for i, p in enumerate(players):
        double = highest_double(p.hand)
        if double is not None and double.left > best:
            best = double.left
            first = i
    return first
