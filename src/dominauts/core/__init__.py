"""Core domain layer: pure domino rules with zero external dependencies.

Quick start::

    import random
    from dominauts.core import MoveApplier, MoveValidator, RuleSet, deal_round

    state = deal_round(RuleSet.all_fives(), ["alice", "bob"], random.Random(7))
    move = MoveValidator(state).generate_legal_moves()[0]
    state = MoveApplier().apply(move, state)
"""

from dominauts.core.applier import MoveApplier, replay, replay_history
from dominauts.core.board import (
    MEXICAN,
    OPENING,
    OPENING_END,
    BoardState,
    Branch,
    ChickenFootBoard,
    EndRef,
    LinearBoard,
    SpinnerBoard,
    TrainBoard,
    new_board,
)
from dominauts.core.end_conditions import EndConditionDetector, is_match_over, match_leader
from dominauts.core.enums import ErrorKind, MoveType, Phase, TiePolicy, Variant
from dominauts.core.errors import (
    DominoError,
    IllegalMoveError,
    InsufficientTilesError,
    InvalidPhaseTransition,
    SessionNotFound,
)
from dominauts.core.move import TERMINAL_MOVES, Draw, Move, Pass, PlaceTile, Resign, Timeout
from dominauts.core.notation import (
    move_from_dict,
    move_to_dict,
    move_to_text,
    moves_to_text,
    parse_move,
    parse_moves,
    parse_tiles,
    tiles_to_text,
)
from dominauts.core.rules import RuleSet
from dominauts.core.scores import Blocked, Domination, Forfeit, ScoreDelta, Terminal
from dominauts.core.scoring import ScoringEngine, round_to_five, scoring_for
from dominauts.core.state import MoveRecord, PlayerState, SessionState, deal_round
from dominauts.core.tile import Tile, hand_pips
from dominauts.core.tileset import Deal, deal, generate, highest_double, set_size, shuffle
from dominauts.core.validator import MoveValidator

__all__ = [
    # Enums / errors
    "ErrorKind",
    "MoveType",
    "Phase",
    "TiePolicy",
    "Variant",
    "DominoError",
    "IllegalMoveError",
    "InsufficientTilesError",
    "InvalidPhaseTransition",
    "SessionNotFound",
    # Tiles
    "Deal",
    "Tile",
    "deal",
    "generate",
    "hand_pips",
    "highest_double",
    "set_size",
    "shuffle",
    # Boards
    "MEXICAN",
    "OPENING",
    "OPENING_END",
    "BoardState",
    "Branch",
    "ChickenFootBoard",
    "EndRef",
    "LinearBoard",
    "SpinnerBoard",
    "TrainBoard",
    "new_board",
    # Moves / state
    "TERMINAL_MOVES",
    "Draw",
    "Move",
    "MoveRecord",
    "Pass",
    "PlaceTile",
    "PlayerState",
    "Resign",
    "RuleSet",
    "SessionState",
    "Timeout",
    "deal_round",
    # Rules
    "EndConditionDetector",
    "MoveApplier",
    "MoveValidator",
    "ScoringEngine",
    "is_match_over",
    "match_leader",
    "replay",
    "replay_history",
    "round_to_five",
    "scoring_for",
    # Outcomes
    "Blocked",
    "Domination",
    "Forfeit",
    "ScoreDelta",
    "Terminal",
    # Notation
    "move_from_dict",
    "move_to_dict",
    "move_to_text",
    "moves_to_text",
    "parse_move",
    "parse_moves",
    "parse_tiles",
    "tiles_to_text",
]
