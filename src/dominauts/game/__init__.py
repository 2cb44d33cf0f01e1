"""Game management layer: session state machine, players, clock, protocol.

Quick start::

    from dominauts.core import RuleSet
    from dominauts.game import BotPlayer, GameSession, HumanPlayer

    session = GameSession(
        RuleSet.all_fives(),
        [HumanPlayer("alice"), BotPlayer("bot")],
    )
    session.start()
    result = session.submit(move)
"""

from dominauts.game.clock import ClockSnapshot, TurnClock
from dominauts.game.interfaces import IGameSession, IPlayer, ITurnClock
from dominauts.game.player import BotPlayer, HumanPlayer
from dominauts.game.protocol import (
    HintRequest,
    MatchResult,
    MoveRequest,
    MoveResult,
    PlayerView,
    SessionSnapshot,
)
from dominauts.game.registry import SessionRegistry
from dominauts.game.session import GameSession, SessionEvents

__all__ = [
    # Interfaces
    "IGameSession",
    "IPlayer",
    "ITurnClock",
    # Concrete
    "BotPlayer",
    "ClockSnapshot",
    "GameSession",
    "HumanPlayer",
    "SessionEvents",
    "SessionRegistry",
    "TurnClock",
    # Wire models
    "HintRequest",
    "MatchResult",
    "MoveRequest",
    "MoveResult",
    "PlayerView",
    "SessionSnapshot",
]
