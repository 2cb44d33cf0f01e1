"""Session registry: routes wire requests to live sessions by id."""

from __future__ import annotations

import logging
import random
import threading
from collections.abc import Iterator, Mapping, Sequence
from typing import Any

from dominauts.core.errors import SessionNotFound
from dominauts.core.rules import RuleSet
from dominauts.engine.models import Hint
from dominauts.game.interfaces import IPlayer
from dominauts.game.protocol import HintRequest, MoveRequest, MoveResult
from dominauts.game.session import GameSession

_LOGGER = logging.getLogger(__name__)


class SessionRegistry:
    """In-memory map of session id → :class:`GameSession`.

    The registry only routes; every session serializes its own moves.
    Persistence is the caller's concern (replay ``history`` to rebuild).
    """

    __slots__ = ("_sessions", "_lock")

    def __init__(self) -> None:
        self._sessions: dict[str, GameSession] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._sessions))

    # ── Lifecycle ────────────────────────────────────────────────────────

    def create(
        self,
        rules: RuleSet | Mapping[str, Any],
        players: Sequence[IPlayer],
        *,
        session_id: str | None = None,
        seed: int | None = None,
        start: bool = True,
    ) -> GameSession:
        """Create (and by default deal) a session.

        *rules* may be a :class:`RuleSet` or a configuration mapping as
        accepted by :meth:`RuleSet.from_mapping`.  A session whose deal
        fails is never registered.
        """
        if not isinstance(rules, RuleSet):
            rules = RuleSet.from_mapping(rules)
        session = GameSession(
            rules,
            players,
            session_id=session_id,
            rng=random.Random(seed),
        )
        if start:
            session.start()
        with self._lock:
            if session.session_id in self._sessions:
                raise ValueError(f"Session {session.session_id!r} already exists")
            self._sessions[session.session_id] = session
        _LOGGER.info(
            "Created session %s (%s, %d players)",
            session.session_id,
            rules.variant,
            len(players),
        )
        return session

    def get(self, session_id: str) -> GameSession:
        """Raises :class:`SessionNotFound` for unknown ids."""
        session = self._sessions.get(session_id)
        if session is None:
            _LOGGER.warning("Unknown session %s", session_id)
            raise SessionNotFound(session_id)
        return session

    def remove(self, session_id: str) -> GameSession:
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is None:
            _LOGGER.warning("Cannot remove unknown session %s", session_id)
            raise SessionNotFound(session_id)
        _LOGGER.info("Removed session %s", session_id)
        return session

    # ── Request routing ──────────────────────────────────────────────────

    def handle_move(self, request: MoveRequest | Mapping[str, Any]) -> MoveResult:
        if not isinstance(request, MoveRequest):
            request = MoveRequest.from_dict(request)
        return self.get(request.session_id).submit(request.move)

    def handle_hint(self, request: HintRequest | Mapping[str, Any]) -> Hint:
        if not isinstance(request, HintRequest):
            request = HintRequest.from_dict(request)
        return self.get(request.session_id).hint(request.player_id, request.skill)
