"""GameSession: the authoritative state machine of a domino match.

Coordinates: players, turn clock, validator, applier, scoring, end checks.
Emits events via simple callbacks so transports / tests can subscribe.
"""

from __future__ import annotations

import logging
import random
import threading
import uuid
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field

from dominauts.core.applier import MoveApplier
from dominauts.core.end_conditions import match_leader
from dominauts.core.enums import ErrorKind, Phase
from dominauts.core.errors import DominoError, IllegalMoveError, InvalidPhaseTransition
from dominauts.core.move import Move, Timeout
from dominauts.core.rules import RuleSet
from dominauts.core.scores import Forfeit, ScoreDelta, Terminal
from dominauts.core.scoring import scoring_for
from dominauts.core.state import MoveRecord, SessionState, deal_round
from dominauts.core.validator import MoveValidator
from dominauts.engine.advisor import MoveAdvisor
from dominauts.engine.models import Hint, IAdvisor, SkillLevel
from dominauts.game.clock import TurnClock
from dominauts.game.interfaces import IGameSession, IPlayer, ITurnClock
from dominauts.game.protocol import MatchResult, MoveResult, SessionSnapshot

_LOGGER = logging.getLogger(__name__)

# ── Event definitions ────────────────────────────────────────────────────────

MoveCallback = Callable[[MoveRecord, SessionState], None]
RoundOverCallback = Callable[[Terminal, list[ScoreDelta], SessionState], None]
MatchOverCallback = Callable[[MatchResult], None]
PhaseCallback = Callable[[Phase], None]


@dataclass
class SessionEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_move: list[MoveCallback] = field(default_factory=list)
    on_round_over: list[RoundOverCallback] = field(default_factory=list)
    on_match_over: list[MatchOverCallback] = field(default_factory=list)
    on_phase_changed: list[PhaseCallback] = field(default_factory=list)


# ── Session ──────────────────────────────────────────────────────────────────


class GameSession(IGameSession):
    """Orchestrates a full match: validates and resolves moves, scores
    rounds, deals the next round, notifies listeners.

    Single writer: ``submit`` holds a per-session lock while the move is in
    ``RESOLVING``; a second concurrent ``submit`` is rejected with
    ``invalid_phase_transition`` instead of being queued.  Readers (hints,
    snapshots) work on the last committed immutable state.
    """

    __slots__ = (
        "_session_id",
        "_rules",
        "_players",
        "_rng",
        "_advisor",
        "_applier",
        "_clock",
        "_lock",
        "_phase",
        "_state",
        "_round_start",
        "_terminal",
        "_match_result",
        "events",
    )

    def __init__(
        self,
        rules: RuleSet,
        players: Sequence[IPlayer],
        *,
        session_id: str | None = None,
        rng: random.Random | None = None,
        advisor: IAdvisor | None = None,
        clock: ITurnClock | None = None,
    ) -> None:
        if not rules.min_players <= len(players) <= rules.max_players:
            raise ValueError(
                f"{rules.variant} needs {rules.min_players}-{rules.max_players} "
                f"players, got {len(players)}"
            )
        if len({p.id for p in players}) != len(players):
            raise ValueError("Player ids must be unique")
        self._session_id = session_id or uuid.uuid4().hex
        self._rules = rules
        self._players = tuple(players)
        self._rng = rng or random.Random()
        self._advisor = advisor or MoveAdvisor()
        self._applier = MoveApplier(scoring_for(rules.variant))
        if clock is None and rules.turn_seconds is not None:
            clock = TurnClock(rules.turn_seconds)
        self._clock = clock
        self._lock = threading.Lock()
        self._phase = Phase.DEALING
        self._state: SessionState | None = None
        self._round_start: SessionState | None = None
        self._terminal: Terminal | None = None
        self._match_result: MatchResult | None = None
        self.events = SessionEvents()

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def session_id(self) -> str:
        return self._session_id

    @property
    def rules(self) -> RuleSet:
        return self._rules

    @property
    def players(self) -> tuple[IPlayer, ...]:
        return self._players

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def state(self) -> SessionState:
        """Last committed state.

        Raises:
            InvalidPhaseTransition: the session has not been dealt yet.
        """
        if self._state is None:
            raise InvalidPhaseTransition("Session has not started")
        return self._state

    @property
    def round_start(self) -> SessionState:
        """State as dealt at the start of the current round (for replay)."""
        if self._round_start is None:
            raise InvalidPhaseTransition("Session has not started")
        return self._round_start

    @property
    def terminal(self) -> Terminal | None:
        """How the last round ended (``None`` while it is still running)."""
        return self._terminal

    @property
    def match_result(self) -> MatchResult | None:
        return self._match_result

    @property
    def clock(self) -> ITurnClock | None:
        return self._clock

    @property
    def current_player(self) -> IPlayer | None:
        if self._state is None:
            return None
        return self._players[self._state.current_turn_index]

    # ── IGameSession impl ────────────────────────────────────────────────

    def start(self) -> SessionState:
        """Deal round 1.

        Raises:
            InvalidPhaseTransition: the session was already started.
            InsufficientTilesError: the tile set cannot supply every hand;
                the session stays in ``DEALING``.
        """
        if self._state is not None:
            raise InvalidPhaseTransition("Session already started")
        _LOGGER.info(
            "Session %s: starting %s match for %s",
            self._session_id,
            self._rules.variant,
            ", ".join(p.id for p in self._players),
        )
        self._deal(round_number=1, match_scores=(), next_seq=1)
        self._prompt_current_player()
        return self.state

    def restore(
        self, round_start: SessionState, history: Iterable[MoveRecord] = ()
    ) -> SessionState:
        """Resume from a dealt round and its recorded history.

        Used instead of :meth:`start` when a store rebuilds a session (for
        example after a reconnect) or to seat players at fixed hands.

        Raises:
            InvalidPhaseTransition: the session was already started.
            ValueError: *round_start* seats other players than the session.
            IllegalMoveError: *history* does not replay from *round_start*.
        """
        if self._state is not None:
            raise InvalidPhaseTransition("Session already started")
        if [p.id for p in round_start.players] != [p.id for p in self._players]:
            raise ValueError("Round seats do not match the session's players")
        if round_start.phase != Phase.AWAITING_MOVE:
            raise InvalidPhaseTransition(
                f"Cannot restore a round dealt in phase {round_start.phase}"
            )
        state = round_start
        for record in history:
            state = self._applier.apply(record.move, state)

        self._round_start = round_start
        if state is not round_start:
            announced = self._commit(state)
        else:
            self._state = state
            self._phase = Phase.AWAITING_MOVE
            if self._clock is not None:
                self._clock.start(state.current_player.id)
            announced = [Phase.AWAITING_MOVE]
        _LOGGER.info(
            "Session %s: restored round %d at seq %d (%s)",
            self._session_id,
            state.round_number,
            state.next_seq - 1,
            self._phase,
        )
        for phase in announced:
            self._notify_phase(phase)
        self._prompt_current_player()
        return state

    def submit(self, move: Move) -> MoveResult:
        if not self._lock.acquire(blocking=False):
            _LOGGER.debug(
                "Session %s: %s rejected, another move is resolving",
                self._session_id,
                move,
            )
            return MoveResult.rejected(
                ErrorKind.INVALID_PHASE_TRANSITION, self._snapshot_or_none(move.player_id)
            )
        try:
            result = self._resolve(move)
        finally:
            self._lock.release()
        if result.accepted and self._phase == Phase.AWAITING_MOVE:
            self._prompt_current_player()
        return result

    def start_next_round(self) -> SessionState:
        """Deal the next round.

        Raises:
            InvalidPhaseTransition: the current round is not over, or the
                match already ended.
        """
        if not self._lock.acquire(blocking=False):
            raise InvalidPhaseTransition("A move is resolving")
        try:
            if self._phase != Phase.ROUND_OVER or self._state is None:
                raise InvalidPhaseTransition(
                    f"Cannot start a new round from phase {self._phase}"
                )
            state = self._state
            self._deal(
                round_number=state.round_number + 1,
                match_scores=state.match_scores,
                next_seq=state.next_seq,
            )
        finally:
            self._lock.release()
        self._prompt_current_player()
        return self.state

    def hint(self, player_id: str, skill: SkillLevel | None = None) -> Hint:
        """Ranked advice for *player_id* on the last committed state.

        Raises:
            InvalidPhaseTransition: no round is in play.
            DominoError: *player_id* is not seated (``unknown_player``).
        """
        state = self.state
        if state.is_over:
            raise InvalidPhaseTransition(f"No moves to advise in phase {self._phase}")
        if state.index_of(player_id) is None:
            raise DominoError(ErrorKind.UNKNOWN_PLAYER, f"Unknown player {player_id!r}")
        return self._advisor.advise(state, player_id, skill)

    def snapshot(self, viewer_id: str | None = None) -> SessionSnapshot:
        return SessionSnapshot.from_state(
            self.state,
            session_id=self._session_id,
            viewer_id=viewer_id,
            phase=self._phase,
        )

    # ── Timers / bots ────────────────────────────────────────────────────

    def poll_clock(self) -> MoveResult | None:
        """Submit a ``Timeout`` for the current player once their turn expired."""
        clock = self._clock
        if clock is None or self._phase != Phase.AWAITING_MOVE or self._state is None:
            return None
        if not clock.is_expired():
            return None
        player_id = self._state.current_player.id
        _LOGGER.info("Session %s: %s ran out of time", self._session_id, player_id)
        return self.submit(Timeout(player_id))

    def run_bots(self, max_moves: int = 10_000) -> int:
        """Play bot turns synchronously until a human is to move.

        Stops at the end of the round.  Returns the number of moves played.
        """
        played = 0
        while played < max_moves and self._phase == Phase.AWAITING_MOVE:
            player = self.current_player
            assert player is not None
            move = player.choose_move(self.state)
            if move is None:
                break
            result = self.submit(move)
            if not result.accepted:
                raise IllegalMoveError(
                    result.reason or ErrorKind.INVALID_PHASE_TRANSITION,
                    f"Bot {player.id} chose an illegal move: {move}",
                )
            played += 1
        return played

    # ── Internal helpers ─────────────────────────────────────────────────

    def _deal(
        self, *, round_number: int, match_scores: Sequence[int], next_seq: int
    ) -> None:
        self._set_phase(Phase.DEALING)
        state = deal_round(
            self._rules,
            [p.id for p in self._players],
            self._rng,
            round_number=round_number,
            match_scores=match_scores,
            bots=[p.id for p in self._players if not p.is_human],
            next_seq=next_seq,
        )
        self._state = state
        self._round_start = state
        self._terminal = None
        _LOGGER.info(
            "Session %s: round %d dealt, %s opens",
            self._session_id,
            round_number,
            state.current_player.id,
        )
        self._set_phase(Phase.AWAITING_MOVE)
        if self._clock is not None:
            self._clock.start(state.current_player.id)

    def _resolve(self, move: Move) -> MoveResult:
        state = self._state
        if state is None or self._phase != Phase.AWAITING_MOVE:
            _LOGGER.debug(
                "Session %s: %s rejected in phase %s", self._session_id, move, self._phase
            )
            return MoveResult.rejected(
                ErrorKind.INVALID_PHASE_TRANSITION, self._snapshot_or_none(move.player_id)
            )

        reason = MoveValidator(state).check(move)
        if reason is not None:
            _LOGGER.debug(
                "Session %s: %s by %s rejected (%s)",
                self._session_id,
                move,
                move.player_id,
                reason,
            )
            return MoveResult.rejected(reason, self._snapshot_or_none(move.player_id))

        self._phase = Phase.RESOLVING
        if self._clock is not None:
            self._clock.stop()
        try:
            self._notify_phase(Phase.RESOLVING)
            new_state = self._applier.apply(move, state)
        except Exception:
            # Nothing was committed; the same player keeps the turn.
            self._phase = Phase.AWAITING_MOVE
            if self._clock is not None:
                self._clock.start(state.current_player.id)
            raise

        record = new_state.history[-1]
        announced = self._commit(new_state)
        _LOGGER.debug(
            "Session %s: seq %d %s by %s",
            self._session_id,
            record.seq,
            move,
            move.player_id,
        )

        # Listeners run only after the new phase is committed.
        for phase in announced:
            self._notify_phase(phase)
        self._emit_move(record, new_state)
        if record.terminal is not None:
            self._emit_round_over(record, new_state)
        return MoveResult(
            accepted=True,
            session=self.snapshot(move.player_id),
            score_deltas=record.score_deltas + record.round_deltas,
            terminal=record.terminal,
        )

    def _commit(self, new_state: SessionState) -> list[Phase]:
        """Install *new_state* and return the phases to announce."""
        self._state = new_state
        terminal = new_state.history[-1].terminal
        if terminal is None:
            self._phase = Phase.AWAITING_MOVE
            if self._clock is not None:
                self._clock.start(new_state.current_player.id)
            return [Phase.AWAITING_MOVE]

        self._terminal = terminal
        _LOGGER.info(
            "Session %s: round %d over (%s), scores %s",
            self._session_id,
            new_state.round_number,
            terminal,
            dict(zip((p.id for p in new_state.players), new_state.match_scores)),
        )
        if new_state.phase != Phase.MATCH_OVER:
            self._phase = Phase.ROUND_OVER
            return [Phase.ROUND_OVER]

        result = self._build_match_result(new_state, terminal)
        self._match_result = result
        self._phase = Phase.MATCH_OVER
        _LOGGER.info(
            "Session %s: match over, winner %s%s",
            self._session_id,
            result.winner,
            " (six-love)" if result.six_love else "",
        )
        return [Phase.ROUND_OVER, Phase.MATCH_OVER]

    def _build_match_result(self, state: SessionState, terminal: Terminal) -> MatchResult:
        ids = [p.id for p in state.players]
        scores = list(state.match_scores)
        forfeit = terminal if isinstance(terminal, Forfeit) else None
        if forfeit is not None:
            remaining = [i for i, pid in enumerate(ids) if pid != forfeit.player_id]
            winner = match_leader(
                [ids[i] for i in remaining], [scores[i] for i in remaining]
            )
        else:
            winner = match_leader(ids, scores)
        six_love = winner is not None and all(
            score == 0 for pid, score in zip(ids, scores) if pid != winner
        )
        return MatchResult(
            winner=winner,
            match_scores=tuple(zip(ids, scores)),
            rounds_played=state.round_number,
            six_love=six_love,
            forfeit=forfeit,
        )

    def _snapshot_or_none(self, viewer_id: str) -> SessionSnapshot | None:
        if self._state is None:
            return None
        return self.snapshot(viewer_id)

    def _prompt_current_player(self) -> None:
        """Ask the current player to move."""
        player = self.current_player
        if player is None or self._phase != Phase.AWAITING_MOVE:
            return
        player.request_move(self.state)

    def _emit_move(self, record: MoveRecord, state: SessionState) -> None:
        for cb in self.events.on_move:
            cb(record, state)

    def _emit_round_over(self, record: MoveRecord, state: SessionState) -> None:
        assert record.terminal is not None
        for cb in self.events.on_round_over:
            cb(record.terminal, list(record.round_deltas), state)
        if self._match_result is not None:
            for cb in self.events.on_match_over:
                cb(self._match_result)

    def _set_phase(self, phase: Phase) -> None:
        self._phase = phase
        self._notify_phase(phase)

    def _notify_phase(self, phase: Phase) -> None:
        for cb in self.events.on_phase_changed:
            cb(phase)
