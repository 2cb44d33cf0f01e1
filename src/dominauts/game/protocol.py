"""Wire models exchanged with the transport layer.

Mappings use camelCase keys.  Snapshots never reveal another player's
hand: only the requesting viewer sees tile ids, everybody else a count.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from dominauts.core.enums import ErrorKind, Phase, Variant
from dominauts.core.move import Move
from dominauts.core.notation import move_from_dict
from dominauts.core.scores import Forfeit, ScoreDelta, Terminal
from dominauts.core.state import SessionState
from dominauts.engine.models import SkillLevel


def _require(data: Mapping[str, Any], key: str) -> Any:
    try:
        return data[key]
    except KeyError:
        raise ValueError(f"Missing field {key!r}") from None


# ── Requests ─────────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class MoveRequest:
    session_id: str
    player_id: str
    move: Move

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> MoveRequest:
        """Decode ``{"sessionId", "playerId", "move": {...}}``.

        Raises:
            ValueError: a field is missing or malformed.
        """
        player_id = str(_require(data, "playerId"))
        move = _require(data, "move")
        if not isinstance(move, Mapping):
            raise ValueError("'move' must be a mapping")
        return cls(
            session_id=str(_require(data, "sessionId")),
            player_id=player_id,
            move=move_from_dict(player_id, move),
        )


@dataclass(frozen=True, slots=True)
class HintRequest:
    session_id: str
    player_id: str
    skill: SkillLevel = SkillLevel.INTERMEDIATE

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> HintRequest:
        skill = data.get("skillLevel")
        return cls(
            session_id=str(_require(data, "sessionId")),
            player_id=str(_require(data, "playerId")),
            skill=SkillLevel.parse(str(skill)) if skill else SkillLevel.INTERMEDIATE,
        )


# ── Snapshots ────────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class PlayerView:
    """One seat as exposed on the wire."""

    id: str
    hand_count: int
    score: int
    round_score: int
    is_bot: bool
    # Tile ids, present only for the viewer's own seat.
    hand: tuple[str, ...] | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "handCount": self.hand_count,
            "score": self.score,
            "roundScore": self.round_score,
            "isBot": self.is_bot,
        }
        if self.hand is not None:
            data["hand"] = list(self.hand)
        return data


@dataclass(frozen=True, slots=True)
class SessionSnapshot:
    """Read-only view of a session for one viewer."""

    session_id: str
    variant: Variant
    phase: Phase
    round_number: int
    players: tuple[PlayerView, ...]
    board: Mapping[str, Any]
    boneyard_count: int
    current_turn_index: int
    history_length: int

    @classmethod
    def from_state(
        cls,
        state: SessionState,
        *,
        session_id: str = "",
        viewer_id: str | None = None,
        phase: Phase | None = None,
    ) -> SessionSnapshot:
        players = tuple(
            PlayerView(
                id=p.id,
                hand_count=len(p.hand),
                score=state.match_scores[i],
                round_score=state.round_scores[i],
                is_bot=p.is_bot,
                hand=tuple(t.id for t in p.hand) if p.id == viewer_id else None,
            )
            for i, p in enumerate(state.players)
        )
        return cls(
            session_id=session_id,
            variant=state.variant,
            phase=state.phase if phase is None else phase,
            round_number=state.round_number,
            players=players,
            board=state.board.to_dict(),
            boneyard_count=len(state.boneyard),
            current_turn_index=state.current_turn_index,
            history_length=len(state.history),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "sessionId": self.session_id,
            "variant": self.variant.value,
            "phase": str(self.phase),
            "roundNumber": self.round_number,
            "players": [p.to_dict() for p in self.players],
            "board": dict(self.board),
            "boneyardCount": self.boneyard_count,
            "currentTurnIndex": self.current_turn_index,
            "historyLength": self.history_length,
        }


# ── Results ──────────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class MoveResult:
    """Outcome of a submitted move."""

    accepted: bool
    session: SessionSnapshot | None
    reason: ErrorKind | None = None
    score_deltas: tuple[ScoreDelta, ...] = ()
    terminal: Terminal | None = None

    @classmethod
    def rejected(cls, reason: ErrorKind, session: SessionSnapshot | None) -> MoveResult:
        return cls(accepted=False, session=session, reason=reason)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "accepted": self.accepted,
            "session": self.session.to_dict() if self.session else None,
        }
        if self.reason is not None:
            data["reason"] = self.reason.value
        if self.score_deltas:
            data["scoreDelta"] = [d.to_dict() for d in self.score_deltas]
        if self.terminal is not None:
            data["terminal"] = self.terminal.to_dict()
        return data


@dataclass(frozen=True, slots=True)
class MatchResult:
    """Final standings of a match."""

    winner: str | None
    match_scores: tuple[tuple[str, int], ...]
    rounds_played: int
    # Every opponent still on zero points.
    six_love: bool = False
    forfeit: Forfeit | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "winner": self.winner,
            "matchScores": {pid: score for pid, score in self.match_scores},
            "roundsPlayed": self.rounds_played,
            "sixLove": self.six_love,
            "forfeit": self.forfeit.to_dict() if self.forfeit else None,
        }
