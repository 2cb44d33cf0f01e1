"""Tests for the wire models."""

from __future__ import annotations

import pytest

from dominauts.core.board import OPENING, LinearBoard
from dominauts.core.enums import ErrorKind, Phase, Variant
from dominauts.core.move import Draw, PlaceTile
from dominauts.core.notation import parse_tiles
from dominauts.core.rules import RuleSet
from dominauts.core.scores import Domination, Forfeit, ScoreDelta
from dominauts.core.state import SessionState
from dominauts.core.tile import Tile
from dominauts.engine.models import SkillLevel
from dominauts.game.protocol import (
    HintRequest,
    MatchResult,
    MoveRequest,
    MoveResult,
    SessionSnapshot,
)


def _make_state() -> SessionState:
    return SessionState.from_hands(
        RuleSet.all_fives(),
        {"A": parse_tiles("1-2 3-4"), "B": parse_tiles("0-0")},
        boneyard=parse_tiles("5-5 6-6"),
        board=LinearBoard().place(Tile(2, 3), OPENING),
        bots=["B"],
    )


class TestMoveRequest:
    def test_from_dict(self) -> None:
        request = MoveRequest.from_dict(
            {
                "sessionId": "s1",
                "playerId": "A",
                "move": {"type": "place_tile", "tileId": "1-2", "endRef": "left"},
            }
        )
        assert request.session_id == "s1"
        assert request.move == PlaceTile("A", Tile(1, 2), "left")

    def test_simple_move(self) -> None:
        request = MoveRequest.from_dict(
            {"sessionId": "s1", "playerId": "B", "move": {"type": "draw"}}
        )
        assert request.move == Draw("B")

    @pytest.mark.parametrize(
        "data",
        [
            {"playerId": "A", "move": {"type": "draw"}},
            {"sessionId": "s1", "move": {"type": "draw"}},
            {"sessionId": "s1", "playerId": "A"},
            {"sessionId": "s1", "playerId": "A", "move": "draw"},
            {"sessionId": "s1", "playerId": "A", "move": {"type": "fly"}},
        ],
    )
    def test_malformed(self, data: dict[str, object]) -> None:
        with pytest.raises(ValueError):
            MoveRequest.from_dict(data)


class TestHintRequest:
    def test_default_skill(self) -> None:
        request = HintRequest.from_dict({"sessionId": "s1", "playerId": "A"})
        assert request.skill == SkillLevel.INTERMEDIATE

    def test_advanced_alias(self) -> None:
        request = HintRequest.from_dict(
            {"sessionId": "s1", "playerId": "A", "skillLevel": "advanced"}
        )
        assert request.skill == SkillLevel.EXPERT


class TestSessionSnapshot:
    def test_only_viewer_sees_hand(self) -> None:
        snap = SessionSnapshot.from_state(_make_state(), session_id="s1", viewer_id="A")
        assert snap.players[0].hand == ("1-2", "3-4")
        assert snap.players[1].hand is None
        assert snap.players[1].hand_count == 1
        assert snap.players[1].is_bot

    def test_to_dict(self) -> None:
        data = SessionSnapshot.from_state(
            _make_state(), session_id="s1", viewer_id="B", phase=Phase.RESOLVING
        ).to_dict()
        assert data["sessionId"] == "s1"
        assert data["variant"] == Variant.ALL_FIVES.value
        assert data["phase"] == "resolving"
        assert data["boneyardCount"] == 2
        assert data["currentTurnIndex"] == 0
        assert data["board"]["origin"] == "2-3"
        assert "hand" not in data["players"][0]
        assert data["players"][1]["hand"] == ["0-0"]


class TestResults:
    def test_rejected(self) -> None:
        data = MoveResult.rejected(ErrorKind.NOT_YOUR_TURN, None).to_dict()
        assert data == {"accepted": False, "session": None, "reason": "not_your_turn"}

    def test_accepted_with_terminal(self) -> None:
        result = MoveResult(
            accepted=True,
            session=None,
            score_deltas=(ScoreDelta("A", 10, "domination"),),
            terminal=Domination("A"),
        )
        data = result.to_dict()
        assert data["scoreDelta"] == [
            {"playerId": "A", "points": 10, "reason": "domination"}
        ]
        assert data["terminal"] == {"type": "domination", "winner": "A"}
        assert "reason" not in data

    def test_match_result(self) -> None:
        result = MatchResult(
            winner="B",
            match_scores=(("A", 0), ("B", 40)),
            rounds_played=2,
            six_love=True,
            forfeit=Forfeit("A", "resign"),
        )
        assert result.to_dict() == {
            "winner": "B",
            "matchScores": {"A": 0, "B": 40},
            "roundsPlayed": 2,
            "sixLove": True,
            "forfeit": {"type": "forfeit", "playerId": "A", "reason": "resign"},
        }
