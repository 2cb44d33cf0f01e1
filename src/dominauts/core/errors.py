"""Exception taxonomy of the engine."""

from __future__ import annotations

from dominauts.core.enums import ErrorKind


class DominoError(Exception):
    """Base class for all engine errors; carries an :class:`ErrorKind`."""

    kind: ErrorKind

    def __init__(self, kind: ErrorKind, message: str = "") -> None:
        super().__init__(message or kind.value)
        self.kind = kind


class IllegalMoveError(DominoError):
    """A move was rejected by the rules. Session state is left untouched."""


class InsufficientTilesError(DominoError, ValueError):
    """The tile set cannot supply every hand."""

    def __init__(self, needed: int, available: int) -> None:
        super().__init__(
            ErrorKind.INSUFFICIENT_TILES,
            f"Need {needed} tiles to deal, only {available} available",
        )
        self.needed = needed
        self.available = available


class InvalidPhaseTransition(DominoError):
    """A request arrived in a phase that cannot accept it."""

    def __init__(self, message: str = "") -> None:
        super().__init__(ErrorKind.INVALID_PHASE_TRANSITION, message)


class SessionNotFound(DominoError, KeyError):
    """No session is registered under the given id."""

    def __init__(self, session_id: str) -> None:
        super().__init__(ErrorKind.SESSION_NOT_FOUND, f"No session {session_id!r}")
        self.session_id = session_id

    def __str__(self) -> str:
        return f"No session {self.session_id!r}"
