"""Qt bridge to run the move advisor in a worker thread."""

from __future__ import annotations

import threading

from PyQt6.QtCore import QObject, pyqtSignal, pyqtSlot

from dominauts.core.state import SessionState
from dominauts.engine.advisor import MoveAdvisor
from dominauts.engine.models import AdviceCancelled, SkillLevel


class AdvisorWorker(QObject):
    """Thread-affine worker that computes hints on demand."""

    hint_ready = pyqtSignal(int, object)
    hint_cancelled = pyqtSignal(int)
    hint_error = pyqtSignal(int, str)

    __slots__ = ("_advisor", "_cancel_event")

    def __init__(self, *, skill: SkillLevel = SkillLevel.INTERMEDIATE) -> None:
        super().__init__()
        self._advisor = MoveAdvisor(skill)
        self._cancel_event = threading.Event()

    @pyqtSlot(object, str, int)
    def request_hint(self, state_obj: object, player_id: str, request_id: int) -> None:
        """Rank the moves of *player_id* in *state_obj* and emit the hint."""
        if not isinstance(state_obj, SessionState):
            self.hint_error.emit(request_id, "Advisor received invalid state")
            return

        self._cancel_event.clear()
        try:
            hint = self._advisor.advise(
                state_obj,
                player_id or None,
                is_cancelled=self._cancel_event.is_set,
            )
        except AdviceCancelled:
            self.hint_cancelled.emit(request_id)
            return
        except Exception as exc:
            self.hint_error.emit(request_id, str(exc))
            return

        if self._cancel_event.is_set():
            self.hint_cancelled.emit(request_id)
            return
        self.hint_ready.emit(request_id, hint)

    @pyqtSlot()
    def cancel(self) -> None:
        """Request cancellation of the current evaluation."""
        self._cancel_event.set()

    @pyqtSlot(str)
    def set_skill(self, skill: str) -> None:
        """Change the reasoning level (takes effect on the next request)."""
        self._advisor = MoveAdvisor(SkillLevel.parse(skill))
