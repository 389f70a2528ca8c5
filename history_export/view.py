"""Host for the chat history view: visit tracking and the download action."""

from __future__ import annotations

from typing import Callable, Sequence

from .models import ConversationTurn, ExportResult
from .orchestrator import ExportOrchestrator
from .progress import GOOD_LISTENER, AchievementEmitter, ProgressStore


class HistoryView:
    """One conversation-history view bound to a session's turn list.

    Each ``open`` counts one visit and emits ``good_listener`` once,
    whether or not an export follows. Opening an already open view does
    nothing; close it first to count another visit.
    """

    def __init__(
        self,
        *,
        turns: Callable[[], Sequence[ConversationTurn]],
        orchestrator: ExportOrchestrator,
        progress: ProgressStore,
        achievements: AchievementEmitter,
    ) -> None:
        self._turns = turns
        self._orchestrator = orchestrator
        self._progress = progress
        self._achievements = achievements
        self._is_open = False

    @property
    def is_open(self) -> bool:
        return self._is_open

    def open(self) -> None:
        if self._is_open:
            return
        self._is_open = True
        print("📖 Chat history opened - tracking visit")
        visits = self._progress.load().chat_history_visits + 1
        self._progress.update({"chat_history_visits": visits})
        self._achievements.emit(GOOD_LISTENER)

    def close(self) -> None:
        self._is_open = False

    async def download(self) -> ExportResult:
        """Export the turns as they stand right now."""

        return await self._orchestrator.start(tuple(self._turns()))


__all__ = ["HistoryView"]
