from __future__ import annotations

import asyncio
from typing import List

from conftest import FakeSurface
from history_export import (
    GOOD_LISTENER,
    GREAT_JOB,
    ConsoleAchievementEmitter,
    ConversationTurn,
    ExportOrchestrator,
    HistoryView,
    JsonProgressStore,
)


def _view(
    orchestrator: ExportOrchestrator,
    progress: JsonProgressStore,
    achievements: ConsoleAchievementEmitter,
    turns: List[ConversationTurn],
) -> HistoryView:
    return HistoryView(
        turns=lambda: turns,
        orchestrator=orchestrator,
        progress=progress,
        achievements=achievements,
    )


def test_opening_view_emits_good_listener_once(
    orchestrator: ExportOrchestrator,
    progress: JsonProgressStore,
    achievements: ConsoleAchievementEmitter,
    turns: List[ConversationTurn],
) -> None:
    view = _view(orchestrator, progress, achievements, turns)

    view.open()
    view.open()

    assert view.is_open
    assert achievements.emitted == [GOOD_LISTENER]
    assert progress.load().chat_history_visits == 1
    assert progress.load().pdf_export_count == 0


def test_each_reopen_counts_a_new_visit(
    orchestrator: ExportOrchestrator,
    progress: JsonProgressStore,
    achievements: ConsoleAchievementEmitter,
    turns: List[ConversationTurn],
) -> None:
    view = _view(orchestrator, progress, achievements, turns)

    view.open()
    view.close()
    view.open()

    assert achievements.emitted == [GOOD_LISTENER, GOOD_LISTENER]
    assert progress.load().chat_history_visits == 2


def test_download_exports_current_turns(
    surface: FakeSurface,
    orchestrator: ExportOrchestrator,
    progress: JsonProgressStore,
    achievements: ConsoleAchievementEmitter,
    turns: List[ConversationTurn],
) -> None:
    session: List[ConversationTurn] = list(turns[:1])
    view = _view(orchestrator, progress, achievements, session)
    view.open()
    session.append(turns[1])

    result = asyncio.run(view.download())

    assert result.ok
    assert turns[1].user_message in surface.rendered[-1]
    assert achievements.emitted == [GOOD_LISTENER, GREAT_JOB]
    counters = progress.load()
    assert counters.chat_history_visits == 1
    assert counters.pdf_export_count == 1


def test_failed_download_keeps_visit_achievement(
    surface: FakeSurface,
    orchestrator: ExportOrchestrator,
    progress: JsonProgressStore,
    achievements: ConsoleAchievementEmitter,
    turns: List[ConversationTurn],
) -> None:
    surface.screenshot_error = RuntimeError("capture failed")
    view = _view(orchestrator, progress, achievements, turns)
    view.open()

    result = asyncio.run(view.download())

    assert not result.ok
    assert achievements.emitted == [GOOD_LISTENER]
    assert progress.load().pdf_export_count == 0
