"""Shared fixtures: an in-memory staging surface and wired collaborators."""

from __future__ import annotations

import asyncio
import io
from pathlib import Path
from typing import List, Optional, Tuple

import pytest
from PIL import Image, ImageDraw

from history_export import (
    ConsoleAchievementEmitter,
    ConversationTurn,
    ExportOrchestrator,
    JsonProgressStore,
    OffscreenStager,
)


class FakeSurface:
    """Staging surface that keeps the mounted HTML in memory.

    Screenshots are real PNGs with a transparent background so the
    flattening step has something to do.
    """

    def __init__(
        self, size: Tuple[int, int] = (200, 300), scale: int = 2
    ) -> None:
        self.size = size
        self.scale = scale
        self.html: Optional[str] = None
        self.width_px: Optional[int] = None
        self.rendered: List[str] = []
        self.clear_calls = 0
        self.gate: Optional[asyncio.Event] = None
        self.render_error: Optional[Exception] = None
        self.ready_error: Optional[Exception] = None
        self.screenshot_error: Optional[Exception] = None
        self.clear_error: Optional[Exception] = None
        self.screenshot_payload: Optional[bytes] = None
        self.ready_gate: Optional[asyncio.Event] = None
        self.measure_error: Optional[Exception] = None
        self.measure_error_after = 0
        self.measure_calls = 0
        self.on_render = None
        self.on_screenshot = None

    @property
    def hidden(self) -> bool:
        return self.html is None

    async def render(self, html: str, width_px: int) -> None:
        if self.on_render is not None:
            self.on_render()
        self.html = html
        self.width_px = width_px
        self.rendered.append(html)
        if self.render_error is not None:
            raise self.render_error

    async def force_layout(self) -> int:
        return self.size[1]

    async def wait_ready(self, timeout: float) -> None:
        if self.ready_gate is not None:
            await self.ready_gate.wait()
        if self.ready_error is not None:
            raise self.ready_error

    async def content_size(self) -> Tuple[int, int]:
        self.measure_calls += 1
        if (
            self.measure_error is not None
            and self.measure_calls > self.measure_error_after
        ):
            raise self.measure_error
        return self.size

    async def screenshot(self) -> bytes:
        if self.on_screenshot is not None:
            self.on_screenshot()
        if self.gate is not None:
            await self.gate.wait()
        if self.screenshot_error is not None:
            raise self.screenshot_error
        if self.screenshot_payload is not None:
            return self.screenshot_payload
        width, height = self.size
        return make_png(width * self.scale, height * self.scale)

    async def clear(self) -> None:
        self.clear_calls += 1
        if self.clear_error is not None:
            raise self.clear_error
        self.html = None


def make_png(width: int, height: int, mode: str = "RGBA") -> bytes:
    """Return a PNG with a transparent background and one dark block."""

    background = (0, 0, 0, 0) if mode == "RGBA" else (255, 255, 255)
    image = Image.new(mode, (width, height), background)
    draw = ImageDraw.Draw(image)
    draw.rectangle(
        (width // 4, height // 4, width // 2, height // 2), fill="black"
    )
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture()
def surface() -> FakeSurface:
    return FakeSurface()


@pytest.fixture()
def stager(surface: FakeSurface) -> OffscreenStager:
    return OffscreenStager(
        surface, settle_delay=0, settle_timeout=1.0, poll_interval=0
    )


@pytest.fixture()
def progress(tmp_path: Path) -> JsonProgressStore:
    return JsonProgressStore(tmp_path / "progress.json")


@pytest.fixture()
def achievements() -> ConsoleAchievementEmitter:
    return ConsoleAchievementEmitter()


@pytest.fixture()
def notices() -> List[str]:
    return []


@pytest.fixture()
def output_dir(tmp_path: Path) -> Path:
    return tmp_path / "exports"


@pytest.fixture()
def orchestrator(
    stager: OffscreenStager,
    output_dir: Path,
    progress: JsonProgressStore,
    achievements: ConsoleAchievementEmitter,
    notices: List[str],
) -> ExportOrchestrator:
    return ExportOrchestrator(
        stager=stager,
        output_dir=output_dir,
        progress=progress,
        achievements=achievements,
        notify=notices.append,
    )


@pytest.fixture()
def turns() -> List[ConversationTurn]:
    return [
        ConversationTurn(
            id="t1",
            prompt_text="What made you smile this week?",
            user_message="My dog learned a trick",
            bot_response="That sounds delightful!",
            timestamp="2024-01-01T09:00:00Z",
        ),
        ConversationTurn(
            id="t2",
            prompt_text="How do you feel today?",
            user_message="Okay I guess",
            bot_response="That's alright, tell me more.",
            timestamp="2024-01-01T10:00:00Z",
        ),
        ConversationTurn(
            id="t3",
            prompt_text="What would you like to try next?",
            user_message="Drawing <b>comics</b> & stories",
            bot_response="Comics are a great way to tell stories.",
            timestamp="2024-01-01T11:00:00Z",
        ),
    ]
