"""Single-slot off-screen staging of export documents."""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Tuple

from .document import render_document_html
from .errors import CaptureError, ConcurrentExportError, ExportError
from .models import ExportDocument
from .surface import A4_WIDTH_PX, StagingSurface

DEFAULT_SETTLE_DELAY = 0.3
DEFAULT_SETTLE_TIMEOUT = 5.0
DEFAULT_POLL_INTERVAL = 0.05


class OffscreenStager:
    """Mount one document at a time on a hidden surface at page width.

    ``activate`` claims the surface and returns once the layout has
    settled; ``deactivate`` hands it back blank. Use ``staged`` so the
    release happens on every exit path.
    """

    def __init__(
        self,
        surface: StagingSurface,
        *,
        page_width_px: int = A4_WIDTH_PX,
        settle_delay: float = DEFAULT_SETTLE_DELAY,
        settle_timeout: float = DEFAULT_SETTLE_TIMEOUT,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        self._surface = surface
        self._active = False
        self.page_width_px = page_width_px
        self.settle_delay = settle_delay
        self.settle_timeout = settle_timeout
        self.poll_interval = poll_interval

    @property
    def active(self) -> bool:
        return self._active

    @property
    def surface(self) -> StagingSurface:
        return self._surface

    async def activate(self, document: ExportDocument) -> None:
        """Render ``document`` off-screen and wait for layout to settle."""

        if self._active:
            raise ConcurrentExportError(
                "Staging surface is already holding an export"
            )
        self._active = True

        settled = False
        try:
            await self._surface.render(
                render_document_html(document), self.page_width_px
            )
            await self._surface.force_layout()
            await asyncio.sleep(self.settle_delay)
            await self._wait_settled()
            settled = True
        except ExportError:
            raise
        except Exception as exc:
            raise CaptureError(f"Unable to stage document: {exc}") from exc
        finally:
            if not settled:
                await self.deactivate()

    async def deactivate(self) -> None:
        """Blank the surface and free the slot; safe to call repeatedly."""

        self._active = False
        try:
            await self._surface.clear()
        except Exception as exc:  # surface teardown must not mask outcome
            print(f"⚠️ Unable to clear staging surface: {exc}")

    async def content_size(self) -> Tuple[int, int]:
        return await self._surface.content_size()

    @asynccontextmanager
    async def staged(
        self, document: ExportDocument
    ) -> AsyncIterator["OffscreenStager"]:
        await self.activate(document)
        try:
            yield self
        finally:
            await self.deactivate()

    async def _wait_settled(self) -> Tuple[int, int]:
        """Wait for the ready signal, then for two matching size readings."""

        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.settle_timeout
        await self._surface.wait_ready(self.settle_timeout)

        previous = await self._surface.content_size()
        while True:
            await asyncio.sleep(self.poll_interval)
            current = await self._surface.content_size()
            if current == previous:
                return current
            if loop.time() >= deadline:
                raise CaptureError(
                    "Staged layout did not settle within"
                    f" {self.settle_timeout:.1f}s"
                )
            previous = current


__all__ = ["OffscreenStager"]
