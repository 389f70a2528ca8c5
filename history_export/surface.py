"""Staging surfaces that lay out export documents outside the viewport."""

# pyright: reportUnknownMemberType=false, reportUnknownVariableType=false

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Protocol, Tuple

try:
    from playwright.async_api import (  # type: ignore[import-not-found]
        async_playwright,
    )
except ImportError as exc:
    raise SystemExit(
        "Missing dependency 'playwright'. Install with pip install"
        " playwright && playwright install chromium"
    ) from exc

from .document import EXPORT_ROOT_ID

# One A4 page at 96 CSS px per inch.
A4_WIDTH_PX = 794
A4_HEIGHT_PX = 1123
CAPTURE_SCALE = 2

BLANK_PAGE = "<!DOCTYPE html><html><body></body></html>"

_READY_SCRIPT = """() => document.fonts.status === 'loaded'
    && Array.from(document.images).every((img) => img.complete)"""

_SIZE_SCRIPT = """(rootId) => {
    const root = document.getElementById(rootId);
    if (!root) { return [0, 0]; }
    return [root.scrollWidth, root.scrollHeight];
}"""

_FORCE_LAYOUT_SCRIPT = """(rootId) => {
    const root = document.getElementById(rootId);
    return root ? root.offsetHeight : 0;
}"""


class StagingSurface(Protocol):
    """Layout target the stager mounts documents on."""

    scale: int

    async def render(self, html: str, width_px: int) -> None: ...

    async def force_layout(self) -> int: ...

    async def wait_ready(self, timeout: float) -> None: ...

    async def content_size(self) -> Tuple[int, int]: ...

    async def screenshot(self) -> bytes: ...

    async def clear(self) -> None: ...


class PlaywrightSurface:
    """Headless Chromium page used as the hidden staging surface."""

    def __init__(self, page: Any, scale: int = CAPTURE_SCALE) -> None:
        self._page = page
        self.scale = scale

    async def render(self, html: str, width_px: int) -> None:
        await self._page.set_viewport_size(
            {"width": width_px, "height": A4_HEIGHT_PX}
        )
        await self._page.set_content(html, wait_until="load")

    async def force_layout(self) -> int:
        height = await self._page.evaluate(
            _FORCE_LAYOUT_SCRIPT, EXPORT_ROOT_ID
        )
        return int(height)

    async def wait_ready(self, timeout: float) -> None:
        await self._page.wait_for_function(
            _READY_SCRIPT, timeout=timeout * 1000
        )

    async def content_size(self) -> Tuple[int, int]:
        width, height = await self._page.evaluate(_SIZE_SCRIPT, EXPORT_ROOT_ID)
        return int(width), int(height)

    async def screenshot(self) -> bytes:
        root = self._page.locator(f"#{EXPORT_ROOT_ID}")
        return await root.screenshot(
            type="png",
            omit_background=False,
            animations="disabled",
            scale="device",
        )

    async def clear(self) -> None:
        await self._page.set_content(BLANK_PAGE)


@asynccontextmanager
async def open_surface(
    scale: int = CAPTURE_SCALE,
) -> AsyncIterator[PlaywrightSurface]:
    """Launch headless Chromium and yield a staging surface on one page."""

    async with async_playwright() as playwright_context:  # type: ignore[misc]
        playwright_api: Any = playwright_context
        browser: Any = await playwright_api.chromium.launch(headless=True)
        try:
            context: Any = await browser.new_context(
                viewport={"width": A4_WIDTH_PX, "height": A4_HEIGHT_PX},
                device_scale_factor=scale,
            )
            page: Any = await context.new_page()
            await page.set_content(BLANK_PAGE)
            yield PlaywrightSurface(page, scale=scale)
        finally:
            await browser.close()


__all__ = [
    "A4_HEIGHT_PX",
    "A4_WIDTH_PX",
    "CAPTURE_SCALE",
    "PlaywrightSurface",
    "StagingSurface",
    "open_surface",
]
