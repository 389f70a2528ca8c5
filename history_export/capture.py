"""Rasterise the staged document into an opaque PNG."""

from __future__ import annotations

import io

try:
    from PIL import (  # type: ignore[import-not-found]
        Image,
        UnidentifiedImageError,
    )
except ImportError as exc:
    raise SystemExit(
        "Missing dependency 'Pillow'. Install with pip install Pillow"
    ) from exc

from .errors import CaptureError, EmptyContentError
from .models import RasterImage
from .staging import OffscreenStager

MIN_CAPTURE_SCALE = 2
BACKGROUND = (255, 255, 255)


class RasterCapture:
    """Capture an activated stager at print resolution."""

    async def capture(self, stager: OffscreenStager) -> RasterImage:
        if not stager.active:
            raise CaptureError("Staging surface is not active")

        try:
            width, height = await stager.content_size()
        except Exception as exc:
            raise CaptureError(
                f"Unable to measure staged document: {exc}"
            ) from exc
        if width <= 0 or height <= 0:
            raise EmptyContentError(
                f"Staged document has no renderable area ({width}x{height})"
            )

        scale = stager.surface.scale
        if scale < MIN_CAPTURE_SCALE:
            raise CaptureError(
                f"Capture scale {scale} is below {MIN_CAPTURE_SCALE}x"
            )

        try:
            payload = await stager.surface.screenshot()
        except Exception as exc:
            raise CaptureError(f"Screenshot failed: {exc}") from exc
        if not payload:
            raise CaptureError("Screenshot returned no data")

        return flatten_png(payload, scale=scale)


def flatten_png(payload: bytes, *, scale: int) -> RasterImage:
    """Composite ``payload`` onto white and re-encode it without alpha."""

    try:
        with Image.open(io.BytesIO(payload)) as source:
            source.load()
            if source.mode in ("RGBA", "LA") or "transparency" in source.info:
                rgba = source.convert("RGBA")
                opaque = Image.new("RGB", rgba.size, BACKGROUND)
                opaque.paste(rgba, mask=rgba.getchannel("A"))
            else:
                opaque = source.convert("RGB")
    except Image.DecompressionBombError as exc:
        raise CaptureError(f"Screenshot is too large: {exc}") from exc
    except (UnidentifiedImageError, OSError) as exc:
        raise CaptureError(
            f"Screenshot is not a readable image: {exc}"
        ) from exc

    buffer = io.BytesIO()
    opaque.save(buffer, format="PNG")
    return RasterImage(
        png=buffer.getvalue(),
        width=opaque.width,
        height=opaque.height,
        scale=scale,
    )


__all__ = ["MIN_CAPTURE_SCALE", "RasterCapture", "flatten_png"]
