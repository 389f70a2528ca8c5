"""Scale a raster capture onto A4-width PDF pages and save it."""

from __future__ import annotations

import io
from pathlib import Path

try:
    from reportlab.lib.pagesizes import A4  # type: ignore[import-not-found]
    from reportlab.lib.utils import (  # type: ignore[import-not-found]
        ImageReader,
    )
    from reportlab.pdfgen import canvas  # type: ignore[import-not-found]
except ImportError as exc:
    raise SystemExit(
        "Missing dependency 'reportlab'. Install with pip install reportlab"
    ) from exc

try:
    from PyPDF2 import PdfReader  # type: ignore[import-not-found]
    from PyPDF2.errors import PdfReadError  # type: ignore[import-not-found]
except ImportError as exc:
    raise SystemExit(
        "Missing dependency 'PyPDF2'. Install with pip install PyPDF2"
    ) from exc

try:
    from PIL import Image  # type: ignore[import-not-found]
except ImportError as exc:
    raise SystemExit(
        "Missing dependency 'Pillow'. Install with pip install Pillow"
    ) from exc

from .errors import AssemblyError
from .files import write_bytes_atomic
from .models import ExportArtifact, RasterImage

DEFAULT_ARTIFACT_NAME = "reflectobot-chat-history.pdf"
DEFAULT_TITLE = "ReflectoBot Chat History"


class PaginatedAssembler:
    """Build a single-artifact PDF from a raster capture.

    The image is scaled to the A4 page width and keeps its aspect ratio.
    Content taller than one A4 page extends the page rather than being
    cut off, so the artifact always holds the whole conversation. Very
    long conversations (roughly 19k CSS px and up) exceed the 14400 pt
    page size many PDF viewers accept; such pages are still valid PDF.
    """

    def __init__(
        self,
        artifact_name: str = DEFAULT_ARTIFACT_NAME,
        title: str = DEFAULT_TITLE,
    ) -> None:
        self.artifact_name = artifact_name
        self.title = title

    def assemble(self, raster: RasterImage) -> ExportArtifact:
        if not raster.png or raster.width <= 0 or raster.height <= 0:
            raise AssemblyError("Raster image is empty")

        try:
            with Image.open(io.BytesIO(raster.png)) as image:
                image.verify()
        except Image.DecompressionBombError as exc:
            raise AssemblyError(f"Raster image is too large: {exc}") from exc
        except (OSError, SyntaxError) as exc:
            raise AssemblyError(f"Raster image is malformed: {exc}") from exc

        page_width, a4_height = A4
        image_height = raster.height * page_width / raster.width
        page_height = max(a4_height, image_height)

        buffer = io.BytesIO()
        try:
            pdf = canvas.Canvas(
                buffer, pagesize=(page_width, page_height), invariant=1
            )
            pdf.setTitle(self.title)
            pdf.drawImage(
                ImageReader(io.BytesIO(raster.png)),
                0,
                page_height - image_height,
                width=page_width,
                height=image_height,
            )
            pdf.showPage()
            pdf.save()
        except (OSError, ValueError, Image.DecompressionBombError) as exc:
            raise AssemblyError(f"Unable to build PDF: {exc}") from exc

        payload = buffer.getvalue()
        _verify_pdf(payload)
        return ExportArtifact(
            filename=self.artifact_name,
            pdf=payload,
            page_width=page_width,
            page_height=page_height,
        )

    def save(self, artifact: ExportArtifact, output_dir: Path) -> Path:
        """Write ``artifact`` into ``output_dir`` in one atomic step."""

        destination = Path(output_dir) / artifact.filename
        try:
            return write_bytes_atomic(destination, artifact.pdf)
        except OSError as exc:
            raise AssemblyError(
                f"Unable to save {destination}: {exc}"
            ) from exc


def _verify_pdf(payload: bytes) -> None:
    if not payload:
        raise AssemblyError("PDF encoder produced no data")
    try:
        pages = len(PdfReader(io.BytesIO(payload)).pages)
    except (PdfReadError, ValueError) as exc:
        raise AssemblyError(f"Assembled PDF is unreadable: {exc}") from exc
    if pages != 1:
        raise AssemblyError(f"Assembled PDF has {pages} pages, expected 1")


__all__ = ["DEFAULT_ARTIFACT_NAME", "PaginatedAssembler"]
