"""Single-flight export of the chat history to a PDF artifact."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional, Sequence

from .assembly import PaginatedAssembler
from .capture import RasterCapture
from .document import ExportDocumentBuilder
from .errors import ConcurrentExportError, ExportError
from .files import sha256_bytes
from .models import ConversationTurn, ExportResult, ExportState
from .progress import GREAT_JOB, AchievementEmitter, ProgressStore
from .staging import OffscreenStager

FAILURE_MESSAGE = "There was an error generating the PDF. Please try again."


class ExportOrchestrator:
    """Drive one export at a time through build, stage, capture, assemble.

    ``start`` never raises for pipeline failures: the error is printed,
    handed to ``notify`` for the user and returned on the result. Only a
    successful export touches the progress counter and the
    ``great_job`` achievement, and each does so exactly once.
    """

    def __init__(
        self,
        *,
        stager: OffscreenStager,
        output_dir: Path | str,
        progress: ProgressStore,
        achievements: AchievementEmitter,
        builder: Optional[ExportDocumentBuilder] = None,
        capture: Optional[RasterCapture] = None,
        assembler: Optional[PaginatedAssembler] = None,
        notify: Callable[[str], None] = print,
    ) -> None:
        self._stager = stager
        self._output_dir = Path(output_dir)
        self._progress = progress
        self._achievements = achievements
        self._builder = builder or ExportDocumentBuilder()
        self._capture = capture or RasterCapture()
        self._assembler = assembler or PaginatedAssembler()
        self._notify = notify
        self._state = ExportState.IDLE

    @property
    def state(self) -> ExportState:
        return self._state

    async def start(self, turns: Sequence[ConversationTurn]) -> ExportResult:
        """Export a snapshot of ``turns``; reject if one is in flight."""

        if self._state is not ExportState.IDLE:
            return self._fail(
                ConcurrentExportError(
                    f"An export is already {self._state.value}"
                ),
                stage=ExportState.IDLE,
            )

        # The state flips before the first await, so a competing start on
        # the same event loop always sees a non-idle orchestrator.
        self._state = ExportState.PREPARING
        snapshot = tuple(turns)
        try:
            path = await self._run_pipeline(snapshot)
        except ExportError as exc:
            return self._fail(exc, stage=self._state)
        except Exception as exc:
            error = ExportError(f"Unexpected export failure: {exc}")
            error.__cause__ = exc
            return self._fail(error, stage=self._state)
        else:
            self._state = ExportState.FINALIZING
            self._finalize()
            return ExportResult(path=path)
        finally:
            self._state = ExportState.IDLE

    async def _run_pipeline(
        self, snapshot: Sequence[ConversationTurn]
    ) -> Path:
        document = self._builder.build(snapshot)
        print(
            f"Staging chat history ({len(document.turn_sections)} turns)"
            f" at {self._stager.page_width_px}px"
        )
        async with self._stager.staged(document):
            self._state = ExportState.CAPTURING
            raster = await self._capture.capture(self._stager)
            print(f"Captured {raster.width}x{raster.height}px raster")

            self._state = ExportState.ASSEMBLING
            artifact = self._assembler.assemble(raster)
            path = self._assembler.save(artifact, self._output_dir)
        print(
            f"✅ Chat history PDF written: {path}"
            f" (sha256 {sha256_bytes(artifact.pdf)[:12]})"
        )
        return path

    def _finalize(self) -> None:
        counters = self._progress.load()
        exports = counters.pdf_export_count + 1
        self._progress.update({"pdf_export_count": exports})
        print(f"📈 Export count incremented: {exports}")
        self._achievements.emit(GREAT_JOB)

    def _fail(
        self, error: ExportError, *, stage: ExportState
    ) -> ExportResult:
        print(
            f"⚠️ Chat history export failed while {stage.value}"
            f" ({type(error).__name__}): {error}"
        )
        self._notify(FAILURE_MESSAGE)
        return ExportResult(error=error)


__all__ = ["FAILURE_MESSAGE", "ExportOrchestrator"]
