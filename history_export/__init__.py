"""Export a conversation history as a rasterised, A4-width PDF."""

from .assembly import DEFAULT_ARTIFACT_NAME, PaginatedAssembler
from .capture import RasterCapture
from .document import ExportDocumentBuilder, render_document_html
from .errors import (
    AssemblyError,
    CaptureError,
    ConcurrentExportError,
    EmptyContentError,
    ExportError,
    ProgressStoreError,
)
from .models import (
    ConversationTurn,
    ExportArtifact,
    ExportDocument,
    ExportResult,
    ExportState,
    RasterImage,
    load_turns,
)
from .orchestrator import FAILURE_MESSAGE, ExportOrchestrator
from .progress import (
    GOOD_LISTENER,
    GREAT_JOB,
    CallbackAchievementEmitter,
    ConsoleAchievementEmitter,
    JsonProgressStore,
    ProgressCounters,
)
from .staging import OffscreenStager
from .surface import PlaywrightSurface, StagingSurface, open_surface
from .view import HistoryView

__all__ = [
    "DEFAULT_ARTIFACT_NAME",
    "FAILURE_MESSAGE",
    "GOOD_LISTENER",
    "GREAT_JOB",
    "AssemblyError",
    "CallbackAchievementEmitter",
    "CaptureError",
    "ConcurrentExportError",
    "ConsoleAchievementEmitter",
    "ConversationTurn",
    "EmptyContentError",
    "ExportArtifact",
    "ExportDocument",
    "ExportDocumentBuilder",
    "ExportError",
    "ExportOrchestrator",
    "ExportResult",
    "ExportState",
    "HistoryView",
    "JsonProgressStore",
    "OffscreenStager",
    "PaginatedAssembler",
    "PlaywrightSurface",
    "ProgressCounters",
    "ProgressStoreError",
    "RasterCapture",
    "RasterImage",
    "StagingSurface",
    "load_turns",
    "open_surface",
    "render_document_html",
]
