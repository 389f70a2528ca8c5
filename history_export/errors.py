"""Error types raised by the chat history export pipeline."""

from __future__ import annotations


class ExportError(Exception):
    """Base class for failures that abort a single export attempt."""


class ConcurrentExportError(ExportError):
    """Raised when an export is started while another one is in flight."""


class EmptyContentError(ExportError):
    """Raised when the staged document has nothing renderable."""


class CaptureError(ExportError):
    """Raised when the staged document cannot be rasterised."""


class AssemblyError(ExportError):
    """Raised when the PDF cannot be assembled or saved."""


class ProgressStoreError(Exception):
    """Raised when persisted progress counters cannot be read."""


__all__ = [
    "AssemblyError",
    "CaptureError",
    "ConcurrentExportError",
    "EmptyContentError",
    "ExportError",
    "ProgressStoreError",
]
