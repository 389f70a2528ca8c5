"""Shared dataclasses for the chat history export pipeline."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, List, Mapping, Tuple

from .errors import ExportError

_TURN_FIELDS = (
    ("id", "id"),
    ("prompt_text", "promptText"),
    ("user_message", "userMessage"),
    ("bot_response", "botResponse"),
    ("timestamp", "timestamp"),
)


@dataclass(frozen=True, slots=True)
class ConversationTurn:
    """One prompt, user reply and bot response recorded during a session."""

    id: str
    prompt_text: str
    user_message: str
    bot_response: str
    timestamp: str

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "ConversationTurn":
        """Build a turn from snake_case or the app's camelCase keys."""

        values: dict[str, str] = {}
        for field_name, camel_name in _TURN_FIELDS:
            if field_name in payload:
                value = payload[field_name]
            elif camel_name in payload:
                value = payload[camel_name]
            else:
                raise ValueError(f"Conversation turn missing '{camel_name}'")
            values[field_name] = str(value)
        return cls(**values)


def load_turns(path: Path | str) -> List[ConversationTurn]:
    """Read a saved session (a JSON array of turns) in display order."""

    source = Path(path)
    with source.open("r", encoding="utf-8") as handle:
        payload = json.load(handle)
    if not isinstance(payload, list):
        raise ValueError(f"Expected a JSON array of turns in {source}")
    return [ConversationTurn.from_mapping(item) for item in payload]


@dataclass(frozen=True, slots=True)
class DocumentSection:
    """A printable block: either one conversation turn or the placeholder."""

    kind: str
    number: int = 0
    turn_id: str = ""
    prompt_text: str = ""
    user_message: str = ""
    bot_response: str = ""
    timestamp: str = ""
    text: str = ""


@dataclass(frozen=True, slots=True)
class ExportDocument:
    """Printable model of a conversation: header block plus sections."""

    title: str
    subtitle: str
    intro: Tuple[str, ...]
    closing: str
    bot_name: str
    sections: Tuple[DocumentSection, ...]

    @property
    def turn_sections(self) -> Tuple[DocumentSection, ...]:
        return tuple(s for s in self.sections if s.kind == "turn")

    @property
    def is_empty(self) -> bool:
        return not self.turn_sections


@dataclass(frozen=True, slots=True)
class RasterImage:
    """Opaque PNG capture of the staged document."""

    png: bytes
    width: int
    height: int
    scale: int


@dataclass(frozen=True, slots=True)
class ExportArtifact:
    """Assembled PDF payload waiting to be written under ``filename``."""

    filename: str
    pdf: bytes
    page_width: float
    page_height: float


class ExportState(str, Enum):
    """Lifecycle states of the export orchestrator."""

    IDLE = "idle"
    PREPARING = "preparing"
    CAPTURING = "capturing"
    ASSEMBLING = "assembling"
    FINALIZING = "finalizing"


@dataclass(slots=True)
class ExportResult:
    """Outcome of one export attempt."""

    path: Path | None = None
    error: ExportError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.path is not None


__all__ = [
    "ConversationTurn",
    "DocumentSection",
    "ExportArtifact",
    "ExportDocument",
    "ExportResult",
    "ExportState",
    "RasterImage",
    "load_turns",
]
