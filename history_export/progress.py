"""Progress counters and achievement signalling for the history view."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Callable, List, Mapping, Protocol

from .errors import ProgressStoreError
from .files import write_bytes_atomic

GREAT_JOB = "great_job"
GOOD_LISTENER = "good_listener"


@dataclass(frozen=True, slots=True)
class ProgressCounters:
    """Persistent counters the badge system evaluates."""

    pdf_export_count: int = 0
    chat_history_visits: int = 0


class ProgressStore(Protocol):
    def load(self) -> ProgressCounters: ...

    def update(self, changes: Mapping[str, int]) -> None: ...


class AchievementEmitter(Protocol):
    def emit(self, achievement_id: str) -> None: ...


class JsonProgressStore:
    """Keep ``ProgressCounters`` in a small JSON file."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def load(self) -> ProgressCounters:
        if not self.path.exists():
            return ProgressCounters()
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise ProgressStoreError(
                f"Progress file is not valid JSON: {self.path}"
            ) from exc
        except OSError as exc:
            raise ProgressStoreError(
                f"Unable to read progress file {self.path}: {exc}"
            ) from exc
        if not isinstance(data, dict):
            raise ProgressStoreError(
                f"Progress file must hold a JSON object: {self.path}"
            )

        known = {item.name for item in fields(ProgressCounters)}
        try:
            values = {key: int(data[key]) for key in known if key in data}
        except (TypeError, ValueError) as exc:
            raise ProgressStoreError(
                f"Progress counters must be integers: {self.path}"
            ) from exc
        return ProgressCounters(**values)

    def update(self, changes: Mapping[str, int]) -> None:
        """Merge ``changes`` into the stored counters."""

        known = {item.name for item in fields(ProgressCounters)}
        unknown = sorted(set(changes) - known)
        if unknown:
            raise ValueError(
                f"Unknown progress counters: {', '.join(unknown)}"
            )

        counters = replace(self.load(), **dict(changes))
        payload = json.dumps(asdict(counters), indent=4) + "\n"
        write_bytes_atomic(self.path, payload.encode("utf-8"))


class ConsoleAchievementEmitter:
    """Print each earned badge and remember the order they arrived in."""

    def __init__(self) -> None:
        self.emitted: List[str] = []

    def emit(self, achievement_id: str) -> None:
        self.emitted.append(achievement_id)
        print(f"🏅 Badge earned: {achievement_id}")


class CallbackAchievementEmitter:
    """Forward achievement ids to a host callback."""

    def __init__(self, callback: Callable[[str], None]) -> None:
        self._callback = callback

    def emit(self, achievement_id: str) -> None:
        self._callback(achievement_id)


__all__ = [
    "GOOD_LISTENER",
    "GREAT_JOB",
    "AchievementEmitter",
    "CallbackAchievementEmitter",
    "ConsoleAchievementEmitter",
    "JsonProgressStore",
    "ProgressCounters",
    "ProgressStore",
]
