from __future__ import annotations

import json
from pathlib import Path
from typing import List

import pytest

from history_export import (
    CallbackAchievementEmitter,
    JsonProgressStore,
    ProgressCounters,
    ProgressStoreError,
)


def test_missing_file_loads_zeroed_counters(tmp_path: Path) -> None:
    store = JsonProgressStore(tmp_path / "progress.json")

    assert store.load() == ProgressCounters()


def test_update_merges_partial_counters(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "progress.json"
    store = JsonProgressStore(path)

    store.update({"chat_history_visits": 3})
    store.update({"pdf_export_count": 1})

    assert store.load() == ProgressCounters(
        pdf_export_count=1, chat_history_visits=3
    )
    assert json.loads(path.read_text(encoding="utf-8")) == {
        "pdf_export_count": 1,
        "chat_history_visits": 3,
    }
    assert sorted(p.name for p in path.parent.iterdir()) == ["progress.json"]


def test_update_rejects_unknown_counters(tmp_path: Path) -> None:
    store = JsonProgressStore(tmp_path / "progress.json")

    with pytest.raises(ValueError, match="streak"):
        store.update({"streak": 1})

    assert not (tmp_path / "progress.json").exists()


def test_unrelated_keys_in_file_are_ignored(tmp_path: Path) -> None:
    path = tmp_path / "progress.json"
    path.write_text(
        json.dumps({"pdf_export_count": 2, "badges": ["great_job"]}),
        encoding="utf-8",
    )

    assert JsonProgressStore(path).load().pdf_export_count == 2


@pytest.mark.parametrize(
    "payload",
    ["{not json", "[1, 2]", '{"pdf_export_count": "many"}'],
)
def test_corrupt_progress_file_raises(tmp_path: Path, payload: str) -> None:
    path = tmp_path / "progress.json"
    path.write_text(payload, encoding="utf-8")

    with pytest.raises(ProgressStoreError):
        JsonProgressStore(path).load()


def test_callback_emitter_forwards_ids() -> None:
    received: List[str] = []
    emitter = CallbackAchievementEmitter(received.append)

    emitter.emit("good_listener")

    assert received == ["good_listener"]


def test_undecodable_progress_file_raises(tmp_path: Path) -> None:
    path = tmp_path / "progress.json"
    path.write_bytes(b'{"pdf_export_count": "\xff\xfe"}')

    with pytest.raises(ProgressStoreError):
        JsonProgressStore(path).load()
