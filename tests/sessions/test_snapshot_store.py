from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from timekeeping.sessions.model import WorkSession
from timekeeping.sessions.snapshot_store import JsonFileSnapshotStore


def test_save_load_clear(tmp_path):
    store = JsonFileSnapshotStore(tmp_path / "sessions")
    session = WorkSession(
        actor_id=7,
        project_id=1,
        record_id=3,
        start_time=datetime(2026, 2, 2, 9, 0),
        pause_accumulated=timedelta(minutes=4, seconds=30),
        current_pause_start=datetime(2026, 2, 2, 10, 0),
    )

    store.save(7, session.to_snapshot())
    loaded = store.load(7)

    assert WorkSession.from_snapshot(loaded) == session
    assert store.load(8) is None

    store.clear(7)
    assert store.load(7) is None
    store.clear(7)


def test_corrupt_file_reads_as_missing(tmp_path):
    store = JsonFileSnapshotStore(tmp_path)
    (tmp_path / "session-7.json").write_text("{not json", encoding="utf-8")

    assert store.load(7) is None


def test_snapshot_with_pause_before_start_is_rejected():
    data = {
        "actor_id": 7,
        "project_id": 1,
        "record_id": 3,
        "start_time": "2026-02-02T09:00:00",
        "pause_accumulated_seconds": 0,
        "current_pause_start": "2026-02-02T08:00:00",
    }

    with pytest.raises(ValueError):
        WorkSession.from_snapshot(data)
