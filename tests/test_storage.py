"""Tests for the processed job id store."""
from __future__ import annotations

import json
import threading
from pathlib import Path

import pytest

from jobhacker.storage import ProcessedJobStore


def test_missing_file_loads_empty(tmp_path: Path) -> None:
    store = ProcessedJobStore(tmp_path / "processed_jobs.json")
    assert store.load() == []
    assert not store.has("remoteok-1")
    assert len(store) == 0


def test_add_persists_and_survives_reload(tmp_path: Path) -> None:
    path = tmp_path / "data" / "processed_jobs.json"
    store = ProcessedJobStore(path)
    store.add("remoteok-1")
    store.add("jobicy-abc")

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["jobIds"] == ["remoteok-1", "jobicy-abc"]
    assert data["lastUpdated"].endswith("Z")

    reopened = ProcessedJobStore(path)
    assert reopened.has("remoteok-1")
    assert "jobicy-abc" in reopened


def test_add_is_idempotent(tmp_path: Path) -> None:
    path = tmp_path / "processed_jobs.json"
    store = ProcessedJobStore(path)
    store.add("remoteok-1")
    store.add("remoteok-1")
    assert json.loads(path.read_text(encoding="utf-8"))["jobIds"] == ["remoteok-1"]


@pytest.mark.parametrize("content", ["{not json", "[1, 2, 3]", '{"jobIds": "nope"}'])
def test_corrupt_file_loads_empty_and_is_repaired(tmp_path: Path, content: str) -> None:
    path = tmp_path / "processed_jobs.json"
    path.write_text(content, encoding="utf-8")
    store = ProcessedJobStore(path)
    assert store.load() == []

    store.add("remoteok-1")
    assert json.loads(path.read_text(encoding="utf-8"))["jobIds"] == ["remoteok-1"]


def test_non_string_ids_are_dropped(tmp_path: Path) -> None:
    path = tmp_path / "processed_jobs.json"
    path.write_text(json.dumps({"jobIds": ["a", 1, None, "a", "b"]}), encoding="utf-8")
    assert ProcessedJobStore(path).load() == ["a", "b"]


def test_add_merges_with_ids_written_by_another_instance(tmp_path: Path) -> None:
    path = tmp_path / "processed_jobs.json"
    first = ProcessedJobStore(path)
    second = ProcessedJobStore(path)
    first.load()
    second.add("remoteok-2")
    first.add("remoteok-1")
    assert ProcessedJobStore(path).load() == ["remoteok-2", "remoteok-1"]


def test_concurrent_adds_keep_every_id(tmp_path: Path) -> None:
    path = tmp_path / "processed_jobs.json"
    store = ProcessedJobStore(path)
    threads = [threading.Thread(target=store.add, args=(f"remoteok-{i}",)) for i in range(20)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert sorted(ProcessedJobStore(path).load()) == sorted(f"remoteok-{i}" for i in range(20))


def test_no_temp_files_left_behind(tmp_path: Path) -> None:
    store = ProcessedJobStore(tmp_path / "processed_jobs.json")
    store.add("remoteok-1")
    assert [p.name for p in tmp_path.iterdir()] == ["processed_jobs.json"]


def test_clear(tmp_path: Path) -> None:
    path = tmp_path / "processed_jobs.json"
    store = ProcessedJobStore(path)
    store.add("remoteok-1")
    store.clear()
    assert not store.has("remoteok-1")
    assert json.loads(path.read_text(encoding="utf-8"))["jobIds"] == []
