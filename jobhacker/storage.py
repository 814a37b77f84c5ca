"""Persistent set of processed job ids (JSON file, atomic rewrites)."""
from __future__ import annotations

import json
import os
import tempfile
import threading
from datetime import datetime, timezone
from pathlib import Path

from jobhacker.config import PROCESSED_JOBS_PATH
from jobhacker.log import get_logger

log = get_logger(__name__)


class ProcessedJobStore:
    """Ordered, append-only set of job ids that have already been scored.

    File shape: ``{"jobIds": [...], "lastUpdated": "<ISO-8601>"}``. Every write
    rewrites the whole file through a temp file + ``os.replace`` so a crash
    mid-write leaves either the old or the new file, never half of one.
    """

    def __init__(self, path: Path | str = PROCESSED_JOBS_PATH) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()
        self._ids: dict[str, None] | None = None

    def load(self) -> list[str]:
        """Read ids from disk; missing or corrupt files load as empty."""
        ids = self._read()
        self._ids = dict.fromkeys(ids)
        return list(self._ids)

    def has(self, job_id: str) -> bool:
        if self._ids is None:
            self.load()
        return job_id in self._ids  # type: ignore[operator]

    def add(self, job_id: str) -> None:
        """Record ``job_id``; no-op when it is already present."""
        with self._lock:
            ids = dict.fromkeys(self._read())
            if job_id in ids:
                self._ids = ids
                return
            ids[job_id] = None
            self._write(list(ids))
            self._ids = ids
        log.debug("Marked processed: %s", job_id)

    def clear(self) -> None:
        with self._lock:
            self._write([])
            self._ids = {}
        log.info("Cleared processed job history → %s", self.path)

    def __contains__(self, job_id: object) -> bool:
        return isinstance(job_id, str) and self.has(job_id)

    def __len__(self) -> int:
        if self._ids is None:
            self.load()
        return len(self._ids)  # type: ignore[arg-type]

    def _read(self) -> list[str]:
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            log.warning("Could not read %s, starting with empty history: %s", self.path, exc)
            return []
        job_ids = data.get("jobIds") if isinstance(data, dict) else None
        if not isinstance(job_ids, list):
            log.warning("Unexpected shape in %s, starting with empty history", self.path)
            return []
        return list(dict.fromkeys(i for i in job_ids if isinstance(i, str)))

    def _write(self, ids: list[str]) -> None:
        payload = {
            "jobIds": ids,
            "lastUpdated": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        }
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, ensure_ascii=False)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
        except OSError as exc:
            log.error("Could not write %s: %s", self.path, exc)
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
            raise
