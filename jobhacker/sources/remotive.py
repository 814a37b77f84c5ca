"""Remotive: free API for remote tech jobs (no API key required).

Docs: https://remotive.com/api/remote-jobs
"""
from __future__ import annotations

from jobhacker.config import API_ENDPOINTS
from jobhacker.log import get_logger
from jobhacker.models import Job
from jobhacker.sources.base import LENIENT, JobSource

log = get_logger(__name__)

# Category keywords that mark a posting as a development role.
_DEV_CATEGORIES: tuple[str, ...] = (
    "software", "engineer", "developer", "frontend", "backend", "devops",
)

# Above this many postings, non-development categories are dropped.
_CATEGORY_FILTER_MIN = 50


def _is_dev_category(category: str) -> bool:
    low = (category or "").lower()
    return any(keyword in low for keyword in _DEV_CATEGORIES)


class RemotiveSource(JobSource):
    name = "remotive"
    display_name = "Remotive"
    policy = LENIENT

    def __init__(self, url: str = API_ENDPOINTS["remotive"]) -> None:
        self.url = url

    def _fetch(self) -> list[Job]:
        data = self._json(self._get(self.url))
        hits = data.get("jobs") if isinstance(data, dict) else None
        if not isinstance(hits, list):
            return []

        if len(hits) > _CATEGORY_FILTER_MIN:
            hits = [h for h in hits if isinstance(h, dict) and _is_dev_category(str(h.get("category") or ""))]
        jobs = self._normalize_all(hits)
        log.debug("Remotive returned %d jobs", len(jobs))
        return jobs
