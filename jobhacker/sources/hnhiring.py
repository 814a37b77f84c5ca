"""Hacker News hiring comments via the Algolia search API."""
from __future__ import annotations

from jobhacker.config import API_ENDPOINTS
from jobhacker.log import get_logger
from jobhacker.models import Job
from jobhacker.sources.base import LENIENT, JobSource

log = get_logger(__name__)

HIRING_KEYWORDS: tuple[str, ...] = ("hiring", "remote", "frontend", "engineer", "developer")
MIN_COMMENT_LENGTH = 100


class HNHiringSource(JobSource):
    name = "hnhiring"
    display_name = "Hacker News"
    policy = LENIENT

    def __init__(self, url: str = API_ENDPOINTS["hnhiring"], query: str = "remote") -> None:
        self.url = url
        self.query = query

    def _is_valid(self, entry: dict) -> bool:
        text = str(entry.get("comment_text") or "")
        if not entry.get("objectID") or len(text) < MIN_COMMENT_LENGTH:
            return False
        lower = text.lower()
        return any(kw in lower for kw in HIRING_KEYWORDS)

    def _fetch(self) -> list[Job]:
        params = {"query": self.query, "tags": "comment,ask_hn", "hitsPerPage": 100}
        data = self._json(self._get(self.url, params=params))
        hits = data.get("hits", []) if isinstance(data, dict) else []
        jobs = self._normalize_all(hits if isinstance(hits, list) else [])
        log.debug("Hacker News returned %d hiring comments", len(jobs))
        return jobs
