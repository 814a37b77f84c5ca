"""Jobicy: newest remote jobs RSS feed."""
from __future__ import annotations

from jobhacker.config import API_ENDPOINTS
from jobhacker.log import get_logger
from jobhacker.models import Job
from jobhacker.sources.base import LENIENT, RSS_ACCEPT, JobSource, parse_rss_items

log = get_logger(__name__)


class JobicySource(JobSource):
    name = "jobicy"
    display_name = "Jobicy"
    policy = LENIENT
    accept = RSS_ACCEPT
    timeout = 10

    def __init__(self, url: str = API_ENDPOINTS["jobicy"]) -> None:
        self.url = url

    def _is_valid(self, entry: dict) -> bool:
        return bool(entry.get("title")) and bool(entry.get("link"))

    def _fetch(self) -> list[Job]:
        items = parse_rss_items(self._get(self.url).content, source=self.name)
        jobs = self._normalize_all(items)
        log.debug("Jobicy returned %d jobs", len(jobs))
        return jobs
