"""WeWorkRemotely: programming category RSS feed.

The only RSS source that fails loudly: a feed that is not well-formed XML
usually means the feed itself broke, so it is surfaced instead of hidden.
"""
from __future__ import annotations

from jobhacker.config import API_ENDPOINTS
from jobhacker.log import get_logger
from jobhacker.models import Job
from jobhacker.sources.base import RSS_ACCEPT, STRICT, JobSource, parse_rss_items

log = get_logger(__name__)


class WeWorkRemotelySource(JobSource):
    name = "weworkremotely"
    display_name = "WeWorkRemotely"
    policy = STRICT
    accept = RSS_ACCEPT

    def __init__(self, url: str = API_ENDPOINTS["weworkremotely"]) -> None:
        self.url = url

    def _is_valid(self, entry: dict) -> bool:
        return bool(entry.get("title")) and bool(entry.get("link"))

    def _fetch(self) -> list[Job]:
        items = parse_rss_items(self._get(self.url).content, source=self.name)
        jobs = self._normalize_all(items)
        log.debug("WeWorkRemotely returned %d jobs", len(jobs))
        return jobs
