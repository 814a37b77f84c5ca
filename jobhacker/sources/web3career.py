"""Web3.career: JSON API with two RSS feeds as fallbacks."""
from __future__ import annotations

from typing import Any

from jobhacker.errors import ParseError, TransportError
from jobhacker.log import get_logger
from jobhacker.models import Job
from jobhacker.sources.base import BROWSER_USER_AGENT, FALLBACK, RSS_ACCEPT, JobSource, parse_rss_items

log = get_logger(__name__)

ENDPOINTS: tuple[str, ...] = (
    "https://web3.career/api/v1/jobs?page=1&per_page=50",
    "https://web3.career/remote-jobs.rss",
    "https://web3.career/feed.rss",
)


def _job_list(data: Any) -> list:
    if isinstance(data, dict):
        data = data.get("jobs") or data.get("data") or []
    return data if isinstance(data, list) else []


class Web3CareerSource(JobSource):
    name = "web3career"
    display_name = "Web3.career"
    policy = FALLBACK
    user_agent = BROWSER_USER_AGENT

    def __init__(self, endpoints: tuple[str, ...] = ENDPOINTS) -> None:
        self.endpoints = endpoints

    def _fetch_endpoint(self, endpoint: str) -> list[Job]:
        is_rss = ".rss" in endpoint
        r = self._get(endpoint, accept=RSS_ACCEPT if is_rss else "application/json, text/html")
        if is_rss:
            items = parse_rss_items(r.content, source=self.name)
            return self._normalize_all(i for i in items if i.get("link"))
        return self._normalize_all(_job_list(self._json(r)))

    def _fetch(self) -> list[Job]:
        for endpoint in self.endpoints:
            try:
                jobs = self._fetch_endpoint(endpoint)
            except (TransportError, ParseError) as exc:
                log.warning("Web3.career endpoint %s failed (%s), trying next", endpoint, exc)
                continue
            if jobs:
                log.info("Web3.career: %d jobs from %s", len(jobs), endpoint)
                return jobs
            log.debug("Web3.career endpoint %s yielded no jobs", endpoint)

        log.warning("Web3.career: all endpoints exhausted, returning no jobs")
        return []
