"""CryptoJobsList: JSON job API."""
from __future__ import annotations

from jobhacker.config import API_ENDPOINTS
from jobhacker.log import get_logger
from jobhacker.models import Job
from jobhacker.sources.base import BROWSER_USER_AGENT, LENIENT, JobSource

log = get_logger(__name__)


class CryptoJobsListSource(JobSource):
    name = "cryptojobslist"
    display_name = "CryptoJobsList"
    policy = LENIENT
    user_agent = BROWSER_USER_AGENT

    def __init__(self, url: str = API_ENDPOINTS["cryptojobslist"]) -> None:
        self.url = url

    def _fetch(self) -> list[Job]:
        data = self._json(self._get(self.url))
        if isinstance(data, dict):
            data = data.get("jobs") or []
        jobs = self._normalize_all(data if isinstance(data, list) else [])
        log.debug("CryptoJobsList returned %d jobs", len(jobs))
        return jobs
