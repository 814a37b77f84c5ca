"""Working Nomads: exposed jobs JSON feed."""
from __future__ import annotations

from jobhacker.config import API_ENDPOINTS
from jobhacker.log import get_logger
from jobhacker.models import Job
from jobhacker.sources.base import BROWSER_USER_AGENT, LENIENT, JobSource

log = get_logger(__name__)


class WorkingNomadsSource(JobSource):
    name = "workingnomads"
    display_name = "Working Nomads"
    policy = LENIENT
    user_agent = BROWSER_USER_AGENT

    def __init__(self, url: str = API_ENDPOINTS["workingnomads"]) -> None:
        self.url = url

    def _fetch(self) -> list[Job]:
        data = self._json(self._get(self.url))
        jobs = self._normalize_all(data if isinstance(data, list) else [])
        log.debug("Working Nomads returned %d jobs", len(jobs))
        return jobs
