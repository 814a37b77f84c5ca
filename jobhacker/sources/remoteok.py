"""RemoteOK: public JSON API, the primary source.

Docs: https://remoteok.com/api (first element is a legal notice, not a job)
"""
from __future__ import annotations

from jobhacker.config import API_ENDPOINTS
from jobhacker.errors import ParseError
from jobhacker.log import get_logger
from jobhacker.models import Job
from jobhacker.sources.base import BROWSER_USER_AGENT, STRICT, JobSource

log = get_logger(__name__)


class RemoteOKSource(JobSource):
    name = "remoteok"
    display_name = "RemoteOK"
    policy = STRICT
    # RemoteOK answers 403 without a browser-ish User-Agent.
    user_agent = BROWSER_USER_AGENT
    timeout = 20

    def __init__(self, url: str = API_ENDPOINTS["remoteok"]) -> None:
        self.url = url

    def _is_valid(self, entry: dict) -> bool:
        return bool(entry.get("id")) and bool(entry.get("position"))

    def _fetch(self) -> list[Job]:
        data = self._json(self._get(self.url))
        if not isinstance(data, list):
            raise ParseError(f"RemoteOK payload unexpected type: {type(data).__name__}", source=self.name)
        jobs = self._normalize_all(data)
        log.debug("RemoteOK returned %d jobs", len(jobs))
        return jobs
