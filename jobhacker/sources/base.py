"""Shared plumbing for job board adapters.

Each adapter declares a failure ``policy``:

* ``STRICT``   - transport and parse errors propagate to the caller, which
  treats the whole source as absent for the run.
* ``LENIENT``  - the same errors are logged and an empty list is returned.
* ``FALLBACK`` - the adapter walks an ordered list of endpoints and keeps the
  first one that yields jobs; exhaustion returns an empty list.

Malformed entries inside an otherwise good payload are skipped under every
policy.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Iterable
from xml.etree import ElementTree

import requests

from jobhacker.errors import ParseError, TransportError
from jobhacker.log import get_logger
from jobhacker.models import Job
from jobhacker.normalize import normalize_job

log = get_logger(__name__)

STRICT = "strict"
LENIENT = "lenient"
FALLBACK = "fallback"

USER_AGENT = "Mozilla/5.0 (compatible; JobHacker-AI/1.0)"
BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
RSS_ACCEPT = "application/rss+xml, application/xml, text/xml"


class JobSource(ABC):
    name: str = "generic"
    display_name: str = "Generic"
    policy: str = LENIENT
    timeout: float = 15
    user_agent: str = USER_AGENT
    accept: str = "application/json"

    def fetch(self) -> list[Job]:
        """Fetch and normalize this source's postings, honouring ``policy``."""
        if self.policy == STRICT:
            return self._fetch()
        try:
            return self._fetch()
        except (TransportError, ParseError) as exc:
            log.warning("[%s] fetch failed, returning no jobs: %s", self.display_name, exc)
            return []

    @abstractmethod
    def _fetch(self) -> list[Job]:
        pass

    def _get(self, url: str, *, params: dict | None = None, accept: str | None = None) -> requests.Response:
        """GET ``url``; any request failure or HTTP error becomes TransportError."""
        headers = {"User-Agent": self.user_agent, "Accept": accept or self.accept}
        try:
            r = requests.get(url, params=params, headers=headers, timeout=self.timeout)
            r.raise_for_status()
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            raise TransportError(f"{self.display_name}: HTTP {status} from {url}", source=self.name, status_code=status) from exc
        except requests.RequestException as exc:
            raise TransportError(f"{self.display_name}: {exc}", source=self.name) from exc
        return r

    def _json(self, response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise ParseError(f"{self.display_name}: invalid JSON payload", source=self.name) from exc

    def _normalize_all(self, entries: Iterable[Any]) -> list[Job]:
        """Normalize entries that pass ``_is_valid``; bad ones are skipped."""
        jobs: list[Job] = []
        skipped = 0
        for entry in entries:
            if not isinstance(entry, dict) or not self._is_valid(entry):
                skipped += 1
                continue
            try:
                jobs.append(normalize_job(entry, self.name))
            except (TypeError, ValueError) as exc:
                skipped += 1
                log.debug("[%s] skipped entry: %s", self.display_name, exc)
        if skipped:
            log.debug("[%s] skipped %d malformed entries", self.display_name, skipped)
        return jobs

    def _is_valid(self, entry: dict) -> bool:
        return bool(entry.get("title"))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r}, policy={self.policy!r})"


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def parse_rss_items(text: str | bytes, source: str | None = None) -> list[dict[str, str]]:
    """Return ``channel/item`` children of an RSS document as flat dicts.

    Namespaced elements are keyed by local name (``dc:creator`` -> ``creator``).
    Raises ParseError when the payload is not well-formed XML.
    """
    try:
        root = ElementTree.fromstring(text)
    except ElementTree.ParseError as exc:
        raise ParseError(f"Malformed XML feed: {exc}", source=source) from exc

    items: list[dict[str, str]] = []
    for item in root.iter("item"):
        fields: dict[str, str] = {}
        for child in item:
            key = _local_name(child.tag)
            if key not in fields:
                fields[key] = (child.text or "").strip()
        items.append(fields)
    return items
