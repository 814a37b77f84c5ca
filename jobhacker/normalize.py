"""Map raw source payloads onto the canonical :class:`Job`.

Every source ships a differently shaped record. ``normalize_job`` dispatches on
the source tag to a mapping function that fills in the canonical fields and
derives a stable ``"<source>-<native id>"`` identifier. Mapping functions only
fall back for optional fields; records without their identity fields are
filtered out by the adapters before they get here.
"""
from __future__ import annotations

import html
import re
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Callable

from jobhacker.models import Job

UNTITLED = "Untitled"
UNKNOWN_COMPANY = "Unknown"

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"
_TAG_RE = re.compile(r"<[^>]+>")
_NUMERIC_RE = re.compile(r"^\d+(?:\.\d+)?$")

# Tried in order; first match wins.
_COMPANY_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"@\s*(.+)$"),
    re.compile(r"\bat\s+(.+?)(?:\s+[-–—|]|$)", re.IGNORECASE),
    re.compile(r"\s[-–—|]\s*(.+)$"),
)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def hash_string(value: str) -> str:
    """Small non-cryptographic hash for sources without a native id.

    32-bit ``h * 31 + c`` over UTF-16 code units, absolute value in base 36.
    Collisions are possible; only used as a last-resort key.
    """
    h = 0
    data = value.encode("utf-16-le")
    for i in range(0, len(data), 2):
        h = ((h << 5) - h + (data[i] | (data[i + 1] << 8))) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    h = abs(h)
    if h == 0:
        return "0"
    digits: list[str] = []
    while h:
        h, rem = divmod(h, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def strip_html(text: Any) -> str:
    """Remove tags, decode entities and collapse whitespace."""
    if not text:
        return ""
    clean = _TAG_RE.sub(" ", str(text))
    return " ".join(html.unescape(clean).split())


def extract_company(title: str | None) -> str | None:
    """Pull a company name out of "Title @ Co", "Title at Co" or "Title - Co"."""
    if not title:
        return None
    for pattern in _COMPANY_PATTERNS:
        match = pattern.search(title)
        if match and match.group(1).strip():
            return match.group(1).strip()
    return None


def _from_epoch(seconds: float) -> datetime:
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return _now()


def parse_date(value: Any) -> datetime:
    """Parse epoch seconds, RFC-822 or ISO-8601; "now" when unparseable."""
    if value is None or isinstance(value, bool):
        return _now()
    if isinstance(value, (int, float)):
        return _from_epoch(value)

    text = str(value).strip()
    if not text:
        return _now()
    if _NUMERIC_RE.match(text):
        return _from_epoch(float(text))

    parsed: datetime | None = None
    try:
        parsed = parsedate_to_datetime(text)
    except (TypeError, ValueError, IndexError):
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            return _now()
    if parsed is None:
        return _now()
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _text(raw: dict, *keys: str) -> str:
    for key in keys:
        value = raw.get(key)
        if value is not None and str(value).strip():
            return str(value).strip()
    return ""


def _native_id(raw: dict, *fallback_keys: str) -> str:
    native = _text(raw, "id")
    if native:
        return native
    return hash_string("".join(_text(raw, k) for k in fallback_keys))


def _remoteok(raw: dict) -> Job:
    native = _text(raw, "id")
    return Job(
        id=f"remoteok-{native}",
        title=_text(raw, "position") or UNTITLED,
        company=_text(raw, "company") or UNKNOWN_COMPANY,
        description=strip_html(raw.get("description")),
        url=_text(raw, "url") or f"https://remoteok.com/remote-jobs/{native}",
        posted_at=parse_date(raw.get("epoch") if raw.get("epoch") is not None else raw.get("date")),
        source="remoteok",
    )


def _weworkremotely(raw: dict) -> Job:
    link = _text(raw, "link")
    match = re.search(r"/(\d+)", link)
    title = _text(raw, "title")
    return Job(
        id=f"weworkremotely-{match.group(1) if match else hash_string(link)}",
        title=title or UNTITLED,
        company=extract_company(title) or UNKNOWN_COMPANY,
        description=strip_html(raw.get("description")),
        url=link,
        posted_at=parse_date(raw.get("pubDate")),
        source="weworkremotely",
    )


def _web3career(raw: dict) -> Job:
    title = _text(raw, "title")
    slug = _text(raw, "slug")
    url = _text(raw, "url", "apply_url", "link")
    if not url:
        url = f"https://web3.career/{slug}" if slug else "https://web3.career"
    native = _text(raw, "id") or hash_string(url if url != "https://web3.career" else title)
    return Job(
        id=f"web3career-{native}",
        title=title or UNTITLED,
        company=_text(raw, "company", "company_name") or extract_company(title) or UNKNOWN_COMPANY,
        description=strip_html(raw.get("description")),
        url=url,
        posted_at=parse_date(_text(raw, "published_at", "created_at", "pubDate") or None),
        source="web3career",
    )


def _hnhiring(raw: dict) -> Job:
    text = str(raw.get("comment_text") or "")
    first_line = strip_html(re.split(r"<p>|\n", text, maxsplit=1)[0])
    company = first_line.split("|", 1)[0].strip()[:50]
    native = _text(raw, "objectID")
    return Job(
        id=f"hnhiring-{native}",
        title=first_line[:100] or "Hacker News Job",
        company=company or "HN Posting",
        description=strip_html(text),
        url=f"https://news.ycombinator.com/item?id={native}",
        posted_at=parse_date(raw.get("created_at_i") if raw.get("created_at_i") is not None else raw.get("created_at")),
        source="hnhiring",
    )


def _jobicy(raw: dict) -> Job:
    title = _text(raw, "title")
    link = _text(raw, "link")
    return Job(
        id=f"jobicy-{hash_string(link)}",
        title=title or UNTITLED,
        company=extract_company(title) or _text(raw, "creator") or UNKNOWN_COMPANY,
        description=strip_html(raw.get("description")),
        url=link,
        posted_at=parse_date(raw.get("pubDate")),
        source="jobicy",
    )


def _cryptojobslist(raw: dict) -> Job:
    native = _native_id(raw, "title", "company")
    slug = _text(raw, "slug") or _text(raw, "id")
    return Job(
        id=f"cryptojobslist-{native}",
        title=_text(raw, "title") or UNTITLED,
        company=_text(raw, "company", "companyName") or UNKNOWN_COMPANY,
        description=strip_html(raw.get("description")),
        url=_text(raw, "url", "applyUrl") or f"https://cryptojobslist.com/jobs/{slug}",
        posted_at=parse_date(_text(raw, "publishedAt", "createdAt") or None),
        source="cryptojobslist",
    )


def _workingnomads(raw: dict) -> Job:
    native = _text(raw, "id") or hash_string(_text(raw, "url", "title"))
    return Job(
        id=f"workingnomads-{native}",
        title=_text(raw, "title") or UNTITLED,
        company=_text(raw, "company_name", "company") or UNKNOWN_COMPANY,
        description=strip_html(raw.get("description")),
        url=_text(raw, "url") or "https://www.workingnomads.com/jobs",
        posted_at=parse_date(_text(raw, "pub_date", "published_at") or None),
        source="workingnomads",
    )


def _remotive(raw: dict) -> Job:
    native = _text(raw, "id") or hash_string(_text(raw, "url", "title"))
    return Job(
        id=f"remotive-{native}",
        title=_text(raw, "title") or UNTITLED,
        company=_text(raw, "company_name") or UNKNOWN_COMPANY,
        description=strip_html(raw.get("description")),
        url=_text(raw, "url") or f"https://remotive.com/remote-jobs/{native}",
        posted_at=parse_date(raw.get("publication_date")),
        source="remotive",
    )


_MAPPERS: dict[str, Callable[[dict], Job]] = {
    "remoteok": _remoteok,
    "weworkremotely": _weworkremotely,
    "web3career": _web3career,
    "hnhiring": _hnhiring,
    "jobicy": _jobicy,
    "cryptojobslist": _cryptojobslist,
    "workingnomads": _workingnomads,
    "remotive": _remotive,
}


def normalize_job(raw: dict, source: str) -> Job:
    try:
        mapper = _MAPPERS[source]
    except KeyError:
        raise ValueError(f"No normalizer for source {source!r}") from None
    return mapper(raw)
