"""Time-window and score filters applied between pipeline stages."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Iterable

from jobhacker.models import AnalyzedJob, Job


def filter_by_time(
    jobs: Iterable[Job], hours_threshold: float = 24, now: datetime | None = None
) -> list[Job]:
    """Keep jobs posted within the last ``hours_threshold`` hours.

    Future-dated postings are dropped rather than clamped, so a bad date parse
    or clock skew cannot make a job look permanently fresh.
    """
    now = now or datetime.now(timezone.utc)
    window = timedelta(hours=hours_threshold)
    return [job for job in jobs if timedelta(0) <= now - job.posted_at <= window]


def filter_by_score(jobs: Iterable[AnalyzedJob], min_score: int) -> list[AnalyzedJob]:
    return [job for job in jobs if job.score >= min_score]


def sort_by_score(jobs: Iterable[AnalyzedJob]) -> list[AnalyzedJob]:
    """Highest score first; ties keep their scoring order."""
    return sorted(jobs, key=lambda j: -j.score)
