"""
Job hunting pipeline.

Runs: fetch (all sources, in parallel) → merge → time filter → dedup filter →
score (one job at a time) → threshold filter → sort → deliver.
"""
from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Sequence

from jobhacker.config import Settings
from jobhacker.filters import filter_by_score, filter_by_time, sort_by_score
from jobhacker.log import get_logger
from jobhacker.models import AnalyzedJob, CandidateProfile, Job
from jobhacker.notify import Notifier, build_notifier
from jobhacker.scoring import analyze_job
from jobhacker.sources import JobSource, get_sources
from jobhacker.storage import ProcessedJobStore

log = get_logger(__name__)

# Held for the duration of a run; an overlapping scheduled run is skipped.
_RUN_LOCK = threading.Lock()


@dataclass
class FetchResult:
    jobs: list[Job] = field(default_factory=list)
    counts: dict[str, int] = field(default_factory=dict)
    failures: dict[str, str] = field(default_factory=dict)


@dataclass
class RunSummary:
    fetched: int = 0
    recent: int = 0
    new: int = 0
    analyzed: list[AnalyzedJob] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    delivered: list[AnalyzedJob] = field(default_factory=list)
    source_counts: dict[str, int] = field(default_factory=dict)
    source_failures: dict[str, str] = field(default_factory=dict)
    skipped: bool = False


def _fetch_source(source: JobSource) -> list[Job]:
    return source.fetch()


def fetch_all(sources: Sequence[JobSource]) -> FetchResult:
    """Fetch every source concurrently; one failure never affects the others.

    Jobs are merged in source registration order and the first job seen for
    each id wins.
    """
    result = FetchResult()
    if not sources:
        return result

    log.info("Fetching %d source(s) in parallel...", len(sources))
    with ThreadPoolExecutor(max_workers=len(sources)) as pool:
        futures = [(src, pool.submit(_fetch_source, src)) for src in sources]

    seen: set[str] = set()
    for src, future in futures:
        name = src.display_name
        try:
            batch = future.result()
        except Exception as exc:
            log.error("✗ %s: fetch failed: %s", name, exc)
            result.failures[name] = str(exc)
            continue
        log.info("✓ %s: %d jobs", name, len(batch))
        result.counts[name] = len(batch)
        for job in batch:
            if job.id not in seen:
                seen.add(job.id)
                result.jobs.append(job)
    return result


class Pipeline:
    def __init__(
        self,
        settings: Settings,
        profile: CandidateProfile,
        *,
        sources: Sequence[JobSource] | None = None,
        store: ProcessedJobStore | None = None,
        scorer: Callable[[Job], AnalyzedJob] | None = None,
        notifier: Notifier | None = None,
    ) -> None:
        self.settings = settings
        self.profile = profile
        self.sources = list(sources) if sources is not None else get_sources()
        self.store = store or ProcessedJobStore(settings.processed_jobs_path)
        self.scorer = scorer or (lambda job: analyze_job(job, profile, settings.ai))
        self.notifier = notifier or build_notifier(settings)

    def run(self, now: datetime | None = None) -> RunSummary:
        if not _RUN_LOCK.acquire(blocking=False):
            log.warning("Previous run still in progress, skipping this one")
            return RunSummary(skipped=True)
        try:
            return self._run(now)
        finally:
            _RUN_LOCK.release()

    def _run(self, now: datetime | None) -> RunSummary:
        summary = RunSummary()

        # 1. Fetch + merge
        fetched = fetch_all(self.sources)
        summary.fetched = len(fetched.jobs)
        summary.source_counts = fetched.counts
        summary.source_failures = fetched.failures
        log.info("Total unique jobs fetched: %d", summary.fetched)
        if not fetched.jobs:
            log.warning("No jobs fetched from any source")
            return summary

        # 2. Time filter
        recent = filter_by_time(fetched.jobs, self.settings.hours_threshold, now=now)
        summary.recent = len(recent)
        log.info("%d jobs posted within %g hours", len(recent), self.settings.hours_threshold)

        # 3. Dedup filter
        self.store.load()
        new_jobs = [job for job in recent if not self.store.has(job.id)]
        summary.new = len(new_jobs)
        log.info("%d new jobs not seen before", len(new_jobs))
        if not new_jobs:
            log.info("No new jobs, try again next time")
            return summary

        # 4. Score, one job at a time; mark processed even on failure
        for i, job in enumerate(new_jobs, 1):
            log.info("[%d/%d] Scoring: %s", i, len(new_jobs), job.title)
            try:
                summary.analyzed.append(self.scorer(job))
            except Exception as exc:
                log.error("✗ Scoring failed for %s: %s", job.id, exc)
                summary.failed.append(job.id)
            self.store.add(job.id)

        # 5. Threshold + sort
        qualifying = sort_by_score(filter_by_score(summary.analyzed, self.settings.min_score))
        if not qualifying:
            log.info("No jobs scored >= %d", self.settings.min_score)
            return summary

        # 6. Deliver
        log.info("Found %d high-match jobs", len(qualifying))
        self.notifier.deliver_batch(qualifying)
        summary.delivered = qualifying

        log.info(
            "Run complete: fetched=%d, recent=%d, new=%d, scored=%d, failed=%d, delivered=%d",
            summary.fetched, summary.recent, summary.new,
            len(summary.analyzed), len(summary.failed), len(summary.delivered),
        )
        return summary


def run(settings: Settings, profile: CandidateProfile) -> RunSummary:
    return Pipeline(settings, profile).run()
