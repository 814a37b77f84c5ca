"""End-to-end tests for the pipeline with stubbed sources, scorer and notifier."""
from __future__ import annotations

import logging

from conftest import NOW, make_job

from jobhacker import pipeline as pipeline_mod
from jobhacker.errors import TransportError, ValidationError
from jobhacker.models import AnalyzedJob, Job
from jobhacker.notify import Notifier
from jobhacker.pipeline import Pipeline, fetch_all
from jobhacker.sources.base import LENIENT, STRICT, JobSource
from jobhacker.storage import ProcessedJobStore


class StubSource(JobSource):
    policy = LENIENT

    def __init__(self, name: str, jobs: list[Job] | None = None, error: Exception | None = None) -> None:
        self.name = name
        self.display_name = name.title()
        self.jobs = jobs or []
        self.error = error
        self.calls = 0

    def _fetch(self) -> list[Job]:
        self.calls += 1
        if self.error:
            raise self.error
        return list(self.jobs)


class StrictStubSource(StubSource):
    policy = STRICT


class RecordingNotifier(Notifier):
    def __init__(self) -> None:
        super().__init__(delay=0)
        self.delivered: list[AnalyzedJob] = []

    def deliver(self, job: AnalyzedJob) -> None:
        self.delivered.append(job)


def scorer_from(scores: dict[str, int]):
    def score(job: Job) -> AnalyzedJob:
        value = scores[job.id]
        if value is None:
            raise ValidationError("bad answer", raw_text="???")
        return AnalyzedJob(job=job, score=value, reason=f"scored {value}")
    return score


def build(settings, profile, sources, scores, store=None):
    notifier = RecordingNotifier()
    p = Pipeline(
        settings,
        profile,
        sources=sources,
        store=store or ProcessedJobStore(settings.processed_jobs_path),
        scorer=scorer_from(scores),
        notifier=notifier,
    )
    return p, notifier


# --- fetch_all ---

def test_fetch_all_isolates_failing_source(caplog) -> None:
    good = StubSource("remoteok", [make_job("remoteok-1"), make_job("remoteok-2")])
    bad = StrictStubSource("weworkremotely", error=TransportError("HTTP 503"))
    with caplog.at_level(logging.INFO):
        result = fetch_all([bad, good])
    assert [j.id for j in result.jobs] == ["remoteok-1", "remoteok-2"]
    assert "Weworkremotely" in result.failures
    assert result.counts == {"Remoteok": 2}
    assert "fetch failed" in caplog.text


def test_fetch_all_merges_in_registration_order_and_dedups() -> None:
    first = StubSource("remoteok", [make_job("remoteok-1"), make_job("remoteok-2")])
    second = StubSource("remotive", [make_job("remotive-9", source="remotive"), make_job("remoteok-1")])
    result = fetch_all([first, second])
    assert [j.id for j in result.jobs] == ["remoteok-1", "remoteok-2", "remotive-9"]


def test_fetch_all_with_no_sources() -> None:
    assert fetch_all([]).jobs == []


# --- Pipeline.run ---

def test_run_delivers_only_high_scores_sorted(settings, profile) -> None:
    jobs = [make_job("remoteok-a"), make_job("remoteok-b"), make_job("remoteok-c")]
    p, notifier = build(settings, profile, [StubSource("remoteok", jobs)],
                        {"remoteok-a": 5, "remoteok-b": 9, "remoteok-c": 8})
    summary = p.run(now=NOW)

    assert [(j.id, j.score) for j in notifier.delivered] == [("remoteok-b", 9), ("remoteok-c", 8)]
    assert summary.delivered == notifier.delivered
    assert summary.fetched == summary.recent == summary.new == 3
    store = ProcessedJobStore(settings.processed_jobs_path)
    assert all(store.has(j.id) for j in jobs)


def test_run_drops_old_jobs_before_scoring(settings, profile) -> None:
    jobs = [make_job("remoteok-new", hours_ago=2), make_job("remoteok-old", hours_ago=48)]
    p, notifier = build(settings, profile, [StubSource("remoteok", jobs)], {"remoteok-new": 9})
    summary = p.run(now=NOW)
    assert summary.recent == 1
    assert [j.id for j in notifier.delivered] == ["remoteok-new"]
    assert not ProcessedJobStore(settings.processed_jobs_path).has("remoteok-old")


def test_run_skips_already_processed_jobs(settings, profile) -> None:
    store = ProcessedJobStore(settings.processed_jobs_path)
    store.add("remoteok-a")
    jobs = [make_job("remoteok-a"), make_job("remoteok-b")]
    p, notifier = build(settings, profile, [StubSource("remoteok", jobs)], {"remoteok-b": 8}, store=store)
    summary = p.run(now=NOW)
    assert summary.new == 1
    assert [j.id for j in notifier.delivered] == ["remoteok-b"]


def test_second_run_finds_nothing_new(settings, profile) -> None:
    jobs = [make_job("remoteok-a")]
    p, notifier = build(settings, profile, [StubSource("remoteok", jobs)], {"remoteok-a": 9})
    p.run(now=NOW)
    summary = p.run(now=NOW)
    assert summary.new == 0
    assert len(notifier.delivered) == 1


def test_scoring_failure_is_isolated_and_still_marked(settings, profile) -> None:
    jobs = [make_job("remoteok-a"), make_job("remoteok-b")]
    p, notifier = build(settings, profile, [StubSource("remoteok", jobs)], {"remoteok-a": None, "remoteok-b": 9})
    summary = p.run(now=NOW)
    assert summary.failed == ["remoteok-a"]
    assert [j.id for j in notifier.delivered] == ["remoteok-b"]
    assert ProcessedJobStore(settings.processed_jobs_path).has("remoteok-a")


def test_all_sources_failing_ends_run_early(settings, profile) -> None:
    sources = [
        StrictStubSource("remoteok", error=TransportError("down")),
        StubSource("remotive", error=RuntimeError("unexpected")),
    ]
    p, notifier = build(settings, profile, sources, {})
    summary = p.run(now=NOW)
    assert summary.fetched == 0
    assert set(summary.source_failures) == {"Remoteok", "Remotive"}
    assert notifier.delivered == []
    assert not settings.processed_jobs_path.exists()


def test_no_qualifying_jobs_delivers_nothing(settings, profile) -> None:
    p, notifier = build(settings, profile, [StubSource("remoteok", [make_job("remoteok-a")])], {"remoteok-a": 3})
    summary = p.run(now=NOW)
    assert summary.delivered == []
    assert notifier.delivered == []
    assert len(summary.analyzed) == 1


def test_overlapping_run_is_skipped(settings, profile) -> None:
    source = StubSource("remoteok", [make_job("remoteok-a")])
    p, notifier = build(settings, profile, [source], {"remoteok-a": 9})
    assert pipeline_mod._RUN_LOCK.acquire(blocking=False)
    try:
        summary = p.run(now=NOW)
    finally:
        pipeline_mod._RUN_LOCK.release()
    assert summary.skipped
    assert source.calls == 0
    assert notifier.delivered == []
