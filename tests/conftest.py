"""Shared fixtures for the job hunting agent tests."""
from __future__ import annotations

import os

os.environ.setdefault("LOG_TO_FILE", "false")

from datetime import datetime, timedelta, timezone  # noqa: E402

import pytest  # noqa: E402

from jobhacker.config import AIConfig, Settings  # noqa: E402
from jobhacker.models import AnalyzedJob, CandidateProfile, Job  # noqa: E402

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


def make_job(
    job_id: str = "remoteok-1",
    title: str = "Frontend Engineer",
    hours_ago: float = 1,
    source: str = "remoteok",
    now: datetime = NOW,
) -> Job:
    return Job(
        id=job_id,
        title=title,
        company="Tech Corp",
        description="React/TypeScript developer needed",
        url=f"https://example.com/{job_id}",
        posted_at=now - timedelta(hours=hours_ago),
        source=source,
    )


def make_analyzed(job_id: str, score: int, reason: str = "Good fit") -> AnalyzedJob:
    return AnalyzedJob(job=make_job(job_id), score=score, reason=reason)


@pytest.fixture
def profile() -> CandidateProfile:
    return CandidateProfile(
        experience="3 years of experience as a front-end engineer",
        skills=("React", "Next.js", "TypeScript"),
        location="China",
        remote_only=True,
        industries=("AI", "Web3"),
    )


@pytest.fixture
def ai_config() -> AIConfig:
    return AIConfig(provider="deepseek", api_key="test-key", model="deepseek-chat", base_url="https://api.deepseek.com")


@pytest.fixture
def settings(tmp_path, ai_config) -> Settings:
    return Settings(
        ai=ai_config,
        processed_jobs_path=tmp_path / "processed_jobs.json",
        notify_delay=0,
    )
