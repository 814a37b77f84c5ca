"""Data models for jobs, scored jobs and the candidate profile."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

SOURCES: tuple[str, ...] = (
    "remoteok",
    "weworkremotely",
    "web3career",
    "hnhiring",
    "jobicy",
    "cryptojobslist",
    "workingnomads",
    "remotive",
)

MIN_SCORE = 1
MAX_SCORE = 10


@dataclass(frozen=True)
class Job:
    id: str
    title: str
    company: str
    description: str
    url: str
    posted_at: datetime
    source: str

    def __post_init__(self) -> None:
        if self.source not in SOURCES:
            raise ValueError(f"Unknown job source: {self.source!r}")
        if not self.id:
            raise ValueError("Job.id cannot be empty")


@dataclass(frozen=True)
class AnalyzedJob:
    """A job plus the score and reason returned by the scoring API."""

    job: Job
    score: int
    reason: str

    def __post_init__(self) -> None:
        if not MIN_SCORE <= self.score <= MAX_SCORE:
            raise ValueError(f"Score {self.score} outside {MIN_SCORE}-{MAX_SCORE}")
        if not self.reason or not self.reason.strip():
            raise ValueError("AnalyzedJob.reason cannot be empty")

    @property
    def id(self) -> str:
        return self.job.id

    @property
    def title(self) -> str:
        return self.job.title

    @property
    def company(self) -> str:
        return self.job.company

    @property
    def description(self) -> str:
        return self.job.description

    @property
    def url(self) -> str:
        return self.job.url

    @property
    def posted_at(self) -> datetime:
        return self.job.posted_at

    @property
    def source(self) -> str:
        return self.job.source


@dataclass(frozen=True)
class CandidateProfile:
    experience: str
    skills: tuple[str, ...] = field(default_factory=tuple)
    location: str = ""
    remote_only: bool = True
    industries: tuple[str, ...] = field(default_factory=tuple)
