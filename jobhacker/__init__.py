"""AI-assisted job hunting agent: fetch, dedup, score and surface remote job postings."""

from .models import SOURCES, AnalyzedJob, CandidateProfile, Job

__all__ = ["SOURCES", "Job", "AnalyzedJob", "CandidateProfile"]
