"""Score jobs against the candidate profile with a language model.

Two wire shapes are supported. Most providers speak the OpenAI chat-completion
protocol (called through the ``openai`` client with a provider base URL); the
``claude`` provider uses Anthropic's messages API over plain ``requests``.
``PROVIDERS`` maps each provider name to the protocol that builds its request,
sends it and pulls the text out of the answer, so a new provider is one entry.
"""
from __future__ import annotations

import json
import math
import re
from typing import Any, Callable, NamedTuple

import openai
import requests
from openai import OpenAI

from jobhacker.config import AIConfig
from jobhacker.errors import ConfigurationError, TransportError, ValidationError
from jobhacker.log import get_logger
from jobhacker.models import MAX_SCORE, MIN_SCORE, AnalyzedJob, CandidateProfile, Job

log = get_logger(__name__)

SYSTEM_PROMPT = (
    "You are a professional recruiting analyst who is good at judging how well "
    "a job posting fits a candidate."
)
DESCRIPTION_BUDGET = 2000

ANTHROPIC_MESSAGES_URL = "https://api.anthropic.com/v1/messages"
ANTHROPIC_VERSION = "2023-06-01"
ANTHROPIC_MAX_TOKENS = 1024
REQUEST_TIMEOUT = 30

_FENCE_OPEN_RE = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_FENCE_CLOSE_RE = re.compile(r"\s*```$")


class ScoreResult(NamedTuple):
    score: int
    reason: str


class Protocol(NamedTuple):
    build_request: Callable[[AIConfig, str, str], dict[str, Any]]
    send: Callable[[AIConfig, dict[str, Any]], Any]
    extract_content: Callable[[Any], str]


def build_prompt(job: Job, profile: CandidateProfile) -> str:
    description = job.description[:DESCRIPTION_BUDGET]
    if len(job.description) > DESCRIPTION_BUDGET:
        description += "..."
    work_mode = "looking for remote work only" if profile.remote_only else "open to remote or on-site work"

    return f"""You are a recruiting match expert. Analyse how well the job below fits the candidate.

Candidate background:
- {profile.experience}
- Skilled in {", ".join(profile.skills)}
- Based in {profile.location}, {work_mode}
- Interested in {" or ".join(profile.industries)} startups

Job:
- Title: {job.title}
- Company: {job.company}
- Description: {description}

Return JSON only (no other text and no code fences):
{{"score": 1-10, "reason": "one sentence explaining the match"}}

Scoring rubric:
- 1-3: no match
- 4-5: partial match with large gaps
- 6-7: reasonable match with some strengths
- 8-9: strong match, very suitable
- 10: perfect match"""


# --- chat-completion protocol (deepseek, openai, groq, together, custom) ---

def _chat_request(config: AIConfig, system_prompt: str, prompt: str) -> dict[str, Any]:
    return {
        "model": config.model,
        "messages": [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": prompt},
        ],
        "temperature": config.temperature,
        "response_format": {"type": "json_object"},
    }


def _chat_send(config: AIConfig, request: dict[str, Any]) -> Any:
    client = OpenAI(
        api_key=config.api_key,
        base_url=config.base_url or None,
        max_retries=0,
        timeout=REQUEST_TIMEOUT,
    )
    try:
        return client.chat.completions.create(**request)
    except openai.OpenAIError as exc:
        raise TransportError(f"{config.provider} request failed: {exc}") from exc


def _chat_content(completion: Any) -> str:
    choices = getattr(completion, "choices", None) or []
    if not choices:
        return ""
    return choices[0].message.content or ""


# --- Anthropic messages protocol (claude) ---

def _messages_request(config: AIConfig, system_prompt: str, prompt: str) -> dict[str, Any]:
    return {
        "model": config.model,
        "max_tokens": ANTHROPIC_MAX_TOKENS,
        "messages": [{"role": "user", "content": prompt}],
        "system": system_prompt,
        "temperature": config.temperature,
    }


def _messages_send(config: AIConfig, request: dict[str, Any]) -> Any:
    headers = {
        "Content-Type": "application/json",
        "x-api-key": config.api_key,
        "anthropic-version": ANTHROPIC_VERSION,
    }
    try:
        r = requests.post(ANTHROPIC_MESSAGES_URL, json=request, headers=headers, timeout=REQUEST_TIMEOUT)
        r.raise_for_status()
        return r.json()
    except requests.RequestException as exc:
        status = getattr(getattr(exc, "response", None), "status_code", None)
        raise TransportError(f"{config.provider} request failed: {exc}", status_code=status) from exc
    except ValueError as exc:
        raise TransportError(f"{config.provider} returned a non-JSON body") from exc


def _messages_content(data: Any) -> str:
    try:
        return data["content"][0]["text"] or ""
    except (KeyError, IndexError, TypeError):
        return ""


CHAT_COMPLETION = Protocol(_chat_request, _chat_send, _chat_content)
ANTHROPIC_MESSAGES = Protocol(_messages_request, _messages_send, _messages_content)

PROVIDERS: dict[str, Protocol] = {
    "deepseek": CHAT_COMPLETION,
    "openai": CHAT_COMPLETION,
    "groq": CHAT_COMPLETION,
    "together": CHAT_COMPLETION,
    "custom": CHAT_COMPLETION,
    "claude": ANTHROPIC_MESSAGES,
}


def invoke(prompt: str, system_prompt: str, config: AIConfig) -> str:
    """Send one prompt to the configured provider and return the raw text."""
    protocol = PROVIDERS.get(config.provider)
    if protocol is None:
        raise ConfigurationError(f"Unsupported AI provider: {config.provider!r}")

    request = protocol.build_request(config, system_prompt, prompt)
    content = protocol.extract_content(protocol.send(config, request))
    if not content or not content.strip():
        raise ValidationError(f"{config.provider} returned an empty response", raw_text=content or "")
    return content


def _strip_fences(text: str) -> str:
    cleaned = text.strip()
    if cleaned.startswith("```"):
        cleaned = _FENCE_CLOSE_RE.sub("", _FENCE_OPEN_RE.sub("", cleaned))
    return cleaned.strip()


def parse_response(raw_text: str) -> ScoreResult:
    """Validate the model answer: a JSON object with score 1-10 and a reason."""
    try:
        parsed = json.loads(_strip_fences(raw_text))
    except ValueError as exc:
        raise ValidationError(f"Response is not valid JSON: {exc}", raw_text=raw_text) from exc
    if not isinstance(parsed, dict):
        raise ValidationError("Response JSON is not an object", raw_text=raw_text)

    raw_score = parsed.get("score")
    try:
        if isinstance(raw_score, bool):
            raise TypeError("boolean score")
        score = float(raw_score)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid score: {raw_score!r}", raw_text=raw_text) from None
    if math.isnan(score) or not MIN_SCORE <= score <= MAX_SCORE:
        raise ValidationError(
            f"Invalid score: {raw_score!r}, must be within {MIN_SCORE}-{MAX_SCORE}", raw_text=raw_text
        )

    reason = parsed.get("reason")
    if not isinstance(reason, str) or not reason.strip():
        raise ValidationError("Missing match reason", raw_text=raw_text)

    # Floor so a fractional score never rises past the threshold.
    return ScoreResult(score=math.floor(score), reason=reason.strip())


def analyze_job(job: Job, profile: CandidateProfile, config: AIConfig) -> AnalyzedJob:
    """Score one job; every failure is logged and re-raised."""
    prompt = build_prompt(job, profile)
    try:
        content = invoke(prompt, SYSTEM_PROMPT, config)
        result = parse_response(content)
    except ValidationError as exc:
        log.error("Scoring failed [%s]: %s | raw response: %r", job.id, exc, exc.raw_text[:500])
        raise
    except Exception as exc:
        log.error("Scoring failed [%s]: %s", job.id, exc)
        raise
    log.debug("Scored %s → %d/10", job.id, result.score)
    return AnalyzedJob(job=job, score=result.score, reason=result.reason)
