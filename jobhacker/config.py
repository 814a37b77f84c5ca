"""Load profile and env configuration."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml
from dotenv import load_dotenv

from jobhacker.errors import ConfigurationError
from jobhacker.log import get_logger
from jobhacker.models import CandidateProfile

load_dotenv()

log = get_logger(__name__)

ROOT_DIR: Path = Path(__file__).resolve().parent.parent
CONFIG_DIR: Path = ROOT_DIR / "config"
DATA_DIR: Path = ROOT_DIR / "data"
PROFILE_PATH: Path = CONFIG_DIR / "profile.yaml"
PROCESSED_JOBS_PATH: Path = DATA_DIR / "processed_jobs.json"

API_ENDPOINTS: dict[str, str] = {
    "remoteok": "https://remoteok.com/api",
    "weworkremotely": "https://weworkremotely.com/categories/remote-programming-jobs.rss",
    "web3career": "https://web3.career/api/v1",
    "hnhiring": "https://hn.algolia.com/api/v1/search_by_date",
    "jobicy": "https://jobicy.com/feed/newjobs",
    "cryptojobslist": "https://cryptojobslist.com/api/jobs",
    "workingnomads": "https://www.workingnomads.com/api/exposed_jobs/",
    "remotive": "https://remotive.com/api/remote-jobs",
}

DEFAULT_MIN_SCORE = 8
DEFAULT_HOURS_THRESHOLD = 24
DEFAULT_CRON_SCHEDULE = "0 */6 * * *"
DEFAULT_TEMPERATURE = 0.7

# Preset base URL / model per scoring provider; env overrides win.
PROVIDER_PRESETS: dict[str, dict[str, Any]] = {
    "deepseek": {
        "base_url": "https://api.deepseek.com",
        "model": "deepseek-chat",
        "temperature": DEFAULT_TEMPERATURE,
    },
    "openai": {
        "base_url": "https://api.openai.com/v1",
        "model": "gpt-4o-mini",
        "temperature": DEFAULT_TEMPERATURE,
    },
    "groq": {
        "base_url": "https://api.groq.com/openai/v1",
        "model": "llama-3.1-70b-versatile",
        "temperature": DEFAULT_TEMPERATURE,
    },
    "together": {
        "base_url": "https://api.together.xyz/v1",
        "model": "meta-llama/Llama-3-70b-chat-hf",
        "temperature": DEFAULT_TEMPERATURE,
    },
    "claude": {
        "base_url": "https://api.anthropic.com",
        "model": "claude-sonnet-4-20250514",
        "temperature": DEFAULT_TEMPERATURE,
    },
    "custom": {
        "temperature": DEFAULT_TEMPERATURE,
    },
}

_API_KEY_VARS: tuple[str, ...] = (
    "AI_API_KEY",
    "DEEPSEEK_API_KEY",
    "OPENAI_API_KEY",
    "ANTHROPIC_API_KEY",
)

DEFAULT_PROFILE = CandidateProfile(
    experience="3 years of experience as a front-end engineer",
    skills=(
        "React", "Next.js", "TypeScript", "Vue", "Nuxt", "Tailwind CSS",
        "Bootstrap", "Material UI", "Ant Design", "Chakra UI", "Shadcn UI",
        "Node.js",
    ),
    location="China",
    remote_only=True,
    industries=("AI", "Web3"),
)


@dataclass(frozen=True)
class AIConfig:
    provider: str
    api_key: str
    model: str
    base_url: str | None = None
    temperature: float = DEFAULT_TEMPERATURE


@dataclass(frozen=True)
class Settings:
    """Everything the pipeline needs, resolved once at startup."""

    ai: AIConfig
    min_score: int = DEFAULT_MIN_SCORE
    hours_threshold: float = DEFAULT_HOURS_THRESHOLD
    run_once: bool = False
    cron_schedule: str = DEFAULT_CRON_SCHEDULE
    processed_jobs_path: Path = PROCESSED_JOBS_PATH
    profile_path: Path = PROFILE_PATH
    telegram_bot_token: str = ""
    telegram_chat_id: str = ""
    notify_delay: float = 1.0


def get_env(key: str, default: str = "", environ: Mapping[str, str] | None = None) -> str:
    env = os.environ if environ is None else environ
    return (env.get(key) or default).strip()


def _truthy(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _number(environ: Mapping[str, str], key: str, default: float) -> float:
    raw = get_env(key, environ=environ)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"{key} must be a number, got {raw!r}") from None


def processed_jobs_path(environ: Mapping[str, str] | None = None) -> Path:
    """Dedup store location; needs no scoring credentials."""
    env = os.environ if environ is None else environ
    return Path(get_env("PROCESSED_JOBS_PATH", environ=env) or PROCESSED_JOBS_PATH)


def load_ai_config(environ: Mapping[str, str] | None = None) -> AIConfig:
    env = os.environ if environ is None else environ
    provider = get_env("AI_PROVIDER", "deepseek", env).lower()
    if provider not in PROVIDER_PRESETS:
        raise ConfigurationError(
            f"Unsupported AI_PROVIDER {provider!r}; choose one of {', '.join(PROVIDER_PRESETS)}"
        )

    api_key = next((get_env(k, environ=env) for k in _API_KEY_VARS if get_env(k, environ=env)), "")
    if not api_key:
        raise ConfigurationError(f"Set one of {', '.join(_API_KEY_VARS)} in the environment or .env")

    preset = PROVIDER_PRESETS[provider]
    base_url = get_env("AI_BASE_URL", environ=env) or preset.get("base_url")
    if provider == "custom" and not base_url:
        raise ConfigurationError("AI_PROVIDER=custom requires AI_BASE_URL")

    return AIConfig(
        provider=provider,
        api_key=api_key,
        model=get_env("AI_MODEL", environ=env) or preset.get("model") or "deepseek-chat",
        base_url=base_url,
        temperature=_number(env, "AI_TEMPERATURE", preset.get("temperature", DEFAULT_TEMPERATURE)),
    )


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build :class:`Settings` from the environment; raises ConfigurationError."""
    env = os.environ if environ is None else environ
    ai = load_ai_config(env)

    min_score = _number(env, "MIN_SCORE", DEFAULT_MIN_SCORE)
    if not 1 <= min_score <= 10:
        raise ConfigurationError(f"MIN_SCORE must be within 1-10, got {min_score}")
    hours = _number(env, "HOURS_THRESHOLD", DEFAULT_HOURS_THRESHOLD)
    if hours <= 0:
        raise ConfigurationError(f"HOURS_THRESHOLD must be positive, got {hours}")

    return Settings(
        ai=ai,
        min_score=int(min_score),
        hours_threshold=hours,
        run_once=_truthy(get_env("RUN_ONCE", environ=env)),
        cron_schedule=get_env("CRON_SCHEDULE", DEFAULT_CRON_SCHEDULE, env),
        processed_jobs_path=processed_jobs_path(env),
        profile_path=Path(get_env("PROFILE_PATH", environ=env) or PROFILE_PATH),
        telegram_bot_token=get_env("TELEGRAM_BOT_TOKEN", environ=env),
        telegram_chat_id=get_env("TELEGRAM_CHAT_ID", environ=env),
        notify_delay=_number(env, "NOTIFY_DELAY_SECONDS", 1.0),
    )


def load_profile(path: Path | None = None) -> CandidateProfile:
    """Read the candidate profile YAML; the built-in default when absent."""
    path = path or PROFILE_PATH
    if not path.exists():
        log.debug("No profile at %s, using built-in default", path)
        return DEFAULT_PROFILE

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path} must contain a mapping")

    prefs = data.get("preferences") or {}
    return CandidateProfile(
        experience=str(data.get("experience") or DEFAULT_PROFILE.experience),
        skills=tuple(str(s) for s in data.get("skills") or DEFAULT_PROFILE.skills),
        location=str(data.get("location") or DEFAULT_PROFILE.location),
        remote_only=bool(prefs.get("remote_only", DEFAULT_PROFILE.remote_only)),
        industries=tuple(str(i) for i in prefs.get("industries") or DEFAULT_PROFILE.industries),
    )
