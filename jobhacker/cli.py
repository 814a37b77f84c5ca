"""Command line interface for the job hunting agent."""
from __future__ import annotations

import argparse

from jobhacker.config import load_profile, load_settings, processed_jobs_path
from jobhacker.errors import ConfigurationError
from jobhacker.log import get_logger, set_level
from jobhacker.pipeline import Pipeline
from jobhacker.scheduler import run_forever, validate
from jobhacker.storage import ProcessedJobStore

log = get_logger(__name__)

SUPPORTED_PROVIDERS = "deepseek, openai, claude, groq, together, custom"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Fetch remote job postings, score them with an LLM and report the best matches."
    )
    parser.add_argument("--once", action="store_true", help="Run a single pass and exit (same as RUN_ONCE=true)")
    parser.add_argument(
        "--clear-history", action="store_true", help="Forget every processed job id and exit"
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    if args.verbose:
        set_level("DEBUG")

    if args.clear_history:
        ProcessedJobStore(processed_jobs_path()).clear()
        return 0

    try:
        settings = load_settings()
        profile = load_profile(settings.profile_path)
        recurring = not (args.once or settings.run_once)
        if recurring:
            validate(settings.cron_schedule)
    except ConfigurationError as exc:
        log.error("Invalid configuration: %s", exc)
        log.error("Create a .env file with AI_API_KEY (or DEEPSEEK_API_KEY / OPENAI_API_KEY / ANTHROPIC_API_KEY)")
        log.error("Supported providers: %s", SUPPORTED_PROVIDERS)
        return 1

    log.info("AI provider: %s (model: %s)", settings.ai.provider, settings.ai.model)
    pipeline = Pipeline(settings, profile)

    try:
        pipeline.run()
    except Exception:
        log.exception("Run failed")
        return 1

    if not recurring:
        log.info("Single-run mode, done.")
        return 0

    def scheduled_run() -> None:
        try:
            pipeline.run()
        except Exception:
            log.exception("Scheduled run failed")

    try:
        run_forever(settings.cron_schedule, scheduled_run)
    except KeyboardInterrupt:
        log.info("Interrupted, exiting.")
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
