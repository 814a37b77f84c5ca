"""
Recurring mode: run the pipeline on a cron-style schedule.

Only the cron shapes the agent is actually configured with are understood and
translated to ``schedule`` jobs:

  ``M */N * * *``  every N hours at minute M
  ``M H * * *``    daily at H:M
  ``M * * * *``    hourly at minute M
  ``*/N * * * *``  every N minutes

Intervals count from process start rather than from midnight.
"""
from __future__ import annotations

import re
import time
from typing import Callable

import schedule

from jobhacker.errors import ConfigurationError
from jobhacker.log import get_logger

log = get_logger(__name__)

POLL_SECONDS = 30

_STEP_RE = re.compile(r"^\*/(\d+)$")


def _int_field(value: str, low: int, high: int, expr: str) -> int:
    if not value.isdigit() or not low <= int(value) <= high:
        raise ConfigurationError(f"Unsupported CRON_SCHEDULE {expr!r}")
    return int(value)


def _step(value: str, expr: str) -> int | None:
    match = _STEP_RE.match(value)
    if not match:
        return None
    n = int(match.group(1))
    if n < 1:
        raise ConfigurationError(f"Unsupported CRON_SCHEDULE {expr!r}")
    return n


def register(
    expr: str,
    task: Callable[[], object],
    scheduler: schedule.Scheduler | None = None,
) -> schedule.Job:
    """Translate ``expr`` into a job on ``scheduler`` (default: module scheduler)."""
    sched = scheduler or schedule.default_scheduler
    fields = expr.split()
    if len(fields) != 5 or fields[2:] != ["*", "*", "*"]:
        raise ConfigurationError(f"Unsupported CRON_SCHEDULE {expr!r}")
    minute, hour = fields[0], fields[1]

    minute_step = _step(minute, expr)
    if minute_step is not None:
        if hour != "*":
            raise ConfigurationError(f"Unsupported CRON_SCHEDULE {expr!r}")
        return sched.every(minute_step).minutes.do(task)

    m = _int_field(minute, 0, 59, expr)
    hour_step = _step(hour, expr)
    if hour_step is not None:
        return sched.every(hour_step).hours.at(f":{m:02d}").do(task)
    if hour == "*":
        return sched.every().hour.at(f":{m:02d}").do(task)
    h = _int_field(hour, 0, 23, expr)
    return sched.every().day.at(f"{h:02d}:{m:02d}").do(task)


def validate(expr: str) -> None:
    """Raise ConfigurationError if ``expr`` is not a supported schedule."""
    register(expr, lambda: None, schedule.Scheduler())


def run_forever(
    expr: str,
    task: Callable[[], object],
    scheduler: schedule.Scheduler | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> None:
    sched = scheduler or schedule.default_scheduler
    job = register(expr, task, sched)
    log.info("Schedule set: %s (next run %s)", expr, job.next_run)
    log.info("Press Ctrl+C to exit")
    while True:
        sched.run_pending()
        sleep(POLL_SECONDS)
