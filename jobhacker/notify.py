"""Deliver high-scoring jobs: console log always, Telegram when configured."""
from __future__ import annotations

import html
import time
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Callable, Iterable

import requests

from jobhacker.config import Settings
from jobhacker.log import get_logger
from jobhacker.models import AnalyzedJob
from jobhacker.retry import retry

log = get_logger(__name__)

TELEGRAM_API = "https://api.telegram.org"


def format_time_ago(posted_at: datetime, now: datetime | None = None) -> str:
    now = now or datetime.now(timezone.utc)
    minutes = int((now - posted_at).total_seconds() // 60)
    hours, minutes = divmod(max(minutes, 0), 60)
    if hours > 0:
        return f"{hours} hours ago"
    if minutes > 0:
        return f"{minutes} minutes ago"
    return "just now"


class Notifier(ABC):
    def __init__(self, delay: float = 1.0, sleep: Callable[[float], None] = time.sleep) -> None:
        self.delay = delay
        self._sleep = sleep

    @abstractmethod
    def deliver(self, job: AnalyzedJob) -> None:
        pass

    def deliver_batch(self, jobs: Iterable[AnalyzedJob]) -> int:
        """Deliver sequentially, pausing ``delay`` seconds between jobs."""
        count = 0
        for i, job in enumerate(jobs):
            if i and self.delay > 0:
                self._sleep(self.delay)
            self.deliver(job)
            count += 1
        return count


class ConsoleNotifier(Notifier):
    def __init__(self, delay: float = 0.0, sleep: Callable[[float], None] = time.sleep) -> None:
        super().__init__(delay=delay, sleep=sleep)

    def deliver(self, job: AnalyzedJob) -> None:
        log.info("=" * 40)
        log.info("[%d/10] %s @ %s", job.score, job.title, job.company)
        log.info("Posted: %s", format_time_ago(job.posted_at))
        log.info("Why: %s", job.reason)
        log.info("Link: %s", job.url)


def build_telegram_message(job: AnalyzedJob) -> str:
    marker = "🔥" if job.score >= 9 else "✨"
    return (
        f"{marker} <b>New match</b> ({job.score}/10)\n\n"
        f"<b>Role:</b> {html.escape(job.title)}\n"
        f"<b>Company:</b> {html.escape(job.company)}\n"
        f"<b>Why:</b> {html.escape(job.reason)}\n"
        f"<b>Source:</b> {job.source}\n"
        f"<a href='{html.escape(job.url, quote=True)}'>Open posting</a>"
    )


@retry(max_attempts=3, base_delay=2.0, retryable=(requests.RequestException,))
def _telegram_send(bot_token: str, chat_id: str, text: str) -> None:
    r = requests.post(
        f"{TELEGRAM_API}/bot{bot_token}/sendMessage",
        json={
            "chat_id": chat_id,
            "text": text,
            "parse_mode": "HTML",
            "disable_web_page_preview": True,
        },
        timeout=10,
    )
    r.raise_for_status()


class TelegramNotifier(Notifier):
    def __init__(
        self,
        bot_token: str,
        chat_id: str,
        delay: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        super().__init__(delay=delay, sleep=sleep)
        self.bot_token = bot_token
        self.chat_id = chat_id

    def deliver(self, job: AnalyzedJob) -> None:
        try:
            _telegram_send(self.bot_token, self.chat_id, build_telegram_message(job))
            log.info("Telegram alert sent for %s", job.id)
        except requests.RequestException as exc:
            log.error("Telegram alert failed for %s: %s", job.id, str(exc)[:150])


class CompositeNotifier(Notifier):
    """Fan each job out to several notifiers."""

    def __init__(
        self,
        notifiers: list[Notifier],
        delay: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        super().__init__(delay=delay, sleep=sleep)
        self.notifiers = notifiers

    def deliver(self, job: AnalyzedJob) -> None:
        for notifier in self.notifiers:
            notifier.deliver(job)


def build_notifier(settings: Settings) -> Notifier:
    notifiers: list[Notifier] = [ConsoleNotifier()]
    if settings.telegram_bot_token and settings.telegram_chat_id:
        notifiers.append(TelegramNotifier(settings.telegram_bot_token, settings.telegram_chat_id))
        log.info("Telegram notifications enabled")
    else:
        log.debug("Telegram credentials missing, console notifications only")
    return CompositeNotifier(notifiers, delay=settings.notify_delay)
