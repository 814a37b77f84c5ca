"""Tests for console and Telegram delivery."""
from __future__ import annotations

from datetime import timedelta
from unittest.mock import MagicMock, patch

import requests

from conftest import NOW, make_analyzed

from jobhacker.config import Settings
from jobhacker.notify import (
    CompositeNotifier,
    ConsoleNotifier,
    Notifier,
    TelegramNotifier,
    build_notifier,
    build_telegram_message,
    format_time_ago,
)


class ListNotifier(Notifier):
    def __init__(self, sleep) -> None:
        super().__init__(delay=1.5, sleep=sleep)
        self.seen: list[str] = []

    def deliver(self, job) -> None:
        self.seen.append(job.id)


def test_format_time_ago() -> None:
    assert format_time_ago(NOW - timedelta(hours=3, minutes=10), now=NOW) == "3 hours ago"
    assert format_time_ago(NOW - timedelta(minutes=25), now=NOW) == "25 minutes ago"
    assert format_time_ago(NOW - timedelta(seconds=20), now=NOW) == "just now"
    assert format_time_ago(NOW + timedelta(minutes=5), now=NOW) == "just now"


def test_batch_sleeps_between_jobs_only() -> None:
    sleep = MagicMock()
    notifier = ListNotifier(sleep)
    count = notifier.deliver_batch([make_analyzed("remoteok-1", 9), make_analyzed("remoteok-2", 8)])
    assert count == 2
    assert notifier.seen == ["remoteok-1", "remoteok-2"]
    sleep.assert_called_once_with(1.5)


def test_console_notifier_logs_job(caplog) -> None:
    caplog.set_level("INFO")
    ConsoleNotifier().deliver(make_analyzed("remoteok-1", 9, reason="React match"))
    assert "[9/10] Frontend Engineer @ Tech Corp" in caplog.text
    assert "React match" in caplog.text


def test_telegram_message_escapes_html() -> None:
    job = make_analyzed("remoteok-1", 9, reason="Uses <React> & TS")
    text = build_telegram_message(job)
    assert "&lt;React&gt; &amp; TS" in text
    assert "9/10" in text


@patch("jobhacker.notify.requests.post")
def test_telegram_notifier_posts_message(mock_post) -> None:
    mock_post.return_value = MagicMock()
    TelegramNotifier("123:abc", "42").deliver(make_analyzed("remoteok-1", 9))
    args, kwargs = mock_post.call_args
    assert args[0] == "https://api.telegram.org/bot123:abc/sendMessage"
    assert kwargs["json"]["chat_id"] == "42"
    assert kwargs["json"]["parse_mode"] == "HTML"


@patch("jobhacker.retry.time.sleep")
@patch("jobhacker.notify.requests.post")
def test_telegram_failure_is_retried_then_logged(mock_post, mock_sleep, caplog) -> None:
    mock_post.side_effect = requests.ConnectionError("unreachable")
    TelegramNotifier("123:abc", "42").deliver(make_analyzed("remoteok-1", 9))
    assert mock_post.call_count == 3
    assert mock_sleep.call_count == 2
    assert "Telegram alert failed" in caplog.text


def test_build_notifier_without_telegram(settings) -> None:
    notifier = build_notifier(settings)
    assert isinstance(notifier, CompositeNotifier)
    assert [type(n) for n in notifier.notifiers] == [ConsoleNotifier]


def test_build_notifier_with_telegram(ai_config) -> None:
    notifier = build_notifier(Settings(ai=ai_config, telegram_bot_token="t", telegram_chat_id="c"))
    assert [type(n) for n in notifier.notifiers] == [ConsoleNotifier, TelegramNotifier]
