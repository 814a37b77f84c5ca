"""Root logger setup shared by every jobhacker module.

Handlers are attached on the first ``get_logger`` call. ``.env`` is loaded
before anything is read, so LOG_LEVEL, LOG_DIR and LOG_TO_FILE behave the same
whether they come from the shell or from the file.
"""
from __future__ import annotations

import logging
import os
import sys
from datetime import datetime
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_LOG_DIR = Path(__file__).resolve().parent.parent / "logs"
LOG_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_FALSEY = ("0", "false", "no", "off")

_configured = False


def get_logger(name: str) -> logging.Logger:
    """Return a named logger; configures root handlers on first call."""
    global _configured
    if not _configured:
        configure()
        _configured = True
    return logging.getLogger(name)


def set_level(level_name: str) -> None:
    """Override the level picked from LOG_LEVEL (used by ``--verbose``)."""
    level = _level(level_name)
    root = logging.getLogger()
    root.setLevel(level)
    for handler in root.handlers:
        if isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler):
            handler.setLevel(level)


def _level(name: str | None) -> int:
    return getattr(logging, (name or "INFO").strip().upper(), logging.INFO)


def _file_handler(log_dir: Path) -> logging.FileHandler | None:
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(
            log_dir / f"jobhacker_{datetime.now():%Y-%m-%d}.log", encoding="utf-8"
        )
    except OSError as exc:
        sys.stderr.write(f"File logging disabled ({log_dir}): {exc}\n")
        return None
    handler.setLevel(logging.DEBUG)
    return handler


def configure(root: logging.Logger | None = None, env_file: str | Path | None = None) -> None:
    """Attach a stdout handler and, unless LOG_TO_FILE is off, a dated file handler.

    ``root`` defaults to the root logger; a logger that already has handlers
    only gets its level updated.
    """
    load_dotenv(env_file)
    root = root if root is not None else logging.getLogger()
    level = _level(os.environ.get("LOG_LEVEL"))
    root.setLevel(level)
    if root.handlers:
        return

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    handlers: list[logging.Handler] = [console]

    if os.environ.get("LOG_TO_FILE", "true").strip().lower() not in _FALSEY:
        fh = _file_handler(Path(os.environ.get("LOG_DIR") or DEFAULT_LOG_DIR))
        if fh is not None:
            handlers.append(fh)

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)
