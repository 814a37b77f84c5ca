"""Error taxonomy shared by sources, the scoring client and the CLI."""
from __future__ import annotations


class JobHackerError(Exception):
    """Base class for every error raised on purpose by this package."""


class TransportError(JobHackerError):
    """A network or HTTP failure while talking to a job board or the scoring API."""

    def __init__(self, message: str, *, source: str | None = None, status_code: int | None = None) -> None:
        super().__init__(message)
        self.source = source
        self.status_code = status_code


class ParseError(JobHackerError):
    """A feed payload that could not be decoded (malformed XML or JSON)."""

    def __init__(self, message: str, *, source: str | None = None) -> None:
        super().__init__(message)
        self.source = source


class ValidationError(JobHackerError):
    """The scoring API answered, but the answer is unusable.

    ``raw_text`` keeps the untouched response for diagnostics.
    """

    def __init__(self, message: str, *, raw_text: str = "") -> None:
        super().__init__(message)
        self.raw_text = raw_text


class ConfigurationError(JobHackerError):
    """Missing or invalid configuration; fatal at startup."""
