"""Exception types shared across the sweep pipeline."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .constants import TRANSIENT_STATUSES

if TYPE_CHECKING:
    from .models import SweepStats


class SweepError(Exception):
    """Base class for all errors raised by gmail-sender-sweep."""


class ConfigError(SweepError, ValueError):
    """Raised when a sweep configuration fails validation."""


class RemoteError(SweepError):
    """A failed call against the mail API.

    ``transient`` is True for rate limiting, temporary unavailability and
    network failures; only those are retried.  When not given it follows
    the status.  ``status`` is None when no HTTP response arrived.
    ``retry_after`` holds the server's suggested delay in seconds, when it
    sent one.
    """

    def __init__(
        self,
        status: int | None,
        message: str = "",
        retry_after: float | None = None,
        reason: str = "",
        transient: bool | None = None,
    ) -> None:
        self.status = status
        self.message = message
        self.retry_after = retry_after
        self.reason = reason
        self.transient = status in TRANSIENT_STATUSES if transient is None else transient
        prefix = f"HTTP {status}" if status is not None else "Network error"
        super().__init__(f"{prefix}: {message}" if message else prefix)


class RetriesExhausted(SweepError):
    """A transient failure persisted past the retry ceiling."""

    def __init__(self, description: str, retries: int, last_error: RemoteError) -> None:
        self.description = description
        self.retries = retries
        self.last_error = last_error
        super().__init__(f"{description} failed after {retries} retries: {last_error}")


class ScanAborted(SweepError):
    """The sweep could not continue; ``stats`` reflects the work done so far."""

    def __init__(self, stats: SweepStats, cause: Exception) -> None:
        self.stats = stats
        self.cause = cause
        super().__init__(str(cause))
