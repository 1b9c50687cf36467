"""Sweep configuration."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path

from .constants import (
    DEFAULT_BASE_DELAY,
    DEFAULT_ITEM_PAUSE,
    DEFAULT_LOOKBACK_DAYS,
    DEFAULT_MAILBOX,
    DEFAULT_MAX_RETRIES,
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
)
from .errors import ConfigError


@dataclass(frozen=True)
class SweepConfig:
    """Everything a sweep needs, validated once up front."""

    sender: str
    mailbox: str = DEFAULT_MAILBOX
    lookback_days: int = DEFAULT_LOOKBACK_DAYS
    audit_path: Path | None = None
    page_size: int = DEFAULT_PAGE_SIZE
    max_retries: int = DEFAULT_MAX_RETRIES
    base_delay: float = DEFAULT_BASE_DELAY
    item_pause: float = DEFAULT_ITEM_PAUSE
    delete: bool = False
    permanent: bool = False
    skip_failed_details: bool = False

    def __post_init__(self) -> None:
        if not self.sender or not self.sender.strip():
            raise ConfigError("sender must not be empty")
        if not self.mailbox or not self.mailbox.strip():
            raise ConfigError("mailbox must not be empty")
        if self.lookback_days < 0:
            raise ConfigError(f"lookback_days must be >= 0, got {self.lookback_days}")
        if not 1 <= self.page_size <= MAX_PAGE_SIZE:
            raise ConfigError(f"page_size must be between 1 and {MAX_PAGE_SIZE}, got {self.page_size}")
        if self.max_retries < 0:
            raise ConfigError(f"max_retries must be >= 0, got {self.max_retries}")
        if self.base_delay < 0 or self.item_pause < 0:
            raise ConfigError("delays must not be negative")
        if self.permanent and not self.delete:
            raise ConfigError("permanent deletion requires delete to be enabled")
        if self.audit_path is not None and not isinstance(self.audit_path, Path):
            object.__setattr__(self, "audit_path", Path(self.audit_path))

    def received_after(self, now: datetime | None = None) -> datetime:
        """Lower bound on the received date, ``lookback_days`` before ``now`` (UTC)."""
        now = now or datetime.now(timezone.utc)
        return now - timedelta(days=self.lookback_days)
