"""Data models for Gmail Sender Sweep."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Protocol


@dataclass(frozen=True)
class MessageSummary:
    """A message as returned by a list call."""

    message_id: str
    sent_at: str = ""  # ISO-8601, empty when the list call does not return it
    subject: str = ""
    sender: str = ""  # Envelope sender address


@dataclass(frozen=True)
class MessageDetail:
    """A message after enrichment: summary fields plus raw headers."""

    message_id: str
    sent_at: str = ""
    subject: str = ""
    sender: str = ""
    headers: tuple[tuple[str, str], ...] = ()


@dataclass(frozen=True)
class Page:
    """One page of list results."""

    items: tuple[MessageSummary, ...] = ()
    next_token: Any = None  # Opaque; only the API that issued it can consume it


@dataclass(frozen=True)
class PageCursor:
    """Initial cursor when ``token`` is None, otherwise a continuation."""

    token: Any = None

    @property
    def is_initial(self) -> bool:
        return self.token is None


@dataclass(frozen=True)
class AuditRecord:
    """One audit row for a matched message."""

    mailbox_id: str
    message_id: str
    sent_timestamp: str
    subject: str
    matched_sender: str
    deleted: bool = False

    def as_row(self) -> dict[str, str]:
        return {
            "mailbox_id": self.mailbox_id,
            "message_id": self.message_id,
            "sent_timestamp": self.sent_timestamp,
            "subject": self.subject,
            "matched_sender": self.matched_sender,
            "deleted": "true" if self.deleted else "false",
        }


@dataclass
class SweepStats:
    """Running counters for a sweep."""

    pages: int = 0
    scanned: int = 0
    matched: int = 0
    deleted: int = 0
    failed: int = 0
    started_at: str = field(default_factory=lambda: datetime.now().isoformat(timespec="seconds"))


class MailApi(Protocol):
    """The remote operations the sweeper needs from a mail host."""

    def list_messages(self, mailbox_id: str, received_after: datetime, page_size: int) -> Page: ...

    def list_messages_continue(self, token: Any) -> Page: ...

    def get_message_detail(self, mailbox_id: str, message_id: str) -> MessageDetail: ...

    def delete_message(self, mailbox_id: str, message_id: str) -> None: ...
