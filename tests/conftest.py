"""Shared fixtures for tests."""

from __future__ import annotations

import json

import httplib2
import pytest
from googleapiclient.errors import HttpError

from gmail_sender_sweep.config import SweepConfig
from gmail_sender_sweep.models import MessageDetail, MessageSummary, Page


def http_error(
    status: int,
    retry_after: str | None = None,
    message: str = "boom",
    reason: str | None = None,
) -> HttpError:
    """Build an HttpError shaped like a Gmail API error response."""
    info = {"status": status}
    if retry_after is not None:
        info["retry-after"] = retry_after
    error: dict = {"code": status, "message": message}
    if reason is not None:
        error["errors"] = [{"domain": "usageLimits", "reason": reason, "message": message}]
    return HttpError(httplib2.Response(info), json.dumps({"error": error}).encode())


def make_detail(message_id: str, sender: str = "", subject: str = "", **extra_headers: str) -> MessageDetail:
    """Build a MessageDetail; ``sender`` becomes the From header when given."""
    headers: list[tuple[str, str]] = []
    if sender:
        headers.append(("From", sender))
    if subject:
        headers.append(("Subject", subject))
    for name, value in extra_headers.items():
        headers.append((name.replace("_", "-"), value))
    return MessageDetail(
        message_id=message_id,
        sent_at="2024-01-15T10:00:00+00:00",
        subject=subject,
        sender=sender,
        headers=tuple(headers),
    )


class FakeMailApi:
    """In-memory MailApi serving fixed pages of messages.

    Errors queued in ``page_errors`` (keyed by page index), ``detail_errors``
    and ``delete_errors`` (keyed by message id) are raised one per call
    before the call succeeds.  An entry of ``"always"`` keeps raising.
    """

    def __init__(self, pages: list[list[MessageDetail]]) -> None:
        self.pages = pages
        self.details = {d.message_id: d for page in pages for d in page}
        self.page_errors: dict[int, list] = {}
        self.detail_errors: dict[str, list] = {}
        self.delete_errors: dict[str, list] = {}
        self.calls: list[tuple] = []
        self.tokens_used: list = []
        self.deleted: list[str] = []

    @staticmethod
    def _maybe_raise(errors) -> None:
        if isinstance(errors, BaseException):
            raise errors
        if errors:
            raise errors.pop(0)

    def _page(self, index: int) -> Page:
        items = tuple(MessageSummary(message_id=d.message_id) for d in self.pages[index])
        next_token = index + 1 if index + 1 < len(self.pages) else None
        return Page(items=items, next_token=next_token)

    def list_messages(self, mailbox_id, received_after, page_size) -> Page:
        self.calls.append(("list", mailbox_id, received_after, page_size))
        self._maybe_raise(self.page_errors.get(0))
        if not self.pages:
            return Page()
        return self._page(0)

    def list_messages_continue(self, token) -> Page:
        self.calls.append(("continue", token))
        self._maybe_raise(self.page_errors.get(token))
        self.tokens_used.append(token)
        return self._page(token)

    def get_message_detail(self, mailbox_id, message_id) -> MessageDetail:
        self.calls.append(("get", mailbox_id, message_id))
        self._maybe_raise(self.detail_errors.get(message_id))
        return self.details[message_id]

    def delete_message(self, mailbox_id, message_id) -> None:
        self.calls.append(("delete", mailbox_id, message_id))
        self._maybe_raise(self.delete_errors.get(message_id))
        self.deleted.append(message_id)


class RecordingSleep:
    """Stand-in for time.sleep that records requested delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def spam_pages() -> list[list[MessageDetail]]:
    """Three messages, two of them From bad@spam.com."""
    return [
        [
            make_detail("m1", sender="Spammer <bad@spam.com>", subject="Win a prize"),
            make_detail("m2", sender="Alice <alice@example.com>", subject="Lunch?"),
            make_detail("m3", sender="bad@spam.com", subject="Last chance"),
        ]
    ]


@pytest.fixture
def config(tmp_path) -> SweepConfig:
    return SweepConfig(
        sender="bad@spam.com",
        mailbox="user@example.com",
        audit_path=tmp_path / "audit.csv",
        item_pause=0.0,
    )
