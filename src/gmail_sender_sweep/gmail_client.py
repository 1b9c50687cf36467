"""Gmail API adapter implementing the MailApi operations."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime

import httplib2
from googleapiclient.errors import HttpError

from .constants import (
    DETAIL_FIELDS,
    LIST_FIELDS,
    METADATA_HEADERS,
    RATE_LIMIT_REASONS,
    TRANSIENT_STATUSES,
)
from .errors import RemoteError
from .models import MessageDetail, MessageSummary, Page

_FROM_RE = re.compile(r"^(.*?)\s*<([^>]+)>$")


@dataclass(frozen=True)
class _ListToken:
    """Continuation state for a Gmail list call."""

    mailbox_id: str
    query: str
    page_size: int
    page_token: str


def _parse_from_header(from_value: str) -> tuple[str, str]:
    """Parse a From header into (display name, email address).

    Handles formats like:
      "John Doe <john@example.com>" -> ("John Doe", "john@example.com")
      "<john@example.com>"          -> ("", "john@example.com")
      "john@example.com"            -> ("", "john@example.com")
    """
    if not from_value:
        return ("", "")
    m = _FROM_RE.match(from_value.strip())
    if m:
        name = m.group(1).strip().strip('"').strip("'")
        return (name, m.group(2).strip())
    email = from_value.strip().strip("<>")
    return ("", email)


def _parse_retry_after(value: str | None) -> float | None:
    if not value:
        return None
    try:
        return max(0.0, float(value))
    except ValueError:
        pass
    try:
        when = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    return max(0.0, (when - datetime.now(timezone.utc)).total_seconds())


def _error_details(exc: HttpError) -> tuple[str, str]:
    """Return (message, first error reason) from a Gmail error payload."""
    try:
        error = json.loads(exc.content.decode("utf-8"))["error"]
    except (AttributeError, KeyError, TypeError, ValueError):
        return (exc.resp.reason or "", "")
    if not isinstance(error, dict):
        return (str(error), "")
    reasons = [e.get("reason", "") for e in error.get("errors") or [] if isinstance(e, dict)]
    return (error.get("message") or exc.resp.reason or "", reasons[0] if reasons else "")


def to_remote_error(exc: HttpError) -> RemoteError:
    """Translate a googleapiclient HttpError into a RemoteError.

    Gmail reports quota throttling as 403 with a rate-limit reason; those
    are transient alongside 429 and 503.
    """
    status = int(exc.resp.status)
    message, reason = _error_details(exc)
    return RemoteError(
        status=status,
        message=message,
        retry_after=_parse_retry_after(exc.resp.get("retry-after")),
        reason=reason,
        transient=status in TRANSIENT_STATUSES or reason in RATE_LIMIT_REASONS,
    )


def _execute(request):
    """Execute a Gmail request, raising RemoteError for API and network failures."""
    try:
        return request.execute()
    except HttpError as exc:
        raise to_remote_error(exc) from exc
    except (OSError, httplib2.HttpLib2Error) as exc:
        raise RemoteError(None, str(exc) or type(exc).__name__, transient=True) from exc


def _sent_timestamp(headers: dict[str, str], internal_date: str | None) -> str:
    date_header = headers.get("date")
    if date_header:
        try:
            return parsedate_to_datetime(date_header).isoformat()
        except (TypeError, ValueError):
            pass
    if internal_date:
        return datetime.fromtimestamp(int(internal_date) / 1000, tz=timezone.utc).isoformat()
    return ""


def build_query(received_after: datetime) -> str:
    """Gmail search query selecting messages received after the given instant."""
    return f"after:{int(received_after.timestamp())}"


class GmailMailbox:
    """Gmail-backed implementation of the MailApi operations.

    ``service`` is an authenticated ``gmail`` v1 Resource.  With
    ``permanent`` set, deletions bypass the trash.
    """

    def __init__(self, service, permanent: bool = False) -> None:
        self._service = service
        self.permanent = permanent

    def _messages(self):
        return self._service.users().messages()

    def _list(self, mailbox_id: str, query: str, page_size: int, page_token: str | None = None) -> Page:
        kwargs: dict = {
            "userId": mailbox_id,
            "q": query,
            "maxResults": page_size,
            "fields": LIST_FIELDS,
        }
        if page_token:
            kwargs["pageToken"] = page_token
        resp = _execute(self._messages().list(**kwargs))

        items = tuple(MessageSummary(message_id=m["id"]) for m in resp.get("messages", []))
        next_page = resp.get("nextPageToken")
        next_token = _ListToken(mailbox_id, query, page_size, next_page) if next_page else None
        return Page(items=items, next_token=next_token)

    def list_messages(self, mailbox_id: str, received_after: datetime, page_size: int) -> Page:
        return self._list(mailbox_id, build_query(received_after), page_size)

    def list_messages_continue(self, token: _ListToken) -> Page:
        return self._list(token.mailbox_id, token.query, token.page_size, token.page_token)

    def get_message_detail(self, mailbox_id: str, message_id: str) -> MessageDetail:
        resp = _execute(
            self._messages().get(
                userId=mailbox_id,
                id=message_id,
                format="metadata",
                metadataHeaders=METADATA_HEADERS,
                fields=DETAIL_FIELDS,
            )
        )

        raw_headers = tuple(
            (h.get("name", ""), h.get("value", "")) for h in resp.get("payload", {}).get("headers", [])
        )
        # First occurrence wins for the summary fields
        by_name: dict[str, str] = {}
        for name, value in raw_headers:
            by_name.setdefault(name.lower(), value)

        _, email = _parse_from_header(by_name.get("from", ""))
        return MessageDetail(
            message_id=resp.get("id", message_id),
            sent_at=_sent_timestamp(by_name, resp.get("internalDate")),
            subject=by_name.get("subject", ""),
            sender=email.lower(),
            headers=raw_headers,
        )

    def delete_message(self, mailbox_id: str, message_id: str) -> None:
        messages = self._messages()
        request = (
            messages.delete(userId=mailbox_id, id=message_id)
            if self.permanent
            else messages.trash(userId=mailbox_id, id=message_id)
        )
        _execute(request)
