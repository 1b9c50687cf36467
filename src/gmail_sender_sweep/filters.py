"""Client-side sender matching."""

from __future__ import annotations

from .constants import SENDER_HEADERS
from .models import MessageDetail

_SENDER_HEADER_NAMES = frozenset(name.lower() for name in SENDER_HEADERS)


def match_sender(detail: MessageDetail, sender: str) -> str | None:
    """Return the first sender-identity header value containing ``sender``.

    Only From, Sender and Return-Path are inspected; names and values are
    compared case-insensitively.  Returns None when nothing matches.
    """
    needle = sender.strip().lower()
    if not needle:
        return None
    for name, value in detail.headers:
        if name.lower() in _SENDER_HEADER_NAMES and needle in value.lower():
            return value
    return None
