"""Tests for client-side sender matching."""

from conftest import make_detail

from gmail_sender_sweep.filters import match_sender
from gmail_sender_sweep.models import MessageDetail


def test_from_header_contains_sender():
    detail = make_detail("m1", sender="Spammer <bad@spam.com>")
    assert match_sender(detail, "bad@spam.com") == "Spammer <bad@spam.com>"


def test_sender_and_return_path_headers_match():
    via_sender = make_detail("m1", sender="Alice <alice@example.com>", Sender="bad@spam.com")
    via_return_path = make_detail("m2", Return_Path="<bad@spam.com>")
    assert match_sender(via_sender, "bad@spam.com") == "bad@spam.com"
    assert match_sender(via_return_path, "bad@spam.com") == "<bad@spam.com>"


def test_other_headers_are_ignored():
    detail = make_detail("m1", sender="alice@example.com", Reply_To="bad@spam.com", subject="bad@spam.com")
    assert match_sender(detail, "bad@spam.com") is None


def test_envelope_sender_alone_never_matches():
    detail = MessageDetail(message_id="m1", sender="bad@spam.com", headers=(("Subject", "hi"),))
    assert match_sender(detail, "bad@spam.com") is None


def test_case_insensitive_names_and_values():
    detail = MessageDetail(message_id="m1", headers=(("FROM", "Bad@Spam.COM"),))
    assert match_sender(detail, "bad@spam.com") == "Bad@Spam.COM"


def test_first_matching_header_wins():
    detail = MessageDetail(
        message_id="m1",
        headers=(
            ("From", "Alice <alice@example.com>"),
            ("Sender", "bulk@spam.com"),
            ("Return-Path", "<bounce@spam.com>"),
        ),
    )
    assert match_sender(detail, "spam.com") == "bulk@spam.com"


def test_match_is_repeatable():
    detail = make_detail("m1", sender="bad@spam.com")
    assert match_sender(detail, "bad@spam.com") == match_sender(detail, "bad@spam.com")


def test_blank_sender_matches_nothing():
    detail = make_detail("m1", sender="bad@spam.com")
    assert match_sender(detail, "  ") is None
