"""Constants for Gmail Sender Sweep."""

from pathlib import Path

# --- Config paths ---
CONFIG_DIR = Path.home() / ".gmail-sender-sweep"
CREDENTIALS_PATH = CONFIG_DIR / "credentials.json"
TOKEN_PATH = CONFIG_DIR / "token.json"

# --- Gmail API ---
SCOPES = ["https://www.googleapis.com/auth/gmail.modify"]
SCOPES_PERMANENT = ["https://mail.google.com/"]  # messages.delete needs the full scope
DEFAULT_MAILBOX = "me"
MAX_PAGE_SIZE = 500  # Gmail's cap on maxResults
LIST_FIELDS = "messages/id,nextPageToken"
DETAIL_FIELDS = "id,internalDate,payload/headers"
SENDER_HEADERS = ("From", "Sender", "Return-Path")
METADATA_HEADERS = [*SENDER_HEADERS, "Subject", "Date"]

# --- Retry / throttling ---
TRANSIENT_STATUSES = (429, 503)
RATE_LIMIT_REASONS = ("rateLimitExceeded", "userRateLimitExceeded")  # Gmail sends these as 403
DEFAULT_MAX_RETRIES = 5
DEFAULT_BASE_DELAY = 2.0  # seconds, doubled per attempt
DEFAULT_ITEM_PAUSE = 0.2  # seconds between items

# --- Scan ---
DEFAULT_PAGE_SIZE = 50
DEFAULT_LOOKBACK_DAYS = 30

# --- Audit file ---
AUDIT_FIELDNAMES = [
    "mailbox_id",
    "message_id",
    "sent_timestamp",
    "subject",
    "matched_sender",
    "deleted",
]
