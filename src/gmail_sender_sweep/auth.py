"""Authentication helpers for Gmail API."""

from __future__ import annotations

from pathlib import Path

from google.auth.transport.requests import Request
from google.oauth2 import service_account
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import Resource, build

from gmail_sender_sweep.constants import (
    CONFIG_DIR,
    CREDENTIALS_PATH,
    DEFAULT_MAILBOX,
    SCOPES,
    SCOPES_PERMANENT,
    TOKEN_PATH,
)


def _delegated_credentials(service_account_file: Path, mailbox: str, scopes: list[str]):
    if mailbox == DEFAULT_MAILBOX:
        raise ValueError("A service account needs an explicit mailbox address to impersonate, not 'me'.")
    if not Path(service_account_file).exists():
        raise FileNotFoundError(f"Service account key not found at {service_account_file}.")
    return service_account.Credentials.from_service_account_file(
        str(service_account_file), scopes=scopes, subject=mailbox
    )


def _user_credentials(scopes: list[str]) -> Credentials:
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)

    creds: Credentials | None = None

    if TOKEN_PATH.exists():
        creds = Credentials.from_authorized_user_file(str(TOKEN_PATH))
        if not creds.has_scopes(scopes):
            creds = None

    if creds and creds.expired and creds.refresh_token:
        creds.refresh(Request())
    elif not creds or not creds.valid:
        if not CREDENTIALS_PATH.exists():
            raise FileNotFoundError(
                f"Credentials file not found at {CREDENTIALS_PATH}.\n"
                "Download your OAuth client credentials from the Google Cloud Console "
                "and save them as:\n"
                f"  {CREDENTIALS_PATH}"
            )
        flow = InstalledAppFlow.from_client_secrets_file(str(CREDENTIALS_PATH), scopes)
        creds = flow.run_local_server(port=0)

    TOKEN_PATH.write_text(creds.to_json())
    return creds


def get_gmail_service(
    mailbox: str = DEFAULT_MAILBOX,
    service_account_file: Path | None = None,
    permanent: bool = False,
) -> Resource:
    """Return an authenticated Gmail API service object.

    With ``service_account_file`` the service account impersonates
    ``mailbox`` through domain-wide delegation.  Otherwise the cached user
    token at TOKEN_PATH is used, refreshed when expired, and an OAuth
    browser flow is launched when there is none (requires credentials.json
    at CREDENTIALS_PATH).  Permanent deletion needs the full mail scope.
    """
    scopes = SCOPES_PERMANENT if permanent else SCOPES

    if service_account_file is not None:
        creds = _delegated_credentials(service_account_file, mailbox, scopes)
    else:
        creds = _user_credentials(scopes)

    return build("gmail", "v1", credentials=creds, cache_discovery=False)


def check_auth(mailbox: str = DEFAULT_MAILBOX, service_account_file: Path | None = None) -> str:
    """Return the address the credentials resolve to for ``mailbox``.

    Raises whatever the auth layer or the API raises on failure.
    """
    service = get_gmail_service(mailbox, service_account_file)
    profile = service.users().getProfile(userId=mailbox).execute()
    return profile["emailAddress"]
