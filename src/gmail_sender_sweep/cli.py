"""CLI entry point for Gmail Sender Sweep."""

from __future__ import annotations

from pathlib import Path

import click

from .audit import read_audit
from .auth import check_auth, get_gmail_service
from .config import SweepConfig
from .constants import (
    DEFAULT_BASE_DELAY,
    DEFAULT_ITEM_PAUSE,
    DEFAULT_LOOKBACK_DAYS,
    DEFAULT_MAILBOX,
    DEFAULT_MAX_RETRIES,
    DEFAULT_PAGE_SIZE,
)
from .display import (
    confirm_delete,
    console,
    display_abort,
    display_audit_summary,
    display_sweep_start,
    setup_logging,
)
from .errors import ConfigError, ScanAborted
from .gmail_client import GmailMailbox
from .scanner import sweep_mailbox


@click.group()
@click.version_option(version="0.1.0", prog_name="gmail-sender-sweep")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """Gmail Sender Sweep - find, audit and delete mail from one sender."""
    setup_logging(verbose)


@cli.command()
@click.option("-s", "--sender", required=True, help="Sender address (or fragment) to match in From/Sender/Return-Path.")
@click.option("-m", "--mailbox", default=DEFAULT_MAILBOX, show_default=True, help="Mailbox to sweep.")
@click.option("-d", "--days", default=DEFAULT_LOOKBACK_DAYS, type=int, show_default=True, help="Only look at mail received in the last N days.")
@click.option("-o", "--audit-file", default=None, type=click.Path(dir_okay=False, path_type=Path), help="Append a CSV row per matched message to this file.")
@click.option("--page-size", default=DEFAULT_PAGE_SIZE, type=int, show_default=True, help="Messages per list page.")
@click.option("--max-retries", default=DEFAULT_MAX_RETRIES, type=int, show_default=True, help="Retries per call on rate limiting.")
@click.option("--base-delay", default=DEFAULT_BASE_DELAY, type=float, show_default=True, help="Base backoff delay in seconds.")
@click.option("--pause", default=DEFAULT_ITEM_PAUSE, type=float, show_default=True, help="Pause between messages in seconds.")
@click.option("--delete", is_flag=True, help="Delete matched messages (default is report only).")
@click.option("--permanent", is_flag=True, help="With --delete, skip the trash and delete permanently.")
@click.option("--skip-failed", is_flag=True, help="Skip messages whose details cannot be fetched instead of aborting.")
@click.option("-y", "--yes", is_flag=True, help="Do not ask for confirmation before deleting.")
@click.option("--service-account", default=None, type=click.Path(dir_okay=False, path_type=Path), help="Service account key for domain-wide delegation.")
@click.pass_context
def sweep(
    ctx: click.Context,
    sender: str,
    mailbox: str,
    days: int,
    audit_file: Path | None,
    page_size: int,
    max_retries: int,
    base_delay: float,
    pause: float,
    delete: bool,
    permanent: bool,
    skip_failed: bool,
    yes: bool,
    service_account: Path | None,
) -> None:
    """Scan a mailbox for messages from a sender and optionally delete them."""
    try:
        config = SweepConfig(
            sender=sender,
            mailbox=mailbox,
            lookback_days=days,
            audit_path=audit_file,
            page_size=page_size,
            max_retries=max_retries,
            base_delay=base_delay,
            item_pause=pause,
            delete=delete,
            permanent=permanent,
            skip_failed_details=skip_failed,
        )
    except ConfigError as e:
        raise click.UsageError(str(e)) from e

    if config.delete and not yes and not confirm_delete(config):
        console.print("[dim]Cancelled.[/dim]")
        return

    try:
        service = get_gmail_service(config.mailbox, service_account, permanent=config.permanent)
    except (FileNotFoundError, ValueError) as e:
        raise click.ClickException(str(e)) from e

    display_sweep_start(config)
    try:
        sweep_mailbox(GmailMailbox(service, permanent=config.permanent), config)
    except ScanAborted as e:
        display_abort(e.stats, str(e))
        ctx.exit(1)
    except KeyboardInterrupt:
        console.print("[bold yellow]Interrupted.[/bold yellow] Audit rows already written remain valid.")
        ctx.exit(130)


@cli.command()
@click.option("-m", "--mailbox", default=DEFAULT_MAILBOX, show_default=True, help="Mailbox to check.")
@click.option("--service-account", default=None, type=click.Path(dir_okay=False, path_type=Path), help="Service account key for domain-wide delegation.")
def auth(mailbox: str, service_account: Path | None) -> None:
    """Test Gmail authentication."""
    try:
        address = check_auth(mailbox, service_account)
    except Exception as e:  # noqa: BLE001
        raise click.ClickException(f"Authentication failed: {e}") from e
    console.print(f"Authenticated as [bold]{address}[/bold]")


@cli.command(name="audit-summary")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def audit_summary(path: Path) -> None:
    """Summarise an audit file by mailbox and matched sender."""
    try:
        records = read_audit(path)
    except KeyError as e:
        raise click.ClickException(f"{path} is not an audit file (missing column {e})") from e

    if not records:
        console.print("[dim]Audit file is empty.[/dim]")
        return

    display_audit_summary(records)
