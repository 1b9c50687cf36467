"""Rich-based display functions for Gmail Sender Sweep."""

from __future__ import annotations

import logging
from collections import Counter

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from .config import SweepConfig
from .models import AuditRecord, MessageDetail, SweepStats

console = Console()


def setup_logging(verbose: bool = False) -> None:
    """Route log records through Rich on the shared console."""
    handler = RichHandler(console=console, show_time=True, show_path=False, rich_tracebacks=True)
    root = logging.getLogger()
    for existing in [h for h in root.handlers if isinstance(h, RichHandler)]:
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if verbose else logging.INFO)
    # googleapiclient is chatty at INFO
    logging.getLogger("googleapiclient").setLevel(logging.WARNING)


def display_sweep_start(config: SweepConfig) -> None:
    mode = "[red]DELETE[/red]" if config.delete else "[green]report only[/green]"
    if config.delete and config.permanent:
        mode += " [red](permanent)[/red]"
    console.print(
        f"Sweeping [bold]{escape(config.mailbox)}[/bold] for [bold]{escape(config.sender)}[/bold] "
        f"over the last {config.lookback_days} days - {mode}"
    )


def display_match(seq: int, detail: MessageDetail, matched_sender: str) -> None:
    """Print one progress line for a matched message.

    The From address is appended when the match came from a different header.
    """
    line = (
        f"[bold]{seq:>5}[/bold]  [dim]{escape(detail.sent_at or '-')}[/dim]  "
        f"{escape(detail.subject or '(no subject)')}  [cyan]{escape(matched_sender)}[/cyan]"
    )
    if detail.sender and detail.sender not in matched_sender.lower():
        line += f"  [dim](from {escape(detail.sender)})[/dim]"
    console.print(line)


def display_page_progress(stats: SweepStats) -> None:
    console.print(
        f"[dim]Page {stats.pages} done - {stats.scanned} scanned, {stats.matched} matched so far[/dim]"
    )


def display_sweep_summary(stats: SweepStats, config: SweepConfig) -> None:
    lines = [
        f"[bold]Started:[/bold] {stats.started_at}",
        f"[bold]Scanned:[/bold] {stats.scanned}",
        f"[bold]Matched:[/bold] {stats.matched}",
    ]
    if config.delete:
        lines.append(f"[bold]Deleted:[/bold] {stats.deleted}")
    if stats.failed:
        lines.append(f"[bold yellow]Skipped (detail fetch failed):[/bold yellow] {stats.failed}")
    if config.audit_path:
        lines.append(f"[bold]Audit file:[/bold] {escape(str(config.audit_path))}")
    console.print(Panel("\n".join(lines), title="Sweep complete", border_style="green"))


def display_abort(stats: SweepStats, reason: str) -> None:
    """Show a termination panel that is distinct from the normal summary."""
    console.print(
        Panel(
            f"[bold red]{escape(reason)}[/bold red]\n\n"
            f"Started {stats.started_at}. "
            f"Work completed before the abort: {stats.scanned} scanned, "
            f"{stats.matched} matched, {stats.deleted} deleted.\n"
            "Audit rows already written remain valid.",
            title="Sweep aborted",
            border_style="red",
        )
    )


def confirm_delete(config: SweepConfig) -> bool:
    """Ask the user to confirm a deleting sweep."""
    action = "permanently deleted" if config.permanent else "moved to trash"
    console.print(
        Panel(
            f"Messages in [bold]{escape(config.mailbox)}[/bold] matching "
            f"[bold]{escape(config.sender)}[/bold] from the last {config.lookback_days} days "
            f"will be [bold red]{action}[/bold red].",
            title="Confirm Delete",
        )
    )
    answer = Prompt.ask('[bold red]Type "DELETE" to confirm[/bold red]', console=console)
    return answer == "DELETE"


def display_audit_summary(records: list[AuditRecord]) -> None:
    """Show audit rows grouped by mailbox and matched sender."""
    matched: Counter[tuple[str, str]] = Counter()
    deleted: Counter[tuple[str, str]] = Counter()
    for record in records:
        key = (record.mailbox_id, record.matched_sender)
        matched[key] += 1
        if record.deleted:
            deleted[key] += 1

    table = Table(title="Audit Summary")
    table.add_column("Mailbox")
    table.add_column("Matched sender")
    table.add_column("Matched", justify="right")
    table.add_column("Deleted", justify="right")

    for (mailbox, sender), count in matched.most_common():
        table.add_row(escape(mailbox), escape(sender), str(count), str(deleted[(mailbox, sender)]))

    console.print(table)
    console.print(
        Panel(
            f"Total rows: {len(records)}  |  Deleted: {sum(deleted.values())}",
            title="Summary",
        )
    )
