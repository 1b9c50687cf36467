"""Sweep orchestration - pages through a mailbox, matches, deletes, audits."""

from __future__ import annotations

import logging
import time
from typing import Callable

from .audit import AuditSink
from .config import SweepConfig
from .display import display_match, display_page_progress, display_sweep_summary
from .errors import RemoteError, RetriesExhausted, ScanAborted
from .executor import RequestExecutor
from .filters import match_sender
from .models import AuditRecord, MailApi, MessageDetail, MessageSummary, Page, PageCursor, SweepStats

logger = logging.getLogger(__name__)

_CALL_ERRORS = (RemoteError, RetriesExhausted)


class MailboxSweeper:
    """Walk every page of a mailbox listing and act on sender matches.

    Each item is fetched, matched and (optionally) deleted exactly once, in
    the order the server returns them.  A page that cannot be fetched aborts
    the sweep with ScanAborted; delete failures only affect their own item.
    """

    def __init__(
        self,
        api: MailApi,
        config: SweepConfig,
        executor: RequestExecutor | None = None,
        sink: AuditSink | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.api = api
        self.config = config
        self.executor = executor or RequestExecutor(
            max_retries=config.max_retries, base_delay=config.base_delay, sleep=sleep
        )
        self.sink = sink
        self._sleep = sleep
        self.stats = SweepStats()

    # --- stages ---

    def fetch_page(self, cursor: PageCursor) -> Page:
        if cursor.is_initial:
            received_after = self.config.received_after()
            return self.executor.execute(
                lambda: self.api.list_messages(self.config.mailbox, received_after, self.config.page_size),
                "list messages",
            )
        return self.executor.execute(
            lambda: self.api.list_messages_continue(cursor.token),
            f"list messages (page {self.stats.pages + 1})",
        )

    def fetch_detail(self, summary: MessageSummary) -> MessageDetail:
        return self.executor.execute(
            lambda: self.api.get_message_detail(self.config.mailbox, summary.message_id),
            f"fetch message {summary.message_id}",
        )

    def delete(self, message_id: str) -> bool:
        try:
            self.executor.execute(
                lambda: self.api.delete_message(self.config.mailbox, message_id),
                f"delete message {message_id}",
            )
        except _CALL_ERRORS as exc:
            logger.error("Could not delete message %s: %s", message_id, exc)
            return False
        return True

    def record(self, detail: MessageDetail, matched_sender: str, deleted: bool) -> None:
        if self.sink is None:
            return
        self.sink.append(
            AuditRecord(
                mailbox_id=self.config.mailbox,
                message_id=detail.message_id,
                sent_timestamp=detail.sent_at,
                subject=detail.subject,
                matched_sender=matched_sender,
                deleted=deleted,
            )
        )

    # --- driver ---

    def process(self, summary: MessageSummary) -> None:
        """Run one listed message through detail, match, delete and audit."""
        self.stats.scanned += 1
        try:
            detail = self.fetch_detail(summary)
        except _CALL_ERRORS as exc:
            if not self.config.skip_failed_details:
                raise ScanAborted(self.stats, exc) from exc
            self.stats.failed += 1
            logger.error("Partial failure: skipping message %s, details unavailable (%s)", summary.message_id, exc)
            return

        matched_sender = match_sender(detail, self.config.sender)
        if matched_sender is None:
            return

        self.stats.matched += 1
        display_match(self.stats.matched, detail, matched_sender)

        deleted = False
        if self.config.delete:
            deleted = self.delete(detail.message_id)
            if deleted:
                self.stats.deleted += 1

        self.record(detail, matched_sender, deleted)

    def run(self) -> SweepStats:
        cursor: PageCursor | None = PageCursor()
        while cursor is not None:
            try:
                page = self.fetch_page(cursor)
            except _CALL_ERRORS as exc:
                raise ScanAborted(self.stats, exc) from exc
            self.stats.pages += 1

            for summary in page.items:
                self.process(summary)
                if self.config.item_pause:
                    self._sleep(self.config.item_pause)

            if page.next_token is not None:
                cursor = PageCursor(page.next_token)
                display_page_progress(self.stats)
            else:
                cursor = None

        display_sweep_summary(self.stats, self.config)
        return self.stats


def sweep_mailbox(
    api: MailApi,
    config: SweepConfig,
    sleep: Callable[[float], None] = time.sleep,
) -> SweepStats:
    """Run a full sweep, holding the audit file open for its duration."""
    executor = RequestExecutor(max_retries=config.max_retries, base_delay=config.base_delay, sleep=sleep)
    if config.audit_path is None:
        return MailboxSweeper(api, config, executor=executor, sleep=sleep).run()
    with AuditSink(config.audit_path) as sink:
        return MailboxSweeper(api, config, executor=executor, sink=sink, sleep=sleep).run()
