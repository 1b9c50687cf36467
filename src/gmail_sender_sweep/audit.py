"""Append-only CSV audit log of matched messages."""

from __future__ import annotations

import csv
from pathlib import Path

from .constants import AUDIT_FIELDNAMES
from .models import AuditRecord


class AuditSink:
    """CSV file that gains one flushed row per matched message.

    The header row is written only when the file is new or empty, so the
    same path can be reused across runs.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        is_new = not self.path.exists() or self.path.stat().st_size == 0
        self._file = open(self.path, "a", newline="", encoding="utf-8")
        self._writer = csv.DictWriter(self._file, fieldnames=AUDIT_FIELDNAMES)
        self.rows_written = 0
        if is_new:
            self._writer.writeheader()
            self._file.flush()

    def append(self, record: AuditRecord) -> None:
        self._writer.writerow(record.as_row())
        self._file.flush()
        self.rows_written += 1

    def close(self) -> None:
        if not self._file.closed:
            self._file.flush()
            self._file.close()

    def __enter__(self) -> AuditSink:
        return self

    def __exit__(self, *exc) -> None:
        self.close()


def read_audit(path: Path | str) -> list[AuditRecord]:
    """Load every row of an audit file."""
    with open(path, newline="", encoding="utf-8") as f:
        return [
            AuditRecord(
                mailbox_id=row["mailbox_id"],
                message_id=row["message_id"],
                sent_timestamp=row["sent_timestamp"],
                subject=row["subject"],
                matched_sender=row["matched_sender"],
                deleted=row["deleted"].strip().lower() == "true",
            )
            for row in csv.DictReader(f)
        ]
