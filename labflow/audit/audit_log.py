"""
Append-only audit trail for a pipeline run.

Every stage and every per-record event appends one entry. Each entry is
stamped with the CRC-32 of ``runId|stage|recordId|notes``; the stamp covers
that entry alone (no chaining), so integrity checks are per entry.
"""

import csv
import io
import json
from collections.abc import Callable, Iterator

from labflow.core.models import AuditEntry
from labflow.observability.logger import RunLogger, get_logger
from labflow.utils import crc32_hex, now_iso

logger = get_logger(__name__)

RUN_LEVEL_RECORD_ID = "-"

CSV_COLUMNS = ["time", "runId", "stage", "status", "recordId", "checksum", "notes"]


def entry_checksum(run_id: str, stage: str, record_id: str, notes: str) -> str:
    """Checksum of an audit entry's content."""
    return crc32_hex(f"{run_id}|{stage}|{record_id}|{notes}")


class AuditLog:
    """
    Ordered, append-only collection of AuditEntry objects for one run.

    Entries are frozen models; the log exposes them as a tuple so callers
    cannot reorder or drop them.
    """

    def __init__(self, run_id: str, clock: Callable[[], str] | None = None):
        """
        Initialize an empty audit log.

        Args:
            run_id: Run every entry belongs to
            clock: Returns the entry timestamp (defaults to current UTC time)
        """
        self.run_id = run_id
        self.clock = clock or now_iso
        self._log = RunLogger(logger, run_id)
        self._entries: list[AuditEntry] = []

    def append(
        self,
        stage: str,
        record_id: str = RUN_LEVEL_RECORD_ID,
        notes: str = "",
        status: str = "ok",
    ) -> AuditEntry:
        """
        Append an entry.

        Args:
            stage: Stage name, e.g. "intake" or "process:item"
            record_id: Sample id ("-" for run-level events)
            notes: Free-text details
            status: "ok" or "error"

        Returns:
            The appended entry
        """
        entry = AuditEntry(
            time=self.clock(),
            run_id=self.run_id,
            stage=stage,
            status=status,
            record_id=record_id,
            checksum=entry_checksum(self.run_id, stage, record_id, notes),
            notes=notes,
        )
        self._entries.append(entry)

        self._log.debug(
            f"Audit entry appended: record_id={record_id}, checksum={entry.checksum}",
            extra={"stage": stage},
        )
        return entry

    @property
    def entries(self) -> tuple[AuditEntry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[AuditEntry]:
        return iter(tuple(self._entries))

    def by_stage(self, stage: str) -> list[AuditEntry]:
        """Entries recorded for one stage name."""
        return [entry for entry in self._entries if entry.stage == stage]

    def verify(self) -> list[int]:
        """
        Recompute every checksum.

        Returns:
            Positions of entries whose checksum does not match their content
        """
        return [
            position
            for position, entry in enumerate(self._entries)
            if entry.checksum != entry_checksum(entry.run_id, entry.stage, entry.record_id, entry.notes)
        ]

    def to_csv(self) -> str:
        """
        Export as CSV.

        Every cell is double-quoted with embedded quotes doubled; newlines in
        notes are collapsed to spaces; rows are separated by ``\\n``.
        """
        buffer = io.StringIO()
        writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
        writer.writerow(CSV_COLUMNS)
        for entry in self._entries:
            writer.writerow([
                entry.time,
                entry.run_id,
                entry.stage,
                entry.status,
                entry.record_id,
                entry.checksum,
                entry.notes.replace("\r\n", " ").replace("\n", " "),
            ])
        return buffer.getvalue().rstrip("\n")

    def to_records(self) -> list[dict[str, str]]:
        """Entries as dictionaries keyed by wire names."""
        return [entry.model_dump(by_alias=True) for entry in self._entries]

    def to_json(self) -> str:
        """Export as a JSON array with sorted keys and 2-space indentation."""
        return json.dumps(self.to_records(), sort_keys=True, indent=2, ensure_ascii=False)
