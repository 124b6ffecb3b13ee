"""SQLite library store.

Holds the reference catalog the engine matches against and the audit log
of every match outcome, including the manual review state of ambiguous
results. Implements both CatalogSnapshotProvider and MatchOutcomeSink.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from reelmatch.core.disambiguation.models import CatalogEntry, MatchResult
from reelmatch.shared.constants import CLIDefaults, ReviewStatus
from reelmatch.shared.errors import ErrorCode, ErrorContext, InfrastructureError
from reelmatch.shared.logging import log_operation_error, log_operation_success

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS catalog_entries (
    id           INTEGER PRIMARY KEY,
    folder_path  TEXT NOT NULL DEFAULT '',
    parsed_title TEXT,
    parsed_year  INTEGER,
    external_id  TEXT
);
CREATE TABLE IF NOT EXISTS match_outcomes (
    id               INTEGER PRIMARY KEY,
    batch_id         TEXT NOT NULL,
    request_id       TEXT NOT NULL,
    input_title      TEXT NOT NULL,
    input_year       INTEGER,
    method           TEXT,
    confidence       REAL,
    matched_entry_id INTEGER,
    ambiguous        INTEGER NOT NULL DEFAULT 0,
    reason           TEXT,
    reviewed         INTEGER NOT NULL DEFAULT 0,
    created_at       TEXT NOT NULL DEFAULT (datetime('now'))
);
CREATE INDEX IF NOT EXISTS idx_outcomes_batch ON match_outcomes(batch_id);
CREATE INDEX IF NOT EXISTS idx_outcomes_pending ON match_outcomes(reviewed) WHERE reviewed = 0;
"""


class ReviewDecision(str, Enum):
    """Manual verdict on a logged outcome."""

    CONFIRM = "confirm"
    REJECT = "reject"

    @property
    def status(self) -> int:
        return ReviewStatus.CONFIRMED if self is ReviewDecision.CONFIRM else ReviewStatus.REJECTED


@dataclass(frozen=True)
class MatchOutcomeRecord:
    """One row of the outcome log."""

    id: int
    batch_id: str
    request_id: str
    input_title: str
    input_year: int | None
    method: str | None
    confidence: float | None
    matched_entry_id: int | None
    ambiguous: bool
    reason: str | None
    reviewed: int
    created_at: str

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> MatchOutcomeRecord:
        return cls(
            id=row["id"],
            batch_id=row["batch_id"],
            request_id=row["request_id"],
            input_title=row["input_title"],
            input_year=row["input_year"],
            method=row["method"],
            confidence=row["confidence"],
            matched_entry_id=row["matched_entry_id"],
            ambiguous=bool(row["ambiguous"]),
            reason=row["reason"],
            reviewed=row["reviewed"],
            created_at=row["created_at"],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "batch_id": self.batch_id,
            "request_id": self.request_id,
            "input_title": self.input_title,
            "input_year": self.input_year,
            "method": self.method,
            "confidence": self.confidence,
            "matched_entry_id": self.matched_entry_id,
            "ambiguous": self.ambiguous,
            "reason": self.reason,
            "reviewed": self.reviewed,
            "created_at": self.created_at,
        }


@dataclass(frozen=True)
class OutcomeCounts:
    """Pending (unreviewed ambiguous) and total outcome counts."""

    pending: int
    total: int


class SQLiteLibraryStore:
    """SQLite-backed catalog and outcome log.

    The connection is shared between worker threads; every statement runs
    under one lock. WAL mode keeps readers from blocking the writer.

    Attributes:
        db_path: Path to the SQLite database file, or ":memory:"

    Example:
        >>> with SQLiteLibraryStore("data/reelmatch.db") as store:
        ...     store.upsert_entries([CatalogEntry(id=1, parsed_title="Inception", parsed_year=2010)])
        ...     entries = store.load_catalog_snapshot()
    """

    def __init__(self, db_path: Path | str) -> None:
        """Open (and create if needed) the database.

        Raises:
            InfrastructureError: If the database cannot be opened or initialized
        """
        self.db_path = str(db_path)
        self._lock = threading.Lock()
        self.conn: sqlite3.Connection | None = None
        self._initialize_db()

    def _initialize_db(self) -> None:
        context = ErrorContext(
            operation="initialize_db",
            additional_data={"db_path": self.db_path},
        )
        try:
            if self.db_path != ":memory:":
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

            self.conn = sqlite3.connect(
                self.db_path,
                check_same_thread=False,
                isolation_level=None,
            )
            self.conn.row_factory = sqlite3.Row
            self.conn.execute("PRAGMA journal_mode=WAL")
            self.conn.execute("PRAGMA synchronous=NORMAL")
            self.conn.executescript(_SCHEMA)

            log_operation_success(
                logger=logger,
                operation="initialize_db",
                duration_ms=0,
                context=context.additional_data,
            )
        except (sqlite3.Error, OSError) as e:
            error = InfrastructureError(
                code=ErrorCode.DATABASE_ERROR,
                message=f"Failed to initialize library store: {e!s}",
                context=context,
                original_error=e,
            )
            log_operation_error(logger=logger, error=error, operation="initialize_db")
            raise error from e

    @contextmanager
    def _cursor(self, operation: str) -> Iterator[sqlite3.Connection]:
        with self._lock:
            # close() clears conn under the same lock
            if self.conn is None:
                raise InfrastructureError(
                    code=ErrorCode.DATABASE_ERROR,
                    message="Library store is closed",
                    context=ErrorContext(operation=operation),
                )
            try:
                yield self.conn
            except sqlite3.Error as e:
                raise InfrastructureError(
                    code=ErrorCode.DATABASE_ERROR,
                    message=f"Library store operation '{operation}' failed: {e!s}",
                    context=ErrorContext(
                        operation=operation,
                        additional_data={"db_path": self.db_path},
                    ),
                    original_error=e,
                ) from e

    # Catalog

    def upsert_entries(self, entries: Iterable[CatalogEntry]) -> int:
        """Insert or update catalog entries by id.

        Returns:
            Number of entries written
        """
        rows = [
            (e.id, e.folder_path, e.parsed_title, e.parsed_year, e.external_id)
            for e in entries
        ]
        with self._cursor("upsert_entries") as conn:
            conn.execute("BEGIN")
            try:
                conn.executemany(
                    """
                    INSERT INTO catalog_entries (id, folder_path, parsed_title, parsed_year, external_id)
                    VALUES (?, ?, ?, ?, ?)
                    ON CONFLICT(id) DO UPDATE SET
                        folder_path = excluded.folder_path,
                        parsed_title = excluded.parsed_title,
                        parsed_year = excluded.parsed_year,
                        external_id = excluded.external_id
                    """,
                    rows,
                )
            except sqlite3.Error:
                conn.execute("ROLLBACK")
                raise
            conn.execute("COMMIT")

        logger.info("Upserted %d catalog entries", len(rows))
        return len(rows)

    def load_catalog_snapshot(self) -> list[CatalogEntry]:
        """Return every catalog entry, newest year first."""
        with self._cursor("load_catalog_snapshot") as conn:
            rows = conn.execute(
                "SELECT id, folder_path, parsed_title, parsed_year, external_id "
                "FROM catalog_entries ORDER BY parsed_year DESC, folder_path ASC",
            ).fetchall()

        return [
            CatalogEntry(
                id=row["id"],
                folder_path=row["folder_path"] or "",
                parsed_title=row["parsed_title"],
                parsed_year=row["parsed_year"],
                external_id=row["external_id"],
            )
            for row in rows
        ]

    # Outcome log

    def record_match_outcome(
        self,
        result: MatchResult,
        batch_id: str,
        request_title: str,
        request_year: int | None,
    ) -> None:
        """Append one outcome to the log."""
        with self._cursor("record_match_outcome") as conn:
            conn.execute(
                """
                INSERT INTO match_outcomes
                    (batch_id, request_id, input_title, input_year, method, confidence,
                     matched_entry_id, ambiguous, reason)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    batch_id,
                    result.request_id,
                    request_title,
                    request_year,
                    result.method.value,
                    result.confidence,
                    result.match.entry_id if result.match else None,
                    1 if result.ambiguous else 0,
                    result.ambiguous_reason.value if result.ambiguous_reason else None,
                ),
            )

    def get_pending_outcomes(self, limit: int = CLIDefaults.PENDING_LIMIT) -> list[MatchOutcomeRecord]:
        """Unreviewed outcomes, newest first."""
        with self._cursor("get_pending_outcomes") as conn:
            rows = conn.execute(
                "SELECT * FROM match_outcomes WHERE reviewed = ? ORDER BY id DESC LIMIT ?",
                (ReviewStatus.PENDING, limit),
            ).fetchall()
        return [MatchOutcomeRecord.from_row(row) for row in rows]

    def get_ambiguous_outcomes(self, limit: int = CLIDefaults.PENDING_LIMIT) -> list[MatchOutcomeRecord]:
        """Unreviewed ambiguous outcomes, newest first."""
        with self._cursor("get_ambiguous_outcomes") as conn:
            rows = conn.execute(
                "SELECT * FROM match_outcomes WHERE reviewed = ? AND ambiguous = 1 "
                "ORDER BY id DESC LIMIT ?",
                (ReviewStatus.PENDING, limit),
            ).fetchall()
        return [MatchOutcomeRecord.from_row(row) for row in rows]

    def review_outcome(self, outcome_id: int, decision: ReviewDecision | str) -> bool:
        """Confirm or reject a logged outcome.

        Returns:
            False if no outcome has that id

        Raises:
            ValueError: If decision is not "confirm" or "reject"
        """
        decision = ReviewDecision(decision)
        with self._cursor("review_outcome") as conn:
            cursor = conn.execute(
                "UPDATE match_outcomes SET reviewed = ? WHERE id = ?",
                (decision.status, outcome_id),
            )
            changed = cursor.rowcount > 0

        if changed:
            logger.info("Outcome %d marked %s", outcome_id, decision.value)
        return changed

    def get_outcome_counts(self) -> OutcomeCounts:
        with self._cursor("get_outcome_counts") as conn:
            pending = conn.execute(
                "SELECT COUNT(*) FROM match_outcomes WHERE reviewed = ? AND ambiguous = 1",
                (ReviewStatus.PENDING,),
            ).fetchone()[0]
            total = conn.execute("SELECT COUNT(*) FROM match_outcomes").fetchone()[0]
        return OutcomeCounts(pending=pending, total=total)

    def close(self) -> None:
        """Close the database connection."""
        with self._lock:
            if self.conn is not None:
                self.conn.close()
                self.conn = None

    def __enter__(self) -> SQLiteLibraryStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
