"""SQLite-backed store for issue summaries and sync checkpoints."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, func, select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from ..jira.mapper import parse_int
from ..models import IssueSummary, SyncCheckpoint
from ..utils.datetime import from_iso, to_iso, to_utc
from .database import Base, IssueRow, ProjectSyncRow

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Raised when the local database cannot be read or written."""

    pass


@dataclass(frozen=True)
class StoredIssue:
    """An issue row as persisted."""

    key: str
    id: int
    last_updated: datetime | None


class IssueStore:
    """Persists issue summaries and per-project checkpoints.

    Issue writes are insert-if-absent keyed by issue key: the first write for
    a key wins and later writes for it are silently skipped, so replaying a
    page is always safe. Checkpoints are the opposite, a plain overwrite of
    the project's single row.
    """

    def __init__(self, url: str, echo: bool = False):
        """Initialize the store.

        Args:
            url: SQLAlchemy database URL (SQLite)
            echo: Log emitted SQL
        """
        self.url = url
        self._engine = create_engine(url, echo=echo)
        self._session_factory = sessionmaker(self._engine, expire_on_commit=False)

    @classmethod
    def from_path(cls, path: Path) -> IssueStore:
        """Open (creating parent directories if needed) a SQLite database file."""
        path.parent.mkdir(parents=True, exist_ok=True)
        return cls(f"sqlite:///{path}")

    def close(self) -> None:
        """Release pooled connections."""
        self._engine.dispose()

    def __enter__(self) -> IssueStore:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    @contextmanager
    def _session(self) -> Iterator[Session]:
        """One transaction: commit on success, roll back on any error."""
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error("Database error: %s", e)
            raise StoreError(f"Database error: {e}") from e
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def init_database(self) -> None:
        """Create the tables if they don't exist."""
        try:
            Base.metadata.create_all(self._engine)
        except SQLAlchemyError as e:
            raise StoreError(f"Could not initialize database: {e}") from e

    # --- Issues ---

    def upsert_summaries(self, records: Sequence[IssueSummary]) -> int:
        """Insert summaries whose key is not stored yet.

        Existing keys are left untouched (first-write-wins). Within one batch
        the first occurrence of a key is the one written.

        Returns:
            Number of new rows written
        """
        batch: dict[str, IssueSummary] = {}
        for record in records:
            if record.key and record.key not in batch:
                batch[record.key] = record
        if not batch:
            return 0

        with self._session() as session:
            existing = set(session.scalars(select(IssueRow.key).where(IssueRow.key.in_(batch))))
            new_rows = [
                {
                    "key": key,
                    "id": parse_int(record.id),
                    "last_updated": to_utc(record.updated) if record.updated else None,
                }
                for key, record in batch.items()
                if key not in existing
            ]
            if new_rows:
                stmt = sqlite_insert(IssueRow).values(new_rows)
                session.execute(stmt.on_conflict_do_nothing(index_elements=[IssueRow.key]))

        logger.debug(
            "Upserted %d records: %d new, %d already stored",
            len(batch),
            len(new_rows),
            len(existing),
        )
        return len(new_rows)

    def get_issue(self, key: str) -> StoredIssue | None:
        """Get a stored issue by key."""
        with self._session() as session:
            row = session.get(IssueRow, key)
            if row is None:
                return None
            return StoredIssue(key=row.key, id=row.id, last_updated=row.last_updated)

    def has_issue(self, key: str) -> bool:
        return self.get_issue(key) is not None

    def list_keys(self) -> list[str]:
        """All stored issue keys, sorted."""
        with self._session() as session:
            return list(session.scalars(select(IssueRow.key).order_by(IssueRow.key)))

    def count_issues(self) -> int:
        with self._session() as session:
            return session.scalar(select(func.count()).select_from(IssueRow)) or 0

    # --- Checkpoints ---

    def get_checkpoint(self, project: str) -> SyncCheckpoint | None:
        """Get the checkpoint for a project, or None if it was never synced."""
        with self._session() as session:
            row = session.get(ProjectSyncRow, project)
            if row is None:
                return None
            return SyncCheckpoint(
                project=row.project,
                last_synced_at=from_iso(row.last_snapshot) if row.last_snapshot else None,
                resume_offset=row.resume_offset,
            )

    def set_checkpoint(self, checkpoint: SyncCheckpoint) -> None:
        """Overwrite the project's checkpoint row (created on first write)."""
        last_snapshot = (
            to_iso(to_utc(checkpoint.last_synced_at)) if checkpoint.last_synced_at else None
        )
        stmt = sqlite_insert(ProjectSyncRow).values(
            project=checkpoint.project,
            last_snapshot=last_snapshot,
            resume_offset=checkpoint.resume_offset,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[ProjectSyncRow.project],
            set_={
                "last_snapshot": stmt.excluded.last_snapshot,
                "resume_offset": stmt.excluded.resume_offset,
            },
        )
        with self._session() as session:
            session.execute(stmt)
        logger.debug("Checkpoint for %s set to %s", checkpoint.project, checkpoint)
