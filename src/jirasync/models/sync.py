"""Sync-related data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from .issue import IssueSummary


class ErrorKind(str, Enum):
    """Why a sync run stopped early."""

    TRANSPORT = "transport"  # Fetch failed: network, auth, non-2xx
    DECODE = "decode"  # Page body was not a valid search result
    PERSISTENCE = "persistence"  # Local database write failed


@dataclass(frozen=True)
class SyncError:
    """A terminal failure for one sync run."""

    kind: ErrorKind
    message: str
    offset: int = 0  # Page offset being processed when the run stopped

    def __str__(self) -> str:
        return f"{self.kind.value} error at offset {self.offset}: {self.message}"


@dataclass(frozen=True)
class PageResult:
    """One page of a paginated search."""

    offset: int  # Position of the first record within the result set
    page_size_declared: int = 0  # maxResults as echoed by the server
    total_available: int = 0  # Server-side total for this query; may change between pages
    records: tuple[IssueSummary, ...] = ()
    error: SyncError | None = None
    record_errors: tuple[str, ...] = ()  # Individual records skipped as unusable

    @property
    def consumed(self) -> int:
        """How many result-set positions this page covers."""
        return len(self.records) + len(self.record_errors)


@dataclass(frozen=True)
class SyncCheckpoint:
    """Per-project sync progress.

    ``last_synced_at`` is the start time of the last fully successful run.
    ``resume_offset`` is set while a run is in progress (or after it was
    interrupted) and cleared on success. It is informational: runs always
    restart pagination at offset 0.
    """

    project: str
    last_synced_at: datetime | None = None
    resume_offset: int | None = None


@dataclass
class SyncOutcome:
    """Result of a sync run."""

    project: str
    total_processed: int = 0  # Result-set positions consumed
    total_written: int = 0  # New rows inserted (first-write-wins)
    pages: int = 0  # Pages fetched successfully
    error: SyncError | None = None
    record_errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """Whether all available pages were processed."""
        return self.error is None
