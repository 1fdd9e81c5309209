"""Database tables for synced issues and per-project checkpoints."""

from datetime import UTC, datetime

from sqlalchemy import DateTime, Integer, String, TypeDecorator
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class UTCDateTime(TypeDecorator):
    """Timezone-aware UTC datetimes on a backend that stores them naive.

    SQLite keeps no offset, so values are normalized to UTC on the way in and
    tagged as UTC on the way out.
    """

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect) -> datetime | None:
        if value is None:
            return None
        if value.tzinfo is not None:
            value = value.astimezone(UTC)
        return value.replace(tzinfo=None)

    def process_result_value(self, value: datetime | None, dialect) -> datetime | None:
        if value is None:
            return None
        return value.replace(tzinfo=UTC)


class Base(DeclarativeBase):
    pass


class IssueRow(Base):
    """One row per issue key ever seen.

    Keyed by the human-readable key: keys are unique per project on the
    tracker side, remote ids are not validated here.
    """

    __tablename__ = "issue"

    key: Mapped[str] = mapped_column(String(50), primary_key=True)
    id: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_updated: Mapped[datetime | None] = mapped_column(UTCDateTime(), nullable=True)

    def __repr__(self) -> str:
        return f"<Issue(key={self.key}, id={self.id}, last_updated={self.last_updated})>"


class ProjectSyncRow(Base):
    """Checkpoint for one project; overwritten on every successful run."""

    __tablename__ = "project_sync"

    project: Mapped[str] = mapped_column(String(20), primary_key=True)
    last_snapshot: Mapped[str | None] = mapped_column(String(50), nullable=True)  # ISO-8601 UTC
    resume_offset: Mapped[int | None] = mapped_column(Integer, nullable=True)

    def __repr__(self) -> str:
        return f"<ProjectSync(project={self.project}, last_snapshot={self.last_snapshot})>"
