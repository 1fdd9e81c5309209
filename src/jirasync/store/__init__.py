"""Local persistence for synced issues."""

from .database import Base, IssueRow, ProjectSyncRow
from .issue_store import IssueStore, StoredIssue, StoreError

__all__ = [
    "Base",
    "IssueRow",
    "IssueStore",
    "ProjectSyncRow",
    "StoreError",
    "StoredIssue",
]
