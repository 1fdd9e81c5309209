"""Data models."""

from .issue import (
    Component,
    IssueDetail,
    IssueSummary,
    IssueType,
    Other,
    Person,
    Status,
    parse_component,
    parse_issue_type,
    parse_open_enum,
    parse_status,
)
from .sync import ErrorKind, PageResult, SyncCheckpoint, SyncError, SyncOutcome

__all__ = [
    "Component",
    "ErrorKind",
    "IssueDetail",
    "IssueSummary",
    "IssueType",
    "Other",
    "PageResult",
    "Person",
    "Status",
    "SyncCheckpoint",
    "SyncError",
    "SyncOutcome",
    "parse_component",
    "parse_issue_type",
    "parse_open_enum",
    "parse_status",
]
