"""Utility functions."""

from .datetime import EPOCH, from_iso, now_utc, parse_jira_datetime, to_iso, to_utc

__all__ = [
    "EPOCH",
    "from_iso",
    "now_utc",
    "parse_jira_datetime",
    "to_iso",
    "to_utc",
]
