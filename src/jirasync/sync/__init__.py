"""Jira issue sync package."""

from .engine import IssueSyncEngine
from .pager import sync
from .protocol import PageFetcher, PagePersister, ProgressCallback

__all__ = [
    "IssueSyncEngine",
    "PageFetcher",
    "PagePersister",
    "ProgressCallback",
    "sync",
]
