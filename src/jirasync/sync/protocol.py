"""Capabilities the pagination loop is driven through."""

from collections.abc import Sequence
from typing import Protocol

from ..models import IssueSummary, PageResult


class PageFetcher(Protocol):
    """Fetch one page of search results.

    Implementations either return a PageResult (with ``error`` set when the
    body could not be decoded) or raise JiraClientError when the request
    itself failed.
    """

    def __call__(self, query: str, offset: int) -> PageResult:
        """Fetch the page starting at ``offset`` for the encoded ``query``."""
        ...


class PagePersister(Protocol):
    """Durably store one page of records.

    Must be idempotent: persisting the same records twice leaves the store
    as if they had been persisted once. Raises StoreError on failure.
    """

    def __call__(self, records: Sequence[IssueSummary]) -> int:
        """Persist ``records`` and return how many were newly written."""
        ...


class ProgressCallback(Protocol):
    """Notified after each page is durably persisted."""

    def __call__(self, offset: int, total: int) -> None: ...
