"""Issue sync engine.

Wires the Jira client, the JSON mapper, the pagination loop and the local
store together, and keeps the per-project checkpoint current:

- after each persisted page, ``resume_offset`` records how far the run got
- after a fully successful run, ``last_synced_at`` becomes the run's start
  time and ``resume_offset`` is cleared
- after a failed run, ``last_synced_at`` keeps its previous value, so the
  next incremental run covers everything the failed one missed
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from ..jira.client import JiraClient, JiraClientError
from ..jira.mapper import DecodeError, decode_json, parse_detail, parse_details, parse_page
from ..jira.queries import issue_url, search_url
from ..models import IssueDetail, IssueSummary, PageResult, SyncCheckpoint, SyncOutcome
from ..utils.datetime import EPOCH, now_utc
from .pager import sync

if TYPE_CHECKING:
    from ..store.issue_store import IssueStore

logger = logging.getLogger(__name__)


class IssueSyncEngine:
    """Synchronizes one project's issues into an IssueStore."""

    def __init__(
        self,
        client: JiraClient,
        store: IssueStore,
        base_url: str,
        page_size: int = 100,
        points_field: str = "customfield_10002",
    ) -> None:
        """Initialize the sync engine.

        Args:
            client: Authenticated Jira client (the fetch capability)
            store: Initialized issue store
            base_url: Jira REST API root
            page_size: maxResults requested per search page
            points_field: Custom field holding story points, for snapshots
        """
        self._client = client
        self._store = store
        self._base_url = base_url
        self._page_size = page_size
        self._points_field = points_field

    def fetch_page(self, query: str, offset: int) -> PageResult:
        """Fetch and map one search page. Transport errors propagate."""
        url = search_url(self._base_url, query, start_at=offset, max_results=self._page_size)
        return parse_page(self._client.fetch(url), offset)

    def persist_page(self, records: Sequence[IssueSummary]) -> int:
        return self._store.upsert_summaries(records)

    def run(self, project: str, incremental: bool = False) -> SyncOutcome:
        """Run one sync pass for ``project``.

        Args:
            project: Project key
            incremental: Only fetch issues changed since the last successful run.
                Falls back to a full sync when the project has no checkpoint yet.

        Returns:
            SyncOutcome of the pass
        """
        started_at = now_utc()
        checkpoint = self._store.get_checkpoint(project)
        last_synced_at = checkpoint.last_synced_at if checkpoint else None

        if incremental and last_synced_at is not None:
            since = last_synced_at
            logger.info("Incremental sync of %s since %s", project, since.isoformat())
        else:
            since = EPOCH
            if incremental:
                logger.info("No checkpoint for %s yet; running a full sync", project)
            else:
                logger.info("Full sync of %s", project)

        def record_progress(offset: int, total: int) -> None:
            self._store.set_checkpoint(
                SyncCheckpoint(
                    project=project, last_synced_at=last_synced_at, resume_offset=offset
                )
            )

        outcome = sync(
            project,
            since,
            self.fetch_page,
            self.persist_page,
            on_progress=record_progress,
        )

        if outcome.ok:
            self._store.set_checkpoint(SyncCheckpoint(project=project, last_synced_at=started_at))
        return outcome

    def snapshot(self, key: str) -> IssueDetail:
        """Fetch one issue in full (see fetch_snapshot)."""
        return fetch_snapshot(self._client, self._base_url, key, self._points_field)

    def snapshots(self, keys: Sequence[str]) -> tuple[list[IssueDetail], list[str]]:
        """Fetch several issues in full (see fetch_snapshots)."""
        return fetch_snapshots(self._client, self._base_url, keys, self._points_field)


def fetch_snapshot(
    client: JiraClient,
    base_url: str,
    key: str,
    points_field: str = "customfield_10002",
) -> IssueDetail:
    """Fetch one issue in full.

    Raises:
        JiraClientError: The request failed
        DecodeError: The body was not JSON
        RecordParseError: The issue's created/updated timestamps are unusable
    """
    raw = client.fetch(issue_url(base_url, key, points_field))
    return parse_detail(decode_json(raw), points_field)


def fetch_snapshots(
    client: JiraClient,
    base_url: str,
    keys: Sequence[str],
    points_field: str = "customfield_10002",
) -> tuple[list[IssueDetail], list[str]]:
    """Fetch several issues in full, collecting per-issue failures.

    A key whose request fails, whose body is not JSON, or whose timestamps
    are unusable is reported in the failure list; the other keys are still
    returned.

    Returns:
        (details in request order, failure messages)
    """
    raws: list[Any] = []
    failures: list[str] = []
    for key in keys:
        try:
            raws.append(decode_json(client.fetch(issue_url(base_url, key, points_field))))
        except (JiraClientError, DecodeError) as e:
            logger.warning("Could not fetch %s: %s", key, e)
            failures.append(f"{key}: {e}")
    details, parse_failures = parse_details(raws, points_field)
    return details, failures + parse_failures
