"""Pagination loop for changed-since syncs.

Every run starts at offset 0 and walks the result set one page at a time:
fetch, persist, advance. There is no resumption state across runs beyond the
``since`` timestamp; persistence is idempotent, so a run that failed halfway
is simply repeated from the top.
"""

from __future__ import annotations

import logging
from datetime import datetime

from ..jira.client import JiraClientError
from ..jira.queries import build_changed_since_query
from ..models import ErrorKind, SyncError, SyncOutcome
from ..store.issue_store import StoreError
from .protocol import PageFetcher, PagePersister, ProgressCallback

logger = logging.getLogger(__name__)


def sync(
    project: str,
    since: datetime,
    fetch_page: PageFetcher,
    persist_page: PagePersister,
    *,
    on_progress: ProgressCallback | None = None,
) -> SyncOutcome:
    """Fetch and persist every issue in ``project`` changed since ``since``.

    The loop ends when the offset reaches the most recently reported total,
    or when a page comes back empty (a stale total must not spin forever).
    A server total that grows mid-run is followed, not treated as an error.

    The first fetch, decode or persistence failure ends the run; it is
    returned on ``SyncOutcome.error`` and pages persisted before it stay
    persisted.

    Args:
        project: Project key
        since: Only issues updated at or after this instant are selected
        fetch_page: Returns the page at a given offset (see PageFetcher)
        persist_page: Idempotently stores a page of records (see PagePersister)
        on_progress: Called with (offset, total) after each persisted page

    Returns:
        SyncOutcome with counts and, if the run stopped early, the error
    """
    query = build_changed_since_query(project, since)
    outcome = SyncOutcome(project=project)
    offset = 0

    while True:
        try:
            page = fetch_page(query, offset)
        except JiraClientError as e:
            outcome.error = SyncError(kind=ErrorKind.TRANSPORT, message=str(e), offset=offset)
            logger.error("Sync of %s stopped: %s", project, outcome.error)
            return outcome

        if page.error is not None:
            outcome.error = page.error
            logger.error("Sync of %s stopped: %s", project, outcome.error)
            return outcome

        outcome.pages += 1
        total = page.total_available

        if page.consumed == 0:
            if offset < total:
                logger.warning(
                    "Empty page at offset %d although %d reported; stopping", offset, total
                )
            break

        try:
            outcome.total_written += persist_page(page.records)
            if on_progress is not None:
                on_progress(offset + page.consumed, total)
        except StoreError as e:
            outcome.error = SyncError(kind=ErrorKind.PERSISTENCE, message=str(e), offset=offset)
            logger.error("Sync of %s stopped: %s", project, outcome.error)
            return outcome

        outcome.record_errors.extend(page.record_errors)
        offset += page.consumed
        outcome.total_processed = offset
        logger.info("processed %d out of %d", offset, total)

        if offset >= total:
            break

    logger.info("Sync of %s complete: %d processed, %d new", project, offset, outcome.total_written)
    return outcome
