"""Sync command for pulling changed Jira issues into the local database."""

import logging

from ..config import Settings
from ..jira.client import JiraClient, JiraClientError
from ..jira.credentials import CredentialsError
from ..models import SyncOutcome
from ..store.issue_store import IssueStore, StoreError
from ..sync.engine import IssueSyncEngine
from .output import error, header, info, success

logger = logging.getLogger(__name__)


def run_sync(settings: Settings, project: str, incremental: bool = False) -> int:
    """Sync one project's issues into the local database.

    Args:
        settings: Application settings (base URL, database path, page size)
        project: Project key to sync
        incremental: Only fetch issues changed since the last successful sync

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    if not project.strip():
        error("Project key cannot be empty")
        return 1

    if not settings.base_url:
        error("Jira base URL is not configured")
        info("Pass --base-url or set JIRASYNC_BASE_URL")
        return 1

    header("Authenticating with Jira...")
    try:
        client = JiraClient.from_environment(settings.base_url, timeout=settings.timeout)
    except CredentialsError as e:
        error(f"Jira credentials not available: {e}")
        info("Set JIRA_CREDS to 'username:password'")
        return 1

    try:
        with client, IssueStore.from_path(settings.database_path) as store:
            store.init_database()
            engine = IssueSyncEngine(
                client,
                store,
                settings.base_url,
                page_size=settings.page_size,
                points_field=settings.points_field,
            )
            mode = "incremental" if incremental else "full"
            header(f"Syncing {project} ({mode})...")
            outcome = engine.run(project, incremental=incremental)
            stored = store.count_issues()
    except (StoreError, JiraClientError) as e:
        error(str(e))
        return 1

    _report(outcome, stored)
    return 0 if outcome.ok else 1


def _report(outcome: SyncOutcome, stored: int) -> None:
    """Display the result of a sync run."""
    print()
    for record_error in outcome.record_errors:
        info(f"Skipped {record_error}")
    if outcome.ok:
        success(f"Sync complete. {outcome.total_processed} issues refreshed.")
    else:
        error(f"Sync incomplete after {outcome.total_processed} issues: {outcome.error}")
        info("Re-run the sync; issues already stored are not duplicated")
    info(f"New issues: {outcome.total_written}")
    info(f"Issues in database: {stored}")
