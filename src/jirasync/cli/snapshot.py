"""Snapshot command for inspecting individual issues."""

import logging
from collections.abc import Sequence

from ..config import Settings
from ..jira.client import JiraClient
from ..jira.credentials import CredentialsError
from ..models import IssueDetail
from ..sync.engine import fetch_snapshots
from .output import error, header

logger = logging.getLogger(__name__)


def run_snapshot(settings: Settings, keys: Sequence[str]) -> int:
    """Fetch issues in full and print them.

    Every key is attempted; keys that fail are reported and make the exit
    code non-zero without hiding the ones that succeeded.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    if not settings.base_url:
        error("Jira base URL is not configured (--base-url or JIRASYNC_BASE_URL)")
        return 1

    try:
        client = JiraClient.from_environment(settings.base_url, timeout=settings.timeout)
    except CredentialsError as e:
        error(f"Jira credentials not available: {e}")
        return 1

    header(f"Fetching {', '.join(keys)}...")
    with client:
        details, failures = fetch_snapshots(client, settings.base_url, keys, settings.points_field)

    for detail in details:
        print()
        print(format_detail(detail))

    for failure in failures:
        error(failure)
    return 1 if failures else 0


def format_detail(detail: IssueDetail) -> str:
    """Render an issue as aligned ``label: value`` lines."""
    assignee = detail.assignee
    rows = [
        ("Key", detail.key),
        ("Id", detail.id),
        ("Summary", detail.summary),
        ("Type", _label(detail.issue_type)),
        ("Status", _label(detail.status)),
        ("Components", ", ".join(_label(c) for c in detail.components)),
        ("Assignee", f"{assignee.name} <{assignee.email}>" if assignee else "Unassigned"),
        ("Points", f"{detail.points:g}"),
        ("Created", detail.created.isoformat()),
        ("Updated", detail.updated.isoformat()),
        ("Resolved", detail.resolution_date.isoformat() if detail.resolution_date else "-"),
    ]
    width = max(len(label) for label, _ in rows)
    lines = [f"{label:<{width}}  {value}" for label, value in rows]
    if detail.description:
        lines.extend(["", detail.description])
    return "\n".join(lines)


def _label(value) -> str:
    # Known enum members print their display name, Other prints its raw text
    return getattr(value, "value", None) or str(value)
