"""Jira search query and URL building."""

from __future__ import annotations

from datetime import datetime
from urllib.parse import quote

from ..utils.datetime import to_utc

# JQL compares dates at minute precision
SINCE_FORMAT = "%Y-%m-%d %H:%M"

SNAPSHOT_FIELDS = (
    "assignee",
    "status",
    "summary",
    "description",
    "created",
    "updated",
    "resolutiondate",
    "issuetype",
    "components",
    "priority",
    "resolution",
)


def build_changed_since_query(project: str, since: datetime) -> str:
    """Build the percent-encoded JQL selecting a project's issues changed since ``since``.

    The timestamp is normalized to UTC before it is truncated to minutes, so
    the same instant always yields the same query regardless of the offset it
    was expressed in.

    Example:
        >>> build_changed_since_query("PROJ", datetime(2019, 9, 1, 5, 0, tzinfo=UTC))
        'project%3DPROJ%20AND%20updatedDate%20%3E%3D%20%222019-09-01%2005%3A00%22'
    """
    if not project:
        raise ValueError("project cannot be empty")
    since_text = to_utc(since).strftime(SINCE_FORMAT)
    jql = f'project={project} AND updatedDate >= "{since_text}"'
    return quote(jql, safe="")


def search_url(base_url: str, encoded_query: str, start_at: int, max_results: int) -> str:
    """URL for one page of search results (only the ``updated`` field is requested)."""
    return (
        f"{base_url.rstrip('/')}/search?jql={encoded_query}"
        f"&expand=names&maxResults={max_results}&fields=updated&startAt={start_at}"
    )


def issue_url(base_url: str, key: str, points_field: str = "customfield_10002") -> str:
    """URL for a single issue with every field the snapshot needs."""
    fields = ",".join((*SNAPSHOT_FIELDS, points_field))
    return f"{base_url.rstrip('/')}/issue/{quote(key, safe='')}?fields={fields}"
