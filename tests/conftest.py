"""Shared fixtures: SQLite stores and a scripted fake Jira server."""

import json
from pathlib import Path
from typing import Any
from urllib.parse import parse_qs, urlsplit

import pytest

from jirasync.jira.client import JiraClientError
from jirasync.store import IssueStore


def search_body(
    start_at: int,
    total: int,
    keys: list[str],
    max_results: int = 50,
) -> bytes:
    """Encode a /search response the way Jira shapes it."""
    issues = [
        {
            "id": str(10000 + int(key.rsplit("-", 1)[1])),
            "key": key,
            "self": f"https://jira.example.com/rest/api/2/issue/{key}",
            "fields": {"updated": "2024-03-01T10:15:00.000+0000"},
        }
        for key in keys
    ]
    payload = {
        "expand": "names,schema",
        "startAt": start_at,
        "maxResults": max_results,
        "total": total,
        "issues": issues,
    }
    return json.dumps(payload).encode()


class FakeJiraServer:
    """Stands in for JiraClient: serves `total` issues PROJ-1..PROJ-N page by page.

    ``fail_on_calls`` lists 1-based call numbers that raise JiraClientError.
    ``responses`` maps a URL substring to a canned body (checked first).
    """

    def __init__(
        self,
        total: int = 0,
        project: str = "PROJ",
        fail_on_calls: set[int] | None = None,
        responses: dict[str, bytes] | None = None,
    ):
        self.total = total
        self.project = project
        self.fail_on_calls = fail_on_calls or set()
        self.responses = responses or {}
        self.urls: list[str] = []

    def fetch(self, url: str) -> bytes:
        self.urls.append(url)
        if len(self.urls) in self.fail_on_calls:
            raise JiraClientError("Request failed: connection reset")
        for fragment, body in self.responses.items():
            if fragment in url:
                return body

        params = parse_qs(urlsplit(url).query)
        start_at = int(params["startAt"][0])
        max_results = int(params["maxResults"][0])
        end = min(start_at + max_results, self.total)
        keys = [f"{self.project}-{n + 1}" for n in range(start_at, end)]
        return search_body(start_at, self.total, keys, max_results)

    @property
    def start_ats(self) -> list[int]:
        return [int(parse_qs(urlsplit(u).query)["startAt"][0]) for u in self.urls]

    def close(self) -> None:
        pass

    def __enter__(self) -> "FakeJiraServer":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "jira-sync.db"


@pytest.fixture
def store(db_path: Path):
    """An initialized store backed by a temporary SQLite file."""
    issue_store = IssueStore.from_path(db_path)
    issue_store.init_database()
    yield issue_store
    issue_store.close()


@pytest.fixture
def jira_server():
    """Factory for FakeJiraServer instances."""
    return FakeJiraServer


@pytest.fixture
def make_search_body():
    """The search_body encoder, for tests that script pages by hand."""
    return search_body
