"""Tests for the command line interface."""

import json
import logging
from datetime import UTC, datetime
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from jirasync.__main__ import build_parser, main
from jirasync.cli.snapshot import format_detail, run_snapshot
from jirasync.cli.sync import run_sync
from jirasync.config import Settings
from jirasync.jira.client import JiraClient
from jirasync.logging import setup_logging
from jirasync.models import Component, IssueDetail, IssueType, Other, Person, Status
from jirasync.store import IssueStore

BASE_URL = "https://jira.example.com/rest/api/2"


@pytest.fixture
def settings(db_path):
    return Settings(base_url=BASE_URL, database_path=db_path, page_size=50)


class TestParser:
    """Tests for argument parsing."""

    def test_sync_args(self):
        args = build_parser().parse_args(["sync", "-p", "PROJ", "--incremental"])
        assert args.command == "sync"
        assert args.project == "PROJ"
        assert args.incremental is True

    def test_global_options(self, tmp_path):
        args = build_parser().parse_args(
            ["-vv", "--db", str(tmp_path / "x.db"), "--base-url", BASE_URL, "snapshot", "PROJ-1"]
        )
        assert args.verbose == 2
        assert args.db == tmp_path / "x.db"
        assert args.keys == ["PROJ-1"]

    def test_snapshot_accepts_several_keys(self):
        args = build_parser().parse_args(["snapshot", "PROJ-1", "PROJ-2"])
        assert args.keys == ["PROJ-1", "PROJ-2"]

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_sync_requires_project(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["sync"])


class TestMain:
    """Tests for the main() entry point."""

    def test_missing_base_url(self, monkeypatch, capsys):
        monkeypatch.delenv("JIRASYNC_BASE_URL", raising=False)
        with pytest.raises(SystemExit) as exc_info:
            main(["sync", "--project", "PROJ"])
        assert exc_info.value.code == 1
        assert "base URL" in capsys.readouterr().err

    def test_empty_project_exits_cleanly(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--base-url", BASE_URL, "sync", "--project", ""])
        assert exc_info.value.code == 1
        assert "Project key cannot be empty" in capsys.readouterr().err

    def test_sync_end_to_end(self, monkeypatch, db_path, jira_server, capsys):
        monkeypatch.setenv("JIRASYNC_PAGE_SIZE", "50")
        with patch.object(JiraClient, "from_environment", return_value=jira_server(total=75)):
            with pytest.raises(SystemExit) as exc_info:
                main(["--base-url", BASE_URL, "--db", str(db_path), "sync", "-p", "PROJ"])

        assert exc_info.value.code == 0
        assert "75 issues refreshed" in capsys.readouterr().out
        with IssueStore.from_path(db_path) as store:
            assert store.count_issues() == 75


class TestRunSync:
    """Tests for run_sync()."""

    def test_success(self, settings, jira_server, capsys):
        server = jira_server(total=3)
        with patch.object(JiraClient, "from_environment", return_value=server):
            assert run_sync(settings, "PROJ") == 0

        out = capsys.readouterr().out
        assert "Sync complete. 3 issues refreshed." in out
        assert "New issues: 3" in out
        assert "Issues in database: 3" in out
        assert "1970-01-01%2000%3A00" in server.urls[0]

    def test_partial_failure(self, settings, jira_server, capsys):
        server = jira_server(total=120, fail_on_calls={2})
        with patch.object(JiraClient, "from_environment", return_value=server):
            assert run_sync(settings, "PROJ") == 1

        captured = capsys.readouterr()
        assert "Sync incomplete after 50 issues" in captured.err
        assert "Issues in database: 50" in captured.out

    def test_incremental_after_full(self, settings, jira_server):
        with patch.object(JiraClient, "from_environment", return_value=jira_server(total=3)):
            run_sync(settings, "PROJ")

        server = jira_server(total=0)
        with patch.object(JiraClient, "from_environment", return_value=server):
            assert run_sync(settings, "PROJ", incremental=True) == 0
        assert "1970-01-01" not in server.urls[0]

    def test_missing_credentials(self, settings, capsys):
        with patch.dict("os.environ", {}, clear=True):
            assert run_sync(settings, "PROJ") == 1
        assert "JIRA_CREDS" in capsys.readouterr().err

    def test_missing_base_url(self, db_path, capsys):
        assert run_sync(Settings(base_url=None, database_path=db_path), "PROJ") == 1
        assert "base URL" in capsys.readouterr().err

    @pytest.mark.parametrize("project", ["", "   "])
    def test_empty_project(self, settings, project, capsys):
        """An empty project key is reported, not raised."""
        with patch.object(JiraClient, "from_environment") as from_environment:
            assert run_sync(settings, project) == 1
        from_environment.assert_not_called()
        assert "Project key cannot be empty" in capsys.readouterr().err


def detail(**overrides) -> IssueDetail:
    values = {
        "id": "10007",
        "key": "PROJ-7",
        "summary": "Checkout fails on Safari",
        "description": "Steps to reproduce",
        "issue_type": IssueType.BUG,
        "status": Other("Triaged"),
        "created": datetime(2024, 2, 1, 9, 0, tzinfo=UTC),
        "updated": datetime(2024, 2, 2, 9, 0, tzinfo=UTC),
        "components": (Component.MOJO, Other("Skunkworks")),
        "assignee": Person(key="jdoe", email="jdoe@example.com", name="Jane Doe"),
        "points": 3.0,
    }
    values.update(overrides)
    return IssueDetail(**values)


class TestRunSnapshot:
    """Tests for run_snapshot() and format_detail()."""

    def test_format_detail(self):
        text = format_detail(detail())
        lines = text.splitlines()
        assert lines[0].split() == ["Key", "PROJ-7"]
        assert "Bug" in text
        assert "Triaged" in text
        assert "Mojo, Skunkworks" in text
        assert "Jane Doe <jdoe@example.com>" in text
        assert lines[-1] == "Steps to reproduce"

    def test_format_unassigned_unresolved(self):
        text = format_detail(detail(assignee=None, status=Status.BACKLOG, description=""))
        assert "Unassigned" in text
        assert "Backlog" in text
        assert text.splitlines()[-1].split() == ["Resolved", "-"]

    def test_run_snapshot(self, settings, jira_server, capsys):
        body = json.dumps(
            {
                "id": "10007",
                "key": "PROJ-7",
                "fields": {
                    "summary": "Checkout fails",
                    "status": {"name": "Ready for Work"},
                    "issuetype": {"name": "Story"},
                    "created": "2024-02-01T09:00:00.000+0000",
                    "updated": "2024-02-02T09:00:00.000+0000",
                },
            }
        ).encode()
        server = jira_server(responses={"/issue/PROJ-7": body})
        with patch.object(JiraClient, "from_environment", return_value=server):
            assert run_snapshot(settings, ["PROJ-7"]) == 0
        out = capsys.readouterr().out
        assert "Checkout fails" in out
        assert "Ready for Work" in out

    def test_run_snapshot_bad_body(self, settings, jira_server, capsys):
        server = jira_server(responses={"/issue/": b"<html>"})
        with patch.object(JiraClient, "from_environment", return_value=server):
            assert run_snapshot(settings, ["PROJ-7"]) == 1
        assert capsys.readouterr().err

    def test_run_snapshot_several_keys(self, settings, jira_server, capsys):
        """Good keys are printed even when another key fails."""
        body = json.dumps(
            {
                "id": "10001",
                "key": "PROJ-1",
                "fields": {
                    "summary": "Login page slow",
                    "created": "2024-02-01T09:00:00.000+0000",
                    "updated": "2024-02-02T09:00:00.000+0000",
                },
            }
        ).encode()
        server = jira_server(responses={"/issue/PROJ-1?": body, "/issue/PROJ-2?": b"oops"})

        with patch.object(JiraClient, "from_environment", return_value=server):
            assert run_snapshot(settings, ["PROJ-1", "PROJ-2"]) == 1

        captured = capsys.readouterr()
        assert "Login page slow" in captured.out
        assert "PROJ-2: Invalid JSON response" in captured.err
        assert len(server.urls) == 2


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self, monkeypatch):
        for name in ("BASE_URL", "PAGE_SIZE", "DATABASE_PATH", "TIMEOUT"):
            monkeypatch.delenv(f"JIRASYNC_{name}", raising=False)
        settings = Settings()
        assert settings.base_url is None
        assert settings.page_size == 100
        assert settings.timeout is None
        assert settings.points_field == "customfield_10002"

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("JIRASYNC_PAGE_SIZE", "25")
        monkeypatch.setenv("JIRASYNC_BASE_URL", BASE_URL)
        settings = Settings()
        assert settings.page_size == 25
        assert settings.base_url == BASE_URL

    def test_page_size_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(page_size=0)


class TestSetupLogging:
    """Tests for setup_logging()."""

    @pytest.fixture(autouse=True)
    def reset_logger(self):
        logger = logging.getLogger("jirasync")
        yield
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)

    def test_quiet_by_default(self):
        setup_logging(0)
        assert logging.getLogger("jirasync").handlers == []

    def test_debug_level(self):
        setup_logging(2)
        assert logging.getLogger("jirasync").level == logging.DEBUG

    def test_log_file(self, tmp_path):
        log_file = tmp_path / "logs" / "sync.log"
        setup_logging(0, log_file)
        assert log_file.exists()
        assert "jirasync starting" in log_file.read_text()
