"""Jira REST API access: credentials, HTTP client, queries and JSON mapping."""

from .client import (
    JiraAuthError,
    JiraClient,
    JiraClientError,
    JiraForbiddenError,
    JiraNotFoundError,
    JiraRateLimitError,
)
from .credentials import Credentials, CredentialsError
from .mapper import (
    DecodeError,
    RecordParseError,
    decode_json,
    parse_detail,
    parse_details,
    parse_page,
    parse_summary,
)
from .queries import build_changed_since_query, issue_url, search_url

__all__ = [
    "Credentials",
    "CredentialsError",
    "DecodeError",
    "JiraAuthError",
    "JiraClient",
    "JiraClientError",
    "JiraForbiddenError",
    "JiraNotFoundError",
    "JiraRateLimitError",
    "RecordParseError",
    "build_changed_since_query",
    "decode_json",
    "issue_url",
    "parse_detail",
    "parse_details",
    "parse_page",
    "parse_summary",
    "search_url",
]
