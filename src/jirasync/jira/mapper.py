"""Map raw Jira JSON onto domain models.

The tracker's payloads are loosely structured: fields go missing, come back
null, change type, or carry vocabulary we have never seen. Mapping is
tolerant of all of that. Only two things are treated as failures:

- a page body that is not a valid search result (``DecodeError`` / a
  ``decode`` error on the PageResult)
- an issue detail whose ``created`` or ``updated`` timestamp is malformed
  (``RecordParseError``), since those drive checkpointing
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..models import (
    ErrorKind,
    IssueDetail,
    IssueSummary,
    PageResult,
    Person,
    SyncError,
    parse_component,
    parse_issue_type,
    parse_status,
)
from ..utils.datetime import parse_jira_datetime

logger = logging.getLogger(__name__)


class DecodeError(ValueError):
    """Raised when a response body is not valid JSON."""

    pass


class RecordParseError(ValueError):
    """Raised when a single record is missing load-bearing data."""

    def __init__(self, key: str, message: str):
        super().__init__(f"{key or '<no key>'}: {message}")
        self.key = key


class SearchResultSet(BaseModel):
    """Envelope of a /search response. Issues are mapped separately."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    start_at: int = Field(default=0, alias="startAt", ge=0)
    max_results: int = Field(default=0, alias="maxResults", ge=0)
    total: int = Field(..., ge=0)
    issues: list[Any] = Field(default_factory=list)


# --- Field helpers ---


def _obj(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def as_str(value: Any) -> str:
    """Strings pass through, integers become their decimal text, anything else is ''."""
    if isinstance(value, str):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return ""


def parse_number(value: Any, default: float = 0.0) -> float:
    """Parse a number that may arrive as a JSON number or a string."""
    if isinstance(value, bool):
        return default
    if isinstance(value, int | float):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return default
    return default


def parse_int(value: Any, default: int = 0) -> int:
    """Parse an integer that may arrive as a JSON number or a string."""
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return default
    return default


def parse_optional_datetime(value: Any) -> datetime | None:
    """Parse a Jira timestamp, or None if it is absent or malformed."""
    if not isinstance(value, str) or not value:
        return None
    try:
        return parse_jira_datetime(value)
    except ValueError:
        logger.debug("Ignoring malformed timestamp %r", value)
        return None


def _required_datetime(fields: dict[str, Any], name: str, key: str) -> datetime:
    value = fields.get(name)
    if not isinstance(value, str):
        raise RecordParseError(key, f"missing '{name}' timestamp")
    try:
        return parse_jira_datetime(value)
    except ValueError as e:
        raise RecordParseError(key, f"malformed '{name}' timestamp {value!r}") from e


def parse_person(raw: Any) -> Person | None:
    """Build a Person, or None unless the user object has a non-empty key."""
    data = _obj(raw)
    key = as_str(data.get("key"))
    if not key:
        return None
    return Person(
        key=key,
        email=as_str(data.get("emailAddress")),
        name=as_str(data.get("displayName")) or as_str(data.get("name")),
    )


# --- Records ---


def decode_json(raw: bytes | str) -> Any:
    """Decode a response body.

    Raises:
        DecodeError: If the body is not valid JSON, not UTF-8, or nested too deeply
    """
    try:
        return json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError, RecursionError) as e:
        raise DecodeError(f"Invalid JSON response: {e}") from e


def parse_summary(raw: Any) -> IssueSummary:
    """Map one search hit. Never raises."""
    data = _obj(raw)
    fields = _obj(data.get("fields"))
    return IssueSummary(
        id=as_str(data.get("id")),
        key=as_str(data.get("key")),
        updated=parse_optional_datetime(fields.get("updated")),
    )


def parse_detail(raw: Any, points_field: str = "customfield_10002") -> IssueDetail:
    """Map a full issue record.

    Raises:
        RecordParseError: If ``created`` or ``updated`` is missing or malformed
    """
    data = _obj(raw)
    fields = _obj(data.get("fields"))
    key = as_str(data.get("key"))

    components = fields.get("components")
    if not isinstance(components, list):
        components = []

    return IssueDetail(
        id=as_str(data.get("id")),
        key=key,
        summary=as_str(fields.get("summary")),
        description=as_str(fields.get("description")),
        issue_type=parse_issue_type(as_str(_obj(fields.get("issuetype")).get("name"))),
        status=parse_status(as_str(_obj(fields.get("status")).get("name"))),
        created=_required_datetime(fields, "created", key),
        updated=_required_datetime(fields, "updated", key),
        components=tuple(parse_component(as_str(_obj(c).get("name"))) for c in components),
        resolution_date=parse_optional_datetime(fields.get("resolutiondate")),
        assignee=parse_person(fields.get("assignee")),
        points=parse_number(fields.get(points_field)),
    )


def parse_details(
    raws: Iterable[Any], points_field: str = "customfield_10002"
) -> tuple[list[IssueDetail], list[str]]:
    """Map a batch of issue records, collecting per-record failures.

    Returns:
        (parsed details, failure messages) - one bad record does not stop the rest
    """
    details: list[IssueDetail] = []
    failures: list[str] = []
    for raw in raws:
        try:
            details.append(parse_detail(raw, points_field))
        except RecordParseError as e:
            logger.warning("Skipping issue %s", e)
            failures.append(str(e))
    return details, failures


def parse_page(raw: bytes | str, offset: int) -> PageResult:
    """Map a /search response body into a PageResult.

    Decode and envelope failures are reported on ``PageResult.error`` rather
    than raised. Hits without a key cannot be stored; they are listed in
    ``record_errors`` and the rest of the page is kept.
    """
    try:
        result_set = SearchResultSet.model_validate(decode_json(raw))
    except (DecodeError, ValidationError) as e:
        return PageResult(
            offset=offset,
            error=SyncError(kind=ErrorKind.DECODE, message=str(e), offset=offset),
        )

    records: list[IssueSummary] = []
    record_errors: list[str] = []
    for position, hit in enumerate(result_set.issues, start=offset):
        summary = parse_summary(hit)
        if not summary.key:
            record_errors.append(f"record at position {position} has no key")
            continue
        records.append(summary)

    if result_set.start_at != offset:
        logger.debug("Server reported startAt=%d for offset %d", result_set.start_at, offset)

    return PageResult(
        offset=offset,
        page_size_declared=result_set.max_results,
        total_available=result_set.total,
        records=tuple(records),
        record_errors=tuple(record_errors),
    )
