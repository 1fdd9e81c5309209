"""Issue domain models.

Classification fields (issue type, status, component) come from a vocabulary
the tracker owns, so each one is an *open* enumeration: a ``str`` Enum of the
values we know about, plus ``Other`` carrying any value we don't. Parsing one
never fails.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TypeVar


@dataclass(frozen=True)
class Other:
    """An enumerated value outside the known variants, kept verbatim."""

    raw: str

    def __str__(self) -> str:
        return self.raw


class IssueType(str, Enum):
    """Known issue types (values are the tracker's display names)."""

    STORY = "Story"
    EPIC = "Epic"
    BUG = "Bug"
    TASK = "Task"
    SUB_TASK = "Sub-task"


class Status(str, Enum):
    """Known workflow statuses."""

    BACKLOG = "Backlog"
    READY_FOR_WORK = "Ready for Work"
    ACTIVE = "Active"
    DONE = "Done"
    DELETED = "Deleted"


class Component(str, Enum):
    """Known project components."""

    MOJO = "Mojo"
    PHOENIX = "Phoenix"
    WOLVERINE = "Wolverine"
    IRONMAN = "Ironman"
    PRODUCT = "Product"
    DESIGN = "Design"


E = TypeVar("E", IssueType, Status, Component)


def parse_open_enum(enum_cls: type[E], raw: str) -> E | Other:
    """Resolve a raw string against an enum's values.

    Exact match first, then case-insensitive. Anything else becomes
    ``Other(raw)`` with the original text untouched.
    """
    try:
        return enum_cls(raw)
    except ValueError:
        pass
    folded = raw.casefold()
    for member in enum_cls:
        if member.value.casefold() == folded:
            return member
    return Other(raw)


def parse_issue_type(raw: str) -> IssueType | Other:
    return parse_open_enum(IssueType, raw)


def parse_status(raw: str) -> Status | Other:
    return parse_open_enum(Status, raw)


def parse_component(raw: str) -> Component | Other:
    return parse_open_enum(Component, raw)


@dataclass(frozen=True)
class Person:
    """A tracker user. Only built when ``key`` is non-empty.

    ``email`` and ``name`` use empty string for "not reported".
    """

    key: str
    email: str = ""
    name: str = ""


@dataclass(frozen=True)
class IssueSummary:
    """Search-result shape of an issue.

    ``key`` (e.g. "PROJ-123") is unique per project and is the storage key.
    ``id`` is the remote primary key as text.
    """

    id: str
    key: str
    updated: datetime | None = None


@dataclass(frozen=True)
class IssueDetail:
    """Full-record shape of an issue, used for single-record snapshots.

    Text fields (``summary``, ``description``) hold an empty string when the
    tracker sent nothing usable; callers should not expect ``None`` there.
    Fields that can genuinely be missing (``resolution_date``, ``assignee``)
    are ``None`` instead.
    """

    id: str
    key: str
    summary: str
    description: str
    issue_type: IssueType | Other
    status: Status | Other
    created: datetime
    updated: datetime
    components: tuple[Component | Other, ...] = field(default_factory=tuple)
    resolution_date: datetime | None = None
    assignee: Person | None = None
    points: float = 0.0

    @property
    def is_resolved(self) -> bool:
        return self.resolution_date is not None
