"""
Domain models for board timeline reconstruction.

Input side (read-only, produced by the issue source):
    RawEvent, Issue, IssueRecord

Internal (produced by the event filter, consumed by the timeline builder):
    Enter, Reset, Closed  (BoardOperation)

Output side:
    ColumnEntry, Timeline, Row
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Iterable, Iterator, Mapping, Union

from board_metrics.core.stages import DEFAULT_TRACKED_LABELS, ROW_DATE_FIELDS


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 tracker timestamp, ``None`` when absent or invalid."""
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def date_part(value: Any) -> date | None:
    """Calendar date of a tracker timestamp as reported (no timezone shift)."""
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    parsed = parse_timestamp(value)
    return parsed.date() if parsed is not None else None


# =============================================================================
# Input
# =============================================================================


@dataclass(frozen=True)
class RawEvent:
    """One item of an issue's event history."""

    kind: str
    created_at: datetime | None = None
    project_id: int | None = None
    previous_column: str | None = None
    column: str | None = None

    @property
    def date(self) -> date | None:
        return self.created_at.date() if self.created_at is not None else None

    @classmethod
    def from_api(cls, payload: Mapping[str, Any]) -> RawEvent:
        """Build from a GitHub issue-event payload; tolerant of missing keys."""
        card = payload.get("project_card")
        if not isinstance(card, Mapping):
            card = {}
        return cls(
            kind=str(payload.get("event") or ""),
            created_at=parse_timestamp(payload.get("created_at")),
            project_id=card.get("project_id"),
            previous_column=card.get("previous_column_name"),
            column=card.get("column_name"),
        )


def select_label(labels: Iterable[Any], tracked: Iterable[str] = DEFAULT_TRACKED_LABELS) -> str:
    """First label whose name is one of the tracked labels, else ``""``."""
    tracked_set = set(tracked)
    for label in labels or ():
        name = label.get("name") if isinstance(label, Mapping) else label
        if name in tracked_set:
            return name
    return ""


@dataclass(frozen=True)
class Issue:
    """An issue as listed by the tracker."""

    number: int
    title: str
    label: str = ""
    closed_date: date | None = None
    is_pull_request: bool = False

    @classmethod
    def from_api(
        cls,
        payload: Mapping[str, Any],
        tracked_labels: Iterable[str] = DEFAULT_TRACKED_LABELS,
    ) -> Issue:
        return cls(
            number=int(payload["number"]),
            title=str(payload.get("title") or ""),
            label=select_label(payload.get("labels") or (), tracked_labels),
            closed_date=date_part(payload.get("closed_at")),
            is_pull_request="pull_request" in payload,
        )


@dataclass(frozen=True)
class IssueRecord:
    """An issue paired with its chronologically ascending event history."""

    issue: Issue
    events: tuple[RawEvent, ...] = ()

    @property
    def number(self) -> int:
        return self.issue.number


# =============================================================================
# Board operations
# =============================================================================


@dataclass(frozen=True)
class Enter:
    """The card entered ``column`` coming from ``previous_column``."""

    column: str
    previous_column: str | None
    date: date


@dataclass(frozen=True)
class Reset:
    """The card left the tracked board; all progress is discarded."""


@dataclass(frozen=True)
class Closed:
    """The issue was closed."""

    date: date


BoardOperation = Union[Enter, Reset, Closed]


# =============================================================================
# Output
# =============================================================================


@dataclass(frozen=True)
class ColumnEntry:
    stage: str
    date: date

    def to_dict(self) -> dict[str, str]:
        return {"stage": self.stage, "date": self.date.isoformat()}


@dataclass(frozen=True)
class Timeline:
    """Finished, immutable sequence of stage entries in arrival order."""

    entries: tuple[ColumnEntry, ...] = ()

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[ColumnEntry]:
        return iter(self.entries)

    def __bool__(self) -> bool:
        return bool(self.entries)

    def stages(self) -> list[str]:
        return [entry.stage for entry in self.entries]

    def get(self, stage: str) -> ColumnEntry | None:
        for entry in self.entries:
            if entry.stage == stage:
                return entry
        return None

    def to_list(self) -> list[dict[str, str]]:
        return [entry.to_dict() for entry in self.entries]


@dataclass
class Row:
    """One output record: identity plus one optional date per stage."""

    number: int
    title: str
    label: str = ""
    backlog: date | None = None
    development: date | None = None
    approved_for_test: date | None = None
    deployed_to_test: date | None = None
    approved_for_prod: date | None = None

    def fields(self) -> tuple[date | None, ...]:
        """The five stage dates in canonical order."""
        return tuple(getattr(self, name) for name in ROW_DATE_FIELDS)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "number": self.number,
            "title": self.title,
            "label": self.label,
        }
        for name in ROW_DATE_FIELDS:
            value = getattr(self, name)
            result[name] = value.isoformat() if value is not None else ""
        return result

    def to_record(self) -> list[str]:
        """Values in output column order (number, title, label, five dates)."""
        return [str(value) for value in self.to_dict().values()]


__all__ = [
    "parse_timestamp",
    "date_part",
    "select_label",
    "RawEvent",
    "Issue",
    "IssueRecord",
    "Enter",
    "Reset",
    "Closed",
    "BoardOperation",
    "ColumnEntry",
    "Timeline",
    "Row",
]
