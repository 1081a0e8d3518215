"""
In-memory / JSON-file issue source.

Serves issue records without network access, for offline runs and tests.
The JSON fixture is a list of GitHub issue payloads, each carrying its event
payloads under an extra ``events`` key:

    [
      {"number": 108, "title": "Login", "closed_at": "2024-02-10T09:00:00Z",
       "labels": [{"name": "bug"}],
       "events": [{"event": "added_to_project", "created_at": "...",
                   "project_card": {"project_id": 4946323, "column_name": "..."}}]}
    ]
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, Iterator, Sequence

from board_metrics.core.errors import ParseError, SourceError
from board_metrics.core.models import Issue, IssueRecord, RawEvent
from board_metrics.core.stages import DEFAULT_TRACKED_LABELS
from board_metrics.framework.sources.protocol import iter_pages, take_until_threshold


class StaticIssueSource:
    """Issue source over a fixed list of records, newest first."""

    def __init__(
        self,
        records: Sequence[IssueRecord],
        *,
        page_size: int = 30,
        threshold: int | None = None,
        name: str = "static",
    ) -> None:
        self._records = list(records)
        self.page_size = page_size
        self.threshold = threshold
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    @classmethod
    def from_payloads(
        cls,
        payloads: Iterable[dict[str, Any]],
        tracked_labels: Iterable[str] = DEFAULT_TRACKED_LABELS,
        **kwargs: Any,
    ) -> StaticIssueSource:
        tracked = tuple(tracked_labels)
        records = [
            IssueRecord(
                Issue.from_api(payload, tracked),
                tuple(RawEvent.from_api(event) for event in payload.get("events") or ()),
            )
            for payload in payloads
        ]
        return cls(records, **kwargs)

    @classmethod
    def from_file(cls, path: str | Path, **kwargs: Any) -> StaticIssueSource:
        path = Path(path)
        try:
            payloads = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError as e:
            raise SourceError(f"Fixture not found: {path}", cause=e).with_context(path=str(path))
        except json.JSONDecodeError as e:
            raise ParseError(f"Invalid JSON fixture: {e}", cause=e).with_context(path=str(path))
        if not isinstance(payloads, list):
            raise ParseError("Fixture must be a JSON list of issues").with_context(path=str(path))
        kwargs.setdefault("name", f"file:{path.name}")
        return cls.from_payloads(payloads, **kwargs)

    def issues_page(self, page: int) -> list[IssueRecord]:
        start = (page - 1) * self.page_size
        return self._records[start:start + self.page_size]

    def iter_issues(self) -> Iterator[IssueRecord]:
        return take_until_threshold(iter_pages(self.issues_page, self.page_size), self.threshold)

    def fetch_issue(self, number: int) -> IssueRecord:
        for record in self._records:
            if record.number == number:
                return record
        raise SourceError(f"Issue #{number} not found").with_context(source_name=self.name, issue_number=number)
