"""
Event filter: raw tracker events to board operations.

First matching rule wins, anything else is dropped without error:

    entry kind, target project, column ignored      -> Reset
    entry kind, target project, column tracked      -> Enter(column, previous, date)
    removed_from_project (any project)              -> Reset
    closed                                          -> Closed(date)

Entry kinds are ``added_to_project``, ``moved_columns_in_project`` and
``converted_note_to_issue``. Events with a missing project card, column
or timestamp never match.
"""

from __future__ import annotations

from typing import Iterable, Iterator

from board_metrics.core.config import BoardConfig
from board_metrics.core.models import BoardOperation, Closed, Enter, RawEvent, Reset
from board_metrics.core.stages import BOARD_ENTRY_KINDS, EventKind


class EventFilter:
    """Normalizes one issue's event history for a single target project."""

    def __init__(self, project_id: int, ignored_columns: Iterable[str]) -> None:
        self.project_id = project_id
        self.ignored_columns = frozenset(ignored_columns)

    @classmethod
    def from_config(cls, config: BoardConfig) -> EventFilter:
        return cls(config.project_id, config.ignored_columns)

    def filter_event(self, event: RawEvent) -> BoardOperation | None:
        """Map a single event, ``None`` when it is not board-relevant."""
        if event.kind in BOARD_ENTRY_KINDS:
            if event.project_id != self.project_id or not event.column:
                return None
            if event.column in self.ignored_columns:
                return Reset()
            if event.date is None:
                return None
            return Enter(event.column, event.previous_column, event.date)

        if event.kind == EventKind.REMOVED_FROM_PROJECT.value:
            return Reset()

        if event.kind == EventKind.CLOSED.value and event.date is not None:
            return Closed(event.date)

        return None

    def filter(self, events: Iterable[RawEvent]) -> Iterator[BoardOperation]:
        """Yield operations in the order the events were given."""
        for event in events:
            operation = self.filter_event(event)
            if operation is not None:
                yield operation
