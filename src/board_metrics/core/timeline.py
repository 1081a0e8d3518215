"""
Timeline reconstruction.

``TimelineBuilder`` folds the board operations of one issue, strictly in the
order given, into an ordered set of stage entries:

    Reset                       -> timeline emptied
    Closed(date)                -> final stage appended, only when the
                                   timeline is non-empty and lacks it
    Enter(column, prev, date)   -> appended when ``column`` is new; otherwise
                                   a regression: entries for the stages after
                                   ``column`` up to and including ``prev`` are
                                   removed (``prev`` must be a stage)

On a regression the re-entered column keeps its original date; the range
never includes ``column`` itself, so nothing is replaced.
"""

from __future__ import annotations

from typing import Iterable

from board_metrics.core.config import BoardConfig
from board_metrics.core.filtering import EventFilter
from board_metrics.core.models import (
    BoardOperation,
    Closed,
    ColumnEntry,
    Enter,
    IssueRecord,
    Reset,
    Timeline,
)
from board_metrics.core.stages import StageCatalog


class TimelineBuilder:
    """State machine for one issue. Use a fresh builder per issue."""

    def __init__(self, stages: StageCatalog | None = None) -> None:
        self.stages = stages or StageCatalog()
        self._entries: list[ColumnEntry] = []

    @property
    def timeline(self) -> Timeline:
        """Snapshot of the entries so far."""
        return Timeline(tuple(self._entries))

    def reset(self) -> None:
        self._entries.clear()

    def _find(self, stage: str) -> ColumnEntry | None:
        for entry in self._entries:
            if entry.stage == stage:
                return entry
        return None

    def apply(self, operation: BoardOperation) -> None:
        if isinstance(operation, Reset):
            self.reset()
        elif isinstance(operation, Closed):
            self._close(operation)
        elif isinstance(operation, Enter):
            self._enter(operation)
        else:
            raise TypeError(f"Unknown board operation: {operation!r}")

    def _close(self, operation: Closed) -> None:
        if self._entries and self._find(self.stages.last) is None:
            self._entries.append(ColumnEntry(self.stages.last, operation.date))

    def _enter(self, operation: Enter) -> None:
        if self._find(operation.column) is None:
            self._entries.append(ColumnEntry(operation.column, operation.date))
            return

        if not self.stages.contains(operation.previous_column):
            return

        invalidated = set(self.stages.range_after(operation.column, operation.previous_column))
        if invalidated:
            self._entries = [e for e in self._entries if e.stage not in invalidated]

    def build(self, operations: Iterable[BoardOperation]) -> Timeline:
        for operation in operations:
            self.apply(operation)
        return self.timeline


def reconstruct(record: IssueRecord, config: BoardConfig) -> Timeline:
    """Filter an issue's events and fold them into its timeline."""
    event_filter = EventFilter.from_config(config)
    builder = TimelineBuilder(config.stages)
    return builder.build(event_filter.filter(record.events))
