"""Tests for board_metrics.core.filtering."""

from datetime import date, datetime, timezone

import pytest

from board_metrics.core.filtering import EventFilter
from board_metrics.core.models import Closed, Enter, RawEvent, Reset
from board_metrics.core.stages import DEFAULT_IGNORED_COLUMNS

PROJECT_ID = 4946323
WHEN = datetime(2024, 1, 5, 14, 30, tzinfo=timezone.utc)


@pytest.fixture
def event_filter() -> EventFilter:
    return EventFilter(PROJECT_ID, DEFAULT_IGNORED_COLUMNS)


def card(kind, column, previous=None, project_id=PROJECT_ID, created_at=WHEN):
    return RawEvent(kind, created_at, project_id, previous, column)


class TestEntryEvents:
    @pytest.mark.parametrize(
        "kind",
        ["added_to_project", "moved_columns_in_project", "converted_note_to_issue"],
    )
    def test_entry_kinds_become_enter(self, event_filter, kind):
        op = event_filter.filter_event(card(kind, "approved for TEST", "in development [WIP 4]"))
        assert op == Enter("approved for TEST", "in development [WIP 4]", date(2024, 1, 5))

    def test_enter_without_previous_column(self, event_filter):
        op = event_filter.filter_event(card("added_to_project", "backlog [WIP min 3]"))
        assert op == Enter("backlog [WIP min 3]", None, date(2024, 1, 5))

    @pytest.mark.parametrize("column", ["pre-backlog", "triage"])
    def test_ignored_column_becomes_reset(self, event_filter, column):
        assert event_filter.filter_event(card("moved_columns_in_project", column, "backlog [WIP min 3]")) == Reset()

    def test_other_project_is_dropped(self, event_filter):
        assert event_filter.filter_event(card("added_to_project", "backlog [WIP min 3]", project_id=1)) is None

    def test_other_project_ignored_column_is_dropped(self, event_filter):
        """Only moves on the tracked board can reset it."""
        assert event_filter.filter_event(card("moved_columns_in_project", "triage", project_id=1)) is None

    def test_missing_card_is_dropped(self, event_filter):
        event = RawEvent("added_to_project", WHEN)
        assert event_filter.filter_event(event) is None

    def test_missing_timestamp_is_dropped(self, event_filter):
        assert event_filter.filter_event(card("added_to_project", "backlog [WIP min 3]", created_at=None)) is None

    def test_non_canonical_column_is_kept(self, event_filter):
        op = event_filter.filter_event(card("moved_columns_in_project", "blocked", "in development [WIP 4]"))
        assert isinstance(op, Enter)
        assert op.column == "blocked"


class TestExitEvents:
    def test_removed_from_project_is_reset(self, event_filter):
        assert event_filter.filter_event(RawEvent("removed_from_project", WHEN)) == Reset()

    def test_removed_from_any_project_is_reset(self, event_filter):
        assert event_filter.filter_event(RawEvent("removed_from_project", WHEN, project_id=1)) == Reset()

    def test_closed_becomes_closed(self, event_filter):
        assert event_filter.filter_event(RawEvent("closed", WHEN)) == Closed(date(2024, 1, 5))

    def test_closed_without_timestamp_is_dropped(self, event_filter):
        assert event_filter.filter_event(RawEvent("closed")) is None


class TestOtherEvents:
    @pytest.mark.parametrize("kind", ["labeled", "assigned", "reopened", "referenced", ""])
    def test_unrelated_kinds_are_dropped(self, event_filter, kind):
        assert event_filter.filter_event(RawEvent(kind, WHEN)) is None


class TestFilterSequence:
    def test_preserves_order_and_drops_noise(self, event_filter):
        events = [
            card("added_to_project", "backlog [WIP min 3]"),
            RawEvent("labeled", WHEN),
            card("moved_columns_in_project", "triage", "backlog [WIP min 3]"),
            RawEvent("closed", WHEN),
        ]
        ops = list(event_filter.filter(events))
        assert ops == [
            Enter("backlog [WIP min 3]", None, date(2024, 1, 5)),
            Reset(),
            Closed(date(2024, 1, 5)),
        ]

    def test_filter_is_lazy(self, event_filter):
        ops = event_filter.filter(iter([RawEvent("closed", WHEN)]))
        assert next(ops) == Closed(date(2024, 1, 5))

    def test_from_config(self, board_config):
        event_filter = EventFilter.from_config(board_config)
        assert event_filter.project_id == board_config.project_id
        assert event_filter.ignored_columns == frozenset({"pre-backlog", "triage"})
