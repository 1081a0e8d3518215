"""Tests for board_metrics.core.models."""

from datetime import date, datetime

import pytest

from board_metrics.core.models import (
    ColumnEntry,
    Issue,
    RawEvent,
    Row,
    Timeline,
    date_part,
    parse_timestamp,
    select_label,
)


class TestTimestamps:
    def test_parse_zulu_timestamp(self):
        parsed = parse_timestamp("2024-02-10T09:00:00Z")
        assert parsed.year == 2024
        assert parsed.utcoffset().total_seconds() == 0

    @pytest.mark.parametrize("value", [None, "", "yesterday", 42])
    def test_parse_invalid_returns_none(self, value):
        assert parse_timestamp(value) is None

    def test_date_part_keeps_reported_calendar_date(self):
        """Late-evening UTC timestamps are not shifted into another day."""
        assert date_part("2024-02-10T23:59:59Z") == date(2024, 2, 10)

    def test_date_part_of_date(self):
        assert date_part(date(2024, 1, 1)) == date(2024, 1, 1)

    def test_date_part_of_missing_value(self):
        assert date_part(None) is None


class TestRawEvent:
    def test_from_api_with_project_card(self):
        event = RawEvent.from_api({
            "event": "moved_columns_in_project",
            "created_at": "2024-01-05T12:00:00Z",
            "project_card": {
                "project_id": 4946323,
                "column_name": "in development [WIP 4]",
                "previous_column_name": "backlog [WIP min 3]",
            },
        })
        assert event.kind == "moved_columns_in_project"
        assert event.project_id == 4946323
        assert event.column == "in development [WIP 4]"
        assert event.previous_column == "backlog [WIP min 3]"
        assert event.date == date(2024, 1, 5)

    def test_from_api_tolerates_missing_keys(self):
        event = RawEvent.from_api({})
        assert event.kind == ""
        assert event.date is None
        assert event.column is None

    def test_from_api_tolerates_null_card(self):
        event = RawEvent.from_api({"event": "closed", "created_at": "2024-01-05T12:00:00Z", "project_card": None})
        assert event.project_id is None

    def test_date_of_datetime(self):
        assert RawEvent("closed", datetime(2024, 3, 1, 8)).date == date(2024, 3, 1)


class TestIssue:
    def test_from_api(self):
        issue = Issue.from_api({
            "number": 108,
            "title": "Login fails",
            "labels": [{"name": "frontend"}, {"name": "bug"}],
            "closed_at": "2024-02-10T09:00:00Z",
        })
        assert issue == Issue(108, "Login fails", label="bug", closed_date=date(2024, 2, 10))

    def test_from_api_pull_request(self):
        issue = Issue.from_api({"number": 3, "title": "PR", "pull_request": {}})
        assert issue.is_pull_request

    def test_from_api_open_issue(self):
        issue = Issue.from_api({"number": 3, "title": "Open", "closed_at": None})
        assert issue.closed_date is None
        assert issue.label == ""

    def test_select_label_first_tracked_wins(self):
        labels = [{"name": "bug"}, {"name": "user story"}]
        assert select_label(labels) == "bug"

    def test_select_label_untracked(self):
        assert select_label([{"name": "question"}]) == ""

    def test_select_label_custom_tracked(self):
        assert select_label(["epic", "bug"], tracked=("epic",)) == "epic"


class TestTimeline:
    def test_accessors(self):
        timeline = Timeline((ColumnEntry("a", date(2024, 1, 1)), ColumnEntry("b", date(2024, 1, 2))))
        assert len(timeline) == 2
        assert timeline.stages() == ["a", "b"]
        assert timeline.get("b").date == date(2024, 1, 2)
        assert timeline.get("c") is None
        assert timeline.to_list()[0] == {"stage": "a", "date": "2024-01-01"}

    def test_empty_timeline_is_falsy(self):
        assert not Timeline()


class TestRow:
    def test_to_record_renders_empty_dates_as_empty_strings(self):
        row = Row(107, "Dashboard", "technical story", backlog=date(2024, 1, 1), development=date(2024, 1, 5))
        assert row.to_record() == [
            "107", "Dashboard", "technical story", "2024-01-01", "2024-01-05", "", "", "",
        ]

    def test_fields_in_stage_order(self):
        row = Row(1, "t", approved_for_prod=date(2024, 1, 9), backlog=date(2024, 1, 1))
        assert row.fields() == (date(2024, 1, 1), None, None, None, date(2024, 1, 9))
