"""Tests for board_metrics.core.timeline.

Covers the fold rules of TimelineBuilder: append on first entry, regression
on re-entry, reset on leaving the board and the closing entry.
"""

from datetime import date

import pytest

from board_metrics.core.models import Closed, ColumnEntry, Enter, Issue, IssueRecord, RawEvent, Reset, Timeline
from board_metrics.core.stages import DEFAULT_STAGES, StageCatalog
from board_metrics.core.timeline import TimelineBuilder, reconstruct

BACKLOG, DEVELOPMENT, APPROVED_TEST, DEPLOYED_TEST, APPROVED_PROD = DEFAULT_STAGES

D0 = date(2024, 1, 1)
D1 = date(2024, 1, 2)
D2 = date(2024, 1, 3)
D3 = date(2024, 1, 4)
D4 = date(2024, 1, 5)


def build(*ops) -> Timeline:
    return TimelineBuilder().build(ops)


def progressed(*stages) -> list:
    """Enter operations walking forward through ``stages`` one day apart."""
    ops = []
    previous = None
    for day, stage in enumerate(stages, start=1):
        ops.append(Enter(stage, previous, date(2024, 1, day)))
        previous = stage
    return ops


class TestEnter:
    def test_first_entry_appends(self):
        timeline = build(Enter(BACKLOG, None, D0))
        assert timeline.entries == (ColumnEntry(BACKLOG, D0),)

    def test_new_column_appends_exactly_one_entry(self):
        builder = TimelineBuilder()
        builder.build(progressed(BACKLOG, DEVELOPMENT))
        before = builder.timeline

        builder.apply(Enter(APPROVED_TEST, DEVELOPMENT, D4))

        after = builder.timeline
        assert len(after) == len(before) + 1
        assert after.entries[:-1] == before.entries
        assert after.entries[-1] == ColumnEntry(APPROVED_TEST, D4)

    def test_entries_keep_arrival_order(self):
        timeline = build(
            Enter(DEVELOPMENT, None, D0),
            Enter(BACKLOG, DEVELOPMENT, D1),
        )
        assert timeline.stages() == [DEVELOPMENT, BACKLOG]

    def test_non_canonical_column_is_recorded(self):
        timeline = build(Enter(BACKLOG, None, D0), Enter("blocked", BACKLOG, D1))
        assert timeline.stages() == [BACKLOG, "blocked"]

    def test_reentry_from_earlier_stage_changes_nothing(self):
        ops = progressed(BACKLOG, DEVELOPMENT) + [Enter(DEVELOPMENT, BACKLOG, D4)]
        timeline = build(*ops)
        assert timeline.entries == (ColumnEntry(BACKLOG, D0), ColumnEntry(DEVELOPMENT, D1))

    def test_reentry_from_non_canonical_column_changes_nothing(self):
        ops = progressed(BACKLOG, DEVELOPMENT) + [Enter(DEVELOPMENT, "blocked", D4)]
        assert build(*ops).stages() == [BACKLOG, DEVELOPMENT]

    def test_reentry_without_previous_column_changes_nothing(self):
        ops = progressed(BACKLOG, DEVELOPMENT) + [Enter(BACKLOG, None, D4)]
        assert build(*ops).stages() == [BACKLOG, DEVELOPMENT]


class TestRegression:
    def test_moving_back_one_stage(self):
        timeline = build(
            Enter(BACKLOG, None, D0),
            Enter(DEVELOPMENT, BACKLOG, D1),
            Enter(APPROVED_TEST, DEVELOPMENT, D2),
            Enter(DEVELOPMENT, APPROVED_TEST, D3),
        )
        assert timeline.entries == (ColumnEntry(BACKLOG, D0), ColumnEntry(DEVELOPMENT, D1))

    def test_reentered_column_keeps_original_date(self):
        timeline = build(*progressed(BACKLOG, DEVELOPMENT, APPROVED_TEST), Enter(DEVELOPMENT, APPROVED_TEST, D4))
        assert timeline.get(DEVELOPMENT).date == D1

    def test_moving_back_several_stages(self):
        ops = progressed(BACKLOG, DEVELOPMENT, APPROVED_TEST, DEPLOYED_TEST)
        timeline = build(*ops, Enter(BACKLOG, DEPLOYED_TEST, D4))
        assert timeline.entries == (ColumnEntry(BACKLOG, D0),)

    def test_only_stages_up_to_previous_column_are_removed(self):
        """A stage after the card's previous column survives the move back."""
        builder = TimelineBuilder()
        builder.build(progressed(BACKLOG, DEVELOPMENT, APPROVED_TEST, DEPLOYED_TEST))
        builder.apply(Enter(DEPLOYED_TEST, APPROVED_TEST, D4))
        builder.apply(Enter(DEVELOPMENT, APPROVED_TEST, D4))
        assert builder.timeline.stages() == [BACKLOG, DEVELOPMENT, DEPLOYED_TEST]

    def test_progress_after_regression_appends_new_dates(self):
        timeline = build(
            *progressed(BACKLOG, DEVELOPMENT, APPROVED_TEST),
            Enter(DEVELOPMENT, APPROVED_TEST, D3),
            Enter(APPROVED_TEST, DEVELOPMENT, D4),
        )
        assert timeline.entries[-1] == ColumnEntry(APPROVED_TEST, D4)

    def test_reentered_non_canonical_column_sorts_before_first_stage(self):
        timeline = build(
            Enter("blocked", None, D0),
            Enter(BACKLOG, "blocked", D1),
            Enter(DEVELOPMENT, BACKLOG, D2),
            Enter("blocked", DEVELOPMENT, D3),
        )
        assert timeline.stages() == ["blocked"]


class TestReset:
    def test_reset_empties_timeline(self):
        timeline = build(*progressed(BACKLOG, DEVELOPMENT, APPROVED_TEST), Reset())
        assert timeline.entries == ()
        assert not timeline

    def test_reset_on_empty_timeline(self):
        assert build(Reset()).entries == ()

    def test_two_resets_equal_one(self):
        ops = progressed(BACKLOG, DEVELOPMENT)
        assert build(*ops, Reset(), Reset()) == build(*ops, Reset())

    def test_board_reentry_after_reset_starts_over(self):
        timeline = build(Enter(BACKLOG, None, D0), Reset(), Enter(BACKLOG, None, D3))
        assert timeline.entries == (ColumnEntry(BACKLOG, D3),)


class TestClosed:
    def test_closed_appends_final_stage(self):
        timeline = build(Enter(BACKLOG, None, D0), Closed(D4))
        assert timeline.entries[-1] == ColumnEntry(APPROVED_PROD, D4)

    def test_closed_on_empty_timeline_is_ignored(self):
        assert build(Closed(D4)).entries == ()

    def test_closed_twice_appends_once(self):
        timeline = build(Enter(BACKLOG, None, D0), Closed(D3), Closed(D4))
        assert timeline.stages().count(APPROVED_PROD) == 1
        assert timeline.get(APPROVED_PROD).date == D3

    def test_closed_after_final_stage_keeps_its_date(self):
        ops = progressed(BACKLOG, DEVELOPMENT, APPROVED_TEST, DEPLOYED_TEST, APPROVED_PROD)
        timeline = build(*ops, Closed(date(2024, 1, 9)))
        assert timeline.stages().count(APPROVED_PROD) == 1
        assert timeline.get(APPROVED_PROD).date == date(2024, 1, 5)

    def test_closed_after_reset_is_ignored(self):
        assert build(Enter(BACKLOG, None, D0), Reset(), Closed(D4)).entries == ()


class TestBuilder:
    def test_unknown_operation_raises(self):
        with pytest.raises(TypeError):
            TimelineBuilder().apply("closed")

    def test_timeline_is_a_snapshot(self):
        builder = TimelineBuilder()
        builder.apply(Enter(BACKLOG, None, D0))
        snapshot = builder.timeline
        builder.apply(Reset())
        assert snapshot.stages() == [BACKLOG]

    def test_custom_stage_catalog(self):
        stages = StageCatalog(("todo", "doing", "done"))
        builder = TimelineBuilder(stages)
        timeline = builder.build([Enter("todo", None, D0), Closed(D1)])
        assert timeline.entries == (ColumnEntry("todo", D0), ColumnEntry("done", D1))


class TestReconstruct:
    def test_reconstruct_filters_then_folds(self, board_config):
        record = IssueRecord(
            Issue(107, "Dashboard"),
            (
                RawEvent.from_api({
                    "event": "added_to_project",
                    "created_at": "2024-01-01T12:00:00Z",
                    "project_card": {"project_id": board_config.project_id, "column_name": BACKLOG},
                }),
                RawEvent.from_api({"event": "labeled", "created_at": "2024-01-02T12:00:00Z"}),
                RawEvent.from_api({"event": "closed", "created_at": "2024-01-09T12:00:00Z"}),
            ),
        )
        timeline = reconstruct(record, board_config)
        assert timeline.to_list() == [
            {"stage": BACKLOG, "date": "2024-01-01"},
            {"stage": APPROVED_PROD, "date": "2024-01-09"},
        ]

    def test_reconstruct_without_board_events(self, board_config):
        record = IssueRecord(Issue(5, "Loose"), (RawEvent.from_api({"event": "closed", "created_at": "2024-01-09T12:00:00Z"}),))
        assert not reconstruct(record, board_config)
