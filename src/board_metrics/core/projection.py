"""Column projection: a finished timeline onto the fixed five-date row."""

from __future__ import annotations

from board_metrics.core.models import Issue, Row, Timeline
from board_metrics.core.stages import DEFAULT_COLUMN_RULES, ColumnRule, field_for_column


class ColumnProjector:
    """
    Applies the column mapping table entry by entry.

    Later entries overwrite earlier ones on the same field. When the issue
    is closed and no entry filled ``approved_for_prod``, the closed date is
    used instead.
    """

    def __init__(self, rules: tuple[ColumnRule, ...] = DEFAULT_COLUMN_RULES) -> None:
        self.rules = rules

    def project(self, issue: Issue, timeline: Timeline) -> Row:
        row = Row(number=issue.number, title=issue.title, label=issue.label)

        for entry in timeline:
            field_name = field_for_column(entry.stage, self.rules)
            if field_name is not None:
                setattr(row, field_name, entry.date)

        if issue.closed_date is not None and row.approved_for_prod is None:
            row.approved_for_prod = issue.closed_date

        return row
