"""Per-issue composition of the core: filter, fold, project, backfill."""

from __future__ import annotations

from typing import Iterable

from board_metrics.core.backfill import backfill
from board_metrics.core.config import BoardConfig
from board_metrics.core.models import IssueRecord, Row
from board_metrics.core.projection import ColumnProjector
from board_metrics.core.timeline import reconstruct


def build_row(record: IssueRecord, config: BoardConfig) -> Row | None:
    """
    Row for one issue, or ``None`` when it never entered the tracked board.

    Pull requests never produce a row.
    """
    if record.issue.is_pull_request:
        return None

    timeline = reconstruct(record, config)
    if not timeline:
        return None

    row = ColumnProjector(config.column_rules).project(record.issue, timeline)
    return backfill(row)


def build_rows(records: Iterable[IssueRecord], config: BoardConfig) -> list[Row]:
    """Rows for all issues in input order, dropping issues without a row."""
    rows = []
    for record in records:
        row = build_row(record, config)
        if row is not None:
            rows.append(row)
    return rows
