"""
board-metrics core — pure timeline reconstruction.

No I/O lives here. The components, leaves first:

    filtering.EventFilter       raw tracker events -> board operations
    timeline.TimelineBuilder    board operations   -> Timeline
    projection.ColumnProjector  Timeline + closure -> Row
    backfill.backfill           Row                -> Row (skipped stages filled)

``rows.build_rows`` composes them per issue.
"""

from board_metrics.core.backfill import backfill
from board_metrics.core.config import BoardConfig
from board_metrics.core.filtering import EventFilter
from board_metrics.core.models import (
    BoardOperation,
    Closed,
    ColumnEntry,
    Enter,
    Issue,
    IssueRecord,
    RawEvent,
    Reset,
    Row,
    Timeline,
)
from board_metrics.core.projection import ColumnProjector
from board_metrics.core.rows import build_row, build_rows
from board_metrics.core.stages import StageCatalog
from board_metrics.core.timeline import TimelineBuilder, reconstruct

__all__ = [
    "BoardConfig",
    "StageCatalog",
    # Models
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
    # Components
    "EventFilter",
    "TimelineBuilder",
    "ColumnProjector",
    "backfill",
    "reconstruct",
    "build_row",
    "build_rows",
]
