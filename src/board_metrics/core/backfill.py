"""
Backfill of skipped stages.

A ticket that reached a later stage must have passed the earlier ones even
when no event recorded it. Rules run once per row, latest stage first, each
reading the row as updated by the previous rule so a single pass cascades:

    deployed_to_test   <- approved_for_prod
    approved_for_test  <- deployed_to_test
    development        <- approved_for_test
    backlog            <- development

Populated fields are never overwritten and nothing propagates forward.
"""

from __future__ import annotations

from board_metrics.core.models import Row
from board_metrics.core.stages import ROW_DATE_FIELDS


# (target, source) pairs in evaluation order
BACKFILL_RULES: tuple[tuple[str, str], ...] = tuple(
    (ROW_DATE_FIELDS[i - 1], ROW_DATE_FIELDS[i])
    for i in range(len(ROW_DATE_FIELDS) - 1, 0, -1)
)


def backfill(row: Row) -> Row:
    """Fill empty earlier stages from later ones; mutates and returns ``row``."""
    for target, source in BACKFILL_RULES:
        if getattr(row, target) is None and getattr(row, source) is not None:
            setattr(row, target, getattr(row, source))
    return row
