"""
Pure configuration value injected into the core components.

``BoardConfig`` is built from settings (see ``board_metrics.core.settings``)
at the boundary and passed explicitly; the core never reads the environment.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from board_metrics.core.stages import (
    DEFAULT_IGNORED_COLUMNS,
    DEFAULT_TRACKED_LABELS,
    ColumnRule,
    StageCatalog,
    column_rules_for,
)


@dataclass(frozen=True)
class BoardConfig:
    """Which board is tracked and how its columns are interpreted.

    ``column_rules`` defaults to rules derived from ``stages``.
    """

    project_id: int
    stages: StageCatalog = field(default_factory=StageCatalog)
    ignored_columns: frozenset[str] = DEFAULT_IGNORED_COLUMNS
    column_rules: tuple[ColumnRule, ...] | None = None
    tracked_labels: tuple[str, ...] = DEFAULT_TRACKED_LABELS

    def __post_init__(self) -> None:
        if self.column_rules is None:
            object.__setattr__(self, "column_rules", column_rules_for(self.stages))
