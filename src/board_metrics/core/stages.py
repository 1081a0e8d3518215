"""
Pipeline stages, ignored columns and the column-to-field mapping table.

The tracked board has exactly five ordered stages. Order matters: it defines
what "after" means when an issue regresses to an earlier column.

Tags:
    board-metrics, core, stages, kanban, column-mapping
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class EventKind(str, Enum):
    """Tracker event kinds the event filter recognizes."""

    ADDED_TO_PROJECT = "added_to_project"
    MOVED_COLUMNS_IN_PROJECT = "moved_columns_in_project"
    CONVERTED_NOTE_TO_ISSUE = "converted_note_to_issue"
    REMOVED_FROM_PROJECT = "removed_from_project"
    CLOSED = "closed"


# Kinds that place a card into a column
BOARD_ENTRY_KINDS = frozenset({
    EventKind.ADDED_TO_PROJECT.value,
    EventKind.MOVED_COLUMNS_IN_PROJECT.value,
    EventKind.CONVERTED_NOTE_TO_ISSUE.value,
})

DEFAULT_STAGES: tuple[str, ...] = (
    "backlog [WIP min 3]",
    "in development [WIP 4]",
    "approved for TEST",
    "deployed to TEST",
    "approved for PROD",
)

DEFAULT_IGNORED_COLUMNS: frozenset[str] = frozenset({"pre-backlog", "triage"})

DEFAULT_TRACKED_LABELS: tuple[str, ...] = ("user story", "technical story", "bug")


@dataclass(frozen=True)
class StageCatalog:
    """Ordered canonical stage names."""

    names: tuple[str, ...] = DEFAULT_STAGES

    def __post_init__(self) -> None:
        if not self.names:
            raise ValueError("StageCatalog needs at least one stage")
        if len(set(self.names)) != len(self.names):
            raise ValueError(f"Duplicate stage names: {list(self.names)}")

    def __len__(self) -> int:
        return len(self.names)

    def __iter__(self):
        return iter(self.names)

    def contains(self, name: str | None) -> bool:
        return name is not None and name in self.names

    def index(self, name: str) -> int:
        return self.names.index(name)

    @property
    def last(self) -> str:
        return self.names[-1]

    def range_after(self, column: str, previous: str) -> tuple[str, ...]:
        """
        Stages strictly after ``column`` up to and including ``previous``.

        ``column`` need not be canonical: a non-canonical column sorts before
        the first stage, so everything up to ``previous`` is returned. Empty
        when ``previous`` is not after ``column``.
        """
        start = self.index(column) + 1 if self.contains(column) else 0
        return self.names[start:self.index(previous) + 1]


class MatchRule(str, Enum):
    """How a column name is compared against a rule pattern."""

    SUBSTRING = "substring"
    EXACT = "exact"


@dataclass(frozen=True)
class ColumnRule:
    """Maps column names to one date field of a Row."""

    field: str
    rule: MatchRule
    pattern: str

    def matches(self, column: str) -> bool:
        if self.rule is MatchRule.SUBSTRING:
            return self.pattern in column
        return column == self.pattern


# Row date fields in canonical stage order
ROW_DATE_FIELDS: tuple[str, ...] = (
    "backlog",
    "development",
    "approved_for_test",
    "deployed_to_test",
    "approved_for_prod",
)

DEFAULT_COLUMN_RULES: tuple[ColumnRule, ...] = (
    ColumnRule("backlog", MatchRule.SUBSTRING, "backlog"),
    ColumnRule("development", MatchRule.SUBSTRING, "development"),
    ColumnRule("approved_for_test", MatchRule.EXACT, "approved for TEST"),
    ColumnRule("deployed_to_test", MatchRule.EXACT, "deployed to TEST"),
    ColumnRule("approved_for_prod", MatchRule.EXACT, "approved for PROD"),
)


def column_rules_for(stages: StageCatalog) -> tuple[ColumnRule, ...]:
    """
    Column rules for a five-stage catalog.

    The default catalog keeps the loose ``backlog``/``development`` matches
    so renamed WIP limits still map. Any other catalog matches its first two
    stage names as substrings and the remaining three exactly.
    """
    if len(stages) != len(ROW_DATE_FIELDS):
        raise ValueError(f"Expected {len(ROW_DATE_FIELDS)} stage names, got {len(stages)}")
    if stages.names == DEFAULT_STAGES:
        return DEFAULT_COLUMN_RULES
    return tuple(
        ColumnRule(field, MatchRule.SUBSTRING if position < 2 else MatchRule.EXACT, name)
        for position, (field, name) in enumerate(zip(ROW_DATE_FIELDS, stages.names))
    )


def field_for_column(column: str, rules: tuple[ColumnRule, ...] = DEFAULT_COLUMN_RULES) -> str | None:
    """Return the Row field for a column name, first matching rule wins."""
    for rule in rules:
        if rule.matches(column):
            return rule.field
    return None


__all__ = [
    "EventKind",
    "BOARD_ENTRY_KINDS",
    "DEFAULT_STAGES",
    "DEFAULT_IGNORED_COLUMNS",
    "DEFAULT_TRACKED_LABELS",
    "StageCatalog",
    "MatchRule",
    "ColumnRule",
    "ROW_DATE_FIELDS",
    "DEFAULT_COLUMN_RULES",
    "column_rules_for",
    "field_for_column",
]
