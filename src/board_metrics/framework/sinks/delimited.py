"""
Delimited-text record sink.

Writes one header line followed by one record per row. Columns are fixed:
Number, Title, Label, then the five stages in pipeline order (their titles
are the configured stage names).
"""

from __future__ import annotations

import csv
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Sequence

from board_metrics.core.errors import SinkError
from board_metrics.core.models import Row
from board_metrics.core.stages import DEFAULT_STAGES, ROW_DATE_FIELDS
from board_metrics.framework.logging import log_step

IDENTITY_HEADERS: tuple[str, ...] = ("Number", "Title", "Label")


def build_headers(stage_names: Sequence[str] = DEFAULT_STAGES) -> tuple[str, ...]:
    if len(stage_names) != len(ROW_DATE_FIELDS):
        raise SinkError(f"Expected {len(ROW_DATE_FIELDS)} stage titles, got {len(stage_names)}")
    return IDENTITY_HEADERS + tuple(stage_names)


@dataclass(frozen=True)
class SinkResult:
    """Where the artifact went and how many records it holds."""

    path: Path
    rows_written: int


class DelimitedRecordSink:
    """Writes rows as delimited text to a single file, replacing it."""

    def __init__(
        self,
        path: str | Path,
        *,
        delimiter: str = ";",
        headers: Sequence[str] | None = None,
    ) -> None:
        self.path = Path(path)
        self.delimiter = delimiter
        self.headers = tuple(headers) if headers is not None else build_headers()

    def write(self, rows: Iterable[Row]) -> SinkResult:
        with log_step("sink.write", log_start=False, path=str(self.path)) as timer:
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                count = 0
                with self.path.open("w", newline="", encoding="utf-8") as handle:
                    writer = csv.writer(handle, delimiter=self.delimiter)
                    writer.writerow(self.headers)
                    for row in rows:
                        writer.writerow(row.to_record())
                        count += 1
            except OSError as e:
                raise SinkError(f"Could not write {self.path}: {e}", cause=e).with_context(path=str(self.path))
            timer.add_metric("rows", count)
        return SinkResult(path=self.path, rows_written=count)
