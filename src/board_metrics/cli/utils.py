"""
CLI utility helpers — output formatting and settings overrides.
"""

from __future__ import annotations

import json
from typing import Any, Iterable

from rich.console import Console
from rich.table import Table

from board_metrics.core.models import Row, Timeline
from board_metrics.core.settings import BoardMetricsSettings, get_settings
from board_metrics.framework.sinks import build_headers

console = Console()
err_console = Console(stderr=True)


def load_settings(**overrides: Any) -> BoardMetricsSettings:
    """Cached settings with the non-None CLI overrides applied."""
    settings = get_settings()
    update = {k: v for k, v in overrides.items() if v is not None}
    return settings.model_copy(update=update) if update else settings


def print_json(payload: Any) -> None:
    console.print_json(json.dumps(payload, default=str))


def print_rows(rows: Iterable[Row], stage_names: Iterable[str], *, title: str = "") -> None:
    """Render rows with the artifact's column titles."""
    headers = build_headers(list(stage_names))
    table = Table(title=title or None, show_header=True, header_style="bold cyan")
    for header in headers:
        table.add_column(header)
    count = 0
    for row in rows:
        table.add_row(*row.to_record())
        count += 1
    if not count:
        console.print("[dim]No rows.[/dim]")
        return
    console.print(table)


def print_timeline(timeline: Timeline, *, title: str = "") -> None:
    if not timeline:
        console.print("[dim]Empty timeline: the issue never entered the tracked board.[/dim]")
        return
    table = Table(title=title or None, show_header=True, header_style="bold cyan")
    table.add_column("Stage")
    table.add_column("Entered")
    for entry in timeline:
        table.add_row(entry.stage, entry.date.isoformat())
    console.print(table)


def print_summary(metrics: dict[str, Any], *, title: str = "") -> None:
    table = Table(title=title or None, show_header=False)
    table.add_column("Key", style="bold")
    table.add_column("Value")
    for key, value in metrics.items():
        table.add_row(str(key), str(value))
    console.print(table)
