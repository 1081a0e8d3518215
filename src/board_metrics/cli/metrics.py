"""
CLI: ``board-metrics run`` and ``board-metrics timeline``.
"""

from __future__ import annotations

from pathlib import Path

import typer

from board_metrics.cli.utils import (
    console,
    err_console,
    load_settings,
    print_json,
    print_rows,
    print_summary,
    print_timeline,
)
from board_metrics.core.errors import MetricsError
from board_metrics.core.settings import BoardMetricsSettings
from board_metrics.framework.sources import IssueSource, StaticIssueSource


def _fixture_source(fixture: Path, settings: BoardMetricsSettings) -> IssueSource:
    return StaticIssueSource.from_file(
        fixture,
        page_size=settings.page_size,
        threshold=settings.ticket_threshold,
        tracked_labels=settings.tracked_labels,
    )


def run(
    output: Path | None = typer.Option(None, "--output", "-o", help="Artifact path (default: <output_dir>/metrics_<date>.csv)"),
    notify: bool | None = typer.Option(None, "--notify/--no-notify", help="Send the artifact to the recipients"),
    threshold: int | None = typer.Option(None, "--threshold", "-t", help="Lowest issue number to evaluate"),
    fixture: Path | None = typer.Option(None, "--fixture", "-f", help="Read issues from a JSON fixture instead of GitHub"),
    show_rows: bool = typer.Option(False, "--rows", help="Print the produced rows"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Reconstruct stage dates for all issues, write the CSV and mail it."""
    from board_metrics.framework.pipelines import BoardMetricsPipeline

    settings = load_settings(ticket_threshold=threshold)
    params: dict[str, object] = {}
    if output is not None:
        params["output"] = str(output)
    if notify is not None:
        params["notify"] = notify

    try:
        source = _fixture_source(fixture, settings) if fixture else None
    except MetricsError as e:
        err_console.print(f"[bold red]Error[/bold red] ({e.category.value}): {e.message}")
        raise typer.Exit(code=1)

    result = BoardMetricsPipeline(settings, source=source, params=params).run()

    if json_out:
        print_json(result.to_dict())
    else:
        if show_rows:
            print_rows(result.rows, settings.stages, title="Rows")
        print_summary(result.metrics, title=f"Run {result.status.value}")
        if result.artifact is not None:
            console.print(f"[green]✓[/green] Wrote {result.artifact}")

    if not result.succeeded:
        err_console.print(f"[bold red]Run failed:[/bold red] {result.error}")
        raise typer.Exit(code=1)


def timeline(
    number: int = typer.Argument(..., help="Issue number"),
    fixture: Path | None = typer.Option(None, "--fixture", "-f", help="Read issues from a JSON fixture instead of GitHub"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Show the reconstructed timeline and the resulting row for one issue."""
    from board_metrics.core.rows import build_row
    from board_metrics.core.timeline import reconstruct
    from board_metrics.framework.pipelines import build_source

    settings = load_settings()
    config = settings.board_config()

    try:
        if fixture:
            record = _fixture_source(fixture, settings).fetch_issue(number)
        else:
            with build_source(settings) as source:
                record = source.fetch_issue(number)
    except MetricsError as e:
        err_console.print(f"[bold red]Error[/bold red] ({e.category.value}): {e.message}")
        raise typer.Exit(code=1)

    if record.issue.is_pull_request:
        err_console.print(f"#{number} is a pull request; pull requests produce no row.")
        raise typer.Exit(code=1)

    issue_timeline = reconstruct(record, config)
    row = build_row(record, config)

    if json_out:
        print_json({
            "number": number,
            "timeline": issue_timeline.to_list(),
            "row": row.to_dict() if row else None,
        })
        return

    print_timeline(issue_timeline, title=f"#{number} {record.issue.title}")
    if row is not None:
        print_rows([row], settings.stages)
