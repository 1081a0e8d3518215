"""
Root Typer application for the board-metrics CLI.
"""

from __future__ import annotations

import typer
from typer import Typer

from board_metrics import __version__

app = Typer(
    name="board-metrics",
    help="board-metrics — stage dates per issue from project board history.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"board-metrics {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    log_level: str | None = typer.Option(None, "--log-level", help="DEBUG, INFO, WARNING or ERROR"),
    log_format: str | None = typer.Option(None, "--log-format", help="console or json"),
) -> None:
    """board-metrics CLI — run the metrics pipeline, inspect timelines, serve the API."""
    from board_metrics.cli.utils import load_settings
    from board_metrics.framework.logging import configure_logging

    settings = load_settings()
    configure_logging(
        level=log_level or settings.log_level,
        format=log_format or settings.log_format,
    )


# ── Command registration ────────────────────────────────────────────────

from board_metrics.cli.metrics import run, timeline  # noqa: E402
from board_metrics.cli.serve import serve  # noqa: E402

app.command("run")(run)
app.command("timeline")(timeline)
app.command("serve")(serve)
