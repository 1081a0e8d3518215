"""
CLI: ``board-metrics serve`` — start the API server.
"""

from __future__ import annotations

import typer

from board_metrics.cli.utils import console


def serve(
    host: str = typer.Option("0.0.0.0", "--host", "-h", help="Bind address"),
    port: int = typer.Option(8000, "--port", "-p", help="Bind port"),
    reload: bool = typer.Option(False, "--reload", help="Auto-reload on changes"),
    log_level: str = typer.Option("info", "--log-level"),
) -> None:
    """Start the board-metrics REST API server."""
    import uvicorn

    console.print(f"[bold green]Starting board-metrics API[/bold green] on {host}:{port}")
    uvicorn.run(
        "board_metrics.api:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level=log_level,
    )
