"""board-metrics command line interface."""

from board_metrics.cli.app import app

__all__ = ["app"]


def main() -> None:
    app()
