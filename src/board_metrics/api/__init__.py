"""board-metrics REST API."""

from board_metrics.api.app import create_app

__all__ = ["create_app"]
