"""Pipelines."""

from board_metrics.framework.pipelines.board_metrics import (
    BoardMetricsPipeline,
    BoardMetricsResult,
    PipelineStatus,
    build_notifier,
    build_sink,
    build_source,
)

__all__ = [
    "PipelineStatus",
    "BoardMetricsPipeline",
    "BoardMetricsResult",
    "build_source",
    "build_sink",
    "build_notifier",
]
