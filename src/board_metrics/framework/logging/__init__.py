"""
Structured, run-aware logging.

Usage:
    from board_metrics.framework.logging import configure_logging, get_logger, log_step, push_context

    configure_logging()
    log = get_logger(__name__)

    token = push_context(run_id="abc-123", repo="Gepardec/mega")
    with log_step("sink.write"):
        write_rows()
    token.restore()
"""

from board_metrics.framework.logging.config import configure_logging
from board_metrics.framework.logging.context import (
    LogContext,
    get_context,
    get_logger,
    push_context,
)
from board_metrics.framework.logging.timing import StepTimer, log_step

__all__ = [
    "configure_logging",
    "get_logger",
    "get_context",
    "push_context",
    "LogContext",
    "StepTimer",
    "log_step",
]
