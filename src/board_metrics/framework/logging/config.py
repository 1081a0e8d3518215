"""
structlog setup for the CLI and the API.

Level and format come from the arguments, else from
``BOARD_METRICS_LOG_LEVEL`` (default INFO) and ``BOARD_METRICS_LOG_FORMAT``
(``console`` or ``json``, default console).
"""

import logging
import os
import sys
from typing import Literal

import structlog
from structlog.types import Processor

from board_metrics.framework.logging.context import add_context_processor

_configured = False


def configure_logging(
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] | str | None = None,
    format: Literal["json", "console"] | str | None = None,
    force: bool = False,
) -> None:
    """Route structlog through stdlib logging on stderr. Later calls need ``force``."""
    global _configured
    if _configured and not force:
        return

    level_name = (level or os.environ.get("BOARD_METRICS_LOG_LEVEL", "INFO")).upper()
    use_json = (format or os.environ.get("BOARD_METRICS_LOG_FORMAT", "console")).lower() == "json"
    level_num = getattr(logging, level_name, logging.INFO)

    processors: list[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_context_processor,
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer()
        if use_json
        else structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
    ]
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level_num, force=True)
    logging.getLogger("board_metrics").setLevel(level_num)
    _configured = True
