"""Record sinks for the finished rows."""

from board_metrics.framework.sinks.delimited import (
    IDENTITY_HEADERS,
    DelimitedRecordSink,
    SinkResult,
    build_headers,
)

__all__ = [
    "DelimitedRecordSink",
    "SinkResult",
    "IDENTITY_HEADERS",
    "build_headers",
]
