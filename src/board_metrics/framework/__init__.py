"""
board-metrics framework — the I/O shell around the core.

    sources     issue source (GitHub, static fixtures)
    sinks       delimited record sink
    alerts      notifier channels (email, console)
    logging     structlog configuration, context, timing
    pipelines   run orchestration
"""
