"""
Run-scoped log context.

The run id, repository, issue and current step attach to every log line
without being passed through each call. The value lives in a ``ContextVar``:
each API request gets its own copy, and the event-fetch pool runs every
task in a copy taken by the submitting thread.
"""

from contextvars import ContextVar, Token
from dataclasses import asdict, dataclass, replace
from typing import Any

import structlog


@dataclass(frozen=True)
class LogContext:
    """
    Fields added to each log entry (``None`` fields are left out).

    run_id/pipeline/repo identify the run, span_id/parent_span_id link
    nested ``log_step`` blocks, issue/step say what is being worked on.
    """

    run_id: str | None = None
    pipeline: str | None = None
    repo: str | None = None
    span_id: str | None = None
    parent_span_id: str | None = None
    issue: int | None = None
    step: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}

    def merge(self, **kwargs: Any) -> "LogContext":
        """Copy with the given known, non-None fields replaced."""
        known = asdict(self)
        return replace(self, **{k: v for k, v in kwargs.items() if k in known and v is not None})


_log_context: ContextVar[LogContext] = ContextVar("board_metrics_log_context", default=LogContext())


def get_context() -> LogContext:
    return _log_context.get()


class ContextToken:
    """Undoes one ``push_context``."""

    def __init__(self, token: Token) -> None:
        self._token = token

    def restore(self) -> None:
        _log_context.reset(self._token)


def push_context(**kwargs: Any) -> ContextToken:
    """
    Layer values over the current context until ``restore()``::

        token = push_context(run_id=run_id, repo="Gepardec/mega")
        try:
            run()
        finally:
            token.restore()
    """
    return ContextToken(_log_context.set(get_context().merge(**kwargs)))


def add_context_processor(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """structlog processor; explicit event keys win over context keys."""
    for key, value in get_context().to_dict().items():
        event_dict.setdefault(key, value)
    return event_dict


def get_logger(name: str | None = None) -> Any:
    return structlog.get_logger(name)
