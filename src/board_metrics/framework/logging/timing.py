"""
Timed steps.

``log_step`` wraps one unit of work (a page fetch, the collect loop, the
sink write) in a span. The span id is pushed into the log context, so lines
logged inside the step carry it, and a nested step records its parent::

    with log_step("source.issues_page", page=3) as step:
        issues = fetch(3)
        step.add_metric("issues", len(issues))

    # DEBUG source.issues_page.start span_id=1f3a9c0e page=3
    # INFO  source.issues_page.end   span_id=1f3a9c0e duration_ms=212.4 page=3 issues=30
"""

import time
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

from board_metrics.framework.logging.context import get_context, get_logger, push_context

log = get_logger("board_metrics.timing")


@dataclass
class StepTimer:
    """Span of one step; metrics added while it runs end up on the end line."""

    step: str
    parent_span_id: str | None = None
    metrics: dict[str, Any] = field(default_factory=dict)
    span_id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])
    started_at: float = field(default_factory=time.perf_counter)
    ended_at: float | None = None
    status: str = "ok"
    error_info: dict[str, Any] | None = None

    @property
    def duration_ms(self) -> float:
        end = self.ended_at if self.ended_at is not None else time.perf_counter()
        return (end - self.started_at) * 1000

    def add_metric(self, key: str, value: Any) -> None:
        self.metrics[key] = value

    def fail(self, error: Exception) -> None:
        self.status = "error"
        self.error_info = {"error_type": type(error).__name__, "error_message": str(error)}

    def to_log_dict(self) -> dict[str, Any]:
        fields: dict[str, Any] = {"span_id": self.span_id, "duration_ms": round(self.duration_ms, 2)}
        if self.parent_span_id:
            fields["parent_span_id"] = self.parent_span_id
        fields.update(self.metrics)
        if self.error_info:
            fields.update(status=self.status, **self.error_info)
        return fields


@contextmanager
def log_step(event: str, log_start: bool = True, level: str = "info", **metrics: Any) -> Iterator[StepTimer]:
    """
    Time ``event`` and log ``<event>.start`` (DEBUG), ``<event>.end`` at
    ``level`` or ``<event>.error`` (ERROR, then re-raise).
    """
    timer = StepTimer(step=event, parent_span_id=get_context().span_id, metrics=dict(metrics))
    token = push_context(span_id=timer.span_id, parent_span_id=timer.parent_span_id, step=event)
    if log_start:
        log.debug(f"{event}.start", **{k: v for k, v in timer.to_log_dict().items() if k != "duration_ms"})
    try:
        yield timer
    except Exception as e:
        timer.ended_at = time.perf_counter()
        timer.fail(e)
        log.error(f"{event}.error", **timer.to_log_dict())
        raise
    finally:
        if timer.ended_at is None:
            timer.ended_at = time.perf_counter()
        token.restore()
    getattr(log, level)(f"{event}.end", **timer.to_log_dict())
