"""
Error types raised at the edges of a metrics run.

The core never raises on bad tracker data; malformed events are dropped by
the event filter. Errors come from the three collaborators around it and
the pipeline treats them differently:

    issue source  NetworkError, RateLimitError      run FAILED
                  SourceError, SourceUnavailable,
                  ParseError, AuthError
    record sink   SinkError                          logged, notify skipped
    notifier      NotificationError                  reported as delivery

Each error carries a category and a retry flag for log routing, plus an
``ErrorContext`` naming the issue, URL or file involved::

    raise NetworkError("GitHub unreachable", cause=e).with_context(url=url)
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Where a failure came from."""

    NETWORK = "NETWORK"
    SOURCE = "SOURCE"
    PARSE = "PARSE"
    AUTH = "AUTH"
    STORAGE = "STORAGE"
    NOTIFICATION = "NOTIFICATION"
    INTERNAL = "INTERNAL"


@dataclass
class ErrorContext:
    """What the failing operation was working on. Unknown keys go to ``metadata``."""

    issue_number: int | None = None
    source_name: str | None = None
    url: str | None = None
    http_status: int | None = None
    path: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        known = {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name != "metadata" and getattr(self, f.name) is not None
        }
        return {**known, **self.metadata}


class MetricsError(Exception):
    """
    Base class of every board-metrics error.

    Subclasses pick ``default_category`` and ``default_retryable``; both can
    be overridden per instance.
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL
    default_retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        retryable: bool | None = None,
        retry_after: int | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.retryable = self.default_retryable if retryable is None else retryable
        self.retry_after = retry_after
        self.context = context or ErrorContext()
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> MetricsError:
        """Attach context and return ``self`` so it can be raised inline."""
        known = {f.name for f in fields(self.context)} - {"metadata"}
        for key, value in kwargs.items():
            if key in known:
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Flat structure for ``log.error(..., **error.to_dict())``."""
        result: dict[str, Any] = {
            "error_type": type(self).__name__,
            "message": self.message,
            "category": self.category.value,
            "retryable": self.retryable,
        }
        if self.retry_after is not None:
            result["retry_after"] = self.retry_after
        context = self.context.to_dict()
        if context:
            result["context"] = context
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, category={self.category.value})"


# ── Issue source ─────────────────────────────────────────────────


class TransientError(MetricsError):
    """The tracker could not be reached right now."""

    default_category = ErrorCategory.NETWORK
    default_retryable = True


class NetworkError(TransientError):
    """Connection, DNS or timeout failure talking to the tracker."""


class RateLimitError(TransientError):
    """The tracker's request quota is used up."""

    def __init__(self, message: str = "Rate limit exceeded", *, retry_after: int = 60, **kwargs: Any):
        super().__init__(message, retry_after=retry_after, **kwargs)


class SourceError(MetricsError):
    """The tracker answered with an error (unknown repository, missing issue)."""

    default_category = ErrorCategory.SOURCE


class SourceUnavailableError(SourceError):
    """The tracker answered 5xx."""

    default_retryable = True


class ParseError(SourceError):
    """The tracker or fixture returned a payload of the wrong shape."""

    default_category = ErrorCategory.PARSE


class AuthError(MetricsError):
    """The tracker rejected the configured token."""

    default_category = ErrorCategory.AUTH


# ── Record sink and notifier ─────────────────────────────────────


class SinkError(MetricsError):
    """The delimited artifact could not be built or written."""

    default_category = ErrorCategory.STORAGE


class NotificationError(MetricsError):
    """The artifact could not be delivered."""

    default_category = ErrorCategory.NOTIFICATION
    default_retryable = True


def is_fatal(error: Exception) -> bool:
    """Whether an error raised while reading issues must abort the run."""
    return isinstance(error, (SourceError, TransientError, AuthError))


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "MetricsError",
    "TransientError",
    "NetworkError",
    "RateLimitError",
    "SourceError",
    "SourceUnavailableError",
    "ParseError",
    "AuthError",
    "SinkError",
    "NotificationError",
    "is_fatal",
]
