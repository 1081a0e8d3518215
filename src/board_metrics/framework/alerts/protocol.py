"""
Notification protocol and data classes.

Defines the interface for delivery channels and the core data types.
Concrete implementations are in channels/ and base.py.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Protocol, runtime_checkable


class ChannelType(str, Enum):
    """Notification channel types."""

    EMAIL = "email"
    CONSOLE = "console"  # For development/testing


@dataclass
class Notification:
    """
    A produced artifact to be delivered to recipients.

    The attachment is optional so a run without an artifact can still
    report.
    """

    subject: str
    body: str
    source: str  # Pipeline name

    attachment: Path | None = None
    run_id: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)
    created_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        result = {
            "subject": self.subject,
            "source": self.source,
            "created_at": self.created_at.isoformat(),
        }
        if self.attachment is not None:
            result["attachment"] = str(self.attachment)
        if self.run_id:
            result["run_id"] = self.run_id
        if self.metadata:
            result["metadata"] = self.metadata
        return result


@dataclass
class DeliveryResult:
    """Result of a delivery attempt."""

    channel_name: str
    success: bool
    message: str | None = None
    error: Exception | None = None
    delivered_at: datetime = field(default_factory=datetime.now)

    @classmethod
    def ok(cls, channel_name: str, message: str | None = None) -> DeliveryResult:
        return cls(channel_name=channel_name, success=True, message=message)

    @classmethod
    def fail(cls, channel_name: str, error: Exception) -> DeliveryResult:
        return cls(
            channel_name=channel_name,
            success=False,
            error=error,
            message=str(error),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "channel": self.channel_name,
            "success": self.success,
            "message": self.message,
            "delivered_at": self.delivered_at.isoformat(),
        }


@runtime_checkable
class NotificationChannel(Protocol):
    """
    Protocol for notification channels.

    Implementations must provide:
    - name: Unique channel identifier
    - channel_type: Type classification
    - send(): Deliver a notification, never raising
    """

    @property
    def name(self) -> str:
        ...

    @property
    def channel_type(self) -> ChannelType:
        ...

    @property
    def enabled(self) -> bool:
        ...

    def send(self, notification: Notification) -> DeliveryResult:
        ...


__all__ = [
    "ChannelType",
    "Notification",
    "DeliveryResult",
    "NotificationChannel",
]
