"""
Notification framework.

Delivers the produced artifact to recipients. Delivery failures are
reported as DeliveryResult values and never abort a run.
"""

from board_metrics.framework.alerts.base import BaseChannel
from board_metrics.framework.alerts.channels import ConsoleChannel, EmailChannel
from board_metrics.framework.alerts.protocol import (
    ChannelType,
    DeliveryResult,
    Notification,
    NotificationChannel,
)
from board_metrics.framework.alerts.registry import NotifierRegistry

__all__ = [
    "ChannelType",
    "Notification",
    "DeliveryResult",
    "NotificationChannel",
    "BaseChannel",
    "ConsoleChannel",
    "EmailChannel",
    "NotifierRegistry",
]
