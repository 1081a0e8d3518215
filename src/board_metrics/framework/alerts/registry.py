"""Notifier: fans one notification out to every enabled channel."""

from __future__ import annotations

from collections.abc import Iterable

from board_metrics.framework.alerts.protocol import (
    DeliveryResult,
    Notification,
    NotificationChannel,
)
from board_metrics.framework.logging import get_logger

log = get_logger(__name__)


class NotifierRegistry:
    """The channels a run delivers its artifact through, in delivery order."""

    def __init__(self, channels: Iterable[NotificationChannel] = ()):
        self.channels: list[NotificationChannel] = list(channels)

    def send_to_all(self, notification: Notification) -> list[DeliveryResult]:
        """
        Send to all enabled channels.

        A channel that raises despite its contract is recorded as a failed
        delivery; one failing channel never stops the others.
        """
        results = []
        for channel in self.channels:
            if not channel.enabled:
                continue
            try:
                result = channel.send(notification)
            except Exception as e:  # noqa: BLE001
                result = DeliveryResult.fail(channel.name, e)

            if result.success:
                log.info("notification.sent", channel=channel.name, detail=result.message)
            else:
                log.error("notification.failed", channel=channel.name, error=result.message)
            results.append(result)
        return results
