"""Console channel for development and runs without mail configured."""

from __future__ import annotations

from typing import Any

from rich.console import Console

from board_metrics.framework.alerts.base import BaseChannel
from board_metrics.framework.alerts.protocol import (
    ChannelType,
    DeliveryResult,
    Notification,
)


class ConsoleChannel(BaseChannel):
    """Prints the notification to the terminal."""

    def __init__(
        self,
        name: str = "console",
        *,
        console: Console | None = None,
        **kwargs: Any,
    ):
        super().__init__(name, ChannelType.CONSOLE, **kwargs)
        self._console = console or Console(stderr=True)

    def send(self, notification: Notification) -> DeliveryResult:
        self._console.print(f"[bold blue]{notification.subject}[/bold blue]")
        self._console.print(f"  Source: {notification.source}")
        if notification.attachment is not None:
            self._console.print(f"  Attachment: {notification.attachment}")
        self._console.print(notification.body, markup=False)
        return DeliveryResult.ok(self._name)
