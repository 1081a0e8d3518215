"""Notification channel base class."""

from __future__ import annotations

from abc import ABC, abstractmethod

from board_metrics.framework.alerts.protocol import (
    ChannelType,
    DeliveryResult,
    Notification,
)


class BaseChannel(ABC):
    """Name, type and an ``enabled`` flag fixed at construction; ``send`` is left to channels."""

    def __init__(self, name: str, channel_type: ChannelType, *, enabled: bool = True):
        self._name = name
        self._channel_type = channel_type
        self._enabled = enabled

    @property
    def name(self) -> str:
        return self._name

    @property
    def channel_type(self) -> ChannelType:
        return self._channel_type

    @property
    def enabled(self) -> bool:
        return self._enabled

    @abstractmethod
    def send(self, notification: Notification) -> DeliveryResult:
        """Deliver the notification. Failures come back as ``DeliveryResult.fail``."""
