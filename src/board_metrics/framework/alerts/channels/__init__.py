"""Notification channel implementations.

Each channel module implements a single delivery target.
"""

from board_metrics.framework.alerts.channels.console import ConsoleChannel
from board_metrics.framework.alerts.channels.email import EmailChannel

__all__ = [
    "ConsoleChannel",
    "EmailChannel",
]
