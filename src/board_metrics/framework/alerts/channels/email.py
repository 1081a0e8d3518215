"""Email (SMTP) channel; the artifact goes out as an attachment."""

from __future__ import annotations

from email.message import EmailMessage
from typing import Any

from board_metrics.core.errors import NotificationError
from board_metrics.framework.alerts.base import BaseChannel
from board_metrics.framework.alerts.protocol import (
    ChannelType,
    DeliveryResult,
    Notification,
)


class EmailChannel(BaseChannel):
    """
    Email channel using SMTP.

    Sends the notification body as plain text with the artifact attached.
    """

    def __init__(
        self,
        name: str,
        smtp_host: str,
        from_address: str,
        recipients: list[str],
        *,
        smtp_port: int = 587,
        smtp_user: str | None = None,
        smtp_password: str | None = None,
        use_tls: bool = True,
        **kwargs: Any,
    ):
        super().__init__(name, ChannelType.EMAIL, **kwargs)
        self._smtp_host = smtp_host
        self._smtp_port = smtp_port
        self._smtp_user = smtp_user
        self._smtp_password = smtp_password
        self._from_address = from_address
        self._recipients = recipients
        self._use_tls = use_tls

    @property
    def recipients(self) -> list[str]:
        return list(self._recipients)

    def _build_message(self, notification: Notification) -> EmailMessage:
        msg = EmailMessage()
        msg["Subject"] = notification.subject
        msg["From"] = self._from_address
        msg["To"] = ", ".join(self._recipients)
        msg.set_content(notification.body)

        if notification.attachment is not None:
            msg.add_attachment(
                notification.attachment.read_bytes(),
                maintype="text",
                subtype="csv",
                filename=notification.attachment.name,
            )

        return msg

    def send(self, notification: Notification) -> DeliveryResult:
        """Send via SMTP."""
        import smtplib

        try:
            message = self._build_message(notification)
            with smtplib.SMTP(self._smtp_host, self._smtp_port) as server:
                if self._use_tls:
                    server.starttls()
                if self._smtp_user and self._smtp_password:
                    server.login(self._smtp_user, self._smtp_password)
                refused = server.send_message(message)

            if refused:
                return DeliveryResult.fail(
                    self._name,
                    NotificationError(f"Recipients refused: {sorted(refused)}"),
                )
            return DeliveryResult.ok(self._name, message=f"sent to {len(self._recipients)} recipient(s)")

        except smtplib.SMTPException as e:
            return DeliveryResult.fail(self._name, NotificationError(str(e), cause=e))
        except OSError as e:
            return DeliveryResult.fail(self._name, NotificationError(str(e), cause=e))
