"""
Notifier for access request emails.
"""

import asyncio
import smtplib
from email.mime.text import MIMEText
from typing import Protocol

from loguru import logger

from ..models.requests import NotificationMessage
from ..utils.exceptions import NotifierException


class Notifier(Protocol):
    """Sends a formatted message to its recipient."""

    async def send(self, message: NotificationMessage) -> None:
        """Send the message, raising NotifierException on failure."""
        ...


class SmtpNotifier:
    """Notifier that delivers HTML email over SMTP."""

    def __init__(
        self,
        host: str,
        port: int,
        username: str,
        password: str,
        use_ssl: bool = True,
        timeout: int = 30,
    ):
        """Initialize the SMTP notifier."""
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_ssl = use_ssl
        self.timeout = timeout

    async def send(self, message: NotificationMessage) -> None:
        """
        Send a notification email.

        The blocking SMTP exchange runs in a worker thread.

        Args:
            message: Message to deliver

        Raises:
            NotifierException: If the mail transport fails
        """
        try:
            await asyncio.to_thread(self._send_email, message)
        except (smtplib.SMTPException, OSError, ValueError) as e:
            raise NotifierException(
                f"Failed to send email: {str(e)}",
                details={"recipient": message.recipient, "subject": message.subject},
            ) from e

        logger.info("Notification email sent", recipient=message.recipient, subject=message.subject)

    def _send_email(self, message: NotificationMessage) -> None:
        msg = MIMEText(message.html_body, "html", "utf-8")
        msg["Subject"] = message.subject
        msg["From"] = message.sender
        msg["To"] = message.recipient

        if self.use_ssl:
            with smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout) as server:
                self._deliver(server, msg)
        else:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
                server.starttls()
                self._deliver(server, msg)

    def _deliver(self, server: smtplib.SMTP, msg: MIMEText) -> None:
        if self.username:
            server.login(self.username, self.password)
        server.send_message(msg)
