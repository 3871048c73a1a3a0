"""
Notification service interface for sending messages to users.

This module provides an abstract base class for notification services and
an email implementation. Delivery failures are logged and reported as
``False``; they never propagate to the request that triggered them.
"""

import asyncio
import logging
import smtplib
from abc import ABC, abstractmethod
from email.message import EmailMessage
from typing import Optional

from app.core.config import settings

logger = logging.getLogger(__name__)


class NotificationService(ABC):
    """Abstract base class for notification services"""

    @abstractmethod
    async def send_message(self, to: str, subject: str, body: str) -> bool:
        """Send message to a recipient"""


class EmailNotificationService(NotificationService):
    """SMTP implementation of notification service"""

    def __init__(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        use_tls: Optional[bool] = None,
        sender: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.host = host if host is not None else settings.SMTP_HOST
        self.port = port if port is not None else settings.SMTP_PORT
        self.username = username if username is not None else settings.SMTP_USERNAME
        self.password = password if password is not None else settings.SMTP_PASSWORD
        self.use_tls = use_tls if use_tls is not None else settings.SMTP_USE_TLS
        self.sender = sender or settings.MAIL_FROM
        self.timeout = timeout if timeout is not None else settings.EXTERNAL_CALL_TIMEOUT

    def _build_message(self, to: str, subject: str, body: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = to
        message["Subject"] = subject
        message.set_content(body)
        return message

    def _deliver(self, message: EmailMessage) -> None:
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
            if self.use_tls:
                smtp.starttls()
            if self.username:
                smtp.login(self.username, self.password or "")
            smtp.send_message(message)

    async def send_message(self, to: str, subject: str, body: str) -> bool:
        """Send an email, returning whether it was handed to the SMTP server"""
        if not self.host:
            logger.warning("SMTP not configured, dropping mail %r to %s", subject, to)
            return False
        if not to:
            logger.warning("No recipient for mail %r", subject)
            return False

        try:
            message = self._build_message(to, subject, body)
            # smtplib blocks; keep it off the event loop
            await asyncio.to_thread(self._deliver, message)
            logger.info("Sent mail %r to %s", subject, to)
            return True
        except Exception as e:
            logger.error("Error sending mail %r to %s: %s", subject, to, e)
            return False


def get_notification_service() -> NotificationService:
    """Dependency to get notification service"""
    return EmailNotificationService()
