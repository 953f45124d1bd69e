"""Fire-and-forget notifications sent after successful commits."""

import logging
from dataclasses import dataclass
from typing import Protocol

from conference_central.domain.models import Conference

logger = logging.getLogger(__name__)


class NotificationSink(Protocol):
    """Interface for delivering a message to a user."""

    async def send(self, recipient_email: str, subject: str, body: str) -> None:
        """Enqueue or deliver a message."""


@dataclass(frozen=True)
class Notification:
    recipient_email: str
    subject: str
    body: str


def confirmation_message(recipient_email: str, conference: Conference) -> Notification:
    """Build the confirmation sent to an organizer for a new conference."""
    return Notification(
        recipient_email=recipient_email,
        subject="You created a new Conference!",
        body=f"Hi, you have created the following conference.\n{conference.describe()}",
    )


@dataclass
class LoggingNotificationSink(NotificationSink):
    """Sink that only logs, used when no delivery endpoint is configured."""

    async def send(self, recipient_email: str, subject: str, body: str) -> None:
        logger.info(
            "Notification not delivered, no sink configured",
            extra={"recipient": recipient_email, "subject": subject},
        )


@dataclass
class NotificationService:
    """Dispatches notifications without letting failures escape."""

    sink: NotificationSink

    async def deliver(self, notification: Notification) -> bool:
        """Send a notification; return False if the sink failed."""
        try:
            await self.sink.send(
                notification.recipient_email, notification.subject, notification.body
            )
        except Exception:
            logger.exception(
                "Failed to deliver notification",
                extra={"recipient": notification.recipient_email},
            )
            return False
        return True
