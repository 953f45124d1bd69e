"""Webhook notification sink adapter."""

from dataclasses import dataclass

import httpx

from conference_central.services.notifications import NotificationSink


@dataclass
class HttpxWebhookNotificationSink(NotificationSink):
    """Posts notifications as JSON to a mail-relay webhook."""

    url: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, url: str) -> "HttpxWebhookNotificationSink":
        """Create a sink with a managed httpx session."""
        return cls(url=url, http_client=httpx.AsyncClient())

    async def send(self, recipient_email: str, subject: str, body: str) -> None:
        """Hand the message to the webhook; delivery is the relay's concern."""
        payload = {"email": recipient_email, "subject": subject, "body": body}
        response = await self.http_client.post(self.url, json=payload, timeout=10)
        response.raise_for_status()

    async def close(self) -> None:
        """Close the underlying HTTP client session."""
        await self.http_client.aclose()
