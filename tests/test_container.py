"""Tests for container wiring."""

import asyncio

import pytest
from pydantic import ValidationError

from conference_central.adapters.memory_store import InMemoryStore
from conference_central.adapters.webhook_notification_sink import (
    HttpxWebhookNotificationSink,
)
from conference_central.config import Settings
from conference_central.containers import build_container
from conference_central.services.notifications import LoggingNotificationSink


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)

    assert isinstance(container.store, InMemoryStore)
    assert isinstance(container.notifications.sink, LoggingNotificationSink)
    assert container.runner.max_attempts == 5
    assert container.announcements.nearly_sold_out_threshold == 5
    asyncio.run(container.close_resources())


def test_build_container_uses_webhook_when_configured(settings) -> None:
    configured = settings.model_copy(
        update={"notification_webhook_url": "https://relay.example.com/send"}
    )

    container = build_container(configured)

    assert isinstance(container.notifications.sink, HttpxWebhookNotificationSink)
    asyncio.run(container.close_resources())


def test_supabase_backend_requires_credentials() -> None:
    with pytest.raises(ValidationError):
        Settings(store_backend="supabase", admin_token="token")


def test_max_attempts_must_be_positive() -> None:
    with pytest.raises(ValidationError):
        Settings(admin_token="token", transaction_max_attempts=0)
