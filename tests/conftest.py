"""Shared test fixtures."""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field

import pytest

from conference_central.adapters.memory_store import InMemoryStore
from conference_central.config import Settings
from conference_central.containers import AppContainer, build_container
from conference_central.domain.keys import EntityKey
from conference_central.domain.models import (
    Conference,
    ConferenceSpec,
    Entity,
    Identity,
    Session,
    SessionSpec,
    SessionType,
    Speaker,
)
from conference_central.services.notifications import NotificationSink


@dataclass
class RecordingNotificationSink(NotificationSink):
    """Fake sink that records sent messages."""

    sent: list[tuple[str, str, str]] = field(default_factory=list)

    async def send(self, recipient_email: str, subject: str, body: str) -> None:
        self.sent.append((recipient_email, subject, body))


@dataclass
class FailingNotificationSink(NotificationSink):
    """Fake sink whose delivery always fails."""

    async def send(self, recipient_email: str, subject: str, body: str) -> None:
        raise ConnectionError("relay unavailable")


class InterleavingStore(InMemoryStore):
    """In-memory store that runs a competing action before the first commit.

    Lets a test force a conflict between two work units deterministically.
    """

    def __init__(self) -> None:
        super().__init__()
        self.before_first_commit: Callable[[], None] | None = None
        self.apply_calls = 0

    def apply(
        self, reads: dict[EntityKey, int], writes: dict[EntityKey, Entity]
    ) -> None:
        self.apply_calls += 1
        competitor, self.before_first_commit = self.before_first_commit, None
        if competitor is not None:
            competitor()
        super().apply(reads, writes)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        store_backend="memory",
        admin_token="admin-token",
        transaction_max_attempts=5,
        nearly_sold_out_threshold=5,
    )


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def sink() -> RecordingNotificationSink:
    return RecordingNotificationSink()


@pytest.fixture
def container(
    settings: Settings,
    store: InMemoryStore,
    sink: RecordingNotificationSink,
) -> AppContainer:
    return build_container(settings, store=store, sink=sink)


@pytest.fixture
def organizer() -> Identity:
    return Identity(user_id="organizer-1", email="olga@example.com")


@pytest.fixture
def attendee() -> Identity:
    return Identity(user_id="attendee-1", email="ada@example.com")


def create_conference(
    container: AppContainer,
    organizer: Identity,
    name: str = "PyCon",
    max_attendees: int = 10,
) -> Conference:
    spec = ConferenceSpec(name=name, max_attendees=max_attendees, city="Berlin")
    return asyncio.run(container.conferences.create(organizer, spec))


def create_session(
    container: AppContainer,
    organizer: Identity,
    conference: Conference,
    name: str = "Intro",
    session_type: SessionType = SessionType.LECTURE,
    speaker: Speaker | None = None,
) -> Session:
    spec = SessionSpec(name=name, session_type=session_type, speaker=speaker)
    return container.catalog.create_session(
        organizer, conference.websafe_key, spec
    )
