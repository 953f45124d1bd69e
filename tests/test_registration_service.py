"""Tests for conference registration."""

import threading

import pytest

from conference_central.config import Settings
from conference_central.containers import AppContainer, build_container
from conference_central.domain.errors import (
    AlreadyRegisteredError,
    CapacityExhaustedError,
    ConferenceNotFoundError,
    DomainError,
    NotRegisteredError,
    ProfileNotFoundError,
)
from conference_central.domain.keys import CONFERENCE, EntityKey
from conference_central.domain.models import Conference, Identity
from tests.conftest import (
    InterleavingStore,
    RecordingNotificationSink,
    create_conference,
    create_session,
)


def _stored(container: AppContainer, conference: Conference) -> Conference:
    stored = container.store.get(conference.key)
    assert isinstance(stored, Conference)
    return stored


def test_register_books_a_seat_and_records_attendance(
    container, organizer, attendee
) -> None:
    conference = create_conference(container, organizer, max_attendees=10)

    result = container.registration.register(attendee, conference.websafe_key)

    assert result.seats_available == 9
    assert _stored(container, conference).seats_available == 9
    profile = container.profiles.fetch(attendee.user_id)
    assert profile is not None
    assert profile.is_attending(conference.websafe_key)
    assert profile.display_name == "ada"


def test_register_twice_is_rejected_without_booking(
    container, organizer, attendee
) -> None:
    conference = create_conference(container, organizer, max_attendees=10)
    container.registration.register(attendee, conference.websafe_key)

    with pytest.raises(AlreadyRegisteredError):
        container.registration.register(attendee, conference.websafe_key)

    assert _stored(container, conference).seats_available == 9


def test_register_then_unregister_restores_state(
    container, organizer, attendee
) -> None:
    conference = create_conference(container, organizer, max_attendees=10)

    container.registration.register(attendee, conference.websafe_key)
    container.registration.unregister(attendee, conference.websafe_key)

    assert _stored(container, conference).seats_available == 10
    profile = container.profiles.fetch(attendee.user_id)
    assert profile is not None
    assert profile.conference_keys_to_attend == frozenset()


def test_unregister_requires_registration(container, organizer, attendee) -> None:
    conference = create_conference(container, organizer)

    with pytest.raises(NotRegisteredError):
        container.registration.unregister(attendee, conference.websafe_key)

    assert _stored(container, conference).seats_available == 10


def test_register_when_full_is_rejected(container, organizer, attendee) -> None:
    conference = create_conference(container, organizer, max_attendees=1)
    container.registration.register(
        Identity(user_id="early-bird"), conference.websafe_key
    )

    with pytest.raises(CapacityExhaustedError):
        container.registration.register(attendee, conference.websafe_key)

    assert _stored(container, conference).seats_available == 0
    assert container.profiles.fetch(attendee.user_id) is None


@pytest.mark.parametrize(
    "websafe_key",
    [
        "garbage",
        EntityKey.for_profile("nobody").child(CONFERENCE, 999).urlsafe(),
        EntityKey.for_profile("nobody").urlsafe(),
    ],
)
def test_register_unknown_conference(container, attendee, websafe_key: str) -> None:
    with pytest.raises(ConferenceNotFoundError):
        container.registration.register(attendee, websafe_key)


def test_unregister_removes_the_conference_sessions_from_wishlist(
    container, organizer, attendee
) -> None:
    conference = create_conference(container, organizer, name="PyCon")
    other = create_conference(container, organizer, name="EuroPython")
    keynote = create_session(container, organizer, conference, name="Keynote")
    talk = create_session(container, organizer, conference, name="Talk")
    elsewhere = create_session(container, organizer, other, name="Elsewhere")
    container.registration.register(attendee, conference.websafe_key)
    for session in (keynote, talk, elsewhere):
        container.wishlist.add(attendee, session.websafe_key)

    container.registration.unregister(attendee, conference.websafe_key)

    profile = container.profiles.fetch(attendee.user_id)
    assert profile is not None
    assert profile.session_ids_to_attend == frozenset({elsewhere.id})


def test_last_seat_goes_to_exactly_one_of_two_racing_users(
    settings: Settings, organizer, attendee
) -> None:
    store = InterleavingStore()
    container = build_container(
        settings, store=store, sink=RecordingNotificationSink()
    )
    conference = create_conference(container, organizer, max_attendees=1)
    rival = Identity(user_id="rival", email="rival@example.com")
    store.before_first_commit = lambda: container.registration.register(
        rival, conference.websafe_key
    )

    with pytest.raises(CapacityExhaustedError):
        container.registration.register(attendee, conference.websafe_key)

    assert _stored(container, conference).seats_available == 0
    rival_profile = container.profiles.fetch(rival.user_id)
    assert rival_profile is not None
    assert rival_profile.is_attending(conference.websafe_key)
    assert container.profiles.fetch(attendee.user_id) is None


def test_concurrent_registrations_never_overbook(settings: Settings, organizer) -> None:
    container = build_container(
        settings.model_copy(update={"transaction_max_attempts": 200}),
        sink=RecordingNotificationSink(),
    )
    conference = create_conference(container, organizer, max_attendees=5)
    outcomes: list[str] = []
    lock = threading.Lock()

    def attempt(user_id: str) -> None:
        try:
            container.registration.register(
                Identity(user_id=user_id), conference.websafe_key
            )
            outcome = "registered"
        except CapacityExhaustedError:
            outcome = "full"
        except DomainError as exc:
            outcome = exc.code.label
        with lock:
            outcomes.append(outcome)

    threads = [
        threading.Thread(target=attempt, args=(f"user-{index}",)) for index in range(20)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert outcomes.count("registered") == 5
    assert outcomes.count("full") == 15
    assert _stored(container, conference).seats_available == 0


def test_list_attended_returns_registered_conferences(
    container, organizer, attendee
) -> None:
    first = create_conference(container, organizer, name="Zeta")
    second = create_conference(container, organizer, name="Alpha")
    create_conference(container, organizer, name="Skipped")
    container.registration.register(attendee, first.websafe_key)
    container.registration.register(attendee, second.websafe_key)

    attended = container.registration.list_attended(attendee.user_id)

    assert [conference.name for conference in attended] == ["Alpha", "Zeta"]


def test_list_attended_without_profile(container) -> None:
    with pytest.raises(ProfileNotFoundError):
        container.registration.list_attended("stranger")
