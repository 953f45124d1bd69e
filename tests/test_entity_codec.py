"""Tests for stored entity payloads."""

from datetime import date, time

import pytest

from conference_central.adapters.entity_codec import decode, encode
from conference_central.domain.keys import CONFERENCE, SESSION, EntityKey
from conference_central.domain.models import (
    Conference,
    Profile,
    Session,
    SessionType,
    Speaker,
    TeeShirtSize,
)

CONFERENCE_KEY = EntityKey.for_profile("u1").child(CONFERENCE, 3)


def test_profile_payload_stores_sets_as_sorted_lists() -> None:
    profile = Profile(
        user_id="u1",
        display_name="Ada",
        main_email="ada@example.com",
        tee_shirt_size=TeeShirtSize.XL,
        conference_keys_to_attend=frozenset({"b", "a"}),
        session_ids_to_attend=frozenset({9, 2}),
    )

    payload = encode(profile)

    assert payload["conference_keys_to_attend"] == ["a", "b"]
    assert payload["session_ids_to_attend"] == [2, 9]
    assert payload["tee_shirt_size"] == "XL"
    assert decode(profile.key, payload) == profile


def test_conference_payload_uses_iso_dates() -> None:
    conference = Conference(
        key=CONFERENCE_KEY,
        name="PyCon",
        organizer_user_id="u1",
        max_attendees=10,
        seats_available=4,
        topics=("python", "data"),
        start_date=date(2026, 5, 1),
        session_ids=frozenset({7}),
    )

    payload = encode(conference)

    assert payload["start_date"] == "2026-05-01"
    assert payload["end_date"] is None
    assert payload["month"] == 5
    assert decode(CONFERENCE_KEY, payload) == conference


def test_session_payload_keeps_speaker_and_time() -> None:
    session = Session(
        key=CONFERENCE_KEY.child(SESSION, 11),
        name="Keynote",
        speaker=Speaker("Grace", "Hopper"),
        session_type=SessionType.KEYNOTE,
        session_date=date(2026, 5, 2),
        start_time=time(9, 30),
    )

    payload = encode(session)

    assert payload["speaker"] == {"first_name": "Grace", "last_name": "Hopper"}
    assert payload["start_time"] == "09:30:00"
    assert decode(session.key, payload) == session


def test_decode_rejects_unknown_kind() -> None:
    with pytest.raises(ValueError):
        decode(EntityKey(kind="Unknown", id=1), {})
