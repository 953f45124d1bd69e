"""JSON payload encoding for stored entities."""

from datetime import date, time

from conference_central.domain.keys import CONFERENCE, PROFILE, SESSION, EntityKey
from conference_central.domain.models import (
    Conference,
    Entity,
    Profile,
    Session,
    SessionType,
    Speaker,
    TeeShirtSize,
)


def encode(entity: Entity) -> dict[str, object]:
    """Return the JSON payload for an entity (its key is stored separately)."""
    if isinstance(entity, Profile):
        return {
            "display_name": entity.display_name,
            "main_email": entity.main_email,
            "tee_shirt_size": entity.tee_shirt_size.value,
            "conference_keys_to_attend": sorted(entity.conference_keys_to_attend),
            "session_ids_to_attend": sorted(entity.session_ids_to_attend),
        }
    if isinstance(entity, Conference):
        return {
            "name": entity.name,
            "organizer_user_id": entity.organizer_user_id,
            "max_attendees": entity.max_attendees,
            "seats_available": entity.seats_available,
            "description": entity.description,
            "topics": list(entity.topics),
            "city": entity.city,
            "start_date": _iso(entity.start_date),
            "end_date": _iso(entity.end_date),
            "month": entity.month,
            "session_ids": sorted(entity.session_ids),
        }
    if isinstance(entity, Session):
        return {
            "name": entity.name,
            "speaker": (
                {
                    "first_name": entity.speaker.first_name,
                    "last_name": entity.speaker.last_name,
                }
                if entity.speaker
                else None
            ),
            "highlights": entity.highlights,
            "duration_minutes": entity.duration_minutes,
            "session_type": entity.session_type.value,
            "session_date": _iso(entity.session_date),
            "start_time": _iso(entity.start_time),
        }
    raise TypeError(f"Unsupported entity type: {type(entity).__name__}")


def decode(key: EntityKey, payload: dict[str, object]) -> Entity:
    """Rebuild an entity from its key and stored payload."""
    if key.kind == PROFILE:
        return Profile(
            user_id=str(key.id),
            display_name=payload.get("display_name"),
            main_email=payload.get("main_email"),
            tee_shirt_size=TeeShirtSize(
                payload.get("tee_shirt_size", TeeShirtSize.NOT_SPECIFIED.value)
            ),
            conference_keys_to_attend=frozenset(
                payload.get("conference_keys_to_attend") or []
            ),
            session_ids_to_attend=frozenset(
                int(value) for value in payload.get("session_ids_to_attend") or []
            ),
        )
    if key.kind == CONFERENCE:
        return Conference(
            key=key,
            name=str(payload["name"]),
            organizer_user_id=str(payload["organizer_user_id"]),
            max_attendees=int(payload["max_attendees"]),
            seats_available=int(payload["seats_available"]),
            description=payload.get("description"),
            topics=tuple(payload.get("topics") or ()),
            city=payload.get("city"),
            start_date=_parse_date(payload.get("start_date")),
            end_date=_parse_date(payload.get("end_date")),
            session_ids=frozenset(
                int(value) for value in payload.get("session_ids") or []
            ),
        )
    if key.kind == SESSION:
        speaker = payload.get("speaker")
        return Session(
            key=key,
            name=str(payload["name"]),
            speaker=Speaker(**speaker) if isinstance(speaker, dict) else None,
            highlights=payload.get("highlights"),
            duration_minutes=payload.get("duration_minutes"),
            session_type=SessionType(
                payload.get("session_type", SessionType.NOT_SPECIFIED.value)
            ),
            session_date=_parse_date(payload.get("session_date")),
            start_time=(
                time.fromisoformat(payload["start_time"])
                if payload.get("start_time")
                else None
            ),
        )
    raise ValueError(f"Unknown entity kind: {key.kind}")


def _iso(value: date | time | None) -> str | None:
    return value.isoformat() if value is not None else None


def _parse_date(value: object) -> date | None:
    return date.fromisoformat(value) if isinstance(value, str) else None
