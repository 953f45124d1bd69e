"""Pydantic request and response models."""

from datetime import date, time

from pydantic import BaseModel, Field

from conference_central.domain.models import (
    Conference,
    ConferenceSpec,
    Profile,
    Session,
    SessionSpec,
    SessionType,
    Speaker,
    TeeShirtSize,
)


class ProfileForm(BaseModel):
    """Fields a user may set on their profile; nulls leave values unchanged."""

    display_name: str | None = None
    tee_shirt_size: TeeShirtSize | None = None


class ProfileOut(BaseModel):
    user_id: str
    display_name: str | None
    main_email: str | None
    tee_shirt_size: TeeShirtSize
    conference_keys_to_attend: list[str]
    session_ids_to_attend: list[int]

    @classmethod
    def from_domain(cls, profile: Profile) -> "ProfileOut":
        return cls(
            user_id=profile.user_id,
            display_name=profile.display_name,
            main_email=profile.main_email,
            tee_shirt_size=profile.tee_shirt_size,
            conference_keys_to_attend=sorted(profile.conference_keys_to_attend),
            session_ids_to_attend=sorted(profile.session_ids_to_attend),
        )


class ConferenceForm(BaseModel):
    name: str = Field(min_length=1)
    description: str | None = None
    topics: list[str] = Field(default_factory=list)
    city: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    max_attendees: int = Field(default=0, ge=0)

    def to_spec(self) -> ConferenceSpec:
        return ConferenceSpec(
            name=self.name,
            max_attendees=self.max_attendees,
            description=self.description,
            topics=tuple(self.topics),
            city=self.city,
            start_date=self.start_date,
            end_date=self.end_date,
        )


class ConferenceOut(BaseModel):
    websafe_key: str
    id: int
    name: str
    organizer_user_id: str
    description: str | None
    topics: list[str]
    city: str | None
    start_date: date | None
    end_date: date | None
    month: int
    max_attendees: int
    seats_available: int

    @classmethod
    def from_domain(cls, conference: Conference) -> "ConferenceOut":
        return cls(
            websafe_key=conference.websafe_key,
            id=conference.id,
            name=conference.name,
            organizer_user_id=conference.organizer_user_id,
            description=conference.description,
            topics=list(conference.topics),
            city=conference.city,
            start_date=conference.start_date,
            end_date=conference.end_date,
            month=conference.month,
            max_attendees=conference.max_attendees,
            seats_available=conference.seats_available,
        )


class SpeakerModel(BaseModel):
    first_name: str
    last_name: str


class SessionForm(BaseModel):
    name: str = Field(min_length=1)
    speaker: SpeakerModel | None = None
    highlights: str | None = None
    duration_minutes: int | None = Field(default=None, ge=0)
    session_type: SessionType = SessionType.NOT_SPECIFIED
    session_date: date | None = None
    start_time: time | None = None

    def to_spec(self) -> SessionSpec:
        return SessionSpec(
            name=self.name,
            speaker=(
                Speaker(self.speaker.first_name, self.speaker.last_name)
                if self.speaker
                else None
            ),
            highlights=self.highlights,
            duration_minutes=self.duration_minutes,
            session_type=self.session_type,
            session_date=self.session_date,
            start_time=self.start_time,
        )


class SessionOut(BaseModel):
    websafe_key: str
    id: int
    conference_key: str
    name: str
    speaker: SpeakerModel | None
    highlights: str | None
    duration_minutes: int | None
    session_type: SessionType
    session_date: date | None
    start_time: time | None

    @classmethod
    def from_domain(cls, session: Session) -> "SessionOut":
        return cls(
            websafe_key=session.websafe_key,
            id=session.id,
            conference_key=session.conference_key.urlsafe(),
            name=session.name,
            speaker=(
                SpeakerModel(
                    first_name=session.speaker.first_name,
                    last_name=session.speaker.last_name,
                )
                if session.speaker
                else None
            ),
            highlights=session.highlights,
            duration_minutes=session.duration_minutes,
            session_type=session.session_type,
            session_date=session.session_date,
            start_time=session.start_time,
        )


class ResultOut(BaseModel):
    """Boolean outcome of a state-changing call."""

    result: bool
    reason: str = ""


class AnnouncementOut(BaseModel):
    message: str


class ErrorOut(BaseModel):
    code: str
    detail: str
