"""Domain models for conferences, sessions and attendee profiles."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, time
from enum import Enum

from conference_central.domain.errors import CapacityError
from conference_central.domain.keys import CONFERENCE, SESSION, EntityKey


class TeeShirtSize(Enum):
    NOT_SPECIFIED = "NOT_SPECIFIED"
    XS = "XS"
    S = "S"
    M = "M"
    L = "L"
    XL = "XL"
    XXL = "XXL"
    XXXL = "XXXL"


class SessionType(Enum):
    NOT_SPECIFIED = "NOT_SPECIFIED"
    LECTURE = "LECTURE"
    KEYNOTE = "KEYNOTE"
    WORKSHOP = "WORKSHOP"


@dataclass
class Profile:
    """A user's profile with the conferences and sessions they follow.

    The attend-set and wishlist are immutable snapshots; they change only
    through the methods below, inside a transaction.
    """

    user_id: str
    display_name: str | None
    main_email: str | None
    tee_shirt_size: TeeShirtSize = TeeShirtSize.NOT_SPECIFIED
    conference_keys_to_attend: frozenset[str] = frozenset()
    session_ids_to_attend: frozenset[int] = frozenset()

    @property
    def key(self) -> EntityKey:
        return EntityKey.for_profile(self.user_id)

    def update(
        self, display_name: str | None, tee_shirt_size: TeeShirtSize | None
    ) -> None:
        """Apply the non-null fields only."""
        if display_name is not None:
            self.display_name = display_name
        if tee_shirt_size is not None:
            self.tee_shirt_size = tee_shirt_size

    def is_attending(self, conference_key: str) -> bool:
        return conference_key in self.conference_keys_to_attend

    def attend(self, conference_key: str) -> None:
        self.conference_keys_to_attend = self.conference_keys_to_attend | {
            conference_key
        }

    def unattend(self, conference_key: str) -> None:
        self.conference_keys_to_attend = self.conference_keys_to_attend - {
            conference_key
        }

    def has_in_wishlist(self, session_id: int) -> bool:
        return session_id in self.session_ids_to_attend

    def add_to_wishlist(self, session_id: int) -> None:
        self.session_ids_to_attend = self.session_ids_to_attend | {session_id}

    def remove_from_wishlist(self, session_ids: Iterable[int]) -> bool:
        """Drop the given ids; return True when at least one was present."""
        remaining = self.session_ids_to_attend - set(session_ids)
        removed = remaining != self.session_ids_to_attend
        self.session_ids_to_attend = remaining
        return removed


@dataclass
class Conference:
    """A capacity-limited event owned by its organizer's profile."""

    key: EntityKey
    name: str
    organizer_user_id: str
    max_attendees: int
    seats_available: int
    description: str | None = None
    topics: tuple[str, ...] = ()
    city: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    session_ids: frozenset[int] = frozenset()

    def __post_init__(self) -> None:
        if self.max_attendees < 0:
            raise ValueError("max_attendees cannot be negative")
        if not 0 <= self.seats_available <= self.max_attendees:
            raise ValueError("seats_available must be within [0, max_attendees]")

    @property
    def id(self) -> int:
        return int(self.key.id)

    @property
    def websafe_key(self) -> str:
        return self.key.urlsafe()

    @property
    def month(self) -> int:
        return self.start_date.month if self.start_date else 0

    def book_seats(self, count: int) -> None:
        if count < 0:
            raise ValueError("Cannot book a negative number of seats")
        if self.seats_available < count:
            raise CapacityError(count, self.seats_available)
        self.seats_available -= count

    def release_seats(self, count: int) -> None:
        if count < 0:
            raise ValueError("Cannot release a negative number of seats")
        # Capped so a double release cannot push past the declared maximum.
        self.seats_available = min(self.max_attendees, self.seats_available + count)

    def add_session(self, session_id: int) -> None:
        self.session_ids = self.session_ids | {session_id}

    def describe(self) -> str:
        parts = [f"Conference {self.name}"]
        if self.city:
            parts.append(f"in {self.city}")
        if self.start_date:
            parts.append(f"starting {self.start_date.isoformat()}")
        if self.topics:
            parts.append(f"on {', '.join(self.topics)}")
        parts.append(f"for up to {self.max_attendees} attendees")
        return " ".join(parts)


@dataclass(frozen=True)
class Speaker:
    first_name: str
    last_name: str

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class Session:
    """A session nested under exactly one conference."""

    key: EntityKey
    name: str
    speaker: Speaker | None = None
    highlights: str | None = None
    duration_minutes: int | None = None
    session_type: SessionType = SessionType.NOT_SPECIFIED
    session_date: date | None = None
    start_time: time | None = None

    def __post_init__(self) -> None:
        if self.key.kind != SESSION or self.key.parent is None:
            raise ValueError("Session keys must be scoped under a conference")
        if self.key.parent.kind != CONFERENCE:
            raise ValueError("Session keys must be scoped under a conference")

    @property
    def id(self) -> int:
        return int(self.key.id)

    @property
    def websafe_key(self) -> str:
        return self.key.urlsafe()

    @property
    def conference_key(self) -> EntityKey:
        return self.key.parent  # type: ignore[return-value]


@dataclass(frozen=True)
class Announcement:
    message: str


@dataclass(frozen=True)
class ConferenceSpec:
    """Organizer-supplied fields for a new conference."""

    name: str
    max_attendees: int = 0
    description: str | None = None
    topics: tuple[str, ...] = ()
    city: str | None = None
    start_date: date | None = None
    end_date: date | None = None


@dataclass(frozen=True)
class SessionSpec:
    """Organizer-supplied fields for a new session."""

    name: str
    speaker: Speaker | None = None
    highlights: str | None = None
    duration_minutes: int | None = None
    session_type: SessionType = SessionType.NOT_SPECIFIED
    session_date: date | None = None
    start_time: time | None = None


@dataclass(frozen=True)
class Identity:
    """Caller identity supplied by the identity resolver."""

    user_id: str
    email: str | None = None


Entity = Profile | Conference | Session
