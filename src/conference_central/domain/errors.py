"""Domain failure kinds and error codes."""

from enum import Enum


class FailureKind(Enum):
    """Caller-visible failure categories."""

    UNAUTHENTICATED = "UNAUTHENTICATED"
    NOT_FOUND = "NOT_FOUND"
    FORBIDDEN = "FORBIDDEN"
    CONFLICT = "CONFLICT"
    TRANSIENT = "TRANSIENT"
    DEFECT = "DEFECT"


class ErrorCode(Enum):
    """Reason codes, each bound to the failure kind it surfaces as."""

    AUTHORIZATION_REQUIRED = ("AUTHORIZATION_REQUIRED", FailureKind.UNAUTHENTICATED)
    INVALID_KEY = ("INVALID_KEY", FailureKind.NOT_FOUND)
    PROFILE_NOT_FOUND = ("PROFILE_NOT_FOUND", FailureKind.NOT_FOUND)
    CONFERENCE_NOT_FOUND = ("CONFERENCE_NOT_FOUND", FailureKind.NOT_FOUND)
    SESSION_NOT_FOUND = ("SESSION_NOT_FOUND", FailureKind.NOT_FOUND)
    NOT_IN_WISHLIST = ("NOT_IN_WISHLIST", FailureKind.NOT_FOUND)
    NOT_ORGANIZER = ("NOT_ORGANIZER", FailureKind.FORBIDDEN)
    ALREADY_REGISTERED = ("ALREADY_REGISTERED", FailureKind.CONFLICT)
    NO_SEATS_AVAILABLE = ("NO_SEATS_AVAILABLE", FailureKind.CONFLICT)
    NOT_REGISTERED = ("NOT_REGISTERED", FailureKind.CONFLICT)
    DUPLICATE_SESSION_NAME = ("DUPLICATE_SESSION_NAME", FailureKind.CONFLICT)
    ALREADY_IN_WISHLIST = ("ALREADY_IN_WISHLIST", FailureKind.CONFLICT)
    UNEXPECTED_FAILURE = ("UNEXPECTED_FAILURE", FailureKind.CONFLICT)
    RETRIES_EXHAUSTED = ("RETRIES_EXHAUSTED", FailureKind.TRANSIENT)
    CAPACITY_INVARIANT = ("CAPACITY_INVARIANT", FailureKind.DEFECT)

    def __init__(self, label: str, kind: FailureKind) -> None:
        self.label = label
        self.kind = kind


class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    def __init__(self, code: ErrorCode, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message

    @property
    def kind(self) -> FailureKind:
        return self.code.kind

    def __str__(self) -> str:
        return f"{self.code.label}: {self.message}"


class UnauthenticatedError(DomainError):
    """Raised when no identity could be resolved for the caller."""

    def __init__(self) -> None:
        super().__init__(ErrorCode.AUTHORIZATION_REQUIRED, "Authorization required")


class InvalidKeyError(DomainError):
    """Raised when a websafe key cannot be decoded."""

    def __init__(self, value: str) -> None:
        super().__init__(ErrorCode.INVALID_KEY, "Invalid key format")
        self.value = value


class ProfileNotFoundError(DomainError):
    """Raised when a user has no stored profile."""

    def __init__(self, user_id: str) -> None:
        super().__init__(ErrorCode.PROFILE_NOT_FOUND, "Profile doesn't exist")
        self.user_id = user_id


class ConferenceNotFoundError(DomainError):
    """Raised when a conference is not found."""

    def __init__(self, conference_key: str) -> None:
        super().__init__(
            ErrorCode.CONFERENCE_NOT_FOUND,
            f"No conference found with key: {conference_key}",
        )
        self.conference_key = conference_key


class SessionNotFoundError(DomainError):
    """Raised when a session is not found."""

    def __init__(self, session_key: str) -> None:
        super().__init__(
            ErrorCode.SESSION_NOT_FOUND,
            f"No session found with key: {session_key}",
        )
        self.session_key = session_key


class NotInWishlistError(DomainError):
    """Raised when removing a session id the wishlist does not hold."""

    def __init__(self, session_id: int) -> None:
        super().__init__(
            ErrorCode.NOT_IN_WISHLIST,
            f"Session {session_id} is not in the wishlist",
        )
        self.session_id = session_id


class NotOrganizerError(DomainError):
    """Raised when someone other than the organizer modifies a conference."""

    def __init__(self) -> None:
        super().__init__(
            ErrorCode.NOT_ORGANIZER,
            "Only the conference organizer can add sessions",
        )


class AlreadyRegisteredError(DomainError):
    def __init__(self) -> None:
        super().__init__(ErrorCode.ALREADY_REGISTERED, "You have already registered")


class CapacityExhaustedError(DomainError):
    def __init__(self) -> None:
        super().__init__(ErrorCode.NO_SEATS_AVAILABLE, "There are no seats available")


class NotRegisteredError(DomainError):
    def __init__(self) -> None:
        super().__init__(
            ErrorCode.NOT_REGISTERED,
            "You are not registered for this conference",
        )


class DuplicateSessionNameError(DomainError):
    def __init__(self, name: str) -> None:
        super().__init__(
            ErrorCode.DUPLICATE_SESSION_NAME,
            f"A session named {name!r} already exists",
        )
        self.name = name


class AlreadyInWishlistError(DomainError):
    def __init__(self) -> None:
        super().__init__(
            ErrorCode.ALREADY_IN_WISHLIST,
            "Session is already in the wishlist",
        )


class UnexpectedFailureError(DomainError):
    """Raised in place of an unexpected exception inside a work unit."""

    def __init__(self) -> None:
        super().__init__(ErrorCode.UNEXPECTED_FAILURE, "Unexpected failure")


class TransientFailureError(DomainError):
    """Raised when a work unit keeps losing optimistic-concurrency races."""

    def __init__(self, attempts: int) -> None:
        super().__init__(
            ErrorCode.RETRIES_EXHAUSTED,
            "The request could not be completed, please retry",
        )
        self.attempts = attempts


class CapacityError(DomainError):
    """Raised when a seat booking would break the capacity ledger."""

    def __init__(self, requested: int, available: int) -> None:
        super().__init__(
            ErrorCode.CAPACITY_INVARIANT,
            f"Cannot book {requested} seats, only {available} available",
        )
        self.requested = requested
        self.available = available
