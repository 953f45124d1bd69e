"""Conference registration: booking and releasing seats."""

import logging
from dataclasses import dataclass

from conference_central.domain.errors import (
    AlreadyRegisteredError,
    CapacityExhaustedError,
    ConferenceNotFoundError,
    InvalidKeyError,
    NotRegisteredError,
    ProfileNotFoundError,
)
from conference_central.domain.keys import CONFERENCE, EntityKey, parse_key
from conference_central.domain.models import Conference, Identity
from conference_central.services.profiles import ProfileRepository
from conference_central.services.transactions import (
    Transaction,
    TransactionalStore,
    TransactionRunner,
)

logger = logging.getLogger(__name__)


def load_conference(transaction: Transaction, websafe_key: str) -> Conference:
    """Load a conference inside a transaction or raise NotFound."""
    try:
        key = parse_key(websafe_key, CONFERENCE)
    except InvalidKeyError as exc:
        raise ConferenceNotFoundError(websafe_key) from exc
    conference = transaction.get(key)
    if not isinstance(conference, Conference):
        raise ConferenceNotFoundError(websafe_key)
    return conference


@dataclass
class RegistrationService:
    """Registers and unregisters users, keeping seats and profiles in step."""

    store: TransactionalStore
    runner: TransactionRunner
    profiles: ProfileRepository

    def register(self, identity: Identity, conference_key: str) -> Conference:
        """Book one seat for the caller and add the conference to their profile."""

        def work(transaction: Transaction) -> Conference:
            conference = load_conference(transaction, conference_key)
            profile = self.profiles.get_or_create(
                transaction, identity.user_id, identity.email
            )
            if profile.is_attending(conference.websafe_key):
                raise AlreadyRegisteredError()
            if conference.seats_available <= 0:
                raise CapacityExhaustedError()

            profile.attend(conference.websafe_key)
            conference.book_seats(1)
            transaction.put(profile, conference)
            return conference

        conference = self.runner.run(work)
        logger.info(
            "Registered for conference",
            extra={"user_id": identity.user_id, "conference": str(conference.key)},
        )
        return conference

    def unregister(self, identity: Identity, conference_key: str) -> Conference:
        """Release the caller's seat and drop the conference's sessions
        from their wishlist."""

        def work(transaction: Transaction) -> Conference:
            conference = load_conference(transaction, conference_key)
            profile = self.profiles.get_or_create(
                transaction, identity.user_id, identity.email
            )
            if not profile.is_attending(conference.websafe_key):
                raise NotRegisteredError()

            profile.unattend(conference.websafe_key)
            # Best effort: only ids the conference still lists are removed.
            profile.remove_from_wishlist(conference.session_ids)
            conference.release_seats(1)
            transaction.put(profile, conference)
            return conference

        conference = self.runner.run(work)
        logger.info(
            "Unregistered from conference",
            extra={"user_id": identity.user_id, "conference": str(conference.key)},
        )
        return conference

    def list_attended(self, user_id: str) -> list[Conference]:
        """Return the conferences in the user's attend-set that still exist."""
        profile = self.profiles.fetch(user_id)
        if profile is None:
            raise ProfileNotFoundError(user_id)
        conferences = []
        for websafe_key in sorted(profile.conference_keys_to_attend):
            try:
                key = EntityKey.from_urlsafe(websafe_key)
            except InvalidKeyError:
                logger.warning(
                    "Skipping malformed conference key in profile",
                    extra={"user_id": user_id},
                )
                continue
            conference = self.store.get(key)
            if isinstance(conference, Conference):
                conferences.append(conference)
        return sorted(conferences, key=lambda conference: conference.name)
