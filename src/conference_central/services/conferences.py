"""Conference creation and lookup."""

import logging
from dataclasses import dataclass

from conference_central.domain.errors import ConferenceNotFoundError, InvalidKeyError
from conference_central.domain.keys import CONFERENCE, EntityKey, parse_key
from conference_central.domain.models import Conference, ConferenceSpec, Identity
from conference_central.services.ids import IdentifierAllocator
from conference_central.services.notifications import (
    NotificationService,
    confirmation_message,
)
from conference_central.services.profiles import ProfileRepository
from conference_central.services.transactions import (
    Transaction,
    TransactionalStore,
    TransactionRunner,
)

logger = logging.getLogger(__name__)


@dataclass
class ConferenceService:
    """Application service for conference lifecycle actions."""

    store: TransactionalStore
    runner: TransactionRunner
    allocator: IdentifierAllocator
    profiles: ProfileRepository
    notifications: NotificationService

    async def create(self, identity: Identity, spec: ConferenceSpec) -> Conference:
        """Create a conference owned by the caller and notify them."""
        profile_key = EntityKey.for_profile(identity.user_id)
        conference_key = self.allocator.allocate(profile_key, CONFERENCE)

        def work(transaction: Transaction) -> tuple[Conference, str | None]:
            profile = self.profiles.get_or_create(
                transaction, identity.user_id, identity.email
            )
            conference = Conference(
                key=conference_key,
                name=spec.name,
                organizer_user_id=identity.user_id,
                max_attendees=spec.max_attendees,
                seats_available=spec.max_attendees,
                description=spec.description,
                topics=spec.topics,
                city=spec.city,
                start_date=spec.start_date,
                end_date=spec.end_date,
            )
            transaction.put(conference, profile)
            return conference, profile.main_email

        conference, email = self.runner.run(work)
        logger.info(
            "Created conference",
            extra={"organizer": identity.user_id, "conference": str(conference.key)},
        )
        if email:
            await self.notifications.deliver(confirmation_message(email, conference))
        return conference

    def get(self, conference_key: str) -> Conference:
        """Return a conference by websafe key."""
        try:
            key = parse_key(conference_key, CONFERENCE)
        except InvalidKeyError as exc:
            raise ConferenceNotFoundError(conference_key) from exc
        conference = self.store.get(key)
        if not isinstance(conference, Conference):
            raise ConferenceNotFoundError(conference_key)
        return conference

    def list_all(self) -> list[Conference]:
        """Return every conference ordered by name."""
        return self._sorted(self.store.query(CONFERENCE))

    def list_owned_by(self, user_id: str) -> list[Conference]:
        """Return the conferences created by a user, ordered by name."""
        return self._sorted(
            self.store.query(CONFERENCE, parent=EntityKey.for_profile(user_id))
        )

    def list_nearly_sold_out(self, threshold: int) -> list[Conference]:
        """Return conferences with a few seats left, but not none."""
        return [
            conference
            for conference in self.list_all()
            if 0 < conference.seats_available <= threshold
        ]

    @staticmethod
    def _sorted(entities: list) -> list[Conference]:
        conferences = [entity for entity in entities if isinstance(entity, Conference)]
        return sorted(conferences, key=lambda conference: conference.name)
