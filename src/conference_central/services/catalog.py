"""Session catalog for conferences."""

import logging
from dataclasses import dataclass

from conference_central.domain.errors import (
    ConferenceNotFoundError,
    DuplicateSessionNameError,
    InvalidKeyError,
    NotOrganizerError,
)
from conference_central.domain.keys import CONFERENCE, SESSION, parse_key
from conference_central.domain.models import (
    Conference,
    Identity,
    Session,
    SessionSpec,
    SessionType,
)
from conference_central.services.ids import IdentifierAllocator
from conference_central.services.registration import load_conference
from conference_central.services.transactions import (
    Transaction,
    TransactionalStore,
    TransactionRunner,
)

logger = logging.getLogger(__name__)


@dataclass
class SessionCatalog:
    """Creates and lists sessions nested under conferences."""

    store: TransactionalStore
    runner: TransactionRunner
    allocator: IdentifierAllocator

    def create_session(
        self, identity: Identity, conference_key: str, spec: SessionSpec
    ) -> Session:
        """Create a session under a conference the caller organizes."""

        def work(transaction: Transaction) -> Session:
            conference = load_conference(transaction, conference_key)
            if conference.organizer_user_id != identity.user_id:
                raise NotOrganizerError()
            for existing in transaction.query(SESSION, parent=conference.key):
                if isinstance(existing, Session) and existing.name == spec.name:
                    raise DuplicateSessionNameError(spec.name)

            session_key = self.allocator.allocate(conference.key, SESSION)
            session = Session(
                key=session_key,
                name=spec.name,
                speaker=spec.speaker,
                highlights=spec.highlights,
                duration_minutes=spec.duration_minutes,
                session_type=spec.session_type,
                session_date=spec.session_date,
                start_time=spec.start_time,
            )
            conference.add_session(session.id)
            transaction.put(session, conference)
            return session

        session = self.runner.run(work)
        logger.info(
            "Created session",
            extra={"organizer": identity.user_id, "session": str(session.key)},
        )
        return session

    def list_sessions(
        self, conference_key: str, session_type: SessionType | None = None
    ) -> list[Session]:
        """Return the sessions of a conference, optionally of one type."""
        conference = self._get_conference(conference_key)
        sessions = [
            session
            for session in self.store.query(SESSION, parent=conference.key)
            if isinstance(session, Session)
            and (session_type is None or session.session_type == session_type)
        ]
        return sorted(sessions, key=lambda session: session.name)

    def list_by_speaker(self, first_name: str, last_name: str) -> list[Session]:
        """Return sessions given by one speaker across all conferences."""
        sessions = [
            session
            for session in self.store.query(SESSION)
            if isinstance(session, Session)
            and session.speaker is not None
            and session.speaker.first_name == first_name
            and session.speaker.last_name == last_name
        ]
        return sorted(sessions, key=lambda session: session.name)

    def _get_conference(self, conference_key: str) -> Conference:
        try:
            key = parse_key(conference_key, CONFERENCE)
        except InvalidKeyError as exc:
            raise ConferenceNotFoundError(conference_key) from exc
        conference = self.store.get(key)
        if not isinstance(conference, Conference):
            raise ConferenceNotFoundError(conference_key)
        return conference
