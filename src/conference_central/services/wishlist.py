"""Per-user session wishlists."""

from dataclasses import dataclass

from conference_central.domain.errors import (
    AlreadyInWishlistError,
    InvalidKeyError,
    NotInWishlistError,
    SessionNotFoundError,
)
from conference_central.domain.keys import SESSION, EntityKey, parse_key
from conference_central.domain.models import Identity, Session
from conference_central.services.profiles import ProfileRepository
from conference_central.services.transactions import (
    Transaction,
    TransactionalStore,
    TransactionRunner,
)


def _session_key(websafe_key: str) -> EntityKey:
    try:
        return parse_key(websafe_key, SESSION)
    except InvalidKeyError as exc:
        raise SessionNotFoundError(websafe_key) from exc


@dataclass
class WishlistService:
    """Add, remove and list sessions a user wants to attend."""

    store: TransactionalStore
    runner: TransactionRunner
    profiles: ProfileRepository

    def add(self, identity: Identity, session_key: str) -> Session:
        """Add a session to the caller's wishlist; attendance is not required."""

        def work(transaction: Transaction) -> Session:
            session = transaction.get(_session_key(session_key))
            if not isinstance(session, Session):
                raise SessionNotFoundError(session_key)
            profile = self.profiles.get_or_create(
                transaction, identity.user_id, identity.email
            )
            if profile.has_in_wishlist(session.id):
                raise AlreadyInWishlistError()
            profile.add_to_wishlist(session.id)
            transaction.put(profile)
            return session

        return self.runner.run(work)

    def remove(self, identity: Identity, session_key: str) -> None:
        """Remove a session from the caller's wishlist."""
        key = _session_key(session_key)
        session_id = int(key.id)

        def work(transaction: Transaction) -> None:
            profile = self.profiles.get_or_create(
                transaction, identity.user_id, identity.email
            )
            if not profile.remove_from_wishlist([session_id]):
                raise NotInWishlistError(session_id)
            transaction.put(profile)

        self.runner.run(work)

    def list_wishlist(self, identity: Identity) -> list[Session]:
        """Return every stored session whose id is in the caller's wishlist."""
        profile = self.profiles.fetch(identity.user_id)
        wanted = profile.session_ids_to_attend if profile else frozenset()
        sessions = [
            session
            for session in self.store.query(SESSION)
            if isinstance(session, Session) and session.id in wanted
        ]
        return sorted(sessions, key=lambda session: session.name)
