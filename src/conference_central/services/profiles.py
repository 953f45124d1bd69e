"""Profile lifecycle: lazy creation and partial updates."""

from dataclasses import dataclass

from conference_central.domain.keys import EntityKey
from conference_central.domain.models import Identity, Profile, TeeShirtSize
from conference_central.services.transactions import (
    Transaction,
    TransactionalStore,
    TransactionRunner,
)


def default_display_name(email: str | None) -> str | None:
    """Derive a display name from the local part of an email address."""
    if email is None:
        return None
    local, _, _ = email.partition("@")
    return local


@dataclass
class ProfileRepository:
    """Get-or-create and update operations for profiles."""

    store: TransactionalStore
    runner: TransactionRunner

    def get_or_create(
        self,
        transaction: Transaction,
        user_id: str,
        email: str | None,
        display_name: str | None = None,
    ) -> Profile:
        """Load the profile through ``transaction`` or build a fresh one.

        A fresh profile is not persisted here; the caller puts it inside its
        own work unit.
        """
        existing = transaction.get(EntityKey.for_profile(user_id))
        if isinstance(existing, Profile):
            return existing
        return Profile(
            user_id=user_id,
            display_name=display_name or default_display_name(email),
            main_email=email,
            tee_shirt_size=TeeShirtSize.NOT_SPECIFIED,
        )

    def upsert(
        self,
        identity: Identity,
        display_name: str | None = None,
        tee_shirt_size: TeeShirtSize | None = None,
    ) -> Profile:
        """Create or update the caller's profile, applying non-null fields."""

        def work(transaction: Transaction) -> Profile:
            profile = self.get_or_create(
                transaction, identity.user_id, identity.email, display_name
            )
            profile.update(display_name, tee_shirt_size)
            transaction.put(profile)
            return profile

        return self.runner.run(work)

    def fetch(self, user_id: str) -> Profile | None:
        """Return the stored profile, if any."""
        profile = self.store.get(EntityKey.for_profile(user_id))
        return profile if isinstance(profile, Profile) else None
