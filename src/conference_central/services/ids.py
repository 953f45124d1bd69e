"""Parent-scoped identifier allocation."""

from dataclasses import dataclass

from conference_central.domain.keys import EntityKey
from conference_central.services.transactions import TransactionalStore


@dataclass
class IdentifierAllocator:
    """Hand out unused numeric ids for new child entities."""

    store: TransactionalStore

    def allocate(self, parent: EntityKey, kind: str) -> EntityKey:
        """Return a fresh key of ``kind`` scoped under ``parent``.

        Siblings are never read; uniqueness comes from the store's id space.
        """
        key = self.store.allocate_id(parent, kind)
        if key.parent != parent or key.kind != kind:
            raise RuntimeError(f"Store allocated {key} outside of {parent}")
        return key
