"""In-process transactional store with optimistic concurrency control."""

import copy
import threading
from dataclasses import dataclass

from conference_central.adapters.versioned_transaction import VersionedTransaction
from conference_central.domain.keys import EntityKey
from conference_central.domain.models import Entity
from conference_central.services.transactions import (
    ConcurrencyConflict,
    TransactionalStore,
)


@dataclass
class _Record:
    version: int
    entity: Entity


class InMemoryStore(TransactionalStore):
    """Versioned entity map; transactions validate their read set on commit.

    Entities are copied on the way in and out, so a transaction only ever
    mutates its private copies until it commits.
    """

    def __init__(self) -> None:
        self._records: dict[EntityKey, _Record] = {}
        self._counters: dict[str, int] = {}
        self._lock = threading.Lock()

    def begin(self) -> VersionedTransaction:
        return VersionedTransaction(backend=self)

    def get(self, key: EntityKey) -> Entity | None:
        _, entity = self.read(key)
        return entity

    def query(self, kind: str, parent: EntityKey | None = None) -> list[Entity]:
        return [entity for _, _, entity in self.scan(kind, parent)]

    def allocate_id(self, parent: EntityKey | None, kind: str) -> EntityKey:
        with self._lock:
            next_id = self._counters.get(kind, 0) + 1
            self._counters[kind] = next_id
        return EntityKey(kind=kind, id=next_id, parent=parent)

    def version(self, key: EntityKey) -> int:
        """Return the committed version of a key; 0 when absent."""
        with self._lock:
            record = self._records.get(key)
            return record.version if record else 0

    def read(self, key: EntityKey) -> tuple[int, Entity | None]:
        with self._lock:
            record = self._records.get(key)
            if record is None:
                return 0, None
            return record.version, copy.deepcopy(record.entity)

    def scan(
        self, kind: str, parent: EntityKey | None
    ) -> list[tuple[EntityKey, int, Entity]]:
        with self._lock:
            return [
                (key, record.version, copy.deepcopy(record.entity))
                for key, record in self._records.items()
                if key.kind == kind and (parent is None or key.parent == parent)
            ]

    def apply(
        self, reads: dict[EntityKey, int], writes: dict[EntityKey, Entity]
    ) -> None:
        """Commit ``writes`` if every key in ``reads`` is still at its version."""
        with self._lock:
            for key, seen_version in reads.items():
                record = self._records.get(key)
                current = record.version if record else 0
                if current != seen_version:
                    raise ConcurrencyConflict(f"{key} changed since it was read")
            for key, entity in writes.items():
                record = self._records.get(key)
                version = record.version + 1 if record else 1
                self._records[key] = _Record(version, copy.deepcopy(entity))

