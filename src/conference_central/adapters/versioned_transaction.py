"""Optimistic transaction shared by the versioned store backends."""

from dataclasses import dataclass, field
from typing import Protocol

from conference_central.domain.keys import EntityKey
from conference_central.domain.models import Entity
from conference_central.services.transactions import Transaction


class VersionedBackend(Protocol):
    """Row-level primitives a store needs to host optimistic transactions."""

    def read(self, key: EntityKey) -> tuple[int, Entity | None]:
        """Return (version, entity); version 0 means the key is absent."""

    def scan(
        self, kind: str, parent: EntityKey | None
    ) -> list[tuple[EntityKey, int, Entity]]:
        """Return (key, version, entity) for every match."""

    def apply(
        self, reads: dict[EntityKey, int], writes: dict[EntityKey, Entity]
    ) -> None:
        """Atomically check read versions and write, or raise ConcurrencyConflict."""


@dataclass
class VersionedTransaction(Transaction):
    """Records the version of everything it reads; writes are staged.

    Repeated reads of one key return the same object, so a work unit can
    mutate what it loaded and put it back.
    """

    backend: VersionedBackend
    _reads: dict[EntityKey, int] = field(default_factory=dict)
    _loaded: dict[EntityKey, Entity | None] = field(default_factory=dict)
    _writes: dict[EntityKey, Entity] = field(default_factory=dict)

    def get(self, key: EntityKey) -> Entity | None:
        if key in self._writes:
            return self._writes[key]
        if key not in self._loaded:
            version, entity = self.backend.read(key)
            self._reads[key] = version
            self._loaded[key] = entity
        return self._loaded[key]

    def query(self, kind: str, parent: EntityKey | None = None) -> list[Entity]:
        results: dict[EntityKey, Entity] = {}
        for key, version, entity in self.backend.scan(kind, parent):
            if key not in self._loaded:
                self._reads[key] = version
                self._loaded[key] = entity
            loaded = self._loaded[key]
            if loaded is not None:
                results[key] = loaded
        for key, entity in self._writes.items():
            if key.kind == kind and (parent is None or key.parent == parent):
                results[key] = entity
        return list(results.values())

    def put(self, *entities: Entity) -> None:
        for entity in entities:
            self._writes[entity.key] = entity

    def commit(self) -> None:
        self.backend.apply(self._reads, self._writes)
        self._writes = {}

    def rollback(self) -> None:
        self._writes = {}
        self._loaded = {}
        self._reads = {}
