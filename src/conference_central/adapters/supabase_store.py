"""Supabase-backed transactional store.

Entities live in one ``entities`` table with a ``version`` column. Reads go
through PostgREST; commits go through the ``commit_entities`` RPC, which
checks every expected version and writes all rows in one database
transaction, returning false when a version no longer matches.
"""

from dataclasses import dataclass

from supabase import Client

from conference_central.adapters.entity_codec import decode, encode
from conference_central.adapters.versioned_transaction import VersionedTransaction
from conference_central.domain.keys import EntityKey
from conference_central.domain.models import Entity
from conference_central.services.transactions import (
    ConcurrencyConflict,
    TransactionalStore,
)

_COLUMNS = "key, version, payload"


@dataclass
class SupabaseStore(TransactionalStore):
    """Supabase implementation of the transactional entity store."""

    client: Client
    table: str = "entities"
    page_size: int = 1000

    def begin(self) -> VersionedTransaction:
        return VersionedTransaction(backend=self)

    def get(self, key: EntityKey) -> Entity | None:
        _, entity = self.read(key)
        return entity

    def query(self, kind: str, parent: EntityKey | None = None) -> list[Entity]:
        return [entity for _, _, entity in self.scan(kind, parent)]

    def allocate_id(self, parent: EntityKey | None, kind: str) -> EntityKey:
        """Reserve an id from the per-kind sequence behind ``allocate_id``."""
        response = self.client.rpc("allocate_id", {"entity_kind": kind}).execute()
        if response.data is None:
            raise RuntimeError(f"Failed to allocate an id for {kind}")
        return EntityKey(kind=kind, id=int(response.data), parent=parent)

    def read(self, key: EntityKey) -> tuple[int, Entity | None]:
        response = (
            self.client.table(self.table)
            .select(_COLUMNS)
            .eq("key", key.urlsafe())
            .limit(1)
            .execute()
        )
        if not response.data:
            return 0, None
        row = response.data[0]
        return int(row["version"]), decode(key, row["payload"])

    def scan(
        self, kind: str, parent: EntityKey | None
    ) -> list[tuple[EntityKey, int, Entity]]:
        """Return every row of ``kind``, paging past the PostgREST row cap."""
        results = []
        offset = 0
        while True:
            query = self.client.table(self.table).select(_COLUMNS).eq("kind", kind)
            if parent is not None:
                query = query.eq("parent_key", parent.urlsafe())
            last = offset + self.page_size - 1
            rows = query.order("key").range(offset, last).execute().data or []
            for row in rows:
                key = EntityKey.from_urlsafe(row["key"])
                results.append((key, int(row["version"]), decode(key, row["payload"])))
            if len(rows) < self.page_size:
                return results
            offset += self.page_size

    def apply(
        self, reads: dict[EntityKey, int], writes: dict[EntityKey, Entity]
    ) -> None:
        """Commit through the RPC; a false result means a stale read."""
        if not writes:
            return
        # Sorted so concurrent commits take row locks in the same order.
        expected = sorted(
            (
                {"key": key.urlsafe(), "version": version}
                for key, version in reads.items()
            ),
            key=lambda item: item["key"],
        )
        rows = [
            {
                "key": key.urlsafe(),
                "kind": key.kind,
                "parent_key": key.parent.urlsafe() if key.parent else None,
                "payload": encode(entity),
            }
            for key, entity in writes.items()
        ]
        response = self.client.rpc(
            "commit_entities", {"expected": expected, "writes": rows}
        ).execute()
        if response.data is not True:
            raise ConcurrencyConflict("Entity versions changed before commit")
