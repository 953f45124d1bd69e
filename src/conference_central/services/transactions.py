"""Atomic, retryable work units against the transactional store."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol, TypeVar

from conference_central.domain.errors import (
    CapacityError,
    DomainError,
    TransientFailureError,
    UnexpectedFailureError,
)
from conference_central.domain.keys import EntityKey
from conference_central.domain.models import Entity

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ConcurrencyConflict(Exception):
    """Raised on commit when an entity read by the transaction has changed."""


class Transaction(Protocol):
    """A single optimistic transaction."""

    def get(self, key: EntityKey) -> Entity | None:
        """Return the entity for a key, if present, and track its version."""

    def query(self, kind: str, parent: EntityKey | None = None) -> list[Entity]:
        """Return every entity of a kind, optionally only children of parent."""

    def put(self, *entities: Entity) -> None:
        """Stage entities to be written on commit."""

    def commit(self) -> None:
        """Write staged entities atomically or raise ConcurrencyConflict."""

    def rollback(self) -> None:
        """Discard staged entities."""


class TransactionalStore(Protocol):
    """Store offering optimistic transactions and parent-scoped ids."""

    def begin(self) -> Transaction:
        """Open a new transaction."""

    def get(self, key: EntityKey) -> Entity | None:
        """Read an entity outside of any transaction."""

    def query(self, kind: str, parent: EntityKey | None = None) -> list[Entity]:
        """Query entities outside of any transaction."""

    def allocate_id(self, parent: EntityKey | None, kind: str) -> EntityKey:
        """Reserve a new numeric id of ``kind`` under ``parent``."""


@dataclass
class TransactionRunner:
    """Run work units with a bounded optimistic-concurrency retry loop."""

    store: TransactionalStore
    max_attempts: int = 5

    def run(self, work: Callable[[Transaction], T]) -> T:
        """Run ``work`` in a fresh transaction per attempt and commit it.

        The work must only touch state read through the transaction it is
        given, so any attempt can be replayed from scratch.
        """
        for attempt in range(1, self.max_attempts + 1):
            transaction = self.store.begin()
            try:
                result = work(transaction)
                transaction.commit()
            except ConcurrencyConflict:
                transaction.rollback()
                logger.info(
                    "Transaction conflict, retrying",
                    extra={"attempt": attempt, "max_attempts": self.max_attempts},
                )
                continue
            except CapacityError:
                transaction.rollback()
                logger.error("Capacity ledger invariant violated", exc_info=True)
                raise
            except DomainError:
                transaction.rollback()
                raise
            except Exception as exc:
                transaction.rollback()
                logger.exception("Unexpected failure inside work unit")
                raise UnexpectedFailureError() from exc
            return result

        logger.warning(
            "Transaction retries exhausted", extra={"attempts": self.max_attempts}
        )
        raise TransientFailureError(self.max_attempts)
