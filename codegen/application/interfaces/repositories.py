"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs or domain value objects only; no
infrastructure imports.
"""

from __future__ import annotations

from types import TracebackType
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from codegen.application.dtos.sequence_counter import SequenceCounterResult
    from codegen.domain.value_objects import CounterKey


# Sequence counter repository interface
class ISequenceCounterRepository(Protocol):
    """Protocol for the persisted sequence counter table (DIP).

    All methods run inside the caller's transaction (see ISequenceUnitOfWork).
    """

    async def get_for_update(self, key: CounterKey) -> SequenceCounterResult | None:
        """Return the counter row for key with a row lock held until commit, or None."""

    async def create(self, key: CounterKey) -> SequenceCounterResult | None:
        """Insert a fresh row (confirmed=0, pending=None) and return it locked.

        Returns None when another transaction created the same key concurrently.
        """

    async def reserve_if_unchanged(
        self, snapshot: SequenceCounterResult, value: int
    ) -> bool:
        """Set pending=value only if confirmed and pending still equal snapshot.

        Returns True if exactly one row was updated; False if another writer won.
        """

    async def confirm_pending(self, key: CounterKey, value: int) -> bool:
        """Move pending=value to confirmed and clear pending.

        Returns True if exactly one row was updated; False if value is not the
        currently pending one.
        """


# Unit of work interface
class ISequenceUnitOfWork(Protocol):
    """One transaction against the counter store.

    Leaving the context without commit() rolls back.
    """

    counters: ISequenceCounterRepository

    async def __aenter__(self) -> ISequenceUnitOfWork: ...

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None: ...

    async def commit(self) -> None:
        """Commit the transaction."""

    async def rollback(self) -> None:
        """Abort the transaction; no mutation made inside it persists."""
