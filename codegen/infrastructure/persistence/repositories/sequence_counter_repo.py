"""Sequence counter repository: locked reads and conditional updates on code_sequence."""

from typing import Any

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from codegen.application.dtos.sequence_counter import SequenceCounterResult
from codegen.domain.value_objects import CounterKey
from codegen.infrastructure.persistence.models.code_sequence import CodeSequence
from codegen.infrastructure.persistence.repositories.base import BaseRepository
from codegen.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


def _to_result(row: CodeSequence) -> SequenceCounterResult:
    return SequenceCounterResult(
        id=row.id,
        date_key=row.date_key,
        type_code=row.type,
        location_code=row.location,
        confirmed=row.confirmed,
        pending=row.pending,
    )


def _key_clause(key: CounterKey) -> tuple[Any, ...]:
    return (
        CodeSequence.date_key == key.date_key,
        CodeSequence.type == key.type_code,
        CodeSequence.location == key.location_code,
    )


class SequenceCounterRepository(BaseRepository[CodeSequence]):
    """SQL implementation of ISequenceCounterRepository.

    Every write is a single conditional UPDATE whose rowcount decides the
    outcome; ORM instances are never mutated, and reads always repopulate
    from the database so a snapshot reflects the row at lock time.
    """

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, CodeSequence)

    async def get_for_update(self, key: CounterKey) -> SequenceCounterResult | None:
        """SELECT ... FOR UPDATE on the key's row (lock held until the transaction ends)."""
        result = await self.db.execute(
            select(CodeSequence)
            .where(*_key_clause(key))
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        row = result.scalar_one_or_none()
        return _to_result(row) if row else None

    async def create(self, key: CounterKey) -> SequenceCounterResult | None:  # type: ignore[override]
        """Insert (confirmed=0, pending=NULL) inside a savepoint.

        Returns None if a concurrent transaction created the same key first
        (unique constraint); the outer transaction stays usable.
        """
        row = CodeSequence(
            date_key=key.date_key,
            type=key.type_code,
            location=key.location_code,
            confirmed=0,
            pending=None,
        )
        try:
            async with self.db.begin_nested():
                row = await super().create(row)
        except IntegrityError:
            logger.info("Sequence record %s already created concurrently", key)
            return None
        return _to_result(row)

    async def reserve_if_unchanged(
        self, snapshot: SequenceCounterResult, value: int
    ) -> bool:
        """UPDATE pending=value WHERE id, confirmed and pending still match snapshot."""
        pending_matches = (
            CodeSequence.pending.is_(None)
            if snapshot.pending is None
            else CodeSequence.pending == snapshot.pending
        )
        result = await self.db.execute(
            update(CodeSequence)
            .where(
                CodeSequence.id == snapshot.id,
                CodeSequence.confirmed == snapshot.confirmed,
                pending_matches,
            )
            .values(pending=value)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def confirm_pending(self, key: CounterKey, value: int) -> bool:
        """UPDATE confirmed=value, pending=NULL WHERE key matches AND pending=value."""
        result = await self.db.execute(
            update(CodeSequence)
            .where(*_key_clause(key), CodeSequence.pending == value)
            .values(confirmed=value, pending=None)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
