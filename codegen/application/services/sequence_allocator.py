"""Sequence allocation: reserve and confirm values on a keyed counter row.

Reserve reads the row under a row lock, then writes pending=candidate with a
conditional update guarded by the confirmed/pending snapshot, so a stale
writer can never overwrite a newer reservation even if the lock is weaker
than expected. Confirm only collapses the currently pending value into
confirmed; abandoned reservations leave gaps instead of duplicates.
"""

from codegen.application.dtos.sequence_counter import ReservationOutcome
from codegen.application.interfaces.repositories import ISequenceCounterRepository
from codegen.domain.value_objects import CounterKey
from codegen.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class SequenceAllocator:
    """Reserve/confirm state machine over ISequenceCounterRepository.

    Stateless; every call runs inside the caller's transaction.
    """

    async def reserve(
        self, counters: ISequenceCounterRepository, key: CounterKey
    ) -> ReservationOutcome:
        """Reserve the next value for key.

        Creates the row lazily (confirmed=0, pending=None) on first use.

        Returns:
            Reserved(candidate) when the conditional update hit exactly one row;
            Conflict(detail) when another writer changed or created the row first.
        """
        record = await counters.get_for_update(key)
        if record is None:
            record = await counters.create(key)
            if record is None:
                return ReservationOutcome.conflict(
                    f"Sequence record {key} was created by another process."
                )
            logger.debug("Created sequence record %s", key)

        candidate = record.next_value
        if not await counters.reserve_if_unchanged(record, candidate):
            return ReservationOutcome.conflict(
                f"Sequence record {key} was modified by another process."
            )
        logger.debug(
            "Reserved sequence %d for %s (confirmed=%d, pending=%s)",
            candidate,
            key,
            record.confirmed,
            record.pending,
        )
        return ReservationOutcome.reserved(candidate)

    async def confirm(
        self, counters: ISequenceCounterRepository, key: CounterKey, value: int
    ) -> bool:
        """Confirm value as used for key.

        Returns:
            True if value was the pending reservation and is now confirmed;
            False if it was already confirmed, superseded, or never reserved.
        """
        confirmed = await counters.confirm_pending(key, value)
        if confirmed:
            logger.info("Confirmed sequence %d for %s", value, key)
        else:
            logger.info("Confirmation miss for sequence %d on %s", value, key)
        return confirmed
